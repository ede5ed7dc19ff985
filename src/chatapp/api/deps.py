from typing import Annotated

from fastapi import Depends

from chatapp.core.config import Settings, get_settings

SettingsDep = Annotated[Settings, Depends(get_settings)]
