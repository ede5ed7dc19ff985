"""Authentication routes package.

- login: Login and token authentication
- signup: User registration
- profile: Current user profile (/me)
"""

from fastapi import APIRouter

from chatapp.api.routes.auth import login, profile, signup

router = APIRouter(prefix="/auth", tags=["auth"])

router.include_router(login.router)
router.include_router(signup.router)
router.include_router(profile.router)
