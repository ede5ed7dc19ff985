import uuid

from sqlmodel import Session, col, or_, select

from chatapp.auth.models import User, UserCreate
from chatapp.core.security import get_password_hash, verify_password


def create_user(*, session: Session, user_create: UserCreate) -> User:
    """Create a new user in the database.

    Args:
        session: Database session
        user_create: User creation data

    Returns:
        Created user object
    """
    db_obj = User.model_validate(
        user_create,
        update={"hashed_password": get_password_hash(user_create.password)},
    )
    session.add(db_obj)
    session.commit()
    session.refresh(db_obj)
    return db_obj


def get_user_by_email(*, session: Session, email: str) -> User | None:
    statement = select(User).where(User.email == email)
    return session.exec(statement).first()


def get_user_by_username(*, session: Session, username: str) -> User | None:
    statement = select(User).where(User.username == username)
    return session.exec(statement).first()


def get_user_by_id(*, session: Session, user_id: uuid.UUID) -> User | None:
    return session.get(User, user_id)


def get_users_by_ids(*, session: Session, user_ids: list[uuid.UUID]) -> list[User]:
    if not user_ids:
        return []
    statement = select(User).where(col(User.id).in_(user_ids))
    return list(session.exec(statement).all())


def authenticate(*, session: Session, login: str, password: str) -> User | None:
    """Authenticate a user by username or email and password.

    Args:
        session: Database session
        login: Username or email address
        password: Plain text password

    Returns:
        User object if authentication successful, None otherwise
    """
    statement = select(User).where(or_(User.email == login, User.username == login))
    db_user = session.exec(statement).first()
    if not db_user:
        return None
    if not verify_password(password, db_user.hashed_password):
        return None
    return db_user
