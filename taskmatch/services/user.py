"""User service module.

Accounts are created by the identity provider; this module only keeps the
local rows that carry volunteer totals and completed-task history.
"""

from sqlmodel import Session, select
from sqlalchemy.exc import IntegrityError

from taskmatch.models.enums import UserRole
from taskmatch.models.principal import Principal
from taskmatch.models.user import User, UserCreate, UserPublic
from taskmatch.exceptions import AlreadyExistsError, InsufficientPermissionsError
from taskmatch.services.utils import get_or_404


def create_user(session: Session, user_in: UserCreate) -> User:
    """
    Create and persist a new user.

    Raises:
        AlreadyExistsError: If a user with the same email already exists.
    """
    db_user = User.model_validate(user_in)
    session.add(db_user)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise AlreadyExistsError("User", "email", user_in.email)
    session.refresh(db_user)
    return db_user


def get_user_by_email(session: Session, email: str) -> User | None:
    statement = select(User).where(User.email == email)
    return session.exec(statement).first()


def get_user(session: Session, principal: Principal, id_user: int) -> User:
    """
    Retrieve a user profile. Users read their own profile; admins read any.

    Raises:
        InsufficientPermissionsError: If a non-admin asks for someone else.
        NotFoundError: If the user doesn't exist.
    """
    if principal.role != UserRole.ADMIN and principal.id_user != id_user:
        raise InsufficientPermissionsError("Not authorized to view this user")
    return get_or_404(session, User, id_user, "User")


def to_user_public(user: User) -> UserPublic:
    return UserPublic.model_validate(user)
