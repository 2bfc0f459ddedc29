from sqlmodel import Session
from loguru import logger
from sqlalchemy.exc import IntegrityError

from taskmatch.core.config import get_settings
from taskmatch.models.enums import UserRole
from taskmatch.models.user import User
from taskmatch.exceptions import AlreadyExistsError
from taskmatch.services import user as user_service


def init_db(session: Session) -> None:
    """
    Ensure the configured initial admin user exists in the database.

    If FIRST_SUPERUSER_EMAIL is not set, the function logs a warning and makes no changes.
    An existing user with that email is promoted to admin; otherwise a new admin user is
    created with FIRST_SUPERUSER_NAME.

    Parameters:
        session (Session): Database session used to look up and persist the admin user.

    Raises:
        AlreadyExistsError: If a unique constraint prevents creating the admin.
    """
    settings = get_settings()
    if not settings.FIRST_SUPERUSER_EMAIL:
        logger.warning("First superuser not configured. Skipping creation.")
        return

    user = user_service.get_user_by_email(session, settings.FIRST_SUPERUSER_EMAIL)
    if user is not None:
        if user.role != UserRole.ADMIN:
            user.role = UserRole.ADMIN
            session.add(user)
            session.commit()
            logger.info(f"Existing user {user.id_user} promoted to admin")
        else:
            logger.info("First superuser already exists")
        return

    admin = User(
        name=settings.FIRST_SUPERUSER_NAME,
        email=settings.FIRST_SUPERUSER_EMAIL,
        role=UserRole.ADMIN,
    )
    try:
        session.add(admin)
        session.commit()
        logger.info("First superuser created successfully")
    except IntegrityError:
        session.rollback()
        logger.error("First superuser already exists (constraint violation)")
        raise AlreadyExistsError("User", "email", settings.FIRST_SUPERUSER_EMAIL)
