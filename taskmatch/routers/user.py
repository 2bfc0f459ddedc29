"""User directory router."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from taskmatch.database.database import get_session
from taskmatch.core.dependencies import get_current_principal, get_current_admin
from taskmatch.models.principal import Principal
from taskmatch.models.user import UserCreate, UserPublic
from taskmatch.services import user as user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def create_user(
    user_in: UserCreate,
    session: Annotated[Session, Depends(get_session)],
    admin: Annotated[Principal, Depends(get_current_admin)],
) -> UserPublic:
    """
    Provision the local record of a user known to the identity provider. Admin only.

    Raises:
        409 AlreadyExistsError: If the email is already registered.
    """
    return user_service.to_user_public(user_service.create_user(session, user_in))


@router.get("/me", response_model=UserPublic)
def read_current_user(
    session: Annotated[Session, Depends(get_session)],
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> UserPublic:
    """
    Get the authenticated user's profile, with total hours and completed tasks.
    """
    user = user_service.get_user(session, principal, principal.id_user)
    return user_service.to_user_public(user)


@router.get("/{id_user}", response_model=UserPublic)
def read_user(
    id_user: int,
    session: Annotated[Session, Depends(get_session)],
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> UserPublic:
    """
    Get a user's profile. Users can only read their own; admins can read anyone's.

    Raises:
        403 Forbidden: If a non-admin reads someone else's profile.
        404 NotFoundError: If the user doesn't exist.
    """
    return user_service.to_user_public(
        user_service.get_user(session, principal, id_user)
    )
