"""NGO directory router."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from taskmatch.database.database import get_session
from taskmatch.core.dependencies import get_current_principal, get_current_admin
from taskmatch.models.principal import Principal
from taskmatch.models.ngo import NgoApprove, NgoCreate, NgoPublic, NgoReject
from taskmatch.services import ngo as ngo_service

router = APIRouter(prefix="/ngos", tags=["ngos"])


@router.post("", response_model=NgoPublic, status_code=status.HTTP_201_CREATED)
def register_ngo(
    ngo_in: NgoCreate,
    session: Annotated[Session, Depends(get_session)],
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> NgoPublic:
    """
    Register an NGO profile for the authenticated user.

    The profile starts as `pending` and cannot post tasks until an admin approves it.

    Raises:
        404 NotFoundError: If the user row doesn't exist.
        409 AlreadyExistsError: The user already has a profile, or the registration number is taken.
    """
    ngo = ngo_service.create_ngo(session, principal.id_user, ngo_in)
    return NgoPublic.model_validate(ngo)


@router.get("/{id_ngo}", response_model=NgoPublic)
def get_ngo(
    id_ngo: int,
    session: Annotated[Session, Depends(get_session)],
) -> NgoPublic:
    """
    Get an NGO profile with its task and volunteer aggregates.

    Raises:
        404 NotFoundError: If the NGO doesn't exist.
    """
    return NgoPublic.model_validate(ngo_service.get_ngo(session, id_ngo))


@router.patch("/{id_ngo}/approve", response_model=NgoPublic)
def approve_ngo(
    id_ngo: int,
    approve_in: NgoApprove,
    session: Annotated[Session, Depends(get_session)],
    admin: Annotated[Principal, Depends(get_current_admin)],
) -> NgoPublic:
    """
    Approve an NGO so it can post tasks. Admin only.

    Raises:
        404 NotFoundError: If the NGO doesn't exist.
        409 Conflict: If the NGO is already approved.
    """
    return NgoPublic.model_validate(
        ngo_service.approve_ngo(session, admin, id_ngo, approve_in)
    )


@router.patch("/{id_ngo}/reject", response_model=NgoPublic)
def reject_ngo(
    id_ngo: int,
    reject_in: NgoReject,
    session: Annotated[Session, Depends(get_session)],
    admin: Annotated[Principal, Depends(get_current_admin)],
) -> NgoPublic:
    """
    Reject an NGO with a reason of 10 to 500 characters. Admin only.

    Raises:
        404 NotFoundError: If the NGO doesn't exist.
        409 Conflict: If the NGO is already rejected.
    """
    return NgoPublic.model_validate(
        ngo_service.reject_ngo(session, admin, id_ngo, reject_in)
    )
