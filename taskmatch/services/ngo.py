"""NGO directory service: profiles, moderation and stats reads."""

from sqlmodel import Session, select
from sqlalchemy.exc import IntegrityError

from taskmatch.models.enums import NgoStatus, UserRole
from taskmatch.models.ngo import Ngo, NgoApprove, NgoCreate, NgoReject
from taskmatch.models.principal import Principal
from taskmatch.models.user import User
from taskmatch.exceptions import (
    AlreadyExistsError,
    ConflictError,
    InsufficientPermissionsError,
    NotFoundError,
)
from taskmatch.services.utils import get_or_404
from taskmatch.utils.logger import logger


def get_ngo(session: Session, id_ngo: int) -> Ngo:
    """
    Retrieve an NGO by ID.

    Raises:
        NotFoundError: If no NGO exists with the given id.
    """
    return get_or_404(session, Ngo, id_ngo, "Ngo")


def get_ngo_by_user(session: Session, id_user: int) -> Ngo | None:
    """
    Retrieve the NGO profile owned by a user.

    Returns:
        Ngo | None: The NGO linked to the user, or None if the user has no profile.
    """
    statement = select(Ngo).where(Ngo.id_user == id_user)
    return session.exec(statement).first()


def create_ngo(session: Session, id_user: int, ngo_in: NgoCreate) -> Ngo:
    """
    Register an NGO profile for an existing user.

    The profile starts pending and the owning user is switched to the NGO role.

    Parameters:
        session: Database session.
        id_user: Owner of the profile.
        ngo_in: Profile data.

    Returns:
        Ngo: The created NGO.

    Raises:
        NotFoundError: If the user doesn't exist.
        AlreadyExistsError: If the user already has a profile or the registration number is taken.
    """
    user = get_or_404(session, User, id_user, "User")
    if get_ngo_by_user(session, id_user) is not None:
        raise AlreadyExistsError("Ngo", "id_user", id_user)

    db_ngo = Ngo.model_validate(ngo_in, update={"id_user": id_user})
    user.role = UserRole.NGO
    session.add(user)
    session.add(db_ngo)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise AlreadyExistsError(
            "Ngo", "registration_number", ngo_in.registration_number
        )
    session.refresh(db_ngo)
    logger.info(f"NGO {db_ngo.id_ngo} registered by user {id_user}, pending review")
    return db_ngo


def _require_admin(principal: Principal) -> None:
    if principal.role != UserRole.ADMIN:
        raise InsufficientPermissionsError("Only admins can moderate NGOs")


def _get_ngo_for_update(session: Session, id_ngo: int) -> Ngo:
    """Load an NGO row locked for the moderation decision, bypassing stale identity-map state."""
    ngo = session.exec(
        select(Ngo)
        .where(Ngo.id_ngo == id_ngo)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).first()
    if ngo is None:
        raise NotFoundError("Ngo", id_ngo)
    return ngo


def approve_ngo(
    session: Session, principal: Principal, id_ngo: int, approve_in: NgoApprove
) -> Ngo:
    """
    Approve a pending or rejected NGO, allowing it to create tasks.

    Raises:
        InsufficientPermissionsError: If the caller is not an admin.
        NotFoundError: If the NGO doesn't exist.
        ConflictError: If the NGO is already approved.
    """
    _require_admin(principal)
    ngo = _get_ngo_for_update(session, id_ngo)
    if ngo.status == NgoStatus.APPROVED:
        session.rollback()
        raise ConflictError(f"Ngo with identifier '{id_ngo}' is already approved")

    ngo.status = NgoStatus.APPROVED
    ngo.is_verified = True
    ngo.rejection_reason = None
    if approve_in.admin_notes is not None:
        ngo.admin_notes = approve_in.admin_notes
    session.add(ngo)
    session.commit()
    session.refresh(ngo)
    logger.info(f"NGO {id_ngo} approved by admin {principal.id_user}")
    return ngo


def reject_ngo(
    session: Session, principal: Principal, id_ngo: int, reject_in: NgoReject
) -> Ngo:
    """
    Reject an NGO with a reason. Approved NGOs can be rejected again to revoke them.

    Raises:
        InsufficientPermissionsError: If the caller is not an admin.
        NotFoundError: If the NGO doesn't exist.
        ConflictError: If the NGO is already rejected.
    """
    _require_admin(principal)
    ngo = _get_ngo_for_update(session, id_ngo)
    if ngo.status == NgoStatus.REJECTED:
        session.rollback()
        raise ConflictError(f"Ngo with identifier '{id_ngo}' is already rejected")

    ngo.status = NgoStatus.REJECTED
    ngo.is_verified = False
    ngo.rejection_reason = reject_in.rejection_reason
    if reject_in.admin_notes is not None:
        ngo.admin_notes = reject_in.admin_notes
    session.add(ngo)
    session.commit()
    session.refresh(ngo)
    logger.info(f"NGO {id_ngo} rejected by admin {principal.id_user}")
    return ngo
