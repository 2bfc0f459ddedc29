"""Application ledger: the applications attached to one task.

Functions here mutate the in-memory Task aggregate only. Loading, locking and
committing belong to the lifecycle controller in services/task.py.
"""

from datetime import datetime

from taskmatch.models.application import Application
from taskmatch.models.enums import ApplicationDecision, ApplicationStatus, Availability, TaskStatus
from taskmatch.models.task import Task
from taskmatch.exceptions import (
    ApplicationAlreadyDecidedError,
    ApplicationNotFoundError,
    DuplicateApplicationError,
    TaskFullError,
    TaskNotAcceptingApplicationsError,
    ValidationError,
)
from taskmatch.services import capacity, roster
from taskmatch.utils.validation import utc_now


def find_application(task: Task, id_application: str) -> Application:
    """
    Look up an application on the task by its id.

    Raises:
        ApplicationNotFoundError: If the task has no application with that id.
    """
    for application in task.applications:
        if application.id_application == id_application:
            return application
    raise ApplicationNotFoundError(id_application)


def active_application_for(task: Task, id_volunteer: int) -> Application | None:
    """Return the volunteer's non-withdrawn application on the task, if any."""
    for application in task.applications:
        if (
            application.id_volunteer == id_volunteer
            and application.status != ApplicationStatus.WITHDRAWN
        ):
            return application
    return None


def apply(
    task: Task,
    id_volunteer: int,
    message: str | None = None,
    availability: Availability = Availability.FLEXIBLE,
    now: datetime | None = None,
) -> Application:
    """
    Append a pending application for the volunteer.

    Applications are accepted past capacity; the capacity check happens at approval.

    Args:
        task: Task aggregate with its applications loaded.
        id_volunteer: Applying user's id.
        message: Optional motivation message.
        availability: Declared availability, flexible by default.
        now: Timestamp to stamp as applied_at (defaults to current UTC time).

    Returns:
        Application: The new pending application.

    Raises:
        TaskNotAcceptingApplicationsError: If the task is not active.
        DuplicateApplicationError: If the volunteer already has a non-withdrawn application.
    """
    if task.status != TaskStatus.ACTIVE:
        raise TaskNotAcceptingApplicationsError(task.id_task, task.status.value)

    if active_application_for(task, id_volunteer) is not None:
        raise DuplicateApplicationError(task.id_task, id_volunteer)

    application = Application(
        id_task=task.id_task,
        id_volunteer=id_volunteer,
        message=message,
        availability=availability,
        status=ApplicationStatus.PENDING,
        applied_at=now or utc_now(),
    )
    task.applications.append(application)
    return application


def decide(
    task: Task,
    id_application: str,
    decision: ApplicationDecision,
    rejection_reason: str | None = None,
    now: datetime | None = None,
) -> Application:
    """
    Move a pending application to approved, rejected or withdrawn.

    Approval joins the volunteer to the roster unless they are already on it.
    Rejection requires a non-blank reason, which is stored stripped.

    Args:
        task: Task aggregate with applications and volunteers loaded.
        id_application: Application to decide.
        decision: Target status.
        rejection_reason: Reason shown to the volunteer, required when rejecting.
        now: Timestamp for approved_at/rejected_at/joined_at.

    Returns:
        Application: The updated application.

    Raises:
        ApplicationNotFoundError: If the id is not on this task.
        ValidationError: If rejecting without a reason.
        ApplicationAlreadyDecidedError: If the application is no longer pending.
        TaskFullError: If approving would exceed volunteers_needed.
    """
    application = find_application(task, id_application)

    reason = (rejection_reason or "").strip()
    if decision == ApplicationDecision.REJECTED and not reason:
        raise ValidationError(
            "A rejection reason is required when rejecting an application",
            field="rejection_reason",
        )

    if application.status != ApplicationStatus.PENDING:
        raise ApplicationAlreadyDecidedError(
            id_application, application.status.value
        )

    now = now or utc_now()
    if decision == ApplicationDecision.APPROVED:
        if not capacity.can_accept(task):
            raise TaskFullError(task.id_task, task.volunteers_needed)
        application.status = ApplicationStatus.APPROVED
        application.approved_at = now
        roster.ensure_member(task, application.id_volunteer, now)
    elif decision == ApplicationDecision.REJECTED:
        application.status = ApplicationStatus.REJECTED
        application.rejected_at = now
        application.rejection_reason = reason
    else:
        application.status = ApplicationStatus.WITHDRAWN

    return application
