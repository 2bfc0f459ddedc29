"""Task lifecycle controller.

Entry point for the six task commands (create, apply, decide, complete,
update, delete). Each mutating command on an existing task is one unit of
work: take the per-task lock, load the task row FOR UPDATE with its children,
mutate through the ledger/roster, refold stats, propagate to the NGO and user
aggregates, then commit once. Any error rolls the whole unit back.
"""

import math
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import case
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from taskmatch.core.locks import task_locks
from taskmatch.core.telemetry import record_command, record_conflict
from taskmatch.models.application import ApplicationCreate, ApplicationDecisionIn, ApplicationPublic
from taskmatch.models.enums import ApplicationDecision, NgoStatus, TaskStatus, UserRole
from taskmatch.models.ngo import Ngo
from taskmatch.models.principal import Principal
from taskmatch.models.task import Task, TaskCreate, TaskPublic, TaskUpdate
from taskmatch.models.user import User
from taskmatch.models.volunteer_record import CompletionCreate, VolunteerRecordPublic
from taskmatch.exceptions import (
    ApplicationNotFoundError,
    ConflictError,
    InsufficientPermissionsError,
    InvalidStatusTransitionError,
    NotFoundError,
    StorageError,
    TaskClosedError,
    ValidationError,
)
from taskmatch.services import capacity, ledger, roster, stats
from taskmatch.services import ngo as ngo_service
from taskmatch.services.utils import get_or_404
from taskmatch.utils.logger import logger
from taskmatch.utils.validation import to_naive_utc, utc_now

ALLOWED_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.DRAFT: frozenset({TaskStatus.ACTIVE, TaskStatus.CANCELLED}),
    TaskStatus.ACTIVE: frozenset(
        {TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED, TaskStatus.CANCELLED}
    ),
    TaskStatus.IN_PROGRESS: frozenset({TaskStatus.COMPLETED, TaskStatus.CANCELLED}),
    TaskStatus.COMPLETED: frozenset(),
    TaskStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset({TaskStatus.COMPLETED, TaskStatus.CANCELLED})

INITIAL_STATUSES = frozenset({TaskStatus.DRAFT, TaskStatus.ACTIVE})

# Columns a partial update may clear; every other field rejects an explicit null
_NULLABLE_FIELDS = frozenset(
    {
        "latitude",
        "longitude",
        "age_max",
        "training_description",
        "benefits",
        "contact_name",
        "contact_email",
        "contact_phone",
        "additional_info",
    }
)


def _commit(session: Session) -> None:
    """Commit the session, translating storage failures into domain errors."""
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        logger.warning(f"Constraint violation on commit: {e.orig}")
        record_conflict(ConflictError.code)
        raise ConflictError(
            "The task was modified concurrently, please retry"
        ) from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Storage failure while committing task changes")
        raise StorageError() from e


@contextmanager
def _locked_task(session: Session, id_task: str, command: str) -> Iterator[Task]:
    """
    Run one read-modify-write unit of work against a task.

    Yields the task loaded FOR UPDATE with fresh applications and roster, then
    commits when the block exits cleanly. Exceptions roll the session back and
    propagate, so no partial mutation is ever persisted.

    Raises:
        NotFoundError: If the task doesn't exist.
        ConflictError: If a storage constraint rejects the commit.
        StorageError: On any other database failure.
    """
    with task_locks.hold(id_task):
        try:
            task = session.exec(
                select(Task)
                .where(Task.id_task == id_task)
                .options(
                    selectinload(Task.applications),  # type: ignore
                    selectinload(Task.volunteers),  # type: ignore
                )
                .with_for_update()
                .execution_options(populate_existing=True)
            ).first()
            if task is None:
                raise NotFoundError("Task", id_task)
            yield task
        except IntegrityError as e:
            session.rollback()
            logger.warning(f"Constraint violation on task {id_task}: {e.orig}")
            record_conflict(ConflictError.code)
            raise ConflictError(
                "The task was modified concurrently, please retry"
            ) from e
        except SQLAlchemyError as e:
            session.rollback()
            logger.exception(f"Storage failure while updating task {id_task}")
            raise StorageError() from e
        except ConflictError as e:
            session.rollback()
            record_conflict(e.code)
            raise
        except Exception:
            session.rollback()
            raise
        _commit(session)
        record_command(command)


def _touch(task: Task) -> None:
    task.updated_at = utc_now()


def _validate_schedule(task_data: dict) -> None:
    """Check the merged task fields for window and age consistency."""
    if task_data["end_date"] < task_data["start_date"]:
        raise ValidationError(
            "End date must be on or after the start date", field="end_date"
        )
    age_max = task_data.get("age_max")
    if age_max is not None and age_max < task_data.get("age_min", 0):
        raise ValidationError(
            "Maximum age cannot be lower than minimum age", field="age_max"
        )


def _authorize_owner(
    session: Session, principal: Principal, task: Task, action: str
) -> None:
    """
    Allow admins, or the NGO user owning the task.

    Raises:
        InsufficientPermissionsError: For every other caller.
    """
    if principal.role == UserRole.ADMIN:
        return
    if principal.role == UserRole.NGO:
        ngo = ngo_service.get_ngo_by_user(session, principal.id_user)
        if ngo is not None and ngo.id_ngo == task.id_ngo:
            return
        raise InsufficientPermissionsError(f"Not authorized to {action} this task")
    if principal.role == UserRole.VOLUNTEER:
        raise InsufficientPermissionsError(f"Volunteers cannot {action} tasks")
    raise InsufficientPermissionsError(f"Unknown role cannot {action} tasks")


def _ensure_not_closed(task: Task) -> None:
    if task.status in TERMINAL_STATUSES:
        raise TaskClosedError(task.id_task, task.status.value)


def transition(task: Task, target: TaskStatus) -> Task:
    """
    Move the task to `target` if the state machine allows it.

    Re-applying the current status is a no-op.

    Raises:
        InvalidStatusTransitionError: If the move is not allowed.
    """
    if target == task.status:
        return task
    if target not in ALLOWED_TRANSITIONS[task.status]:
        raise InvalidStatusTransitionError(task.status.value, target.value)
    task.status = target
    return task


def create_task(
    session: Session,
    principal: Principal,
    task_in: TaskCreate,
    id_ngo: int | None = None,
) -> Task:
    """
    Create a task owned by an approved NGO.

    NGO users post under their own profile, which must be approved. Admins post
    on behalf of any NGO named by `id_ngo`, whatever its status.

    Parameters:
        session: Database session.
        principal: Authenticated caller.
        task_in: Task creation payload; status must be draft or active.
        id_ngo: Owning NGO, required for admins and ignored for NGO users.

    Returns:
        Task: The persisted task with zeroed stats.

    Raises:
        InsufficientPermissionsError: Volunteers, NGO users without a profile or with an unapproved one.
        NotFoundError: If an admin names an unknown NGO.
        ValidationError: Bad initial status, schedule window or age range.
    """
    if principal.role == UserRole.ADMIN:
        if id_ngo is None:
            raise ValidationError(
                "Admins must specify the NGO that owns the task", field="id_ngo"
            )
        ngo = get_or_404(session, Ngo, id_ngo, "Ngo")
    elif principal.role == UserRole.NGO:
        ngo = ngo_service.get_ngo_by_user(session, principal.id_user)
        if ngo is None:
            raise InsufficientPermissionsError(
                "NGO profile not found. Please complete your NGO registration first."
            )
        if ngo.status != NgoStatus.APPROVED:
            raise InsufficientPermissionsError(
                "Only approved NGOs can create tasks. Please wait for admin approval."
            )
    elif principal.role == UserRole.VOLUNTEER:
        raise InsufficientPermissionsError("Volunteers cannot create tasks")
    else:
        raise InsufficientPermissionsError("Unknown role cannot create tasks")

    if task_in.status not in INITIAL_STATUSES:
        raise ValidationError(
            "A new task must start as draft or active", field="status"
        )

    task_data = task_in.model_dump()
    task_data["start_date"] = to_naive_utc(task_in.start_date)
    task_data["end_date"] = to_naive_utc(task_in.end_date)
    _validate_schedule(task_data)

    task = Task.model_validate({**task_data, "id_ngo": ngo.id_ngo})
    stats.recompute_stats(task)
    session.add(task)

    ngo.total_tasks = Ngo.total_tasks + 1  # type: ignore
    session.add(ngo)
    _commit(session)
    session.refresh(task)
    record_command("create")

    logger.info(f"Task {task.id_task} created for NGO {ngo.id_ngo} as {task.status.value}")
    return task


def get_task(session: Session, id_task: str) -> Task:
    """
    Retrieve a task by id.

    Raises:
        NotFoundError: If the task doesn't exist.
    """
    return get_or_404(session, Task, id_task, "Task")


def get_ngo_tasks(
    session: Session, principal: Principal, status: TaskStatus | None = None
) -> list[Task]:
    """
    List the tasks of the caller's NGO, newest first.

    Raises:
        InsufficientPermissionsError: If the caller is not an NGO user.
        NotFoundError: If the NGO user has no NGO profile.
    """
    if principal.role != UserRole.NGO:
        raise InsufficientPermissionsError("Only NGO users have their own tasks")
    ngo = ngo_service.get_ngo_by_user(session, principal.id_user)
    if ngo is None:
        raise NotFoundError("Ngo", f"user_{principal.id_user}")

    statement = select(Task).where(Task.id_ngo == ngo.id_ngo)
    if status is not None:
        statement = statement.where(Task.status == status)
    statement = statement.order_by(Task.created_at.desc())  # type: ignore
    return list(session.exec(statement).all())


def apply_for_task(
    session: Session,
    principal: Principal,
    id_task: str,
    application_in: ApplicationCreate,
) -> Task:
    """
    Submit the calling volunteer's application to an active task.

    Raises:
        InsufficientPermissionsError: If the caller is not a volunteer.
        NotFoundError: Unknown task or volunteer.
        TaskNotAcceptingApplicationsError: If the task is not active.
        DuplicateApplicationError: If the volunteer already has an active application.
    """
    if principal.role != UserRole.VOLUNTEER:
        raise InsufficientPermissionsError("Only volunteers can apply for tasks")
    get_or_404(session, User, principal.id_user, "User")

    with _locked_task(session, id_task, "apply") as task:
        application = ledger.apply(
            task,
            principal.id_user,
            message=application_in.message,
            availability=application_in.availability,
        )
        id_application = application.id_application
        stats.recompute_stats(task)
        _touch(task)

    logger.info(
        f"Volunteer {principal.id_user} applied to task {id_task} ({id_application})"
    )
    return task


def _authorize_decision(
    session: Session,
    principal: Principal,
    task: Task,
    id_application: str,
    decision: ApplicationDecision,
) -> None:
    """Owners and admins decide anything; a volunteer may only withdraw their own application."""
    if principal.role == UserRole.VOLUNTEER:
        application = ledger.find_application(task, id_application)
        if (
            decision == ApplicationDecision.WITHDRAWN
            and application.id_volunteer == principal.id_user
        ):
            return
        raise InsufficientPermissionsError("Not authorized to update this application")
    _authorize_owner(session, principal, task, "manage applications of")


def decide_application(
    session: Session,
    principal: Principal,
    id_task: str,
    id_application: str,
    decision_in: ApplicationDecisionIn,
) -> Task:
    """
    Approve, reject or withdraw a pending application.

    Approval joins the volunteer to the roster and is refused once
    volunteers_needed approvals exist.

    Raises:
        NotFoundError: Unknown task or application.
        InsufficientPermissionsError: Caller is neither owner, admin, nor the withdrawing applicant.
        TaskClosedError: If the task is completed or cancelled.
        ValidationError: Rejection without a reason.
        ApplicationAlreadyDecidedError: If the application is not pending.
        TaskFullError: If the task has no approval slot left.
    """
    with _locked_task(session, id_task, "decide") as task:
        _authorize_decision(session, principal, task, id_application, decision_in.status)
        _ensure_not_closed(task)
        ledger.decide(
            task,
            id_application,
            decision_in.status,
            rejection_reason=decision_in.rejection_reason,
        )
        stats.recompute_stats(task)
        _touch(task)
        stats.refresh_ngo_stats(session, task.ngo)

    logger.info(
        f"Application {id_application} on task {id_task} {decision_in.status.value} by user {principal.id_user}"
    )
    return task


def withdraw_application(session: Session, principal: Principal, id_task: str) -> Task:
    """
    Withdraw the calling volunteer's active application on a task.

    Raises:
        InsufficientPermissionsError: If the caller is not a volunteer.
        NotFoundError: Unknown task, or no active application for the caller.
        TaskClosedError: If the task is completed or cancelled.
        ApplicationAlreadyDecidedError: If the application was already approved or rejected.
    """
    if principal.role != UserRole.VOLUNTEER:
        raise InsufficientPermissionsError("Only volunteers can withdraw applications")

    with _locked_task(session, id_task, "withdraw") as task:
        application = ledger.active_application_for(task, principal.id_user)
        if application is None:
            raise ApplicationNotFoundError(
                f"task_{id_task}_volunteer_{principal.id_user}"
            )
        _ensure_not_closed(task)
        ledger.decide(task, application.id_application, ApplicationDecision.WITHDRAWN)
        stats.recompute_stats(task)
        _touch(task)

    logger.info(f"Volunteer {principal.id_user} withdrew from task {id_task}")
    return task


def complete_for_volunteer(
    session: Session,
    principal: Principal,
    id_task: str,
    completion_in: CompletionCreate,
) -> Task:
    """
    Mark a roster member's participation as completed.

    Volunteers complete for themselves; admins complete on behalf of the volunteer
    named in the payload. The roster update, the task stats, the NGO aggregates and
    the volunteer's hours and completed-task record commit together.

    Raises:
        InsufficientPermissionsError: NGO users, or volunteers naming someone else.
        ValidationError: Admin without a target volunteer, negative hours, bad rating.
        NotFoundError: Unknown task or volunteer.
        TaskClosedError: If the task was cancelled.
        NotARosterMemberError: If the volunteer is not on the roster.
        AlreadyCompletedError: If the volunteer already completed the task.
    """
    if principal.role == UserRole.VOLUNTEER:
        if (
            completion_in.id_volunteer is not None
            and completion_in.id_volunteer != principal.id_user
        ):
            raise InsufficientPermissionsError(
                "Volunteers can only complete tasks for themselves"
            )
        id_volunteer = principal.id_user
    elif principal.role == UserRole.ADMIN:
        if completion_in.id_volunteer is None:
            raise ValidationError(
                "Admins must specify the volunteer to complete for",
                field="id_volunteer",
            )
        id_volunteer = completion_in.id_volunteer
    elif principal.role == UserRole.NGO:
        raise InsufficientPermissionsError("NGO users cannot complete tasks")
    else:
        raise InsufficientPermissionsError("Unknown role cannot complete tasks")

    user = get_or_404(session, User, id_volunteer, "User")

    with _locked_task(session, id_task, "complete") as task:
        if task.status == TaskStatus.CANCELLED:
            raise TaskClosedError(task.id_task, task.status.value)
        record = roster.complete(
            task,
            id_volunteer,
            completion_in.hours_worked,
            rating=completion_in.rating,
            feedback=completion_in.feedback,
        )
        stats.recompute_stats(task)
        _touch(task)
        stats.record_completion(user, task, record)
        session.add(user)
        stats.refresh_ngo_stats(session, task.ngo)

    logger.info(
        f"Volunteer {id_volunteer} completed task {id_task} ({completion_in.hours_worked}h)"
    )
    return task


def update_task(
    session: Session,
    principal: Principal,
    id_task: str,
    task_update: TaskUpdate,
) -> Task:
    """
    Apply a partial update to a task, including status transitions.

    Parameters:
        session: Database session.
        principal: Authenticated caller, must own the task or be an admin.
        id_task: Task to update.
        task_update: Fields to change; unset fields are left untouched.

    Returns:
        Task: The updated task.

    Raises:
        NotFoundError: Unknown task.
        InsufficientPermissionsError: Caller doesn't own the task.
        TaskClosedError: If the task is completed or cancelled.
        ValidationError: Null for a required field, broken schedule window or age range,
            or volunteers_needed below the approved count.
        InvalidStatusTransitionError: If the status move is not allowed.
    """
    with _locked_task(session, id_task, "update") as task:
        _authorize_owner(session, principal, task, "update")
        _ensure_not_closed(task)

        update_data = task_update.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            if value is None and key not in _NULLABLE_FIELDS:
                raise ValidationError(f"{key} cannot be null", field=key)
        for key in ("start_date", "end_date"):
            if key in update_data:
                update_data[key] = to_naive_utc(update_data[key])
        new_status = update_data.pop("status", None)

        merged = task.model_dump() | update_data
        _validate_schedule(merged)
        if merged["volunteers_needed"] < capacity.count_approved(task.applications):
            raise ValidationError(
                "Volunteers needed cannot be lower than the number of approved volunteers",
                field="volunteers_needed",
            )

        for key, value in update_data.items():
            setattr(task, key, value)
        previous_status = task.status
        if new_status is not None:
            transition(task, new_status)

        stats.recompute_stats(task)
        _touch(task)
        if task.status != previous_status:
            stats.refresh_ngo_stats(session, task.ngo)

    logger.info(f"Task {id_task} updated by user {principal.id_user}")
    return task


def set_featured(
    session: Session, principal: Principal, id_task: str, is_featured: bool
) -> Task:
    """
    Toggle the featured flag of a task.

    Raises:
        InsufficientPermissionsError: If the caller is not an admin.
        NotFoundError: Unknown task.
    """
    if principal.role != UserRole.ADMIN:
        raise InsufficientPermissionsError("Only admins can feature tasks")

    with _locked_task(session, id_task, "feature") as task:
        task.is_featured = is_featured
        _touch(task)

    logger.info(f"Task {id_task} featured={is_featured}")
    return task


def delete_task(session: Session, principal: Principal, id_task: str) -> None:
    """
    Delete a task with its applications and roster.

    The owning NGO's total_tasks is decremented (never below zero) in the same
    transaction, and its activity aggregates are refolded without the task.

    Raises:
        NotFoundError: Unknown task.
        InsufficientPermissionsError: Caller doesn't own the task.
    """
    with _locked_task(session, id_task, "delete") as task:
        _authorize_owner(session, principal, task, "delete")
        ngo = task.ngo
        session.delete(task)
        ngo.total_tasks = case(  # type: ignore
            (Ngo.total_tasks > 0, Ngo.total_tasks - 1), else_=0
        )
        session.add(ngo)
        stats.refresh_ngo_stats(session, ngo)

    logger.info(f"Task {id_task} deleted by user {principal.id_user}")


def to_task_public(task: Task) -> TaskPublic:
    """
    Convert a Task to its public view.

    Drops private contact details and adds is_open, full_location and duration_days.
    """
    duration = task.end_date - task.start_date
    return TaskPublic.model_validate(
        task,
        update={
            "applications": [
                ApplicationPublic.model_validate(a) for a in task.applications
            ],
            "volunteers": [
                VolunteerRecordPublic.model_validate(v) for v in task.volunteers
            ],
            "is_open": capacity.is_open(task),
            "full_location": f"{task.address}, {task.city}, {task.state} {task.zip_code}",
            "duration_days": math.ceil(abs(duration.total_seconds()) / 86400),
        },
    )
