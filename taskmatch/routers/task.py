"""Task router: posting, applications, roster completion and moderation."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from taskmatch.database.database import get_session
from taskmatch.core.dependencies import get_current_principal, get_current_admin
from taskmatch.models.principal import Principal
from taskmatch.models.enums import TaskStatus
from taskmatch.models.task import TaskCreate, TaskFeature, TaskPublic, TaskUpdate
from taskmatch.models.application import ApplicationCreate, ApplicationDecisionIn
from taskmatch.models.volunteer_record import CompletionCreate
from taskmatch.services import task as task_service

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post("", response_model=TaskPublic, status_code=status.HTTP_201_CREATED)
def create_task(
    task_in: TaskCreate,
    session: Annotated[Session, Depends(get_session)],
    principal: Annotated[Principal, Depends(get_current_principal)],
    id_ngo: int | None = Query(
        default=None, description="Owning NGO, required when an admin posts"
    ),
) -> TaskPublic:
    """
    Post a new volunteer task.

    ### Authorization:
    - NGO users with an **approved** NGO profile post under their own NGO
    - Admins post on behalf of the NGO given by `id_ngo`

    The task starts as `draft` unless `status` is `active`. Any other initial
    status is refused.

    Returns:
        TaskPublic: The created task with zeroed stats.

    Raises:
        401 Unauthorized: If no valid token is provided.
        403 Forbidden: Volunteers, or NGOs not yet approved.
        404 NotFoundError: If an admin names an unknown NGO.
        422 ValidationError: Invalid initial status, schedule or age range.
    """
    task = task_service.create_task(session, principal, task_in, id_ngo=id_ngo)
    return task_service.to_task_public(task)


@router.get("/me", response_model=list[TaskPublic])
def get_my_tasks(
    session: Annotated[Session, Depends(get_session)],
    principal: Annotated[Principal, Depends(get_current_principal)],
    status_filter: TaskStatus | None = Query(
        default=None, alias="status", description="Filter by status"
    ),
) -> list[TaskPublic]:
    """
    List the tasks of the authenticated NGO, newest first.

    Raises:
        403 Forbidden: If the caller is not an NGO user.
        404 NotFoundError: If the NGO profile doesn't exist.
    """
    tasks = task_service.get_ngo_tasks(session, principal, status=status_filter)
    return [task_service.to_task_public(task) for task in tasks]


@router.get("/{id_task}", response_model=TaskPublic)
def get_task(
    id_task: str,
    session: Annotated[Session, Depends(get_session)],
) -> TaskPublic:
    """
    Get a task with its applications, roster and derived stats.

    No authentication required. Private contact details are never returned.

    Raises:
        404 NotFoundError: If the task doesn't exist.
    """
    return task_service.to_task_public(task_service.get_task(session, id_task))


@router.patch("/{id_task}", response_model=TaskPublic)
def update_task(
    id_task: str,
    task_update: TaskUpdate,
    session: Annotated[Session, Depends(get_session)],
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> TaskPublic:
    """
    Partially update a task, including moving its status.

    Allowed moves: draft to active or cancelled; active to in-progress, completed
    or cancelled; in-progress to completed or cancelled. Completed and cancelled
    tasks can no longer be edited.

    Raises:
        403 Forbidden: If the caller doesn't own the task and is not an admin.
        404 NotFoundError: If the task doesn't exist.
        409 Conflict: Illegal status move, or the task is closed.
        422 ValidationError: Invalid fields, or capacity below the approved count.
    """
    task = task_service.update_task(session, principal, id_task, task_update)
    return task_service.to_task_public(task)


@router.delete("/{id_task}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    id_task: str,
    session: Annotated[Session, Depends(get_session)],
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> None:
    """
    Delete a task together with its applications and roster.

    Raises:
        403 Forbidden: If the caller doesn't own the task and is not an admin.
        404 NotFoundError: If the task doesn't exist.
    """
    task_service.delete_task(session, principal, id_task)


@router.patch("/{id_task}/feature", response_model=TaskPublic)
def feature_task(
    id_task: str,
    feature: TaskFeature,
    session: Annotated[Session, Depends(get_session)],
    admin: Annotated[Principal, Depends(get_current_admin)],
) -> TaskPublic:
    """Feature or unfeature a task. Admin only."""
    task = task_service.set_featured(session, admin, id_task, feature.is_featured)
    return task_service.to_task_public(task)


@router.post(
    "/{id_task}/applications",
    response_model=TaskPublic,
    status_code=status.HTTP_201_CREATED,
)
def apply_for_task(
    id_task: str,
    application_in: ApplicationCreate,
    session: Annotated[Session, Depends(get_session)],
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> TaskPublic:
    """
    Apply to an active task as the authenticated volunteer.

    Applications stay pending until the NGO decides. Applying is allowed even when
    the task is full: extra applications wait until a slot opens.

    Raises:
        403 Forbidden: If the caller is not a volunteer.
        404 NotFoundError: If the task doesn't exist.
        409 Conflict: Task not active, or an active application already exists.
    """
    task = task_service.apply_for_task(session, principal, id_task, application_in)
    return task_service.to_task_public(task)


@router.delete("/{id_task}/applications/me", response_model=TaskPublic)
def withdraw_application(
    id_task: str,
    session: Annotated[Session, Depends(get_session)],
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> TaskPublic:
    """
    Withdraw the authenticated volunteer's pending application.

    A withdrawn application frees the volunteer to apply again.

    Raises:
        404 NotFoundError: If the volunteer has no active application on the task.
        409 Conflict: Application already decided, or the task is closed.
    """
    task = task_service.withdraw_application(session, principal, id_task)
    return task_service.to_task_public(task)


@router.patch("/{id_task}/applications/{id_application}", response_model=TaskPublic)
def decide_application(
    id_task: str,
    id_application: str,
    decision_in: ApplicationDecisionIn,
    session: Annotated[Session, Depends(get_session)],
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> TaskPublic:
    """
    Approve, reject or withdraw a pending application.

    ### Authorization:
    - The owning NGO or an admin may take any decision
    - The applicant volunteer may only withdraw

    Approving adds the volunteer to the roster. Rejecting requires a
    `rejection_reason`.

    Raises:
        403 Forbidden: Caller not allowed to take this decision.
        404 NotFoundError: Task or application doesn't exist.
        409 Conflict: Application already decided, task full, or task closed.
        422 ValidationError: Rejection without a reason.
    """
    task = task_service.decide_application(
        session, principal, id_task, id_application, decision_in
    )
    return task_service.to_task_public(task)


@router.post("/{id_task}/complete", response_model=TaskPublic)
def complete_task(
    id_task: str,
    completion_in: CompletionCreate,
    session: Annotated[Session, Depends(get_session)],
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> TaskPublic:
    """
    Record a roster member's completion with hours, optional rating and feedback.

    Volunteers complete for themselves. Admins set `id_volunteer` to complete on
    behalf of a volunteer. Hours are added to the volunteer's total and the NGO's
    aggregates are refreshed.

    Raises:
        403 Forbidden: NGO users, or volunteers completing for someone else.
        404 NotFoundError: Task doesn't exist, or the volunteer is not on the roster.
        409 Conflict: Already completed, or the task was cancelled.
        422 ValidationError: Negative hours or a rating outside 1 to 5.
    """
    task = task_service.complete_for_volunteer(
        session, principal, id_task, completion_in
    )
    return task_service.to_task_public(task)
