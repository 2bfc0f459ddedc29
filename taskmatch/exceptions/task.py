"""Task lifecycle and application matching exceptions.

Every conflict raised here means the command was well-formed but the current
state of the task forbids it. They all map to HTTP 409.
"""

from taskmatch.exceptions.base import AppException
from taskmatch.exceptions.crud import NotFoundError


class ConflictError(AppException):
    """The request conflicts with the current state of the resource."""

    code = "conflict"


class DuplicateApplicationError(ConflictError):
    code = "duplicate_application"

    def __init__(self, id_task: str, id_volunteer: int):
        self.id_task = id_task
        self.id_volunteer = id_volunteer
        super().__init__(
            f"Volunteer {id_volunteer} already has an active application for task '{id_task}'"
        )


class TaskFullError(ConflictError):
    code = "task_full"

    def __init__(self, id_task: str, volunteers_needed: int):
        self.id_task = id_task
        self.volunteers_needed = volunteers_needed
        super().__init__(
            f"Task '{id_task}' already has {volunteers_needed} approved volunteer(s)"
        )


class AlreadyCompletedError(ConflictError):
    code = "already_completed"

    def __init__(self, id_task: str, id_volunteer: int):
        self.id_task = id_task
        self.id_volunteer = id_volunteer
        super().__init__(
            f"Volunteer {id_volunteer} already completed task '{id_task}'"
        )


class TaskNotAcceptingApplicationsError(ConflictError):
    code = "task_not_accepting_applications"

    def __init__(self, id_task: str, status: str):
        self.id_task = id_task
        self.status = status
        super().__init__(
            f"Task '{id_task}' is not accepting applications (status: {status})"
        )


class ApplicationAlreadyDecidedError(ConflictError):
    code = "application_already_decided"

    def __init__(self, id_application: str, status: str):
        self.id_application = id_application
        self.status = status
        super().__init__(
            f"Application '{id_application}' is already {status}"
        )


class InvalidStatusTransitionError(ConflictError):
    code = "invalid_status_transition"

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move task from '{current}' to '{target}'")


class TaskClosedError(ConflictError):
    code = "task_closed"

    def __init__(self, id_task: str, status: str):
        self.id_task = id_task
        self.status = status
        super().__init__(f"Task '{id_task}' is {status} and can no longer be changed")


class ApplicationNotFoundError(NotFoundError):
    code = "application_not_found"

    def __init__(self, id_application: str):
        super().__init__("Application", id_application)


class NotARosterMemberError(NotFoundError):
    code = "not_a_roster_member"

    def __init__(self, id_task: str, id_volunteer: int):
        self.id_task = id_task
        self.id_volunteer = id_volunteer
        super().__init__("VolunteerRecord", f"task_{id_task}_volunteer_{id_volunteer}")
