"""Capacity policy: whether a task still has room for approved volunteers.

Pending applications are never capped, they form an implicit waiting list.
Only the move to approved is gated.
"""

from collections.abc import Iterable

from taskmatch.models.application import Application
from taskmatch.models.enums import ApplicationStatus, TaskStatus
from taskmatch.models.task import Task


def count_approved(applications: Iterable[Application]) -> int:
    return sum(1 for app in applications if app.status == ApplicationStatus.APPROVED)


def can_accept(task: Task) -> bool:
    """True while approving one more application stays within volunteers_needed."""
    return count_approved(task.applications) < task.volunteers_needed


def available_slots(task: Task) -> int:
    return max(0, task.volunteers_needed - count_approved(task.applications))


def is_open(task: Task) -> bool:
    """An active task that can still take approved volunteers."""
    return task.status == TaskStatus.ACTIVE and can_accept(task)
