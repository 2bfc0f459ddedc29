"""Volunteer roster: approved volunteers' participation on one task."""

import math
from datetime import datetime

from taskmatch.models.task import Task
from taskmatch.models.volunteer_record import VolunteerRecord
from taskmatch.exceptions import (
    AlreadyCompletedError,
    NotARosterMemberError,
    ValidationError,
)
from taskmatch.utils.validation import utc_now


def find_member(task: Task, id_volunteer: int) -> VolunteerRecord | None:
    for record in task.volunteers:
        if record.id_volunteer == id_volunteer:
            return record
    return None


def ensure_member(
    task: Task, id_volunteer: int, now: datetime | None = None
) -> VolunteerRecord:
    """Return the volunteer's roster entry, creating it on first approval."""
    record = find_member(task, id_volunteer)
    if record is None:
        record = VolunteerRecord(
            id_task=task.id_task,
            id_volunteer=id_volunteer,
            joined_at=now or utc_now(),
            hours_worked=0,
        )
        task.volunteers.append(record)
    return record


def complete(
    task: Task,
    id_volunteer: int,
    hours_worked: float,
    rating: int | None = None,
    feedback: str | None = None,
    now: datetime | None = None,
) -> VolunteerRecord:
    """
    Record a volunteer's completion of the task.

    completed_at is written once; a second completion leaves the record untouched.

    Args:
        task: Task aggregate with its roster loaded.
        id_volunteer: Volunteer completing the task.
        hours_worked: Hours spent, zero or more.
        rating: Optional 1-5 rating of the task.
        feedback: Optional free-text feedback.
        now: Completion timestamp (defaults to current UTC time).

    Returns:
        VolunteerRecord: The completed roster entry.

    Raises:
        NotARosterMemberError: If the volunteer is not on the roster.
        AlreadyCompletedError: If the volunteer already completed the task.
        ValidationError: If hours are negative or not finite, or rating is outside 1-5.
    """
    record = find_member(task, id_volunteer)
    if record is None:
        raise NotARosterMemberError(task.id_task, id_volunteer)

    if record.completed_at is not None:
        raise AlreadyCompletedError(task.id_task, id_volunteer)

    if not (math.isfinite(hours_worked) and hours_worked >= 0):
        raise ValidationError(
            "Hours worked must be a finite number of zero or more", field="hours_worked"
        )
    if rating is not None and not 1 <= rating <= 5:
        raise ValidationError("Rating must be between 1 and 5", field="rating")

    record.hours_worked = hours_worked
    record.rating = rating
    record.feedback = feedback
    record.completed_at = now or utc_now()
    return record
