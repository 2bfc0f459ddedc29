"""Derived statistics for tasks, their NGO and completing volunteers.

Task counters are always refolded from the child collections, never adjusted
incrementally, so recomputing any number of times yields the same result.
"""

from sqlmodel import Session, select, func

from taskmatch.models.completed_task import CompletedTask
from taskmatch.models.enums import TaskStatus
from taskmatch.models.ngo import Ngo
from taskmatch.models.task import Task
from taskmatch.models.user import User
from taskmatch.models.volunteer_record import VolunteerRecord
from taskmatch.services import capacity


def average_rating(ratings: list[int]) -> float:
    return sum(ratings) / len(ratings) if ratings else 0


def recompute_stats(task: Task) -> Task:
    """
    Refold the task's derived counters from its applications and roster.

    Parameters:
        task: Task with applications and volunteers loaded.

    Returns:
        Task: The same task, with total_applications, approved_applications,
        total_volunteers, total_hours and average_rating rewritten.
    """
    task.total_applications = len(task.applications)
    task.approved_applications = capacity.count_approved(task.applications)
    task.total_volunteers = len(task.volunteers)
    task.total_hours = sum(record.hours_worked or 0 for record in task.volunteers)
    task.average_rating = average_rating(
        [record.rating for record in task.volunteers if record.rating is not None]
    )
    return task


def refresh_ngo_stats(session: Session, ngo: Ngo) -> Ngo:
    """
    Refold an NGO's activity aggregates from its tasks.

    Rewrites completed_tasks, total_volunteers (distinct volunteers across all
    rosters), total_hours and average_rating. The NGO row is locked first so
    concurrent refolds for the same NGO serialize. total_tasks is left alone:
    it is maintained by task creation and deletion.

    Parameters:
        session: Database session; pending changes are flushed before reading.
        ngo: NGO whose aggregates to rewrite.

    Returns:
        Ngo: The refreshed NGO.
    """
    ngo = session.exec(
        select(Ngo)
        .where(Ngo.id_ngo == ngo.id_ngo)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).one()

    completed = session.exec(
        select(func.count())
        .select_from(Task)
        .where(Task.id_ngo == ngo.id_ngo, Task.status == TaskStatus.COMPLETED)
    ).one()

    volunteers, hours, rating = session.exec(
        select(
            func.count(func.distinct(VolunteerRecord.id_volunteer)),
            func.coalesce(func.sum(VolunteerRecord.hours_worked), 0),
            func.avg(VolunteerRecord.rating),
        )
        .select_from(VolunteerRecord)
        .join(Task, VolunteerRecord.id_task == Task.id_task)  # type: ignore
        .where(Task.id_ngo == ngo.id_ngo)
    ).one()

    ngo.completed_tasks = completed
    ngo.total_volunteers = volunteers
    ngo.total_hours = float(hours)
    ngo.average_rating = float(rating) if rating is not None else 0
    session.add(ngo)
    return ngo


def record_completion(user: User, task: Task, record: VolunteerRecord) -> CompletedTask:
    """
    Credit a finished roster entry to the volunteer's personal totals.

    The hours are added with an SQL-side increment so concurrent completions on
    different tasks cannot overwrite each other. Must run in the same
    transaction as the roster mutation.

    Returns:
        CompletedTask: The appended completed-task record.
    """
    user.total_hours = User.total_hours + (record.hours_worked or 0)  # type: ignore
    entry = CompletedTask(
        id_task=task.id_task,
        completed_at=record.completed_at,
        hours_worked=record.hours_worked,
        rating=record.rating,
        feedback=record.feedback,
    )
    user.completed_tasks.append(entry)
    return entry
