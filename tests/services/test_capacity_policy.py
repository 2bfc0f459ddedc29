"""Tests for the capacity policy."""

import pytest

from taskmatch.models.application import Application
from taskmatch.models.enums import ApplicationStatus, TaskStatus
from taskmatch.services import capacity
from tests.factories import make_task


def _add(task, status: ApplicationStatus, id_volunteer: int) -> None:
    task.applications.append(
        Application(id_task=task.id_task, id_volunteer=id_volunteer, status=status)
    )


class TestCountApproved:
    def test_counts_only_approved(self):
        task = make_task()
        _add(task, ApplicationStatus.APPROVED, 1)
        _add(task, ApplicationStatus.PENDING, 2)
        _add(task, ApplicationStatus.REJECTED, 3)
        _add(task, ApplicationStatus.WITHDRAWN, 4)
        _add(task, ApplicationStatus.APPROVED, 5)

        assert capacity.count_approved(task.applications) == 2

    def test_empty(self):
        assert capacity.count_approved([]) == 0


class TestCanAccept:
    def test_below_capacity(self):
        task = make_task(volunteers_needed=2)
        _add(task, ApplicationStatus.APPROVED, 1)
        assert capacity.can_accept(task) is True
        assert capacity.available_slots(task) == 1

    def test_at_capacity(self):
        task = make_task(volunteers_needed=1)
        _add(task, ApplicationStatus.APPROVED, 1)
        assert capacity.can_accept(task) is False
        assert capacity.available_slots(task) == 0

    def test_pending_applications_do_not_consume_slots(self):
        """Pending applications past capacity form a waiting list."""
        task = make_task(volunteers_needed=1)
        for i in range(5):
            _add(task, ApplicationStatus.PENDING, i)
        assert capacity.can_accept(task) is True


class TestIsOpen:
    @pytest.mark.parametrize(
        "status",
        [
            TaskStatus.DRAFT,
            TaskStatus.IN_PROGRESS,
            TaskStatus.COMPLETED,
            TaskStatus.CANCELLED,
        ],
    )
    def test_only_active_tasks_are_open(self, status):
        assert capacity.is_open(make_task(status=status)) is False

    def test_active_task_with_room(self):
        assert capacity.is_open(make_task(status=TaskStatus.ACTIVE)) is True

    def test_full_active_task_is_closed(self):
        task = make_task(volunteers_needed=1)
        _add(task, ApplicationStatus.APPROVED, 1)
        assert capacity.is_open(task) is False
