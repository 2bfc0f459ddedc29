"""SQLModel tables and API schemas.

Importing the package registers every table on SQLModel.metadata so string
relationship targets resolve and Alembic autogenerate sees the full schema.
"""

from taskmatch.models.enums import (
    UserRole,
    NgoStatus,
    TaskStatus,
    TaskCategory,
    RecurringPattern,
    ExperienceLevel,
    ApplicationStatus,
    ApplicationDecision,
    Availability,
)
from taskmatch.models.completed_task import CompletedTask
from taskmatch.models.user import User
from taskmatch.models.ngo import Ngo
from taskmatch.models.application import Application
from taskmatch.models.volunteer_record import VolunteerRecord
from taskmatch.models.task import Task
from taskmatch.models.principal import Principal

__all__ = [
    "UserRole",
    "NgoStatus",
    "TaskStatus",
    "TaskCategory",
    "RecurringPattern",
    "ExperienceLevel",
    "ApplicationStatus",
    "ApplicationDecision",
    "Availability",
    "CompletedTask",
    "User",
    "Ngo",
    "Application",
    "VolunteerRecord",
    "Task",
    "Principal",
]
