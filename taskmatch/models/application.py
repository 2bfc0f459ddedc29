from datetime import datetime
from typing import TYPE_CHECKING
from sqlalchemy import Index, text
from sqlmodel import SQLModel, Field, Relationship
from taskmatch.models.enums import ApplicationStatus, ApplicationDecision, Availability
from taskmatch.utils.validation import new_id, utc_now

if TYPE_CHECKING:
    from taskmatch.models.task import Task

# Enum columns persist member names, hence the upper-case literal
_ACTIVE_APPLICATION = text("status != 'WITHDRAWN'")


class ApplicationBase(SQLModel):
    message: str | None = Field(default=None, max_length=500)
    availability: Availability = Field(default=Availability.FLEXIBLE)


class Application(ApplicationBase, table=True):
    __table_args__ = (
        Index(
            "uq_application_active_volunteer",
            "id_task",
            "id_volunteer",
            unique=True,
            sqlite_where=_ACTIVE_APPLICATION,
            postgresql_where=_ACTIVE_APPLICATION,
        ),
    )

    id_application: str = Field(default_factory=new_id, primary_key=True)
    id_task: str = Field(foreign_key="task.id_task", ondelete="CASCADE", index=True)
    id_volunteer: int = Field(foreign_key="user.id_user", index=True)
    status: ApplicationStatus = Field(default=ApplicationStatus.PENDING)
    applied_at: datetime = Field(default_factory=utc_now)
    approved_at: datetime | None = None
    rejected_at: datetime | None = None
    rejection_reason: str | None = Field(default=None, max_length=500)
    task: "Task" = Relationship(back_populates="applications")


class ApplicationCreate(ApplicationBase):
    pass


class ApplicationDecisionIn(SQLModel):
    status: ApplicationDecision
    rejection_reason: str | None = Field(default=None, max_length=500)


class ApplicationPublic(ApplicationBase):
    id_application: str
    id_task: str
    id_volunteer: int
    status: ApplicationStatus
    applied_at: datetime
    approved_at: datetime | None = None
    rejected_at: datetime | None = None
    rejection_reason: str | None = None
