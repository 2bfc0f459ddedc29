from datetime import datetime
from typing import TYPE_CHECKING
from pydantic import FiniteFloat
from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field, Relationship
from taskmatch.utils.validation import new_id, utc_now

if TYPE_CHECKING:
    from taskmatch.models.task import Task


class VolunteerRecord(SQLModel, table=True):
    """Roster entry of an approved volunteer on one task."""

    __table_args__ = (
        UniqueConstraint(
            "id_task", "id_volunteer", name="uq_volunteerrecord_task_volunteer"
        ),
    )

    id_record: str = Field(default_factory=new_id, primary_key=True)
    id_task: str = Field(foreign_key="task.id_task", ondelete="CASCADE", index=True)
    id_volunteer: int = Field(foreign_key="user.id_user", index=True)
    joined_at: datetime = Field(default_factory=utc_now)
    hours_worked: float = Field(default=0)
    rating: int | None = None
    feedback: str | None = Field(default=None, max_length=1000)
    completed_at: datetime | None = None
    task: "Task" = Relationship(back_populates="volunteers")


class VolunteerRecordPublic(SQLModel):
    id_record: str
    id_task: str
    id_volunteer: int
    joined_at: datetime
    hours_worked: float
    rating: int | None = None
    feedback: str | None = None
    completed_at: datetime | None = None


class CompletionCreate(SQLModel):
    hours_worked: FiniteFloat = Field(ge=0)
    rating: int | None = Field(default=None, ge=1, le=5)
    feedback: str | None = Field(default=None, max_length=1000)
    # Only honoured for admins completing on behalf of a volunteer
    id_volunteer: int | None = None
