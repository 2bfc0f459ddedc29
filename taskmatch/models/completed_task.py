from datetime import datetime
from typing import TYPE_CHECKING
from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field, Relationship

if TYPE_CHECKING:
    from taskmatch.models.user import User


class CompletedTaskBase(SQLModel):
    id_task: str | None = Field(
        default=None, foreign_key="task.id_task", ondelete="SET NULL", nullable=True
    )
    completed_at: datetime
    hours_worked: float = Field(default=0, ge=0)
    rating: int | None = Field(default=None, ge=1, le=5)
    feedback: str | None = Field(default=None, max_length=1000)


class CompletedTask(CompletedTaskBase, table=True):
    """A volunteer's personal record of a finished task."""

    __table_args__ = (
        UniqueConstraint("id_user", "id_task", name="uq_completedtask_user_task"),
    )

    id_completed: int | None = Field(default=None, primary_key=True)
    id_user: int = Field(foreign_key="user.id_user", ondelete="CASCADE", index=True)
    user: "User" = Relationship(back_populates="completed_tasks")


class CompletedTaskPublic(CompletedTaskBase):
    id_completed: int
    id_user: int
