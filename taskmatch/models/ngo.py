from datetime import datetime
from typing import TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship
from taskmatch.models.enums import NgoStatus, TaskCategory
from taskmatch.utils.validation import utc_now

if TYPE_CHECKING:
    from taskmatch.models.user import User
    from taskmatch.models.task import Task


class NgoBase(SQLModel):
    organization_name: str = Field(max_length=100)
    registration_number: str = Field(unique=True, index=True, max_length=50)
    category: TaskCategory
    description: str = Field(max_length=1000)
    city: str = Field(max_length=100)
    state: str = Field(max_length=100)
    country: str = Field(default="United States", max_length=100)


class Ngo(NgoBase, table=True):
    id_ngo: int | None = Field(default=None, primary_key=True)
    id_user: int = Field(foreign_key="user.id_user", unique=True)
    status: NgoStatus = Field(default=NgoStatus.PENDING, index=True)
    is_verified: bool = Field(default=False)
    is_active: bool = Field(default=True)
    admin_notes: str | None = Field(default=None, max_length=1000)
    rejection_reason: str | None = Field(default=None, max_length=500)
    created_at: datetime = Field(default_factory=utc_now)
    # Aggregates written by the task engine, never by profile edits
    total_tasks: int = Field(default=0)
    completed_tasks: int = Field(default=0)
    total_volunteers: int = Field(default=0)
    total_hours: float = Field(default=0)
    average_rating: float = Field(default=0)
    user: "User" = Relationship(back_populates="ngo_profile")
    tasks: list["Task"] = Relationship(back_populates="ngo")


class NgoCreate(NgoBase):
    pass


class NgoPublic(NgoBase):
    id_ngo: int
    id_user: int
    status: NgoStatus
    is_verified: bool
    is_active: bool
    total_tasks: int
    completed_tasks: int
    total_volunteers: int
    total_hours: float
    average_rating: float


class NgoApprove(SQLModel):
    admin_notes: str | None = Field(default=None, max_length=1000)


class NgoReject(SQLModel):
    rejection_reason: str = Field(min_length=10, max_length=500)
    admin_notes: str | None = Field(default=None, max_length=1000)
