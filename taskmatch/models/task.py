from datetime import datetime
from typing import TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship
from taskmatch.models.enums import (
    TaskCategory,
    TaskStatus,
    RecurringPattern,
    ExperienceLevel,
)
from taskmatch.models.application import Application, ApplicationPublic
from taskmatch.models.volunteer_record import VolunteerRecord, VolunteerRecordPublic
from taskmatch.utils.validation import new_id, utc_now

if TYPE_CHECKING:
    from taskmatch.models.ngo import Ngo


class TaskBase(SQLModel):
    title: str = Field(min_length=5, max_length=100)
    description: str = Field(min_length=20, max_length=2000)
    category: TaskCategory = Field(index=True)
    # Location is opaque data, no geographic matching is done on it
    address: str = Field(min_length=1)
    city: str = Field(min_length=1, index=True)
    state: str = Field(min_length=1)
    zip_code: str = Field(min_length=1, max_length=20)
    latitude: float | None = None
    longitude: float | None = None
    start_date: datetime
    end_date: datetime
    is_recurring: bool = False
    recurring_pattern: RecurringPattern = Field(default=RecurringPattern.WEEKLY)
    volunteers_needed: int = Field(ge=1)
    age_min: int = Field(default=0, ge=0)
    age_max: int | None = Field(default=None, ge=0)
    skills: str = Field(default="", max_length=500)
    experience: ExperienceLevel = Field(default=ExperienceLevel.BEGINNER)
    training_provided: bool = False
    training_description: str | None = None
    benefits: str | None = Field(default=None, max_length=500)
    is_urgent: bool = Field(default=False, index=True)


class Task(TaskBase, table=True):
    id_task: str = Field(default_factory=new_id, primary_key=True)
    id_ngo: int = Field(foreign_key="ngo.id_ngo", index=True)
    status: TaskStatus = Field(default=TaskStatus.DRAFT, index=True)
    is_featured: bool = Field(default=False, index=True)
    contact_name: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    additional_info: str | None = Field(default=None, max_length=1000)
    # Derived from the child collections by services.stats.recompute_stats
    total_applications: int = Field(default=0)
    approved_applications: int = Field(default=0)
    total_volunteers: int = Field(default=0)
    total_hours: float = Field(default=0)
    average_rating: float = Field(default=0)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    ngo: "Ngo" = Relationship(back_populates="tasks")
    applications: list[Application] = Relationship(
        back_populates="task",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "order_by": "Application.applied_at",
        },
    )
    volunteers: list[VolunteerRecord] = Relationship(
        back_populates="task",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "order_by": "VolunteerRecord.joined_at",
        },
    )


class TaskCreate(TaskBase):
    status: TaskStatus = TaskStatus.DRAFT
    contact_name: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    additional_info: str | None = Field(default=None, max_length=1000)


class TaskUpdate(SQLModel):
    title: str | None = Field(default=None, min_length=5, max_length=100)
    description: str | None = Field(default=None, min_length=20, max_length=2000)
    category: TaskCategory | None = None
    address: str | None = Field(default=None, min_length=1)
    city: str | None = Field(default=None, min_length=1)
    state: str | None = Field(default=None, min_length=1)
    zip_code: str | None = Field(default=None, min_length=1, max_length=20)
    latitude: float | None = None
    longitude: float | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    is_recurring: bool | None = None
    recurring_pattern: RecurringPattern | None = None
    volunteers_needed: int | None = Field(default=None, ge=1)
    age_min: int | None = Field(default=None, ge=0)
    age_max: int | None = Field(default=None, ge=0)
    skills: str | None = Field(default=None, max_length=500)
    experience: ExperienceLevel | None = None
    training_provided: bool | None = None
    training_description: str | None = None
    benefits: str | None = Field(default=None, max_length=500)
    is_urgent: bool | None = None
    status: TaskStatus | None = None
    contact_name: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    additional_info: str | None = Field(default=None, max_length=1000)


class TaskFeature(SQLModel):
    is_featured: bool


class TaskPublic(TaskBase):
    id_task: str
    id_ngo: int
    status: TaskStatus
    is_featured: bool
    total_applications: int
    approved_applications: int
    total_volunteers: int
    total_hours: float
    average_rating: float
    created_at: datetime
    updated_at: datetime
    applications: list[ApplicationPublic] = []
    volunteers: list[VolunteerRecordPublic] = []
    is_open: bool
    full_location: str
    duration_days: int
