from datetime import datetime
from typing import TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship
from taskmatch.models.enums import UserRole
from taskmatch.models.completed_task import CompletedTaskPublic
from taskmatch.utils.validation import utc_now

if TYPE_CHECKING:
    from taskmatch.models.completed_task import CompletedTask
    from taskmatch.models.ngo import Ngo


class UserBase(SQLModel):
    name: str = Field(max_length=50)
    email: str = Field(unique=True, index=True)
    role: UserRole = Field(default=UserRole.VOLUNTEER, index=True)


class User(UserBase, table=True):
    id_user: int | None = Field(default=None, primary_key=True)
    is_active: bool = Field(default=True)
    total_hours: float = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=utc_now)
    completed_tasks: list["CompletedTask"] = Relationship(
        back_populates="user",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "order_by": "CompletedTask.completed_at",
        },
    )
    ngo_profile: "Ngo" = Relationship(
        back_populates="user", sa_relationship_kwargs={"uselist": False}
    )


class UserCreate(UserBase):
    pass


class UserPublic(UserBase):
    id_user: int
    is_active: bool
    total_hours: float
    created_at: datetime
    completed_tasks: list[CompletedTaskPublic] = []
