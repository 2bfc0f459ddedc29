from sqlmodel import SQLModel
from taskmatch.models.enums import UserRole


class Principal(SQLModel):
    """Authenticated caller, as asserted by the identity provider's token."""

    id_user: int
    role: UserRole


class TokenData(SQLModel):
    sub: str | None = None
    role: UserRole | None = None
