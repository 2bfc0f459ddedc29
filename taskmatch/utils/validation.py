import uuid
from datetime import datetime, timezone


def new_id() -> str:
    """Opaque string identifier for tasks, applications and roster entries."""
    return uuid.uuid4().hex


def utc_now() -> datetime:
    """Current UTC time as a naive datetime, the form every timestamp column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to naive UTC.

    Aware values are converted to UTC and stripped of tzinfo; naive values are assumed
    to already be UTC and returned unchanged.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
