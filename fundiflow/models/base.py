# File: fundiflow/models/base.py

import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.utcnow()


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Records use string ids so they can be addressed the same way the
    dashboard addresses documents.
    """
    pass


def to_naive_utc(value: datetime) -> datetime:
    """Stored datetimes are naive UTC; convert aware values on the way in."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
