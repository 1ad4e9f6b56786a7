"""Declarative base shared by every ORM model."""

from datetime import UTC, datetime

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def utc_now_iso() -> str:
    """Timestamps are stored as RFC3339 strings, as the UI sends them."""
    return datetime.now(UTC).isoformat()
