"""SQLAlchemy ORM models."""

from reporead.models.base import Base
from reporead.models.chat import ChatSession
from reporead.models.history import FileHistoryEntry

__all__ = [
    "Base",
    "ChatSession",
    "FileHistoryEntry",
]
