"""Chat session ORM model — one row per (repository, session)."""

import json
from typing import Any

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from reporead.models.base import Base, utc_now_iso


class ChatSession(Base):
    """A saved conversation about one repository.

    Ids are chosen by the client, so the key is ``(repo_url, id)``.
    Messages are replaced wholesale on every save and stored as a
    JSON array of ``{role, content}`` objects.
    """

    __tablename__ = "chat_sessions"

    repo_url: Mapped[str] = mapped_column(String(500), primary_key=True)
    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    title: Mapped[str] = mapped_column(String(300))
    file_path: Mapped[str | None] = mapped_column(Text, nullable=True)
    messages_json: Mapped[str] = mapped_column(Text, default="[]")
    created_at: Mapped[str] = mapped_column(String(40), default=utc_now_iso)
    updated_at: Mapped[str] = mapped_column(
        String(40), default=utc_now_iso, index=True
    )

    @property
    def messages(self) -> list[dict[str, str]]:
        data: list[dict[str, str]] = json.loads(self.messages_json or "[]")
        return data

    @messages.setter
    def messages(self, value: list[dict[str, str]]) -> None:
        self.messages_json = json.dumps(value, ensure_ascii=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "file_path": self.file_path,
            "messages": self.messages,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def to_summary_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "file_path": self.file_path,
            "message_count": len(self.messages),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
