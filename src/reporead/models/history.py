"""Recently opened files, per repository."""

from typing import Any

from sqlalchemy import Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from reporead.models.base import Base, utc_now_iso


class FileHistoryEntry(Base):
    __tablename__ = "file_history"
    __table_args__ = (
        UniqueConstraint("repo_url", "path", name="uq_file_history_path"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    repo_url: Mapped[str] = mapped_column(String(500), index=True)
    path: Mapped[str] = mapped_column(Text)
    opened_at: Mapped[str] = mapped_column(String(40), default=utc_now_iso)

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "opened_at": self.opened_at}
