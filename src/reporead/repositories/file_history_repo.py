"""SQL implementation of FileHistoryRepository."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from reporead.constants import MAX_HISTORY_ENTRIES
from reporead.models.base import utc_now_iso
from reporead.models.history import FileHistoryEntry


class SqlFileHistoryRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_entries(self, repo_url: str) -> list[FileHistoryEntry]:
        """Most recently opened first, at most ``MAX_HISTORY_ENTRIES``."""
        result = await self._session.execute(
            select(FileHistoryEntry)
            .where(FileHistoryEntry.repo_url == repo_url)
            .order_by(FileHistoryEntry.id.desc())
            .limit(MAX_HISTORY_ENTRIES)
        )
        return list(result.scalars().all())

    async def record(self, repo_url: str, path: str) -> FileHistoryEntry:
        """Move ``path`` to the front of the history, trimming the tail."""
        await self._session.execute(
            delete(FileHistoryEntry).where(
                FileHistoryEntry.repo_url == repo_url,
                FileHistoryEntry.path == path,
            )
        )
        entry = FileHistoryEntry(
            repo_url=repo_url, path=path, opened_at=utc_now_iso()
        )
        self._session.add(entry)
        await self._session.flush()

        stale = await self._session.execute(
            select(FileHistoryEntry.id)
            .where(FileHistoryEntry.repo_url == repo_url)
            .order_by(FileHistoryEntry.id.desc())
            .offset(MAX_HISTORY_ENTRIES)
        )
        stale_ids = list(stale.scalars().all())
        if stale_ids:
            await self._session.execute(
                delete(FileHistoryEntry).where(
                    FileHistoryEntry.id.in_(stale_ids)
                )
            )
        return entry

    async def clear(self, repo_url: str) -> None:
        await self._session.execute(
            delete(FileHistoryEntry).where(
                FileHistoryEntry.repo_url == repo_url
            )
        )
