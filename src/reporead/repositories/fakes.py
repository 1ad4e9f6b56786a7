"""In-memory fake repositories for unit testing.

Each fake satisfies the corresponding Protocol from protocols.py.
"""

from __future__ import annotations

from reporead.constants import MAX_HISTORY_ENTRIES
from reporead.models.base import utc_now_iso
from reporead.models.chat import ChatSession
from reporead.models.history import FileHistoryEntry


class FakeChatSessionRepository:
    """Dict-backed ChatSessionRepository keyed by (repo_url, id)."""

    def __init__(self) -> None:
        self._store: dict[tuple[str, str], ChatSession] = {}

    async def list_sessions(self, repo_url: str) -> list[ChatSession]:
        sessions = [
            s for (url, _), s in self._store.items() if url == repo_url
        ]
        return sorted(sessions, key=lambda s: s.updated_at, reverse=True)

    async def get_session(
        self, repo_url: str, session_id: str
    ) -> ChatSession | None:
        return self._store.get((repo_url, session_id))

    async def upsert_session(self, session: ChatSession) -> ChatSession:
        self._store[(session.repo_url, session.id)] = session
        return session

    async def delete_session(self, repo_url: str, session_id: str) -> bool:
        return self._store.pop((repo_url, session_id), None) is not None


class FakeFileHistoryRepository:
    """List-backed FileHistoryRepository, newest entry first."""

    def __init__(self) -> None:
        self._store: dict[str, list[FileHistoryEntry]] = {}

    async def list_entries(self, repo_url: str) -> list[FileHistoryEntry]:
        return list(self._store.get(repo_url, []))

    async def record(self, repo_url: str, path: str) -> FileHistoryEntry:
        entries = [
            e for e in self._store.get(repo_url, []) if e.path != path
        ]
        entry = FileHistoryEntry(
            repo_url=repo_url, path=path, opened_at=utc_now_iso()
        )
        entries.insert(0, entry)
        self._store[repo_url] = entries[:MAX_HISTORY_ENTRIES]
        return entry

    async def clear(self, repo_url: str) -> None:
        self._store.pop(repo_url, None)
