"""Protocol-based repository interfaces.

SQL implementations satisfy these protocols structurally (no inheritance).
Test doubles can be plain classes or mocks matching the same signature.
"""

from typing import Protocol

from reporead.models.chat import ChatSession
from reporead.models.history import FileHistoryEntry


class ChatSessionRepository(Protocol):
    async def list_sessions(self, repo_url: str) -> list[ChatSession]: ...
    async def get_session(
        self, repo_url: str, session_id: str
    ) -> ChatSession | None: ...
    async def upsert_session(self, session: ChatSession) -> ChatSession: ...
    async def delete_session(self, repo_url: str, session_id: str) -> bool: ...


class FileHistoryRepository(Protocol):
    async def list_entries(self, repo_url: str) -> list[FileHistoryEntry]: ...
    async def record(self, repo_url: str, path: str) -> FileHistoryEntry: ...
    async def clear(self, repo_url: str) -> None: ...
