"""SQL implementation of ChatSessionRepository."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from reporead.models.chat import ChatSession


class SqlChatSessionRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_sessions(self, repo_url: str) -> list[ChatSession]:
        result = await self._session.execute(
            select(ChatSession)
            .where(ChatSession.repo_url == repo_url)
            .order_by(ChatSession.updated_at.desc())
        )
        return list(result.scalars().all())

    async def get_session(
        self, repo_url: str, session_id: str
    ) -> ChatSession | None:
        return await self._session.get(ChatSession, (repo_url, session_id))

    async def upsert_session(self, session: ChatSession) -> ChatSession:
        """Insert, or overwrite every field of the stored session."""
        existing = await self.get_session(session.repo_url, session.id)
        if existing is None:
            self._session.add(session)
            await self._session.flush()
            return session

        existing.title = session.title
        existing.file_path = session.file_path
        existing.messages_json = session.messages_json
        existing.created_at = session.created_at
        existing.updated_at = session.updated_at
        await self._session.flush()
        return existing

    async def delete_session(self, repo_url: str, session_id: str) -> bool:
        result = await self._session.execute(
            delete(ChatSession).where(
                ChatSession.repo_url == repo_url,
                ChatSession.id == session_id,
            )
        )
        rowcount: int = getattr(result, "rowcount", 0) or 0
        return rowcount > 0
