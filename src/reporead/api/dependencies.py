"""FastAPI dependency injection for services and repository access."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass

from fastapi import Request

from reporead.api.app_state import AppState
from reporead.catalog.favorites import FavoritesStore
from reporead.catalog.user_settings import UserSettingsStore
from reporead.ingestion.hosting_client import HostingClient
from reporead.repositories.protocols import (
    ChatSessionRepository,
    FileHistoryRepository,
)
from reporead.services.repo_service import RepoService

logger = logging.getLogger(__name__)


@dataclass
class Repos:
    """Repository container resolved per-request via Depends.

    Routes receive this instead of touching session_factory.
    """

    chat_session: ChatSessionRepository
    file_history: FileHistoryRepository


def get_app_state(request: Request) -> AppState:
    state: AppState = request.app.state.typed
    return state


async def get_repos(
    request: Request,
) -> AsyncIterator[Repos]:
    """Generator dep — session lives for the request, commits on success."""
    from reporead.repositories.chat_session_repo import (
        SqlChatSessionRepository,
    )
    from reporead.repositories.file_history_repo import (
        SqlFileHistoryRepository,
    )

    session_factory = get_app_state(request).session_factory
    if session_factory is None:
        raise RuntimeError("database is not initialised")
    async with session_factory() as session:
        yield Repos(
            chat_session=SqlChatSessionRepository(session),
            file_history=SqlFileHistoryRepository(session),
        )
        await session.commit()


def get_repo_service(request: Request) -> RepoService:
    return get_app_state(request).repo_service


def get_hosting_client(request: Request) -> HostingClient:
    return get_app_state(request).hosting


def get_favorites_store(request: Request) -> FavoritesStore:
    return get_app_state(request).favorites


def get_user_settings_store(request: Request) -> UserSettingsStore:
    return get_app_state(request).user_settings
