"""Typed application state — replaces untyped getattr() access."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from reporead.catalog.favorites import FavoritesStore
from reporead.catalog.user_settings import UserSettingsStore
from reporead.config import Settings
from reporead.ingestion.hosting_client import HostingClient
from reporead.services.repo_service import RepoService


@dataclass
class AppState:
    """Typed container for app.state attributes."""

    settings: Settings
    repo_service: RepoService
    hosting: HostingClient
    favorites: FavoritesStore
    user_settings: UserSettingsStore
    screenshots_dir: Path
    session_factory: async_sessionmaker[AsyncSession] | None = None
