"""Repository discovery — search and trending."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from reporead.api.dependencies import (
    get_hosting_client,
    get_repo_service,
    get_user_settings_store,
)
from reporead.api.schemas import APIResponse
from reporead.catalog.trending import fetch_trending
from reporead.catalog.user_settings import UserSettingsStore
from reporead.constants import TrendingSince
from reporead.ingestion.hosting_client import HostingClient
from reporead.services.repo_service import RepoService

router = APIRouter(prefix="/api", tags=["discovery"])


@router.get("/search")
async def search_repos(
    q: str = "",
    service: RepoService = Depends(get_repo_service),
    user_settings: UserSettingsStore = Depends(get_user_settings_store),
) -> APIResponse:
    """Search the hosting site, authenticated with the saved token."""
    token = user_settings.load().github_token
    items = await service.search_repos(q, token=token)
    return APIResponse(
        success=True,
        data=[item.model_dump() for item in items],
        metadata={"count": len(items)},
    )


@router.get("/trending")
async def trending(
    language: str | None = None,
    since: TrendingSince = TrendingSince.DAILY,
    spoken_language: str | None = None,
    hosting: HostingClient = Depends(get_hosting_client),
) -> APIResponse:
    repos = await fetch_trending(
        hosting,
        language=language,
        since=since,
        spoken_language=spoken_language,
    )
    return APIResponse(
        success=True,
        data=[repo.model_dump() for repo in repos],
        metadata={"count": len(repos)},
    )
