"""Per-repository file-view history routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from reporead.api.dependencies import Repos, get_repos
from reporead.api.schemas import APIResponse, HistoryRecordRequest

router = APIRouter(prefix="/api/history", tags=["history"])


@router.get("")
async def get_history(
    repo_url: str,
    repos: Repos = Depends(get_repos),
) -> APIResponse:
    entries = await repos.file_history.list_entries(repo_url)
    return APIResponse(
        success=True,
        data={
            "repo_url": repo_url,
            "entries": [e.to_dict() for e in entries],
        },
    )


@router.post("")
async def record_file_open(
    body: HistoryRecordRequest,
    repos: Repos = Depends(get_repos),
) -> APIResponse:
    entry = await repos.file_history.record(body.repo_url, body.path)
    return APIResponse(success=True, data=entry.to_dict())


@router.delete("")
async def clear_history(
    repo_url: str,
    repos: Repos = Depends(get_repos),
) -> APIResponse:
    await repos.file_history.clear(repo_url)
    return APIResponse(success=True, data={"cleared": repo_url})
