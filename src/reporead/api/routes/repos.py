"""Imported repository routes — import, browse, read, delete."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from reporead.api.dependencies import get_repo_service
from reporead.api.schemas import APIResponse, ImportRequest
from reporead.services.repo_service import RepoService

router = APIRouter(prefix="/api", tags=["repos"])


@router.post("/repos/import")
async def import_repo(
    body: ImportRequest,
    service: RepoService = Depends(get_repo_service),
) -> APIResponse:
    """Download and extract a repository snapshot."""
    result = await service.import_repo(body.url)
    return APIResponse(success=True, data=result.model_dump(exclude_none=True))


@router.get("/repos")
async def list_recent_repos(
    service: RepoService = Depends(get_repo_service),
) -> APIResponse:
    """Imported repositories, newest first."""
    repos = service.list_recent_repos()
    return APIResponse(
        success=True,
        data=[info.model_dump() for info in repos],
        metadata={"count": len(repos)},
    )


@router.get("/repos/{repo_key}")
async def get_repo_info(
    repo_key: str,
    service: RepoService = Depends(get_repo_service),
) -> APIResponse:
    info = service.get_repo_info(repo_key)
    return APIResponse(success=True, data=info.model_dump())


@router.get("/repos/{repo_key}/tree")
async def get_repo_tree(
    repo_key: str,
    service: RepoService = Depends(get_repo_service),
) -> APIResponse:
    tree = service.get_repo_tree(repo_key)
    return APIResponse(success=True, data=tree.model_dump(exclude_none=True))


@router.get("/repos/{repo_key}/file")
async def read_text_file(
    repo_key: str,
    path: str = Query(min_length=1),
    service: RepoService = Depends(get_repo_service),
) -> APIResponse:
    """Bounded read of one file, by path relative to the repo root."""
    content = service.read_text_file(repo_key, path)
    return APIResponse(success=True, data=content.model_dump())


@router.get("/repos/{repo_key}/path")
async def get_repo_path(
    repo_key: str,
    service: RepoService = Depends(get_repo_service),
) -> APIResponse:
    return APIResponse(success=True, data=service.get_repo_path(repo_key))


@router.delete("/repos/{repo_key}")
async def delete_repo(
    repo_key: str,
    service: RepoService = Depends(get_repo_service),
) -> APIResponse:
    service.delete_repo(repo_key)
    return APIResponse(success=True, data={"deleted": repo_key})


@router.get("/language")
async def get_file_language(path: str) -> APIResponse:
    return APIResponse(
        success=True, data=RepoService.get_file_language(path)
    )
