"""Favorite repository routes."""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends

from reporead.api.dependencies import get_favorites_store
from reporead.api.schemas import (
    APIResponse,
    FavoriteCreate,
    FavoritesExportRequest,
)
from reporead.catalog.favorites import FavoritesStore
from reporead.catalog.schemas import FavoriteRepo

router = APIRouter(prefix="/api/favorites", tags=["favorites"])


@router.get("")
async def get_favorites(
    store: FavoritesStore = Depends(get_favorites_store),
) -> APIResponse:
    favorites = store.load()
    return APIResponse(
        success=True, data=[fav.model_dump() for fav in favorites]
    )


@router.put("")
async def save_favorites(
    favorites: list[FavoriteRepo],
    store: FavoritesStore = Depends(get_favorites_store),
) -> APIResponse:
    """Replace the whole list (the UI reorders client-side)."""
    store.save(favorites)
    return APIResponse(success=True, data={"count": len(favorites)})


@router.post("")
async def add_favorite(
    body: FavoriteCreate,
    store: FavoritesStore = Depends(get_favorites_store),
) -> APIResponse:
    favorite = store.add(**body.model_dump())
    return APIResponse(success=True, data=favorite.model_dump())


@router.delete("/{owner}/{repo}")
async def remove_favorite(
    owner: str,
    repo: str,
    store: FavoritesStore = Depends(get_favorites_store),
) -> APIResponse:
    removed = store.remove(owner, repo)
    if not removed:
        return APIResponse(
            success=False, error=f"Not a favorite: {owner}/{repo}"
        )
    return APIResponse(success=True, data={"removed": f"{owner}/{repo}"})


@router.post("/export")
async def export_favorites(
    body: FavoritesExportRequest,
    store: FavoritesStore = Depends(get_favorites_store),
) -> APIResponse:
    dest = store.export(Path(body.path).expanduser(), body.format)
    return APIResponse(success=True, data=str(dest))
