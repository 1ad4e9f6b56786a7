"""User preference routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from reporead.api.dependencies import get_user_settings_store
from reporead.api.schemas import APIResponse
from reporead.catalog.schemas import AppSettings
from reporead.catalog.user_settings import UserSettingsStore

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("")
async def get_settings(
    store: UserSettingsStore = Depends(get_user_settings_store),
) -> APIResponse:
    return APIResponse(success=True, data=store.load().model_dump())


@router.put("")
async def update_settings(
    body: AppSettings,
    store: UserSettingsStore = Depends(get_user_settings_store),
) -> APIResponse:
    store.save(body)
    return APIResponse(success=True, data=body.model_dump())
