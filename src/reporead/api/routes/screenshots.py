"""Screenshot sink route."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from reporead.api.app_state import AppState
from reporead.api.dependencies import get_app_state
from reporead.api.schemas import APIResponse, ScreenshotRequest
from reporead.catalog.screenshots import save_screenshot

router = APIRouter(prefix="/api", tags=["screenshots"])


@router.post("/screenshots")
async def create_screenshot(
    body: ScreenshotRequest,
    state: AppState = Depends(get_app_state),
) -> APIResponse:
    copy = body.copy_to_clipboard
    if copy is None:
        copy = state.user_settings.load().copy_screenshot_to_clipboard
    path = await save_screenshot(
        state.screenshots_dir,
        body.data,
        body.filename,
        copy_to_clipboard=copy,
    )
    return APIResponse(success=True, data=str(path))
