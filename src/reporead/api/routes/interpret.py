"""Code interpretation route."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from reporead.api.app_state import AppState
from reporead.api.dependencies import get_app_state
from reporead.api.schemas import APIResponse, InterpretRequest
from reporead.chat.interpret import interpret_code

router = APIRouter(prefix="/api", tags=["interpret"])


@router.post("/interpret")
async def interpret(
    body: InterpretRequest,
    state: AppState = Depends(get_app_state),
) -> APIResponse:
    """Explain a code selection with the configured model."""
    prefs = state.user_settings.load()
    text = await interpret_code(
        prefs,
        body.code,
        body.language,
        body.project,
        timeout=state.settings.interpret_timeout_seconds,
    )
    return APIResponse(
        success=True,
        data=text,
        metadata={"model": prefs.interpret_model},
    )
