"""Saved chat session routes, scoped by repository URL."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from reporead.api.dependencies import Repos, get_repos
from reporead.api.schemas import APIResponse, ChatSessionPayload
from reporead.constants import CHAT_TITLE_MAX_CHARS
from reporead.models.base import utc_now_iso
from reporead.models.chat import ChatSession

router = APIRouter(prefix="/api/chat/sessions", tags=["chat"])

DEFAULT_TITLE = "New chat"


def _session_title(payload: ChatSessionPayload) -> str:
    if payload.title:
        return payload.title
    if payload.messages and payload.messages[0].content:
        return payload.messages[0].content[:CHAT_TITLE_MAX_CHARS]
    return DEFAULT_TITLE


@router.get("")
async def list_sessions(
    repo_url: str,
    repos: Repos = Depends(get_repos),
) -> APIResponse:
    """Summaries, most recently updated first."""
    sessions = await repos.chat_session.list_sessions(repo_url)
    return APIResponse(
        success=True,
        data=[s.to_summary_dict() for s in sessions],
    )


@router.get("/{session_id}")
async def get_session(
    session_id: str,
    repo_url: str,
    repos: Repos = Depends(get_repos),
) -> APIResponse:
    """Full session, or ``data: null`` when unknown."""
    session = await repos.chat_session.get_session(repo_url, session_id)
    return APIResponse(
        success=True,
        data=session.to_dict() if session is not None else None,
    )


@router.put("")
async def save_session(
    body: ChatSessionPayload,
    repo_url: str,
    repos: Repos = Depends(get_repos),
) -> APIResponse:
    """Create or overwrite the session with this id."""
    now = utc_now_iso()
    session = ChatSession(
        repo_url=repo_url,
        id=body.id,
        title=_session_title(body),
        file_path=body.file_path,
        created_at=body.created_at or now,
        updated_at=body.updated_at or now,
    )
    session.messages = [m.model_dump(mode="json") for m in body.messages]
    saved = await repos.chat_session.upsert_session(session)
    return APIResponse(success=True, data=saved.to_dict())


@router.delete("/{session_id}")
async def delete_session(
    session_id: str,
    repo_url: str,
    repos: Repos = Depends(get_repos),
) -> APIResponse:
    deleted = await repos.chat_session.delete_session(repo_url, session_id)
    return APIResponse(success=True, data={"deleted": deleted})
