"""Request/response schemas for the HTTP API."""

from typing import Any

from pydantic import BaseModel, Field

from reporead.constants import ChatRole, ExportFormat


class APIResponse(BaseModel):
    """Standard response envelope for all API endpoints."""

    success: bool
    data: Any | None = None
    error: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class ImportRequest(BaseModel):
    """Request body for POST /api/repos/import."""

    url: str = Field(min_length=1, max_length=2000)


class FavoriteCreate(BaseModel):
    """Request body for POST /api/favorites."""

    owner: str = Field(min_length=1)
    repo: str = Field(min_length=1)
    url: str = Field(min_length=1)
    description: str | None = None
    language: str | None = None
    stars: int | None = None


class FavoritesExportRequest(BaseModel):
    """Request body for POST /api/favorites/export.

    ``format`` is validated by the exporter so an unknown value is
    reported like every other bad input.
    """

    path: str = Field(min_length=1)
    format: str = ExportFormat.JSON


class ScreenshotRequest(BaseModel):
    """Request body for POST /api/screenshots.

    ``copy_to_clipboard`` falls back to the user's saved preference.
    """

    data: str = Field(min_length=1)
    filename: str = Field(min_length=1, max_length=255)
    copy_to_clipboard: bool | None = None


class InterpretRequest(BaseModel):
    """Request body for POST /api/interpret."""

    code: str = Field(min_length=1)
    language: str = "plaintext"
    project: str = ""


class ChatMessageSchema(BaseModel):
    role: ChatRole
    content: str


class ChatSessionPayload(BaseModel):
    """Request body for PUT /api/chat/sessions."""

    id: str = Field(min_length=1, max_length=100)
    title: str | None = None
    file_path: str | None = None
    messages: list[ChatMessageSchema] = Field(default_factory=list)
    created_at: str | None = None
    updated_at: str | None = None


class HistoryRecordRequest(BaseModel):
    """Request body for POST /api/history."""

    repo_url: str = Field(min_length=1)
    path: str = Field(min_length=1)
