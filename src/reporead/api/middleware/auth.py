"""Shared-secret gate in front of the HTTP API.

RepoRead binds to loopback and its only expected caller is the desktop
shell, so an unset ``Settings.api_key`` leaves every route open. Once a
key is set, each request outside the public health and docs routes
must carry it in the ``X-API-Key`` header. CORS preflights never reach
this gate because ``CORSMiddleware`` sits outside it.
"""

from __future__ import annotations

import hmac
import logging

from fastapi import Request, Response
from starlette.middleware.base import (
    BaseHTTPMiddleware,
    RequestResponseEndpoint,
)
from starlette.responses import JSONResponse

from reporead.api.schemas import APIResponse
from reporead.constants import (
    API_KEY_HEADER,
    AUTH_EXEMPT_PATHS,
    AUTH_EXEMPT_PREFIXES,
)

logger = logging.getLogger(__name__)


def is_public_path(path: str) -> bool:
    return path in AUTH_EXEMPT_PATHS or path.startswith(AUTH_EXEMPT_PREFIXES)


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Reject requests whose key does not match the configured one."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        expected: str = request.app.state.typed.settings.api_key
        if not expected or is_public_path(request.url.path):
            return await call_next(request)

        provided = request.headers.get(API_KEY_HEADER, "")
        if hmac.compare_digest(provided.encode(), expected.encode()):
            return await call_next(request)

        logger.warning(
            "event=api_key_rejected path=%s client=%s present=%s",
            request.url.path,
            request.client.host if request.client else "-",
            bool(provided),
        )
        return JSONResponse(
            status_code=401,
            content=APIResponse(
                success=False, error="Invalid or missing API key"
            ).model_dump(),
        )
