"""FastAPI application with lifespan startup."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

# Phase 1: Singleton logging — MUST be before any reporead imports
# (they transitively import litellm which reads LITELLM_LOG at import time)
from reporead.logging_config import setup_logging

setup_logging()

import httpx  # noqa: E402
from fastapi import FastAPI, Request  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker  # noqa: E402

from reporead import __version__  # noqa: E402
from reporead.api.app_state import AppState  # noqa: E402
from reporead.api.middleware.auth import ApiKeyMiddleware  # noqa: E402
from reporead.api.routes import (  # noqa: E402
    chat_sessions,
    discovery,
    favorites,
    health,
    history,
    interpret,
    preferences,
    repos,
    screenshots,
)
from reporead.api.schemas import APIResponse  # noqa: E402
from reporead.catalog.favorites import FavoritesStore  # noqa: E402
from reporead.catalog.user_settings import UserSettingsStore  # noqa: E402
from reporead.config import (  # noqa: E402
    Settings,
    create_app_engine,
    repos_dir,
)
from reporead.constants import (  # noqa: E402
    FAVORITES_FILE,
    SCREENSHOTS_SUBDIR,
    SETTINGS_FILE,
)
from reporead.ingestion.hosting_client import HostingClient  # noqa: E402
from reporead.logging_config import (  # noqa: E402
    apply_log_level,
    cleanup_third_party_handlers,
)
from reporead.models.base import Base  # noqa: E402
from reporead.resilience.errors import RepoError  # noqa: E402
from reporead.services.repo_service import RepoService  # noqa: E402
from reporead.storage.local_store import LocalStore  # noqa: E402

# Phase 2: Now that all imports (including litellm) are done,
# clear litellm's duplicate handlers.
cleanup_third_party_handlers()

_logger = logging.getLogger(__name__)


def build_app_state(
    settings: Settings, http_client: httpx.AsyncClient
) -> AppState:
    """Wire stores and services for one data root and config dir."""
    data_dir = settings.resolved_data_dir
    config_dir = settings.resolved_config_dir
    store = LocalStore(repos_dir(settings))
    hosting = HostingClient(settings, client=http_client)
    return AppState(
        settings=settings,
        repo_service=RepoService(store, hosting),
        hosting=hosting,
        favorites=FavoritesStore(config_dir / FAVORITES_FILE),
        user_settings=UserSettingsStore(config_dir / SETTINGS_FILE),
        screenshots_dir=data_dir / SCREENSHOTS_SUBDIR,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # 1. Use module-level settings (single source of truth)
    settings = _settings

    # 2. Settings may carry a level that only lives in .env
    apply_log_level(settings.log_level)

    # 3. Data root must exist before SQLite opens its file there
    repos_dir(settings).mkdir(parents=True, exist_ok=True)

    # 4. Create async SQLite engine (WAL set via pool-connect listener)
    engine = create_app_engine(
        settings.resolved_database_url, echo=settings.debug_mode
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    # 5. One shared HTTP client for every hosting call
    http_client = httpx.AsyncClient(
        timeout=settings.http_timeout_seconds,
        follow_redirects=True,
    )

    # 6. Store in app.state
    state = build_app_state(settings, http_client)
    state.session_factory = session_factory
    app.state.typed = state

    _logger.info(
        "event=startup data_dir=%s config_dir=%s",
        settings.resolved_data_dir,
        settings.resolved_config_dir,
    )
    if not settings.api_key:
        _logger.warning(
            "event=no_api_key action=all_endpoints_public"
        )

    yield

    # Cleanup
    await http_client.aclose()
    await engine.dispose()


async def repo_error_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Render any RepoError as the standard envelope."""
    status = exc.status_code if isinstance(exc, RepoError) else 500
    _logger.info(
        "event=request_failed path=%s status=%d error=%s",
        request.url.path,
        status,
        exc,
    )
    return JSONResponse(
        status_code=status,
        content=APIResponse(success=False, error=str(exc)).model_dump(),
    )


app = FastAPI(
    title="RepoRead",
    description="Offline repository browser backend",
    version=__version__,
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)

app.add_exception_handler(RepoError, repo_error_handler)

# Middleware stack (Starlette LIFO: last added = outermost = runs first)
#
# Inbound request order:
#   CORSMiddleware (outermost) -> ApiKeyMiddleware -> Router
#
# CORS must be outermost so OPTIONS preflight is answered before
# ApiKeyMiddleware rejects for missing X-API-Key.
_settings = Settings()
_cors_origins = [
    o.strip()
    for o in _settings.cors_origins.split(",")
    if o.strip()
]

app.add_middleware(ApiKeyMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "X-API-Key"],
    allow_credentials=False,
)

# Routes
app.include_router(health.router)
app.include_router(repos.router)
app.include_router(discovery.router)
app.include_router(favorites.router)
app.include_router(screenshots.router)
app.include_router(preferences.router)
app.include_router(interpret.router)
app.include_router(chat_sessions.router)
app.include_router(history.router)
