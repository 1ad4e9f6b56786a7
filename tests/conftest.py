"""Shared test fixtures — temp data root, fake hosting site, in-memory SQLite."""

import io
import zipfile
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
)

from reporead.api.app_state import AppState
from reporead.api.dependencies import Repos, get_repos
from reporead.config import Settings
from reporead.ingestion.hosting_client import HostingClient
from reporead.main import app, build_app_state
from reporead.models.base import Base
from reporead.repositories.fakes import (
    FakeChatSessionRepository,
    FakeFileHistoryRepository,
)
from reporead.storage.local_store import LocalStore

Handler = Callable[[httpx.Request], httpx.Response]

README_BYTES = b"# Widgets 1\n"  # 12 bytes
LIB_RS_BYTES = b"pub fn add(a: i32, b: i32) -> i32 {a+b}\n"  # 40 bytes


def make_zip(entries: dict[str, bytes | None]) -> bytes:
    """Build an in-memory zip; ``None`` values become directory entries."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, data in entries.items():
            if data is None:
                zf.writestr(zipfile.ZipInfo(name), b"")
            else:
                zf.writestr(name, data)
    return buf.getvalue()


def widgets_archive() -> bytes:
    """Snapshot archive of acme/widgets on ``main``."""
    return make_zip({
        "widgets-main/": None,
        "widgets-main/README.md": README_BYTES,
        "widgets-main/src/": None,
        "widgets-main/src/lib.rs": LIB_RS_BYTES,
    })


def fake_hosting_site(
    archive: bytes,
    *,
    default_branch: str = "main",
    seen: list[httpx.Request] | None = None,
) -> Handler:
    """MockTransport handler answering like the hosting site."""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if request.url.host == "api.github.com":
            return httpx.Response(
                200, json={"default_branch": default_branch}
            )
        if request.url.host == "codeload.github.com":
            return httpx.Response(200, content=archive)
        return httpx.Response(404)

    return handler


def offline(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("network disabled in tests", request=request)


def make_settings(tmp_path: Path) -> Settings:
    return Settings(
        data_dir=tmp_path / "data",
        config_dir=tmp_path / "config",
        _env_file=None,  # type: ignore[call-arg]
    )


def make_hosting(settings: Settings, handler: Handler) -> HostingClient:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HostingClient(settings, client=client)


def setup_test_app(
    tmp_path: Path,
    handler: Handler = offline,
) -> tuple[AppState, Repos]:
    """Common app-state setup for API test fixtures.

    Real stores under ``tmp_path``, a mocked hosting site and fake
    chat/history repositories. Returns (state, repos) so the fixture
    can seed data.
    """
    settings = make_settings(tmp_path)
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    state = build_app_state(settings, client)
    app.state.typed = state

    fake_repos = Repos(
        chat_session=FakeChatSessionRepository(),
        file_history=FakeFileHistoryRepository(),
    )
    app.dependency_overrides[get_repos] = lambda: fake_repos
    return state, fake_repos


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def store(settings: Settings) -> LocalStore:
    root = settings.resolved_data_dir / "repos"
    root.mkdir(parents=True)
    return LocalStore(root)


@pytest.fixture
async def engine():
    """Per-test in-memory database with every table created."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine):
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session
