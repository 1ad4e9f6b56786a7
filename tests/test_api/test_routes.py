"""Tests for API routes using httpx AsyncClient."""

from __future__ import annotations

import base64
import json
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from reporead.api.app_state import AppState
from reporead.api.middleware.auth import is_public_path
from reporead.main import app
from tests.conftest import fake_hosting_site, setup_test_app, widgets_archive

REPO_URL = "https://github.com/acme/widgets"


def _site(seen: list[httpx.Request]):
    """Fake hosting site that also answers repository search."""
    widgets_site = fake_hosting_site(widgets_archive(), seen=seen)

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path != "/search/repositories":
            return widgets_site(request)
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "items": [
                    {
                        "full_name": "acme/widgets",
                        "html_url": REPO_URL,
                        "name": "widgets",
                        "owner": {"login": "acme"},
                        "stargazers_count": 5,
                    }
                ]
            },
        )

    return handler


@pytest.fixture
def seen() -> list[httpx.Request]:
    return []


@pytest.fixture
async def app_state(tmp_path: Path, seen: list[httpx.Request]):
    """App wired to real stores under tmp_path and fake repos (no database)."""
    state, _ = setup_test_app(tmp_path, _site(seen))
    yield state
    app.dependency_overrides.clear()


@pytest.fixture
async def client(app_state: AppState):
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test"
    ) as c:
        yield c


async def _import(client: AsyncClient) -> dict:
    resp = await client.post("/api/repos/import", json={"url": REPO_URL})
    assert resp.status_code == 200
    return resp.json()["data"]


class TestHealthRoutes:
    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient) -> None:
        resp = await client.get("/api/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert "version" in data


class TestRepoRoutes:
    @pytest.mark.asyncio
    async def test_list_empty(self, client: AsyncClient) -> None:
        resp = await client.get("/api/repos")
        body = resp.json()
        assert body["success"] is True
        assert body["data"] == []
        assert body["metadata"]["count"] == 0

    @pytest.mark.asyncio
    async def test_import_then_browse(self, client: AsyncClient) -> None:
        data = await _import(client)
        assert data["repo_key"] == "acme_widgets"
        assert data["info"]["branch"] == "main"
        assert data["tree"]["children"][1] == {
            "name": "README.md",
            "path": "README.md",
            "is_dir": False,
            "size": 12,
        }

        listed = (await client.get("/api/repos")).json()
        assert [r["key"] for r in listed["data"]] == ["acme_widgets"]

        info = (await client.get("/api/repos/acme_widgets")).json()
        assert info["data"]["url"] == REPO_URL

        tree = (await client.get("/api/repos/acme_widgets/tree")).json()
        assert "size" not in tree["data"]
        assert tree["data"]["name"] == "widgets"

        resp = await client.get(
            "/api/repos/acme_widgets/file", params={"path": "src/lib.rs"}
        )
        content = resp.json()["data"]
        assert content["language"] == "rust"
        assert content["truncated"] is False
        assert content["total_lines"] == 1
        assert content["is_binary"] is False

        path = (await client.get("/api/repos/acme_widgets/path")).json()
        assert Path(path["data"]).is_absolute()

    @pytest.mark.asyncio
    async def test_delete(self, client: AsyncClient) -> None:
        await _import(client)

        resp = await client.delete("/api/repos/acme_widgets")
        assert resp.json()["data"] == {"deleted": "acme_widgets"}

        resp = await client.delete("/api/repos/acme_widgets")
        assert resp.status_code == 404
        body = resp.json()
        assert body["success"] is False
        assert body["error"] == "Repository not found: acme_widgets"

    @pytest.mark.asyncio
    async def test_invalid_url(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/repos/import", json={"url": "https://example.com/a/b"}
        )
        assert resp.status_code == 400
        assert resp.json()["error"].startswith("Invalid URL: ")

    @pytest.mark.asyncio
    async def test_path_escape(self, client: AsyncClient) -> None:
        await _import(client)

        resp = await client.get(
            "/api/repos/acme_widgets/file",
            params={"path": "../../config/settings.json"},
        )
        assert resp.status_code == 400
        assert resp.json()["error"].startswith("Unsafe path: ")

    @pytest.mark.asyncio
    async def test_nul_byte_in_path(self, client: AsyncClient) -> None:
        await _import(client)

        resp = await client.get(
            "/api/repos/acme_widgets/file", params={"path": "src/a\x00b.rs"}
        )
        assert resp.status_code == 400
        assert resp.json()["success"] is False
        assert resp.json()["error"].startswith("Unsafe path: ")

    @pytest.mark.asyncio
    async def test_missing_repo_info(self, client: AsyncClient) -> None:
        resp = await client.get("/api/repos/acme_ghost")
        assert resp.status_code == 500
        assert resp.json()["error"].startswith("IO error: ")

    @pytest.mark.asyncio
    async def test_language(self, client: AsyncClient) -> None:
        resp = await client.get("/api/language", params={"path": "a/b.go"})
        assert resp.json()["data"] == "go"


class TestDiscoveryRoutes:
    @pytest.mark.asyncio
    async def test_search_uses_saved_token(
        self, client: AsyncClient, seen: list[httpx.Request]
    ) -> None:
        await client.put("/api/settings", json={"github_token": "ghp_saved"})

        resp = await client.get("/api/search", params={"q": "widgets"})

        body = resp.json()
        assert body["metadata"]["count"] == 1
        assert body["data"][0]["full_name"] == "acme/widgets"
        assert seen[-1].headers["Authorization"] == "Bearer ghp_saved"

    @pytest.mark.asyncio
    async def test_trending_rejects_unknown_window(
        self, client: AsyncClient
    ) -> None:
        resp = await client.get("/api/trending", params={"since": "yearly"})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_trending_upstream_error(self, client: AsyncClient) -> None:
        resp = await client.get("/api/trending")
        assert resp.status_code == 400
        assert "Trending error: HTTP 404" in resp.json()["error"]


class TestFavoriteRoutes:
    @pytest.mark.asyncio
    async def test_add_list_remove(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/favorites",
            json={
                "owner": "acme",
                "repo": "widgets",
                "url": REPO_URL,
                "language": "Rust",
            },
        )
        assert resp.json()["data"]["added_at"]

        listed = (await client.get("/api/favorites")).json()["data"]
        assert [f["repo"] for f in listed] == ["widgets"]

        resp = await client.delete("/api/favorites/acme/widgets")
        assert resp.json()["data"] == {"removed": "acme/widgets"}

        resp = await client.delete("/api/favorites/acme/widgets")
        body = resp.json()
        assert body["success"] is False
        assert body["error"] == "Not a favorite: acme/widgets"

    @pytest.mark.asyncio
    async def test_replace_and_export(
        self, client: AsyncClient, tmp_path: Path
    ) -> None:
        favorites = [
            {
                "owner": "acme",
                "repo": "widgets",
                "url": REPO_URL,
                "added_at": "2024-05-01T10:00:00+00:00",
            }
        ]
        resp = await client.put("/api/favorites", json=favorites)
        assert resp.json()["data"] == {"count": 1}

        dest = tmp_path / "export" / "favs.json"
        resp = await client.post(
            "/api/favorites/export",
            json={"path": str(dest), "format": "json"},
        )
        assert resp.json()["data"] == str(dest)
        assert json.loads(dest.read_text())[0]["repo"] == "widgets"

    @pytest.mark.asyncio
    async def test_export_unknown_format(
        self, client: AsyncClient, tmp_path: Path
    ) -> None:
        resp = await client.post(
            "/api/favorites/export",
            json={"path": str(tmp_path / "f.csv"), "format": "csv"},
        )
        assert resp.status_code == 400


class TestSettingsRoutes:
    @pytest.mark.asyncio
    async def test_defaults_then_update(self, client: AsyncClient) -> None:
        data = (await client.get("/api/settings")).json()["data"]
        assert data["copy_screenshot_to_clipboard"] is True
        assert data["github_token"] is None

        resp = await client.put(
            "/api/settings",
            json={"copy_screenshot_to_clipboard": False},
        )
        assert resp.json()["data"]["copy_screenshot_to_clipboard"] is False

        data = (await client.get("/api/settings")).json()["data"]
        assert data["copy_screenshot_to_clipboard"] is False


class TestScreenshotRoutes:
    @pytest.mark.asyncio
    async def test_saves_and_uses_preference(
        self, client: AsyncClient, app_state: AppState
    ) -> None:
        payload = base64.b64encode(b"\x89PNG").decode()

        with patch(
            "reporead.catalog.screenshots.copy_image_to_clipboard",
            AsyncMock(return_value=True),
        ) as copy:
            resp = await client.post(
                "/api/screenshots",
                json={
                    "data": f"data:image/png;base64,{payload}",
                    "filename": "shot.png",
                },
            )

        saved = Path(resp.json()["data"])
        assert saved == app_state.screenshots_dir / "shot.png"
        assert saved.read_bytes() == b"\x89PNG"
        copy.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unsafe_filename(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/screenshots",
            json={
                "data": "iVBORw==",
                "filename": "../x.png",
                "copy_to_clipboard": False,
            },
        )
        assert resp.status_code == 400


class TestInterpretRoutes:
    @pytest.mark.asyncio
    async def test_requires_key(self, client: AsyncClient) -> None:
        resp = await client.post("/api/interpret", json={"code": "x = 1"})
        assert resp.status_code == 400
        assert "API key is not configured" in resp.json()["error"]

    @pytest.mark.asyncio
    async def test_returns_model_text(self, client: AsyncClient) -> None:
        await client.put("/api/settings", json={"openrouter_api_key": "sk"})
        response = SimpleNamespace(
            choices=[
                SimpleNamespace(message=SimpleNamespace(content="Adds one."))
            ]
        )

        with patch(
            "reporead.chat.interpret._acompletion",
            AsyncMock(return_value=response),
        ):
            resp = await client.post(
                "/api/interpret",
                json={"code": "x += 1", "language": "python"},
            )

        body = resp.json()
        assert body["data"] == "Adds one."
        assert body["metadata"]["model"] == "anthropic/claude-sonnet-4"


class TestChatSessionRoutes:
    @pytest.mark.asyncio
    async def test_save_list_get_delete(self, client: AsyncClient) -> None:
        question = "Explain how the widget registry resolves plugins at startup"
        resp = await client.put(
            "/api/chat/sessions",
            params={"repo_url": REPO_URL},
            json={
                "id": "s1",
                "messages": [
                    {"role": "user", "content": question},
                    {"role": "assistant", "content": "It scans entry points."},
                ],
            },
        )
        saved = resp.json()["data"]
        assert saved["title"] == question[:50]
        assert saved["created_at"]

        listed = (
            await client.get(
                "/api/chat/sessions", params={"repo_url": REPO_URL}
            )
        ).json()["data"]
        assert listed[0]["id"] == "s1"
        assert listed[0]["message_count"] == 2

        got = (
            await client.get(
                "/api/chat/sessions/s1", params={"repo_url": REPO_URL}
            )
        ).json()["data"]
        assert got["messages"][1]["role"] == "assistant"

        resp = await client.delete(
            "/api/chat/sessions/s1", params={"repo_url": REPO_URL}
        )
        assert resp.json()["data"] == {"deleted": True}

    @pytest.mark.asyncio
    async def test_unknown_session_is_null(self, client: AsyncClient) -> None:
        resp = await client.get(
            "/api/chat/sessions/nope", params={"repo_url": REPO_URL}
        )
        body = resp.json()
        assert body["success"] is True
        assert body["data"] is None

    @pytest.mark.asyncio
    async def test_default_title(self, client: AsyncClient) -> None:
        resp = await client.put(
            "/api/chat/sessions",
            params={"repo_url": REPO_URL},
            json={"id": "empty"},
        )
        assert resp.json()["data"]["title"] == "New chat"

    @pytest.mark.asyncio
    async def test_bad_role_rejected(self, client: AsyncClient) -> None:
        resp = await client.put(
            "/api/chat/sessions",
            params={"repo_url": REPO_URL},
            json={"id": "s", "messages": [{"role": "system", "content": "x"}]},
        )
        assert resp.status_code == 422


class TestHistoryRoutes:
    @pytest.mark.asyncio
    async def test_record_list_clear(self, client: AsyncClient) -> None:
        for path in ("README.md", "src/lib.rs", "README.md"):
            await client.post(
                "/api/history", json={"repo_url": REPO_URL, "path": path}
            )

        data = (
            await client.get("/api/history", params={"repo_url": REPO_URL})
        ).json()["data"]
        assert data["repo_url"] == REPO_URL
        assert [e["path"] for e in data["entries"]] == [
            "README.md",
            "src/lib.rs",
        ]

        await client.delete("/api/history", params={"repo_url": REPO_URL})
        data = (
            await client.get("/api/history", params={"repo_url": REPO_URL})
        ).json()["data"]
        assert data["entries"] == []


class TestApiKeyMiddleware:
    @pytest.mark.asyncio
    async def test_key_required_when_configured(
        self, client: AsyncClient, app_state: AppState
    ) -> None:
        app_state.settings.api_key = "secret"

        resp = await client.get("/api/repos")
        assert resp.status_code == 401
        assert resp.json()["success"] is False

        resp = await client.get("/api/repos", headers={"X-API-Key": "secret"})
        assert resp.status_code == 200

        resp = await client.get("/api/health")
        assert resp.status_code == 200

    @pytest.mark.asyncio
    async def test_wrong_key_gets_envelope(
        self, client: AsyncClient, app_state: AppState
    ) -> None:
        app_state.settings.api_key = "secret"

        resp = await client.get("/api/repos", headers={"X-API-Key": "nope"})

        assert resp.status_code == 401
        assert resp.json() == {
            "success": False,
            "data": None,
            "error": "Invalid or missing API key",
            "metadata": {},
        }

    @pytest.mark.asyncio
    async def test_open_without_configured_key(
        self, client: AsyncClient, app_state: AppState
    ) -> None:
        app_state.settings.api_key = ""

        resp = await client.get("/api/repos")

        assert resp.status_code == 200


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/api/health", True),
        ("/api/health/ready", True),
        ("/api/docs", True),
        ("/api/openapi.json", True),
        ("/api/repos", False),
        ("/api/docs/extra", False),
    ],
)
def test_public_paths(path: str, expected: bool) -> None:
    assert is_public_path(path) is expected
