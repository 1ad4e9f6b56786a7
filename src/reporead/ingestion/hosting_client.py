"""Async client for the hosting site's API and archive endpoints."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import httpx

from reporead.config import Settings
from reporead.constants import (
    DEFAULT_BRANCH_FALLBACK,
    GITHUB_V3_MEDIA_TYPE,
    SEARCH_PAGE_SIZE,
)
from reporead.ingestion.schemas import SearchResultItem
from reporead.resilience.errors import HttpError, InvalidUrl, IoError

logger = logging.getLogger(__name__)


class HostingClient:
    """Branch lookup, archive download and repository search.

    Wraps a shared :class:`httpx.AsyncClient`. When none is passed in,
    one is created on first use and closed by :meth:`aclose`.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings if settings is not None else Settings()
        self._owns_client = client is None
        self._client = client
        self.host = host = self._settings.hosting_host
        self.api_base = f"https://api.{host}"
        self.codeload_base = f"https://codeload.{host}"
        self.site_base = f"https://{host}"

    @property
    def http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._settings.http_timeout_seconds,
                follow_redirects=True,
            )
        return self._client

    def headers(self, accept: str | None = None) -> dict[str, str]:
        headers = {"User-Agent": self._settings.user_agent}
        if accept:
            headers["Accept"] = accept
        return headers

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> HostingClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def default_branch(self, owner: str, repo: str) -> str:
        """Return the repository's default branch, or ``"main"``.

        Never raises: any failure falls back to ``"main"`` so a missing
        lookup cannot block an import.
        """
        url = f"{self.api_base}/repos/{owner}/{repo}"
        try:
            resp = await self.http.get(
                url, headers=self.headers(GITHUB_V3_MEDIA_TYPE)
            )
            if not resp.is_success:
                logger.warning(
                    "event=default_branch_fallback repo=%s/%s status=%d",
                    owner,
                    repo,
                    resp.status_code,
                )
                return DEFAULT_BRANCH_FALLBACK
            branch = resp.json().get("default_branch")
        except (httpx.HTTPError, ValueError, AttributeError) as exc:
            logger.warning(
                "event=default_branch_fallback repo=%s/%s error=%s",
                owner,
                repo,
                exc,
            )
            return DEFAULT_BRANCH_FALLBACK

        if not isinstance(branch, str) or not branch:
            return DEFAULT_BRANCH_FALLBACK
        return branch

    async def download_archive(
        self, owner: str, repo: str, branch: str, dest: Path
    ) -> None:
        """Download the branch snapshot zip to ``dest``.

        Raises:
            InvalidUrl: the hosting site answered with a non-success status.
            HttpError: the request failed in transport.
            IoError: ``dest`` could not be written.
        """
        url = f"{self.codeload_base}/{owner}/{repo}/zip/refs/heads/{branch}"
        try:
            resp = await self.http.get(
                url,
                headers=self.headers(),
                timeout=self._settings.download_timeout_seconds,
            )
        except httpx.HTTPError as exc:
            raise HttpError(f"{url}: {exc}") from exc

        if not resp.is_success:
            raise InvalidUrl(f"Failed to download: HTTP {resp.status_code}")

        body = resp.content
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            dest.write_bytes(body)
        except OSError as exc:
            raise IoError(f"{dest}: {exc.strerror or exc}") from exc

        logger.info(
            "event=archive_downloaded repo=%s/%s branch=%s bytes=%d",
            owner,
            repo,
            branch,
            len(body),
        )

    async def search(
        self, query: str, token: str | None = None
    ) -> list[SearchResultItem]:
        """Search repositories by stars, at most one page.

        Raises:
            InvalidUrl: the API answered with a non-success status.
            HttpError: the request failed in transport.
        """
        if not query.strip():
            return []

        headers = self.headers(GITHUB_V3_MEDIA_TYPE)
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            resp = await self.http.get(
                f"{self.api_base}/search/repositories",
                params={
                    "q": query,
                    "per_page": SEARCH_PAGE_SIZE,
                    "sort": "stars",
                    "order": "desc",
                },
                headers=headers,
            )
        except httpx.HTTPError as exc:
            raise HttpError(str(exc)) from exc

        if not resp.is_success:
            raise InvalidUrl(f"Search API error: HTTP {resp.status_code}")

        try:
            items: list[dict[str, Any]] = resp.json().get("items", [])
            return [_search_item(item) for item in items]
        except (ValueError, AttributeError, KeyError, TypeError) as exc:
            raise HttpError(f"Malformed search response: {exc}") from exc


def _search_item(item: dict[str, Any]) -> SearchResultItem:
    return SearchResultItem(
        full_name=item["full_name"],
        description=item.get("description"),
        stargazers_count=item.get("stargazers_count", 0),
        html_url=item["html_url"],
        owner=item["owner"]["login"],
        repo=item["name"],
    )
