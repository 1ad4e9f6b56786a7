"""Scrape the hosting site's trending page.

The page has no API, so each ``article.Box-row`` is read for:

* ``h2 a[href]`` — ``/owner/repo``
* ``p.col-9`` — description
* ``span[itemprop=programmingLanguage]`` — language
* ``a[href$=/stargazers]`` / ``a[href$=/forks]`` — totals
* ``span.d-inline-block.float-sm-right`` — stars gained in the window

Only the first match of each selector per row counts.
"""

from __future__ import annotations

import logging
from html.parser import HTMLParser
from urllib.parse import quote

import httpx

from reporead.constants import TrendingSince
from reporead.ingestion.hosting_client import HostingClient
from reporead.ingestion.schemas import TrendingRepo
from reporead.resilience.errors import HttpError, InvalidUrl

logger = logging.getLogger(__name__)

_VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "source", "track", "wbr",
})


def parse_number(text: str) -> int | None:
    """Digits only: ``"1,234"`` → 1234; no digits → None."""
    digits = "".join(ch for ch in text if ch.isascii() and ch.isdigit())
    return int(digits) if digits else None


class _Row:
    def __init__(self, depth: int) -> None:
        self.depth = depth
        self.link_seen = False
        self.href: str | None = None
        self.texts: dict[str, str] = {}


class _TrendingPageParser(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.rows: list[_Row] = []
        self._stack: list[str] = []
        self._row: _Row | None = None
        self._h2_depth: int | None = None
        self._captures: dict[str, tuple[int, list[str]]] = {}

    def handle_starttag(
        self, tag: str, attrs: list[tuple[str, str | None]]
    ) -> None:
        if tag in _VOID_ELEMENTS:
            return
        self._stack.append(tag)
        depth = len(self._stack)
        attr = {name: value or "" for name, value in attrs}
        classes = set(attr.get("class", "").split())

        row = self._row
        if row is None:
            if tag == "article" and "Box-row" in classes:
                self._row = _Row(depth)
            return

        if tag == "h2" and self._h2_depth is None:
            self._h2_depth = depth
        if tag == "a" and self._h2_depth is not None and not row.link_seen:
            row.link_seen = True
            row.href = attr.get("href") or None

        field = _field_for(tag, attr, classes)
        if field and field not in row.texts and field not in self._captures:
            self._captures[field] = (depth, [])

    def handle_startendtag(
        self, tag: str, attrs: list[tuple[str, str | None]]
    ) -> None:
        # Self-closing elements carry no text
        return

    def handle_endtag(self, tag: str) -> None:
        if tag not in self._stack:
            return
        while self._stack:
            depth = len(self._stack)
            opened = self._stack.pop()
            self._close(depth)
            if opened == tag:
                break

    def handle_data(self, data: str) -> None:
        for _, chunks in self._captures.values():
            chunks.append(data)

    def _close(self, depth: int) -> None:
        row = self._row
        if row is None:
            return
        for field, (start, chunks) in list(self._captures.items()):
            if start == depth:
                row.texts[field] = "".join(chunks).strip()
                del self._captures[field]
        if self._h2_depth == depth:
            self._h2_depth = None
        if depth == row.depth:
            self.rows.append(row)
            self._row = None
            self._captures.clear()


def _field_for(
    tag: str, attr: dict[str, str], classes: set[str]
) -> str | None:
    if tag == "p" and "col-9" in classes:
        return "description"
    if tag == "span":
        if attr.get("itemprop") == "programmingLanguage":
            return "language"
        if {"d-inline-block", "float-sm-right"} <= classes:
            return "stars_today"
    if tag == "a":
        href = attr.get("href", "")
        if href.endswith("/stargazers"):
            return "stars"
        if href.endswith("/forks"):
            return "forks"
    return None


def parse_trending_html(
    html: str, site_base: str = "https://github.com"
) -> list[TrendingRepo]:
    """Extract trending rows; rows without ``owner/repo`` are skipped."""
    parser = _TrendingPageParser()
    parser.feed(html)
    parser.close()

    results: list[TrendingRepo] = []
    for row in parser.rows:
        if row.href is None:
            continue
        parts = row.href.strip().lstrip("/").split("/")
        if len(parts) < 2 or not parts[0] or not parts[1]:
            continue
        owner, repo = parts[0], parts[1]
        texts = row.texts
        results.append(
            TrendingRepo(
                full_name=f"{owner}/{repo}",
                description=texts.get("description") or None,
                stars=parse_number(texts.get("stars", "")),
                forks=parse_number(texts.get("forks", "")),
                language=texts.get("language") or None,
                stars_today=parse_number(texts.get("stars_today", "")),
                url=f"{site_base}/{owner}/{repo}",
                owner=owner,
                repo=repo,
            )
        )
    return results


async def fetch_trending(
    hosting: HostingClient,
    language: str | None = None,
    since: str = TrendingSince.DAILY,
    spoken_language: str | None = None,
) -> list[TrendingRepo]:
    """Fetch and parse the trending page.

    Raises:
        InvalidUrl: the page answered with a non-success status.
        HttpError: the request failed in transport.
    """
    url = f"{hosting.site_base}/trending"
    if language and language.strip():
        url += "/" + quote(language.strip(), safe="")

    params: dict[str, str] = {}
    if since.strip():
        params["since"] = since.strip()
    if spoken_language and spoken_language.strip():
        params["spoken_language_code"] = spoken_language.strip()

    try:
        resp = await hosting.http.get(
            url, params=params, headers=hosting.headers("text/html")
        )
    except httpx.HTTPError as exc:
        raise HttpError(f"{url}: {exc}") from exc

    if not resp.is_success:
        raise InvalidUrl(f"Trending error: HTTP {resp.status_code}")

    repos = parse_trending_html(resp.text, hosting.site_base)
    logger.info(
        "event=trending_fetched language=%s since=%s count=%d",
        language or "any",
        since,
        len(repos),
    )
    return repos
