"""Decompose hosting URLs and derive storage keys."""

from __future__ import annotations

from urllib.parse import quote

from reporead.ingestion.schemas import ParsedUrl
from reporead.resilience.errors import InvalidUrl

DEFAULT_HOST = "github.com"


def parse_repo_url(url: str, host: str = DEFAULT_HOST) -> ParsedUrl:
    """Parse ``[scheme://]host/owner/repo[/tree/<branch...>][/...]``.

    Branch names may contain slashes: everything after ``/tree/`` is
    joined back together.

    Raises:
        InvalidUrl: the host prefix is missing, or owner/repo is absent.
    """
    cleaned = url.strip()
    if cleaned.endswith("/"):
        cleaned = cleaned[:-1]

    path = _strip_host_prefix(cleaned, host)
    if path is None:
        raise InvalidUrl(f"Not a {host} URL: {url.strip()}")

    parts = path.split("/")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise InvalidUrl(f"Missing owner or repo: {url.strip()}")

    owner, repo = parts[0], parts[1]

    branch: str | None = None
    if len(parts) >= 4 and parts[2] == "tree":
        joined = "/".join(parts[3:])
        branch = joined or None

    return ParsedUrl(owner=owner, repo=repo, branch=branch)


def _strip_host_prefix(url: str, host: str) -> str | None:
    for prefix in (f"https://{host}/", f"http://{host}/", f"{host}/"):
        if url.startswith(prefix):
            return url[len(prefix):]
    return None


def generate_repo_key(owner: str, repo: str) -> str:
    """Stable, filesystem-safe key for an ``(owner, repo)`` pair.

    The owner part never contains ``_`` (it is percent-escaped), so
    the first ``_`` always separates owner from repo and distinct
    pairs never share a key.
    """
    owner_part = quote(owner, safe="-.").replace("_", "%5F")
    repo_part = quote(repo, safe="-._")
    return f"{owner_part}_{repo_part}"
