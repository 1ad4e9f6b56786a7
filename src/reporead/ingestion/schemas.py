"""Pydantic models for the import and inspection data flow."""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel, Field


class ParsedUrl(BaseModel):
    """Output of the URL parser — which repository, and optionally which branch."""

    owner: str = Field(min_length=1)
    repo: str = Field(min_length=1)
    branch: str | None = None


class RepoInfo(BaseModel):
    """Per-import descriptor persisted as ``_meta/info.json``."""

    key: str
    owner: str
    repo: str
    branch: str
    imported_at: str  # RFC3339, UTC
    url: str  # URL exactly as the user supplied it


class FileNode(BaseModel):
    """One node of the serialised repository tree.

    ``size`` is set for files only, ``children`` for directories only.
    Absent fields are dropped when serialising (``exclude_none``).
    """

    name: str
    path: str
    is_dir: bool
    size: int | None = None
    children: list[FileNode] | None = None

    def iter_nodes(self) -> Iterator[FileNode]:
        """Yield this node and every descendant, depth-first."""
        yield self
        for child in self.children or []:
            yield from child.iter_nodes()


class FileContent(BaseModel):
    """Bounded, binary-aware view of one file."""

    content: str
    truncated: bool
    total_lines: int | None = None
    language: str
    is_binary: bool


class ImportResult(BaseModel):
    repo_key: str
    info: RepoInfo
    tree: FileNode


class SearchResultItem(BaseModel):
    """One repository from the hosting search endpoint."""

    full_name: str
    description: str | None = None
    stargazers_count: int = 0
    html_url: str
    owner: str
    repo: str


class TrendingRepo(BaseModel):
    """One repository scraped from the trending page."""

    full_name: str
    description: str | None = None
    stars: int | None = None
    forks: int | None = None
    language: str | None = None
    stars_today: int | None = None
    url: str
    owner: str
    repo: str
