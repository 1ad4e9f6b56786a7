"""Repository commands over one data root.

Every UI command goes through here, so the HTTP routes and the CLI
share one behaviour.
"""

from __future__ import annotations

from reporead.ingestion.content_reader import read_file_content
from reporead.ingestion.hosting_client import HostingClient
from reporead.ingestion.language_detector import detect_language
from reporead.ingestion.schemas import (
    FileContent,
    FileNode,
    ImportResult,
    RepoInfo,
    SearchResultItem,
)
from reporead.services.import_service import import_repo
from reporead.storage.local_store import LocalStore


class RepoService:
    def __init__(self, store: LocalStore, hosting: HostingClient) -> None:
        self._store = store
        self._hosting = hosting

    @property
    def store(self) -> LocalStore:
        return self._store

    async def import_repo(self, url: str) -> ImportResult:
        return await import_repo(url, store=self._store, hosting=self._hosting)

    def read_text_file(self, repo_key: str, file_path: str) -> FileContent:
        """Read a file by its path relative to the repository root."""
        return read_file_content(self._store.resolve_file(repo_key, file_path))

    def list_recent_repos(self) -> list[RepoInfo]:
        return self._store.list_repos()

    def get_repo_tree(self, repo_key: str) -> FileNode:
        return self._store.load_tree(repo_key)

    def get_repo_info(self, repo_key: str) -> RepoInfo:
        return self._store.load_info(repo_key)

    def delete_repo(self, repo_key: str) -> None:
        self._store.delete_repo(repo_key)

    @staticmethod
    def get_file_language(file_path: str) -> str:
        return detect_language(file_path)

    def get_repo_path(self, repo_key: str) -> str:
        """Absolute on-disk location of an imported repository."""
        return str(self._store.repo_dir(repo_key).resolve())

    async def search_repos(
        self, query: str, token: str | None = None
    ) -> list[SearchResultItem]:
        return await self._hosting.search(query, token=token)
