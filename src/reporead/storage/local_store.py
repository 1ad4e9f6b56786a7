"""On-disk layout for imported repositories.

One subdirectory per repository, named by its key, under a single
data root. Each holds the extracted sources plus a reserved
``_meta/`` sidecar with ``info.json`` and ``tree.json``.

A repository whose own sources contain a top-level ``_meta`` entry
shares that directory with the sidecar; the tree hides it and the
sidecar files overwrite any same-named files there.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from reporead.constants import INFO_FILE, META_DIR, TREE_FILE
from reporead.ingestion.schemas import FileNode, RepoInfo
from reporead.resilience.errors import (
    InvalidUrl,
    IoError,
    JsonError,
    RepoError,
    RepoNotFound,
    UnsafePath,
)

logger = logging.getLogger(__name__)

_ModelT = TypeVar("_ModelT", bound=BaseModel)


def _write_json(path: Path, model: BaseModel) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            model.model_dump_json(indent=2, exclude_none=True),
            encoding="utf-8",
        )
    except OSError as exc:
        raise IoError(f"{path}: {exc.strerror or exc}") from exc


def _read_json(path: Path, model: type[_ModelT]) -> _ModelT:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise IoError(f"{path}: {exc.strerror or exc}") from exc
    except UnicodeDecodeError as exc:
        raise JsonError(f"{path}: {exc}") from exc
    try:
        return model.model_validate_json(raw)
    except ValidationError as exc:
        first = exc.errors()[0]["msg"]
        raise JsonError(f"{path}: {first}") from exc


def save_info(repo_dir: Path, info: RepoInfo) -> None:
    _write_json(repo_dir / META_DIR / INFO_FILE, info)


def save_tree(repo_dir: Path, tree: FileNode) -> None:
    _write_json(repo_dir / META_DIR / TREE_FILE, tree)


def load_info(repo_dir: Path) -> RepoInfo:
    return _read_json(repo_dir / META_DIR / INFO_FILE, RepoInfo)


def load_tree(repo_dir: Path) -> FileNode:
    return _read_json(repo_dir / META_DIR / TREE_FILE, FileNode)


class LocalStore:
    """Owns the data root and every repository directory under it."""

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def repo_dir(self, key: str) -> Path:
        """Directory for ``key``; keys must be a single path component."""
        if (
            not key
            or key in (".", "..")
            or "/" in key
            or "\\" in key
            or "\x00" in key
            or key == META_DIR
        ):
            raise InvalidUrl(f"Invalid repository key: {key!r}")
        return self._root / key

    def archive_path(self, key: str) -> Path:
        return self._root / f"{self.repo_dir(key).name}.zip"

    def resolve_file(self, key: str, relative_path: str) -> Path:
        """Absolute path of ``relative_path`` inside repository ``key``.

        Raises:
            UnsafePath: the path would leave the repository directory.
        """
        repo_root = self.repo_dir(key).resolve()
        if "\x00" in relative_path:
            raise UnsafePath(f"{relative_path!r} contains a NUL byte")
        target = (repo_root / relative_path.lstrip("/")).resolve()
        if target == repo_root or not target.is_relative_to(repo_root):
            raise UnsafePath(f"{relative_path!r} is outside repository {key!r}")
        return target

    def load_info(self, key: str) -> RepoInfo:
        return load_info(self.repo_dir(key))

    def load_tree(self, key: str) -> FileNode:
        return load_tree(self.repo_dir(key))

    def list_repos(self) -> list[RepoInfo]:
        """All loadable repositories, newest import first.

        Directories whose sidecar is missing or corrupt are skipped so a
        single bad entry cannot hide the rest.
        """
        if not self._root.is_dir():
            return []

        repos: list[RepoInfo] = []
        try:
            entries = sorted(self._root.iterdir())
        except OSError as exc:
            raise IoError(f"{self._root}: {exc.strerror or exc}") from exc

        for path in entries:
            if not path.is_dir():
                continue
            try:
                repos.append(load_info(path))
            except RepoError as exc:
                logger.debug(
                    "event=list_repos_skip dir=%s error=%s", path.name, exc
                )

        repos.sort(key=lambda info: info.imported_at, reverse=True)
        return repos

    def delete_repo(self, key: str) -> None:
        """Remove the whole repository directory.

        Raises:
            RepoNotFound: no directory exists for ``key``.
        """
        repo_dir = self.repo_dir(key)
        if not repo_dir.exists():
            raise RepoNotFound(key)
        try:
            shutil.rmtree(repo_dir)
        except OSError as exc:
            raise IoError(f"{repo_dir}: {exc.strerror or exc}") from exc
        logger.info("event=repo_deleted key=%s", key)
