"""Extract a hosting snapshot archive into a repository directory.

Snapshot archives wrap every entry in one vendor-added root folder
(``<repo>-<branch>/``). Extraction strips that folder and refuses any
entry that is outside it or that would land outside the destination
(zip slip).
"""

from __future__ import annotations

import logging
import shutil
import zipfile
from pathlib import Path

from reporead.resilience.errors import IoError, UnsafePath, ZipError

logger = logging.getLogger(__name__)


def extract_archive(zip_path: Path, dest_dir: Path) -> str:
    """Extract ``zip_path`` into ``dest_dir`` and delete the archive.

    Returns the root prefix found in the archive. On failure, whatever
    was extracted so far is left in place for the caller to clean up.

    Raises:
        ZipError: the archive is unreadable or empty.
        UnsafePath: an entry lies outside the root prefix or ``dest_dir``.
        IoError: writing to ``dest_dir`` or deleting the archive failed.
    """
    try:
        with zipfile.ZipFile(zip_path) as archive:
            root_name = _extract_all(archive, dest_dir)
    except (zipfile.BadZipFile, NotImplementedError) as exc:
        raise ZipError(str(exc)) from exc
    except OSError as exc:
        raise IoError(f"{exc.filename or zip_path}: {exc.strerror or exc}") from exc

    try:
        zip_path.unlink()
    except OSError as exc:
        raise IoError(f"{zip_path}: {exc.strerror or exc}") from exc

    return root_name


def _extract_all(archive: zipfile.ZipFile, dest_dir: Path) -> str:
    entries = archive.infolist()
    if not entries:
        raise ZipError("archive contains no entries")

    root_name = entries[0].filename.split("/", 1)[0]
    prefix = f"{root_name}/"
    dest_root = dest_dir.resolve()
    dest_dir.mkdir(parents=True, exist_ok=True)

    written = 0
    for info in entries:
        name = info.filename
        if name in (root_name, prefix):
            continue
        if not name.startswith(prefix):
            raise UnsafePath(
                f"entry {name!r} is outside archive root {root_name!r}"
            )

        relative = name[len(prefix):]
        target = _safe_target(dest_root, relative)

        if info.is_dir():
            target.mkdir(parents=True, exist_ok=True)
            continue

        target.parent.mkdir(parents=True, exist_ok=True)
        with archive.open(info) as src, open(target, "wb") as out:
            shutil.copyfileobj(src, out)
        written += 1

    logger.info(
        "event=archive_extracted root=%s files=%d", root_name, written
    )
    return root_name


def _safe_target(dest_root: Path, relative: str) -> Path:
    """Join ``relative`` onto ``dest_root``, refusing escapes."""
    target = (dest_root / relative).resolve()
    if target == dest_root or not target.is_relative_to(dest_root):
        raise UnsafePath(f"entry {relative!r} escapes destination")
    return target
