"""Map file extensions to language tags and spot binary files."""

from __future__ import annotations

from pathlib import PurePath

from reporead.config import BINARY_EXTENSIONS, DEFAULT_LANGUAGE, EXTENSION_MAP
from reporead.constants import NUL_SCAN_WINDOW


def _extension(file_path: str | PurePath) -> str:
    return PurePath(file_path).suffix.lower()


def detect_language(file_path: str | PurePath) -> str:
    """Coarse language tag for a path; ``plaintext`` when unknown.

    Matching is case-insensitive on the final extension only.
    """
    return EXTENSION_MAP.get(_extension(file_path), DEFAULT_LANGUAGE)


def is_binary_extension(file_path: str | PurePath) -> bool:
    """True if the extension is in the known-binary set."""
    return _extension(file_path) in BINARY_EXTENSIONS


def contains_nul(data: bytes) -> bool:
    """True if a NUL byte appears within the scan window."""
    return b"\x00" in data[:NUL_SCAN_WINDOW]
