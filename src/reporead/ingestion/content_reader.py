"""Bounded, binary-aware file reads for the code viewer.

Three outcomes, decided in order:

* known-binary extension → empty binary result, file never opened;
* file larger than ``MAX_FILE_SIZE`` → only the first half of the
  ceiling is read and at most ``PREVIEW_LINES`` lines are returned,
  with ``total_lines`` unknown;
* otherwise the whole file is read; more than ``MAX_LINES`` lines
  returns a ``PREVIEW_LINES`` preview with the exact total.

A NUL byte in the first ``NUL_SCAN_WINDOW`` bytes marks any file
binary, whatever its extension.
"""

from __future__ import annotations

import logging
from pathlib import Path

from reporead.constants import MAX_FILE_SIZE, MAX_LINES, PREVIEW_LINES
from reporead.ingestion.language_detector import (
    contains_nul,
    detect_language,
    is_binary_extension,
)
from reporead.ingestion.schemas import FileContent
from reporead.resilience.errors import IoError

logger = logging.getLogger(__name__)


def split_lines(text: str) -> list[str]:
    r"""Split on ``\n`` and ``\r\n``; a trailing break adds no line.

    A lone ``\r`` is not a break and stays in the line.
    """
    if not text:
        return []
    *lines, last = text.split("\n")
    lines = [line[:-1] if line.endswith("\r") else line for line in lines]
    if last:
        lines.append(last)
    return lines


def _binary_result(language: str) -> FileContent:
    return FileContent(
        content="",
        truncated=False,
        total_lines=None,
        language=language,
        is_binary=True,
    )


def read_file_content(file_path: Path) -> FileContent:
    """Read ``file_path`` under the size and line ceilings.

    Raises:
        IoError: the file cannot be stat'ed or read.
    """
    try:
        file_size = file_path.stat().st_size
    except OSError as exc:
        raise IoError(f"{file_path}: {exc.strerror or exc}") from exc

    language = detect_language(file_path.name)

    if is_binary_extension(file_path.name):
        return _binary_result(language)

    try:
        if file_size > MAX_FILE_SIZE:
            with open(file_path, "rb") as f:
                head = f.read(MAX_FILE_SIZE // 2)
        else:
            head = file_path.read_bytes()
    except OSError as exc:
        raise IoError(f"{file_path}: {exc.strerror or exc}") from exc

    if contains_nul(head):
        return _binary_result(language)

    text = head.decode("utf-8", errors="replace")
    lines = split_lines(text)

    if file_size > MAX_FILE_SIZE:
        logger.debug(
            "event=preview_by_size path=%s size=%d",
            file_path.name,
            file_size,
        )
        return FileContent(
            content="\n".join(lines[:PREVIEW_LINES]),
            truncated=True,
            total_lines=None,
            language=language,
            is_binary=False,
        )

    if len(lines) > MAX_LINES:
        return FileContent(
            content="\n".join(lines[:PREVIEW_LINES]),
            truncated=True,
            total_lines=len(lines),
            language=language,
            is_binary=False,
        )

    return FileContent(
        content=text,
        truncated=False,
        total_lines=len(lines),
        language=language,
        is_binary=False,
    )
