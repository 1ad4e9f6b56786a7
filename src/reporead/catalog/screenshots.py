"""Screenshot sink: decode, save under the data dir, optionally copy."""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
import shutil
import sys
from pathlib import Path, PurePath

from reporead.constants import CLIPBOARD_TIMEOUT, PNG_DATA_URL_PREFIX
from reporead.resilience.errors import InvalidUrl, IoError, UnsafePath

logger = logging.getLogger(__name__)


def decode_png_data(data: str) -> bytes:
    """Decode base64 image data, with or without a PNG data-URL prefix.

    Raises:
        InvalidUrl: the payload is not valid base64.
    """
    payload = data.removeprefix(PNG_DATA_URL_PREFIX)
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidUrl(f"Invalid base64 data: {exc}") from exc


def _clipboard_command(path: Path) -> tuple[list[str], bool] | None:
    """Platform clipboard command, and whether it reads PNG from stdin."""
    if sys.platform == "darwin" and shutil.which("osascript"):
        return [
            "osascript",
            "-e",
            "on run argv",
            "-e",
            "set the clipboard to "
            "(read (POSIX file (item 1 of argv)) as «class PNGf»)",
            "-e",
            "end run",
            str(path),
        ], False
    if shutil.which("wl-copy"):
        return ["wl-copy", "--type", "image/png"], True
    if shutil.which("xclip"):
        return ["xclip", "-selection", "clipboard", "-t", "image/png", "-i"], True
    return None


async def copy_image_to_clipboard(path: Path, image: bytes) -> bool:
    """Best effort; returns False instead of raising when it cannot copy."""
    command = _clipboard_command(path)
    if command is None:
        logger.debug("event=clipboard_unavailable")
        return False
    args, uses_stdin = command
    try:
        proc = await asyncio.create_subprocess_exec(
            *args,
            stdin=asyncio.subprocess.PIPE if uses_stdin else None,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )
    except OSError as exc:
        logger.warning("event=clipboard_failed tool=%s error=%s", args[0], exc)
        return False
    try:
        await asyncio.wait_for(
            proc.communicate(image if uses_stdin else None),
            timeout=CLIPBOARD_TIMEOUT,
        )
    except TimeoutError:
        proc.kill()
        await proc.wait()
        logger.warning("event=clipboard_timeout tool=%s", args[0])
        return False
    return proc.returncode == 0


async def save_screenshot(
    screenshots_dir: Path,
    base64_data: str,
    filename: str,
    copy_to_clipboard: bool = False,
) -> Path:
    """Write a screenshot and return its path.

    Raises:
        UnsafePath: ``filename`` is not a bare file name.
        InvalidUrl: ``base64_data`` does not decode.
        IoError: the file could not be written.
    """
    name = PurePath(filename).name
    if name != filename or name in ("", ".", "..") or "\\" in name:
        raise UnsafePath(f"screenshot filename {filename!r}")

    image = decode_png_data(base64_data)
    target = screenshots_dir / name
    try:
        screenshots_dir.mkdir(parents=True, exist_ok=True)
        target.write_bytes(image)
    except OSError as exc:
        raise IoError(f"{target}: {exc.strerror or exc}") from exc
    logger.info("event=screenshot_saved path=%s bytes=%d", target, len(image))

    if copy_to_clipboard:
        copied = await copy_image_to_clipboard(target, image)
        logger.debug("event=screenshot_clipboard copied=%s", copied)
    return target
