"""Persisted user preferences (``<config_dir>/settings.json``)."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from reporead.catalog.schemas import AppSettings
from reporead.resilience.errors import IoError

logger = logging.getLogger(__name__)


class UserSettingsStore:
    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> AppSettings:
        """Stored preferences, or defaults when absent or unreadable."""
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return AppSettings()
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning(
                "event=settings_unreadable path=%s error=%s", self._path, exc
            )
            return AppSettings()
        try:
            return AppSettings.model_validate_json(raw)
        except ValidationError:
            logger.warning("event=settings_invalid path=%s", self._path)
            return AppSettings()

    def save(self, settings: AppSettings) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                settings.model_dump_json(indent=2), encoding="utf-8"
            )
        except OSError as exc:
            raise IoError(f"{self._path}: {exc.strerror or exc}") from exc
