"""Favorite repositories (``<config_dir>/favorites.json``)."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from reporead.catalog.schemas import FavoriteRepo
from reporead.export import export_favorites
from reporead.resilience.errors import IoError

logger = logging.getLogger(__name__)

_FAVORITES_ADAPTER = TypeAdapter(list[FavoriteRepo])


class FavoritesStore:
    """JSON-file list of favorites, in the order they were added."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> list[FavoriteRepo]:
        """Saved favorites; empty when the file is absent or corrupt."""
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as exc:
            logger.warning(
                "event=favorites_unreadable path=%s error=%s", self._path, exc
            )
            return []
        try:
            return _FAVORITES_ADAPTER.validate_json(raw)
        except ValidationError:
            logger.warning("event=favorites_invalid path=%s", self._path)
            return []

    def save(self, favorites: list[FavoriteRepo]) -> None:
        payload = _FAVORITES_ADAPTER.dump_json(favorites, indent=2)
        _write_text(self._path, payload.decode("utf-8"))

    def add(
        self,
        owner: str,
        repo: str,
        url: str,
        description: str | None = None,
        language: str | None = None,
        stars: int | None = None,
    ) -> FavoriteRepo:
        """Add or refresh one favorite; an existing entry keeps its place."""
        favorites = self.load()
        favorite = FavoriteRepo(
            owner=owner,
            repo=repo,
            url=url,
            description=description,
            language=language,
            stars=stars,
            added_at=datetime.now(UTC).isoformat(),
        )
        for i, existing in enumerate(favorites):
            if (existing.owner, existing.repo) == (owner, repo):
                favorites[i] = favorite.model_copy(
                    update={"added_at": existing.added_at}
                )
                favorite = favorites[i]
                break
        else:
            favorites.append(favorite)
        self.save(favorites)
        return favorite

    def remove(self, owner: str, repo: str) -> bool:
        """Drop a favorite. Returns False if it was not saved."""
        favorites = self.load()
        kept = [f for f in favorites if (f.owner, f.repo) != (owner, repo)]
        if len(kept) == len(favorites):
            return False
        self.save(kept)
        return True

    def export(self, dest: Path, fmt: str) -> Path:
        """Write every favorite to ``dest`` as ``json`` or ``markdown``.

        Raises:
            InvalidUrl: ``fmt`` is not a supported export format.
        """
        rendered = export_favorites(self.load(), fmt)
        _write_text(dest, rendered)
        logger.info("event=favorites_exported path=%s format=%s", dest, fmt)
        return dest


def _write_text(path: Path, text: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise IoError(f"{path}: {exc.strerror or exc}") from exc
