"""JSON export — the favorites list as stored."""

from __future__ import annotations

import json

from reporead.catalog.schemas import FavoriteRepo


def export_favorites_json(favorites: list[FavoriteRepo]) -> str:
    """Pretty-printed JSON array, one object per favorite."""
    return json.dumps(
        [fav.model_dump() for fav in favorites],
        indent=2,
        ensure_ascii=False,
    )
