"""Markdown export — one bullet link per favorite."""

from __future__ import annotations

from reporead.catalog.schemas import FavoriteRepo

HEADER = "# RepoRead Favorites\n\n"


def export_favorites_markdown(favorites: list[FavoriteRepo]) -> str:
    parts = [HEADER]
    parts.extend(_favorite_line(fav) for fav in favorites)
    return "".join(parts)


def _favorite_line(fav: FavoriteRepo) -> str:
    line = f"- [{fav.full_name}]({fav.url})"
    if fav.description is not None:
        line += f" — {fav.description.strip()}"
    if fav.language is not None:
        line += f" · {fav.language}"
    return line + "\n"
