"""Export module — favorites rendered as JSON or Markdown."""

from collections.abc import Callable

from reporead.catalog.schemas import FavoriteRepo
from reporead.constants import ExportFormat
from reporead.export.json_export import export_favorites_json
from reporead.export.markdown import export_favorites_markdown
from reporead.resilience.errors import InvalidUrl

__all__ = [
    "export_favorites",
    "export_favorites_json",
    "export_favorites_markdown",
]

_FAVORITES_EXPORTERS: dict[str, Callable[[list[FavoriteRepo]], str]] = {
    ExportFormat.JSON: export_favorites_json,
    ExportFormat.MARKDOWN: export_favorites_markdown,
}


def export_favorites(favorites: list[FavoriteRepo], fmt: str) -> str:
    """Dispatch favorites export by format string."""
    exporter = _FAVORITES_EXPORTERS.get(fmt)
    if exporter is None:
        raise InvalidUrl(f"Unsupported export format: {fmt}")
    return exporter(favorites)
