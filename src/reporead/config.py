"""Environment-based configuration and application constants."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import platformdirs
from pydantic import field_validator
from pydantic_settings import BaseSettings
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from reporead.constants import APP_NAME, APP_VENDOR, REPOS_SUBDIR

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Reads from .env file and environment variables."""

    # Directories (None = platform default)
    data_dir: Path | None = None
    config_dir: Path | None = None

    # Hosting
    hosting_host: str = "github.com"
    user_agent: str = "RepoRead/0.1"
    http_timeout_seconds: float = 30.0
    download_timeout_seconds: float = 300.0

    # Database (chat sessions, file history); empty = <data_dir>/reporead.db
    database_url: str = ""

    # LLM bridge
    interpret_timeout_seconds: int = 120

    # Logging
    log_level: str = "INFO"
    debug_mode: bool = False

    # API
    api_key: str = ""
    cors_origins: str = "http://localhost:1420,tauri://localhost"
    host: str = "127.0.0.1"
    port: int = 8765

    @field_validator("hosting_host")
    @classmethod
    def _strip_host(cls, v: str) -> str:
        host = v.strip().strip("/")
        if not host:
            raise ValueError("hosting_host must not be empty")
        return host

    @property
    def resolved_data_dir(self) -> Path:
        """Data root: explicit setting, else the platform data dir."""
        if self.data_dir is not None:
            return self.data_dir
        platform_dir = _platform_dir(platformdirs.user_data_path)
        return platform_dir if platform_dir is not None else Path(".")

    @property
    def resolved_config_dir(self) -> Path:
        if self.config_dir is not None:
            return self.config_dir
        platform_dir = _platform_dir(platformdirs.user_config_path)
        if platform_dir is None:
            return Path("./config")
        return platform_dir

    @property
    def resolved_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.resolved_data_dir / 'reporead.db'}"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "",
        "extra": "ignore",
    }


def _platform_dir(resolver: Callable[..., Path]) -> Path | None:
    """Ask platformdirs for a per-user directory.

    Returns None when no absolute location is discoverable (for
    example when the home directory cannot be determined).
    """
    try:
        path = resolver(APP_NAME, APP_VENDOR, ensure_exists=False)
    except (KeyError, OSError, RuntimeError):
        logger.warning("event=platform_dir_unavailable")
        return None
    if not path.is_absolute():
        return None
    return path


def repos_dir(settings: Settings | None = None) -> Path:
    """Directory holding one subdirectory per imported repository.

    Falls back to ``./repos`` when no platform data directory exists.
    """
    cfg = settings if settings is not None else Settings()
    if cfg.data_dir is not None:
        return cfg.data_dir / REPOS_SUBDIR
    platform_dir = _platform_dir(platformdirs.user_data_path)
    if platform_dir is None:
        return Path("./repos")
    return platform_dir / REPOS_SUBDIR


# File extension → coarse language tag
EXTENSION_MAP: dict[str, str] = {
    # JavaScript
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascript",
    # TypeScript
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "typescript",
    # Python
    ".py": "python",
    ".pyw": "python",
    # Data / docs
    ".json": "json",
    ".md": "markdown",
    ".markdown": "markdown",
    ".html": "html",
    ".htm": "html",
    ".css": "css",
    ".scss": "scss",
    ".sass": "scss",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
    ".xml": "xml",
    ".sql": "sql",
    # Systems
    ".rs": "rust",
    ".go": "go",
    ".java": "java",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".cxx": "cpp",
    ".hpp": "cpp",
    ".swift": "swift",
    # Shell
    ".sh": "shell",
    ".bash": "shell",
    ".zsh": "shell",
}

DEFAULT_LANGUAGE = "plaintext"

# Extensions always reported as binary, whatever the file holds
BINARY_EXTENSIONS: frozenset[str] = frozenset({
    # Images
    ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".ico", ".webp", ".svg",
    ".tiff", ".tif",
    # Audio
    ".mp3", ".wav", ".ogg", ".flac", ".aac", ".m4a",
    # Video
    ".mp4", ".avi", ".mov", ".mkv", ".webm", ".flv",
    # Archives
    ".zip", ".tar", ".gz", ".rar", ".7z", ".bz2", ".xz",
    # Executables / libraries
    ".exe", ".dll", ".so", ".dylib", ".bin", ".o", ".a",
    # Documents
    ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
    # Fonts
    ".ttf", ".otf", ".woff", ".woff2", ".eot",
    # Other
    ".class", ".pyc", ".pyo", ".wasm", ".db", ".sqlite", ".sqlite3",
})


def create_app_engine(
    url: str, *, echo: bool = False
) -> AsyncEngine:
    """Create async SQLite engine with WAL journal mode.

    Handles URL conversion (sqlite:/// → sqlite+aiosqlite:///)
    and sets WAL mode via a pool-connect event listener so it
    fires once per raw DBAPI connection, not per ORM session.
    """
    if url.startswith("sqlite:///"):
        db_url = "sqlite+aiosqlite:///" + url[len("sqlite:///"):]
    else:
        db_url = url
    engine = create_async_engine(db_url, echo=echo)

    @event.listens_for(engine.sync_engine, "connect")
    def _set_wal_mode(
        dbapi_conn: object,
        _connection_record: object,
    ) -> None:
        cursor = dbapi_conn.cursor()  # type: ignore[attr-defined]
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine
