"""Shared constants — single source of truth for cross-module values.

All magic strings and numbers that appear in 2+ files belong here.
StrEnum members are str-compatible, so downstream code (JSON
payloads, route parameters) works unchanged.
"""

from __future__ import annotations

from enum import StrEnum

# ── String Enums ─────────────────────────────────────────


class ExportFormat(StrEnum):
    """Supported favorites export formats."""

    JSON = "json"
    MARKDOWN = "markdown"


class TrendingSince(StrEnum):
    """Time windows accepted by the trending page."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class ChatRole(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"


# ── Content Reader Ceilings ──────────────────────────────

MAX_FILE_SIZE = 3 * 1024 * 1024
MAX_LINES = 50_000
PREVIEW_LINES = 1000
NUL_SCAN_WINDOW = 8192

# ── On-disk Layout ───────────────────────────────────────

META_DIR = "_meta"
INFO_FILE = "info.json"
TREE_FILE = "tree.json"
REPOS_SUBDIR = "repos"
SCREENSHOTS_SUBDIR = "screenshots"
FAVORITES_FILE = "favorites.json"
SETTINGS_FILE = "settings.json"
ARCHIVE_SUFFIX = ".zip"

# Names hidden from the serialised tree (plus anything starting with ".")
TREE_EXCLUDED_NAMES = frozenset({
    "node_modules",
    "__pycache__",
    META_DIR,
})

# ── Platform Directories ─────────────────────────────────

APP_VENDOR = "xnu"
APP_NAME = "RepoRead"

# ── Hosting API ──────────────────────────────────────────

DEFAULT_BRANCH_FALLBACK = "main"
GITHUB_V3_MEDIA_TYPE = "application/vnd.github.v3+json"
SEARCH_PAGE_SIZE = 15
PNG_DATA_URL_PREFIX = "data:image/png;base64,"
CLIPBOARD_TIMEOUT = 5  # seconds

# ── LLM Bridge ───────────────────────────────────────────

OPENROUTER_PROVIDER_PREFIX = "openrouter/"
OPENROUTER_REFERER = "https://github.com/xnu/reporead"

RETRY_MAX_ATTEMPTS = 3
RETRY_INITIAL_WAIT = 2
RETRY_MAX_WAIT = 30

# ── History ──────────────────────────────────────────────

MAX_HISTORY_ENTRIES = 20
CHAT_TITLE_MAX_CHARS = 50

# ── Misc ─────────────────────────────────────────────────

ERROR_TRUNCATION_CHARS = 200

# ── Auth Exempt Paths ────────────────────────────────────

AUTH_EXEMPT_PATHS = frozenset({
    "/api/health",
    "/api/docs",
    "/api/redoc",
    "/api/openapi.json",
})

AUTH_EXEMPT_PREFIXES = ("/api/health",)

API_KEY_HEADER = "X-API-Key"
