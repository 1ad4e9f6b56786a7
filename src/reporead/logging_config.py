"""Process-wide logging for the API server and the CLI.

``setup_logging()`` runs once, before anything imports litellm: it pins
``LITELLM_LOG`` and installs the root handler. With no explicit level it
reads ``LOG_LEVEL`` from the environment, the same variable
``Settings.log_level`` is loaded from.

``apply_log_level()`` re-applies the level once ``Settings`` is loaded,
so a value that only lives in ``.env`` still takes effect.

``cleanup_third_party_handlers()`` runs after imports and drops the
handlers litellm attaches to its own loggers.
"""

import logging
import os

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"
LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LEVEL = "INFO"

_LITELLM_LOGGERS = ("LiteLLM", "LiteLLM Router", "LiteLLM Proxy")

# Quieted to WARNING regardless of the root level
_SUPPRESSED_LOGGERS = (*_LITELLM_LOGGERS, "httpx", "httpcore", "aiosqlite")

_phase1_done = False
_phase2_done = False


def resolve_level(level: str | None = None, default: str = DEFAULT_LEVEL) -> int:
    """Numeric level for ``level``, else ``$LOG_LEVEL``, else ``default``.

    Unknown names fall back to INFO.
    """
    name = (level or os.environ.get(LOG_LEVEL_ENV) or default).upper()
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


def setup_logging(
    level: str | None = None, default: str = DEFAULT_LEVEL
) -> None:
    """Configure the root logger. Later calls are no-ops."""
    global _phase1_done  # noqa: PLW0603
    if _phase1_done:
        return
    _phase1_done = True

    # litellm._logging reads this at import time to set handler level.
    os.environ.setdefault("LITELLM_LOG", "WARNING")

    logging.basicConfig(
        level=resolve_level(level, default),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )

    for name in _SUPPRESSED_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def apply_log_level(level: str) -> int:
    """Set the root logger to ``level`` and return the numeric value."""
    value = resolve_level(level)
    logging.getLogger().setLevel(value)
    return value


def cleanup_third_party_handlers() -> None:
    """Route litellm records through the root handler only."""
    global _phase2_done  # noqa: PLW0603
    if _phase2_done:
        return
    _phase2_done = True

    for name in _LITELLM_LOGGERS:
        lg = logging.getLogger(name)
        lg.handlers.clear()
        lg.propagate = True
