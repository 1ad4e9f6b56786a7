"""Pydantic models for the catalog features persisted in the config dir."""

from __future__ import annotations

from pydantic import BaseModel

DEFAULT_INTERPRET_PROMPT = (
    "This is {language} code from the {project} project. "
    "Please interpret the following code in under 500 words:"
    "\n\n```{language}\n{code}\n```"
)
DEFAULT_INTERPRET_MODEL = "anthropic/claude-sonnet-4"


class FavoriteRepo(BaseModel):
    owner: str
    repo: str
    url: str
    description: str | None = None
    language: str | None = None
    stars: int | None = None
    added_at: str  # RFC3339

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


class AppSettings(BaseModel):
    """User-editable preferences, stored as ``settings.json``.

    Distinct from :class:`reporead.config.Settings`, which is the
    process configuration read from the environment.
    """

    github_token: str | None = None
    copy_screenshot_to_clipboard: bool = True
    openrouter_api_key: str | None = None
    interpret_prompt: str = DEFAULT_INTERPRET_PROMPT
    interpret_model: str = DEFAULT_INTERPRET_MODEL
