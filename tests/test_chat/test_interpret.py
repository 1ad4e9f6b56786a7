"""Tests for the code interpretation bridge."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from reporead.catalog.schemas import AppSettings
from reporead.chat.interpret import build_interpret_prompt, interpret_code
from reporead.resilience.errors import HttpError, InvalidUrl


def _response(*contents: str | None) -> SimpleNamespace:
    return SimpleNamespace(
        choices=[
            SimpleNamespace(message=SimpleNamespace(content=c))
            for c in contents
        ]
    )


class _ProviderError(Exception):
    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code


class TestBuildPrompt:
    def test_substitutes_placeholders(self) -> None:
        prompt = build_interpret_prompt(
            "{language} code from {project}:\n{code}",
            code="fn main() {}",
            language="rust",
            project="widgets",
        )

        assert prompt == "rust code from widgets:\nfn main() {}"

    def test_braces_in_code_untouched(self) -> None:
        prompt = build_interpret_prompt(
            "{code}", code="x = {'a': '{b}'}", language="python", project=""
        )

        assert prompt == "x = {'a': '{b}'}"

    def test_default_template(self) -> None:
        prompt = build_interpret_prompt(
            AppSettings().interpret_prompt, "print(1)", "python", "demo"
        )

        assert "python code from the demo project" in prompt
        assert "```python\nprint(1)\n```" in prompt


class TestInterpretCode:
    async def test_missing_key(self) -> None:
        with pytest.raises(InvalidUrl) as exc_info:
            await interpret_code(
                AppSettings(openrouter_api_key="  "), "x", "python", "p"
            )
        assert "API key is not configured" in str(exc_info.value)

    async def test_calls_openrouter_model(self) -> None:
        mock = AsyncMock(return_value=_response("It adds ", "two numbers."))
        settings = AppSettings(
            openrouter_api_key="sk-or-test",
            interpret_model="anthropic/claude-sonnet-4",
        )

        with patch("reporead.chat.interpret._acompletion", mock):
            text = await interpret_code(
                settings, "fn add() {}", "rust", "widgets", timeout=30
            )

        assert text == "It adds two numbers."
        kwargs = mock.await_args.kwargs
        assert kwargs["model"] == "openrouter/anthropic/claude-sonnet-4"
        assert kwargs["api_key"] == "sk-or-test"
        assert kwargs["timeout"] == 30
        assert kwargs["messages"][0]["role"] == "user"
        assert "fn add() {}" in kwargs["messages"][0]["content"]
        assert "HTTP-Referer" in kwargs["extra_headers"]

    async def test_prefixed_model_kept(self) -> None:
        mock = AsyncMock(return_value=_response(None))
        settings = AppSettings(
            openrouter_api_key="k", interpret_model="openrouter/meta/llama"
        )

        with patch("reporead.chat.interpret._acompletion", mock):
            text = await interpret_code(settings, "x", "python", "p")

        assert text == ""
        assert mock.await_args.kwargs["model"] == "openrouter/meta/llama"

    async def test_status_error_maps_to_invalid_url(self) -> None:
        mock = AsyncMock(side_effect=_ProviderError(401, "bad key"))

        with patch("reporead.chat.interpret._acompletion", mock):
            with pytest.raises(InvalidUrl) as exc_info:
                await interpret_code(
                    AppSettings(openrouter_api_key="k"), "x", "python", "p"
                )

        assert "OpenRouter API error: HTTP 401" in str(exc_info.value)
        assert mock.await_count == 1

    async def test_transport_error_maps_to_http_error(self) -> None:
        mock = AsyncMock(side_effect=ConnectionError("connection refused"))

        with patch("reporead.chat.interpret._acompletion", mock):
            with pytest.raises(HttpError):
                await interpret_code(
                    AppSettings(openrouter_api_key="k"), "x", "python", "p"
                )
