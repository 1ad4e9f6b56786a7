"""Code interpretation through OpenRouter with rate-limit retry."""

from __future__ import annotations

import logging
from collections.abc import Callable, Coroutine
from typing import TYPE_CHECKING, Any

import litellm
from litellm.exceptions import RateLimitError as LitellmRateLimitError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from reporead.catalog.schemas import AppSettings
from reporead.constants import (
    ERROR_TRUNCATION_CHARS,
    OPENROUTER_PROVIDER_PREFIX,
    OPENROUTER_REFERER,
    RETRY_INITIAL_WAIT,
    RETRY_MAX_ATTEMPTS,
    RETRY_MAX_WAIT,
    ChatRole,
)
from reporead.resilience.errors import (
    HttpError,
    InvalidUrl,
    RepoError,
    classify_error,
    is_retryable,
)

logger = logging.getLogger(__name__)

# litellm stubs have partially unknown types — typed alias
if TYPE_CHECKING:
    _acompletion: Callable[..., Coroutine[Any, Any, Any]]
else:
    _acompletion = litellm.acompletion


def build_interpret_prompt(
    template: str, code: str, language: str, project: str
) -> str:
    """Substitute ``{language}``, ``{project}`` and ``{code}`` literally.

    Plain replacement rather than ``str.format`` so braces in the code
    itself are left alone.
    """
    return (
        template.replace("{language}", language)
        .replace("{project}", project)
        .replace("{code}", code)
    )


def _router_model(model: str) -> str:
    if model.startswith(OPENROUTER_PROVIDER_PREFIX):
        return model
    return f"{OPENROUTER_PROVIDER_PREFIX}{model}"


@retry(
    stop=stop_after_attempt(RETRY_MAX_ATTEMPTS),
    wait=wait_exponential_jitter(
        initial=RETRY_INITIAL_WAIT, max=RETRY_MAX_WAIT
    ),
    retry=retry_if_exception_type(LitellmRateLimitError),
    reraise=True,
)
async def _complete(
    model: str, prompt: str, api_key: str, timeout: int
) -> str:
    response: Any = await _acompletion(
        model=_router_model(model),
        messages=[{"role": ChatRole.USER.value, "content": prompt}],
        api_key=api_key,
        timeout=timeout,
        extra_headers={"HTTP-Referer": OPENROUTER_REFERER},
    )
    return "".join(
        str(choice.message.content or "") for choice in response.choices
    )


def _to_repo_error(exc: Exception) -> RepoError:
    status = getattr(exc, "status_code", None)
    detail = str(exc)[:ERROR_TRUNCATION_CHARS]
    if isinstance(status, int):
        return InvalidUrl(f"OpenRouter API error: HTTP {status} - {detail}")
    return HttpError(detail)


async def interpret_code(
    settings: AppSettings,
    code: str,
    language: str,
    project: str,
    *,
    timeout: int = 120,
) -> str:
    """Ask the configured model to explain ``code``.

    Raises:
        InvalidUrl: no API key is configured, or the provider
            answered with an error status.
        HttpError: the call failed without a status (transport).
    """
    api_key = (settings.openrouter_api_key or "").strip()
    if not api_key:
        raise InvalidUrl("OpenRouter API key is not configured")

    prompt = build_interpret_prompt(
        settings.interpret_prompt, code, language, project
    )
    try:
        text = await _complete(
            settings.interpret_model, prompt, api_key, timeout
        )
    except Exception as exc:
        logger.warning(
            "event=interpret_failed model=%s class=%s retryable=%s error=%s",
            settings.interpret_model,
            classify_error(exc).value,
            is_retryable(exc),
            str(exc)[:ERROR_TRUNCATION_CHARS],
        )
        raise _to_repo_error(exc) from exc

    logger.info(
        "event=interpret_complete model=%s language=%s chars=%d",
        settings.interpret_model,
        language,
        len(text),
    )
    return text
