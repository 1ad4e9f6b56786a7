"""Chat module: code interpretation through a hosted LLM router."""

from reporead.chat.interpret import build_interpret_prompt, interpret_code

__all__ = [
    "build_interpret_prompt",
    "interpret_code",
]
