"""
LLM explanation module.

Sends the rendered prompt to a chat completion endpoint and streams the
answer back. Without an API key the analysis is skipped, not failed.
"""

from __future__ import annotations

from aiexplain.config import Config, Provider
from aiexplain.explainer.chat import OpenAIExplainer
from aiexplain.explainer.claude import ClaudeExplainer
from aiexplain.explainer.protocol import (
    SKIP_MESSAGE,
    CompletionState,
    Explainer,
    ExplanationResult,
)


def get_explainer(config: Config) -> Explainer:
    """Build the explainer for the configured provider."""
    explainer_cls: type[OpenAIExplainer] | type[ClaudeExplainer]
    if config.ai_provider == Provider.ANTHROPIC:
        explainer_cls = ClaudeExplainer
    else:
        explainer_cls = OpenAIExplainer

    return explainer_cls(
        api_key=config.ai_api_key,
        model=config.ai_model,
        base_url=config.ai_base_url or None,
        max_tokens=config.ai_max_tokens,
    )


__all__ = [
    "SKIP_MESSAGE",
    "ClaudeExplainer",
    "CompletionState",
    "Explainer",
    "ExplanationResult",
    "OpenAIExplainer",
    "get_explainer",
]
