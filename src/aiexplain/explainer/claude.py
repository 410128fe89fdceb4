"""
Claude explainer, selected with ai_provider=anthropic.

Same contract as the OpenAI explainer, over the Anthropic Messages
streaming API.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

import anthropic

from aiexplain.explainer.protocol import Explainer

logger = logging.getLogger(__name__)


@dataclass
class ClaudeExplainer(Explainer):
    """Streams a single-message Claude completion."""

    client_factory: Callable[..., Any] | None = field(default=None, repr=False)

    transport_errors = (anthropic.AnthropicError,)

    def _make_client(self) -> Any:
        factory = self.client_factory or anthropic.Anthropic
        base_url = self._resolved_base_url()
        logger.debug("Creating Anthropic client: model=%s, base_url=%s", self.model, base_url)
        return factory(api_key=self.api_key, base_url=base_url, max_retries=0)

    def _frames(self, prompt: str) -> Iterator[str]:
        client = self._make_client()

        with client.messages.stream(
            model=self.model,
            max_tokens=self.max_tokens,
            messages=[{"role": "user", "content": prompt}],
        ) as stream:
            yield from stream.text_stream
