"""
OpenAI-compatible chat completion explainer.

Works with api.openai.com and any endpoint speaking the same protocol
(DeepSeek, OpenRouter, Ollama, vLLM, ...) via base_url.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import closing
from dataclasses import dataclass, field
from typing import Any

import openai

from aiexplain.explainer.protocol import Explainer

logger = logging.getLogger(__name__)


@dataclass
class OpenAIExplainer(Explainer):
    """
    Streams a single-message chat completion.

    client_factory builds the SDK client; it defaults to openai.OpenAI and
    is only called when a request is actually made.
    """

    client_factory: Callable[..., Any] | None = field(default=None, repr=False)

    transport_errors = (openai.OpenAIError,)

    def _make_client(self) -> Any:
        factory = self.client_factory or openai.OpenAI
        base_url = self._resolved_base_url()
        logger.debug("Creating OpenAI client: model=%s, base_url=%s", self.model, base_url)
        return factory(api_key=self.api_key, base_url=base_url, max_retries=0)

    def _frames(self, prompt: str) -> Iterator[str]:
        client = self._make_client()
        response = client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            stream=True,
        )

        with closing(response):
            for chunk in response:
                # Some servers send a trailing usage frame with no choices
                if not chunk.choices:
                    yield ""
                    continue
                yield chunk.choices[0].delta.content or ""
