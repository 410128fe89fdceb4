"""
Explainer protocol: streaming chat completion for one prompt.

A provider implementation only has to turn a prompt into a sequence of
per-frame text deltas (_frames). The base class owns everything else:

- Degraded mode: with no API key, nothing is sent and a fixed skip
  message is returned.
- State tracking: IDLE -> CONNECTING -> STREAMING -> DONE, or FAILED.
- Error mapping: the provider's transport errors become CompletionError
  carrying the original message. No retries.
- Accumulation: deltas are joined in arrival order.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

from aiexplain.exceptions import CompletionError

logger = logging.getLogger(__name__)

SKIP_MESSAGE = "No AI API key provided, skipping AI analysis"


class CompletionState(str, Enum):
    """Lifecycle of a single completion call."""

    IDLE = "idle"
    CONNECTING = "connecting"
    STREAMING = "streaming"
    DONE = "done"
    FAILED = "failed"


@dataclass
class ExplanationResult:
    """Final text of a completion."""

    text: str
    skipped: bool = False
    chunk_count: int = 0
    latency_ms: float = 0.0


@dataclass
class Explainer(ABC):
    """
    Abstract base for streaming chat-completion clients.

    Example:
        explainer = OpenAIExplainer(api_key="...", model="gpt-4o-mini")
        result = explainer.explain(prompt, on_chunk=print)
    """

    api_key: str
    model: str
    base_url: str | None = None
    max_tokens: int = 4096

    state: CompletionState = field(default=CompletionState.IDLE, init=False)

    # Exceptions raised by the provider SDK that mean "the call failed"
    transport_errors: ClassVar[tuple[type[Exception], ...]] = ()

    @property
    def skipped(self) -> bool:
        """True when no credential is configured."""
        return not self.api_key

    def _resolved_base_url(self) -> str | None:
        """Base URL with stray quotes from .env files removed."""
        if not self.base_url:
            return None
        return self.base_url.strip().strip('"') or None

    @abstractmethod
    def _frames(self, prompt: str) -> Iterator[str]:
        """
        Open the provider stream and yield one text delta per frame.

        Frames without text yield "". Provider errors propagate unchanged.
        """
        ...

    def stream(self, prompt: str) -> Iterator[str]:
        """
        Lazily stream the completion as non-empty text fragments.

        The returned iterator is single-use. Without an API key it yields
        nothing and makes no network call.

        Raises:
            CompletionError: On any transport or protocol failure, either
                while connecting or mid-stream.
        """
        if self.skipped:
            self.state = CompletionState.DONE
            return

        self.state = CompletionState.CONNECTING
        try:
            for delta in self._frames(prompt):
                self.state = CompletionState.STREAMING
                if delta:
                    yield delta
        except self.transport_errors as e:
            self.state = CompletionState.FAILED
            logger.debug("Completion stream failed: %s", e)
            raise CompletionError(str(e), original_error=e) from e

        self.state = CompletionState.DONE

    def explain(
        self,
        prompt: str,
        on_chunk: Callable[[str], None] | None = None,
    ) -> ExplanationResult:
        """
        Run the completion to the end and return the full text.

        Each fragment is passed to on_chunk as soon as it arrives, so the
        caller can print incrementally. Fragments already delivered are not
        retracted if the stream later fails.
        """
        if self.skipped:
            self.state = CompletionState.DONE
            return ExplanationResult(text=SKIP_MESSAGE, skipped=True)

        start_time = time.perf_counter()
        parts: list[str] = []

        for fragment in self.stream(prompt):
            parts.append(fragment)
            if on_chunk is not None:
                on_chunk(fragment)

        latency_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "Completion finished: model=%s, chunks=%d, duration=%.0fms",
            self.model, len(parts), latency_ms,
        )
        return ExplanationResult(
            text="".join(parts),
            chunk_count=len(parts),
            latency_ms=latency_ms,
        )
