# src/pipeline/orchestrator.py - v2
"""Generation orchestrator: suggestions (cached or fresh), selection, test.

One orchestrator drives one invocation through

    START -> FINGERPRINTED -> CACHE_HIT | CACHE_MISS -> SUGGESTIONS_READY
          -> AWAITING_SELECTION -> GENERATING -> DONE

On a cache miss the provider's suggestions are written to the cache by a
background task while the user picks a suggestion and the test is
generated. The task is always awaited before run() returns, and a write
failure is reported on the result instead of aborting the run. Provider
failures, cache read failures and invalid selections propagate.
"""

from __future__ import annotations

import asyncio
import contextvars
import logging
import threading
from collections.abc import Callable, Sequence
from enum import Enum

from pydantic import BaseModel

from unitgen.cache.base_cache_store import BaseSuggestionCache
from unitgen.cache.fingerprint import compute_fingerprint
from unitgen.core.errors import CacheWriteError
from unitgen.core.models import Suggestion
from unitgen.llm.base_client import BaseProvider
from unitgen.logging.context import (
    clear_context,
    set_invocation_context,
    set_state_context,
)
from unitgen.pipeline.output import ArtifactSink
from unitgen.pipeline.postprocess import unwrap_artifact
from unitgen.pipeline.prompts import (
    ARTIFACT_SYSTEM_PROMPT,
    SUGGESTION_SYSTEM_PROMPT,
    build_artifact_prompt,
    build_suggestion_prompt,
)

logger = logging.getLogger(__name__)

Selector = Callable[[Sequence[Suggestion]], Suggestion]


class PipelineState(str, Enum):
    START = "start"
    FINGERPRINTED = "fingerprinted"
    CACHE_HIT = "cache_hit"
    CACHE_MISS = "cache_miss"
    SUGGESTIONS_READY = "suggestions_ready"
    AWAITING_SELECTION = "awaiting_selection"
    GENERATING = "generating"
    DONE = "done"


class GenerationResult(BaseModel):
    """Outcome of one completed invocation."""

    fingerprint: str
    cache_hit: bool
    suggestion: Suggestion
    artifact: str
    cache_write_error: str | None = None


class GenerationOrchestrator:
    """Drives fingerprint -> suggestions -> selection -> generation."""

    def __init__(
        self,
        provider: BaseProvider,
        cache: BaseSuggestionCache,
        selector: Selector,
        sink: ArtifactSink | None = None,
        language: str | None = None,
    ) -> None:
        self._provider = provider
        self._cache = cache
        self._selector = selector
        self._sink = sink
        self._language = language
        self._state = PipelineState.START
        self._cache_write: asyncio.Task | None = None
        self.fingerprint: str | None = None
        self.cache_hit = False

    @property
    def state(self) -> PipelineState:
        return self._state

    async def run(self, content: bytes) -> GenerationResult:
        """Execute the whole invocation for one file's content."""
        try:
            suggestions = await self.load_suggestions(content)
            suggestion = await self.select(suggestions)
            artifact = await self.generate(content, suggestion)
            if self._sink is not None:
                self._sink.emit(artifact)
            self._transition(PipelineState.DONE)
        finally:
            write_error = await self.finish_cache_write()
            clear_context()

        return GenerationResult(
            fingerprint=self.fingerprint or "",
            cache_hit=self.cache_hit,
            suggestion=suggestion,
            artifact=artifact,
            cache_write_error=write_error,
        )

    async def load_suggestions(self, content: bytes) -> list[Suggestion]:
        """Return cached suggestions for content, or fetch and cache them."""
        fingerprint = compute_fingerprint(content)
        self.fingerprint = fingerprint
        set_invocation_context(fingerprint, self._provider.provider_name)
        self._transition(PipelineState.FINGERPRINTED)
        logger.debug(
            "Input: hash=%s provider=%s length=%d",
            fingerprint,
            self._provider.provider_name,
            len(content),
        )

        cached = await self._cache.lookup(fingerprint)
        if cached.is_hit:
            self.cache_hit = True
            self._transition(PipelineState.CACHE_HIT)
            suggestions = cached.suggestions
        else:
            self._transition(PipelineState.CACHE_MISS)
            suggestions = await self._provider.get_suggestions(
                SUGGESTION_SYSTEM_PROMPT,
                build_suggestion_prompt(content, self._language),
            )
            if suggestions:
                self._cache_write = asyncio.create_task(
                    self._cache.store(fingerprint, suggestions),
                    name=f"cache-write-{fingerprint[:12]}",
                )
            else:
                logger.warning("Provider returned no suggestions; nothing cached")

        self._transition(PipelineState.SUGGESTIONS_READY)
        logger.info(
            "%d suggestions (%s)",
            len(suggestions),
            "cached" if self.cache_hit else self._provider.provider_name,
        )
        return suggestions

    async def select(self, suggestions: Sequence[Suggestion]) -> Suggestion:
        """Block on the selector without stalling the background write.

        The selector runs on a daemon thread, so a terminal read that is
        still pending when the run is cancelled (Ctrl-C) never holds up
        interpreter exit.
        """
        self._transition(PipelineState.AWAITING_SELECTION)
        loop = asyncio.get_running_loop()
        future: asyncio.Future[Suggestion] = loop.create_future()

        def _resolve(outcome: Suggestion | BaseException) -> None:
            if future.done():
                return
            if isinstance(outcome, BaseException):
                future.set_exception(outcome)
            else:
                future.set_result(outcome)

        def _worker() -> None:
            outcome: Suggestion | BaseException
            try:
                outcome = self._selector(suggestions)
            except Exception as e:
                outcome = e
            try:
                loop.call_soon_threadsafe(_resolve, outcome)
            except RuntimeError:
                logger.debug("Selection finished after the event loop closed")

        ctx = contextvars.copy_context()
        threading.Thread(
            target=ctx.run, args=(_worker,), name="unitgen-selection", daemon=True
        ).start()
        return await future

    async def generate(self, content: bytes, suggestion: Suggestion) -> str:
        """Second provider call; returns the test with any fence removed."""
        self._transition(PipelineState.GENERATING)
        logger.info("Generating unit test: %s", suggestion.title)
        raw = await self._provider.create_artifact(
            ARTIFACT_SYSTEM_PROMPT, build_artifact_prompt(content, suggestion)
        )
        return unwrap_artifact(raw)

    async def finish_cache_write(self) -> str | None:
        """Wait for a pending cache write; return its error message, if any."""
        task, self._cache_write = self._cache_write, None
        if task is None:
            return None
        try:
            path = await task
        except CacheWriteError as e:
            logger.error("%s", e)
            return str(e)
        logger.debug("Suggestions cached at %s", path)
        return None

    def _transition(self, state: PipelineState) -> None:
        self._state = state
        set_state_context(state.value)
