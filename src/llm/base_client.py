# src/llm/base_client.py - v2
"""Abstract LLM provider interface.

Adapters implement complete() and provider_name; the two capabilities the
pipeline uses (get_suggestions, create_artifact) are built on top of them
here so every backend shares the same deserialization and error rules.
How a backend constrains its output to the SuggestionResult schema is the
adapter's business, driven by the response_format argument.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from pydantic import BaseModel, ValidationError

from unitgen.core.errors import MalformedResponseError
from unitgen.core.models import Suggestion, SuggestionResult
from unitgen.llm.models import LLMResponse, Message

logger = logging.getLogger(__name__)


class BaseProvider(ABC):
    """Unified interface for all LLM providers."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        response_format: type[BaseModel] | None = None,
    ) -> LLMResponse:
        """Text completion.

        Raises:
            ProviderCallError: The backend call failed.
        """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (anthropic, openai)."""

    async def get_suggestions(
        self, system_prompt: str, user_prompt: str
    ) -> list[Suggestion]:
        """Ask for a schema-constrained list of unit test suggestions.

        Raises:
            ProviderCallError: The backend call failed.
            MalformedResponseError: The output is not a valid SuggestionResult.
        """
        response = await self.complete(
            [Message(role="user", content=user_prompt)],
            system=system_prompt,
            response_format=SuggestionResult,
        )
        _log_usage(response)
        return self.parse_suggestions(response.content)

    async def create_artifact(self, system_prompt: str, user_prompt: str) -> str:
        """Free-form generation; returns the raw text including any fences."""
        response = await self.complete(
            [Message(role="user", content=user_prompt)],
            system=system_prompt,
        )
        _log_usage(response)
        return response.content

    def parse_suggestions(self, raw: str) -> list[Suggestion]:
        """Decode a SuggestionResult JSON document."""
        if not raw.strip():
            raise MalformedResponseError(self.provider_name, "empty response")
        try:
            result = SuggestionResult.model_validate_json(raw)
        except ValidationError as e:
            raise MalformedResponseError(self.provider_name, str(e)) from e
        return list(result.suggestions)


def _log_usage(response: LLMResponse) -> None:
    logger.debug(
        "LLM call: provider=%s model=%s in=%d out=%d latency=%dms",
        response.provider,
        response.model,
        response.input_tokens,
        response.output_tokens,
        response.latency_ms,
    )
