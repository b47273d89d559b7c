# src/llm/adapters/anthropic_adapter.py - v3
"""Anthropic Claude adapter implementing BaseProvider.

Uses the official anthropic SDK. Structured output is obtained with a
forced tool call whose input_schema is the requested model's JSON schema;
the tool input is returned as the response content.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any

from pydantic import BaseModel

from unitgen.core.errors import ProviderCallError
from unitgen.llm.base_client import BaseProvider
from unitgen.llm.models import LLMResponse, Message

logger = logging.getLogger(__name__)

_STRUCTURED_TOOL = "structured_output"


class AnthropicAdapter(BaseProvider):
    """Adapter for Anthropic Claude models."""

    def __init__(
        self,
        model: str = "claude-3-5-haiku-latest",
        api_key: str | None = None,
        max_tokens_default: int = 8092,
        temperature_default: float = 0.2,
        timeout_s: float | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._max_tokens_default = max_tokens_default
        self._temperature_default = temperature_default
        self._timeout_s = timeout_s
        self._sdk_client = None  # Lazy initialization

    @property
    def _client(self):
        """Lazy-init Anthropic client (only on first API call)."""
        if self._sdk_client is None:
            import anthropic

            kwargs: dict[str, Any] = {"api_key": self._api_key or "", "max_retries": 0}
            if self._timeout_s is not None:
                kwargs["timeout"] = self._timeout_s
            self._sdk_client = anthropic.AsyncAnthropic(**kwargs)
        return self._sdk_client

    @property
    def provider_name(self) -> str:
        return "anthropic"

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        response_format: type[BaseModel] | None = None,
    ) -> LLMResponse:
        """Text completion via Anthropic Messages API."""
        import anthropic

        kwargs: dict[str, Any] = {
            "model": self._model,
            "max_tokens": max_tokens or self._max_tokens_default,
            "temperature": (
                self._temperature_default if temperature is None else temperature
            ),
            "messages": [{"role": m.role, "content": m.content} for m in messages],
        }
        if system:
            kwargs["system"] = system

        if response_format is not None:
            kwargs["tools"] = [
                {
                    "name": _STRUCTURED_TOOL,
                    "description": "Return structured data matching the schema",
                    "input_schema": response_format.model_json_schema(),
                }
            ]
            kwargs["tool_choice"] = {"type": "tool", "name": _STRUCTURED_TOOL}

        start = time.monotonic()
        try:
            response = await self._client.messages.create(**kwargs)
        except anthropic.APIError as e:
            raise ProviderCallError(self.provider_name, str(e)) from e
        latency_ms = int((time.monotonic() - start) * 1000)

        return LLMResponse(
            content=self._extract_content(response, response_format is not None),
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            model=response.model,
            provider=self.provider_name,
            latency_ms=latency_ms,
            raw_response=response,
        )

    @staticmethod
    def _extract_content(response: Any, structured: bool) -> str:
        """Extract text from Anthropic response content blocks."""
        for block in response.content:
            block_type = getattr(block, "type", None)
            if structured and block_type == "tool_use":
                return json.dumps(block.input)
            if block_type == "text":
                return block.text
        return ""
