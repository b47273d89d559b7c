# src/llm/adapters/openai_adapter.py - v2
"""OpenAI GPT adapter implementing BaseProvider.

Uses the official openai SDK. Structured output uses native json_schema
response_format in strict mode.
"""

from __future__ import annotations

import time
from typing import Any

from pydantic import BaseModel

from unitgen.core.errors import ProviderCallError
from unitgen.llm.base_client import BaseProvider
from unitgen.llm.models import LLMResponse, Message

SCHEMA_NAME = "unit_test_suggestions"


class OpenAIAdapter(BaseProvider):
    """OpenAI GPT adapter."""

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key: str = "",
        max_tokens_default: int = 4096,
        temperature_default: float = 0.2,
        timeout_s: float | None = None,
    ):
        self._model = model
        self._api_key = api_key
        self._max_tokens_default = max_tokens_default
        self._temperature_default = temperature_default
        self._timeout_s = timeout_s
        self._sdk_client = None

    @property
    def _client(self):
        if self._sdk_client is None:
            import openai

            kwargs: dict[str, Any] = {"api_key": self._api_key, "max_retries": 0}
            if self._timeout_s is not None:
                kwargs["timeout"] = self._timeout_s
            self._sdk_client = openai.AsyncOpenAI(**kwargs)
        return self._sdk_client

    @property
    def provider_name(self) -> str:
        return "openai"

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        response_format: type[BaseModel] | None = None,
    ) -> LLMResponse:
        import openai

        oai_messages: list[dict[str, Any]] = []
        if system:
            oai_messages.append({"role": "system", "content": system})
        for m in messages:
            oai_messages.append({"role": m.role, "content": m.content})

        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": oai_messages,
            "max_tokens": max_tokens or self._max_tokens_default,
            "temperature": (
                self._temperature_default if temperature is None else temperature
            ),
        }
        if response_format is not None:
            kwargs["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": SCHEMA_NAME,
                    "schema": response_format.model_json_schema(),
                    "strict": True,
                },
            }

        t0 = time.monotonic()
        try:
            resp = await self._client.chat.completions.create(**kwargs)
        except openai.OpenAIError as e:
            raise ProviderCallError(self.provider_name, str(e)) from e
        latency = int((time.monotonic() - t0) * 1000)

        choice = resp.choices[0]
        usage = resp.usage
        return LLMResponse(
            content=choice.message.content or "",
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            model=self._model,
            provider=self.provider_name,
            latency_ms=latency,
            raw_response=resp,
        )
