# src/llm/client_factory.py - v3
"""Factory: instantiate an LLM provider from its identifier.

Called once at startup with the resolved Settings and API key.
"""

from __future__ import annotations

import importlib
import logging

from unitgen.config.settings import Settings
from unitgen.core.errors import ConfigurationError
from unitgen.llm.base_client import BaseProvider

logger = logging.getLogger(__name__)

# Registry of provider name -> adapter class path (lazy import).
_PROVIDER_REGISTRY: dict[str, str] = {
    "anthropic": "unitgen.llm.adapters.anthropic_adapter.AnthropicAdapter",
    "openai": "unitgen.llm.adapters.openai_adapter.OpenAIAdapter",
}


class UnsupportedProviderError(ConfigurationError):
    """Raised when a provider is not registered."""


def available_providers() -> list[str]:
    return sorted(_PROVIDER_REGISTRY)


def create_provider(
    provider: str,
    api_key: str,
    settings: Settings | None = None,
    **kwargs: object,
) -> BaseProvider:
    """Instantiate the correct adapter from provider name.

    Args:
        provider: Provider identifier (anthropic, openai).
        api_key: Opaque credential passed through to the SDK.
        settings: Application settings (model, token and timeout defaults).
        **kwargs: Additional adapter arguments; take precedence over settings.

    Returns:
        Configured BaseProvider instance.

    Raises:
        UnsupportedProviderError: If provider is not registered.
    """
    if provider not in _PROVIDER_REGISTRY:
        raise UnsupportedProviderError(
            f"invalid provider: {provider!r}. "
            f"Available: {', '.join(available_providers())}"
        )

    adapter_cls = _import_class(_PROVIDER_REGISTRY[provider])

    init_kwargs = dict(kwargs)
    init_kwargs["api_key"] = api_key
    if settings is not None:
        init_kwargs.setdefault("model", settings.model_name)
        init_kwargs.setdefault("max_tokens_default", settings.max_tokens)
        init_kwargs.setdefault("temperature_default", settings.temperature)
        init_kwargs.setdefault("timeout_s", settings.request_timeout_s)

    logger.debug(
        "Creating LLM provider: provider=%s, model=%s",
        provider,
        init_kwargs.get("model", "<default>"),
    )
    return adapter_cls(**init_kwargs)


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
