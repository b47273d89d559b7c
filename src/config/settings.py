# src/config/settings.py - v2
"""Typed configuration loaded from the environment via pydantic-settings.

One Settings instance is built at startup (CLI flags applied as overrides)
and passed explicitly to the provider factory, the cache and the output
sinks. Environment variables use the UNITGEN_ prefix, e.g.
UNITGEN_AI_PROVIDER=anthropic.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from unitgen.core.errors import ConfigurationError

SUPPORTED_PROVIDERS = ("anthropic", "openai")


class Settings(BaseSettings):
    """Application settings loaded from UNITGEN_* env vars and .env."""

    model_config = SettingsConfigDict(
        env_prefix="UNITGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === LLM PROVIDER ===
    ai_provider: str = "openai"
    # None derives ./secrets/<provider>_api_key and <PROVIDER>_API_KEY.
    ai_secret_path: Path | None = None
    ai_secret_env_var: str | None = None
    # Overrides the per-provider model below when set.
    ai_model: str | None = None
    anthropic_model: str = "claude-3-5-haiku-latest"
    openai_model: str = "gpt-4o-mini"
    max_tokens: int = 8092
    temperature: float = 0.2
    # Per network call; None leaves the SDK default in place.
    request_timeout_s: float | None = 120.0

    # === Cache ===
    cache_root: Path = Path("/tmp/unit")

    # === Output ===
    color: bool = True
    write: bool = False
    output_path: Path | None = None

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    log_format: Literal["json", "text"] = "text"

    # --- Validators ---

    @field_validator("ai_provider")
    @classmethod
    def normalize_provider(cls, v: str) -> str:
        return v.strip().lower()

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.ai_provider not in SUPPORTED_PROVIDERS:
            errors.append(
                f"invalid provider: {self.ai_provider!r} "
                f"(expected one of {', '.join(SUPPORTED_PROVIDERS)})"
            )

        if self.max_tokens <= 0:
            errors.append("max_tokens must be > 0")

        if self.request_timeout_s is not None and self.request_timeout_s <= 0:
            errors.append("request_timeout_s must be > 0")

        if self.output_path is not None and not self.write:
            errors.append("output_path requires write to be enabled")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def secret_path(self) -> Path:
        """File holding the API key for the selected provider."""
        if self.ai_secret_path is not None:
            return self.ai_secret_path
        return Path("./secrets") / f"{self.ai_provider}_api_key"

    @property
    def secret_env_var(self) -> str:
        """Environment variable holding the API key for the selected provider."""
        if self.ai_secret_env_var:
            return self.ai_secret_env_var
        return f"{self.ai_provider.upper()}_API_KEY"

    @property
    def model_name(self) -> str:
        """Model id for the selected provider."""
        if self.ai_model:
            return self.ai_model
        if self.ai_provider == "anthropic":
            return self.anthropic_model
        return self.openai_model


def load_settings(**overrides: object) -> Settings:
    """Load settings from the environment with optional overrides.

    Args:
        **overrides: Field-level overrides (CLI flags or tests). None values
            are dropped so unset flags fall through to env/defaults.

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    cleaned = {k: v for k, v in overrides.items() if v is not None}
    return Settings(**cleaned)  # type: ignore[arg-type]
