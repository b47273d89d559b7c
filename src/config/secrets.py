# src/config/secrets.py - v1
"""API key resolution for the selected provider.

The key file is read first; a set environment variable overrides it.
Neither source yielding a key is a fatal configuration error.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from unitgen.config.settings import Settings
from unitgen.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


def resolve_api_key(
    settings: Settings, environ: Mapping[str, str] | None = None
) -> str:
    """Return the API key for settings.ai_provider.

    Raises:
        ConfigurationError: No non-empty key in the file or the env var.
    """
    env = os.environ if environ is None else environ
    key = ""

    path = settings.secret_path.expanduser()
    try:
        key = path.read_text(encoding="utf-8").strip()
        logger.debug("Read API key from %s", path)
    except FileNotFoundError:
        logger.debug("No API key file at %s", path)
    except OSError as e:
        logger.warning("Cannot read API key file %s: %s", path, e)

    env_value = env.get(settings.secret_env_var)
    if env_value is not None:
        key = env_value.strip()
        logger.debug("Using API key from $%s", settings.secret_env_var)

    if not key:
        raise ConfigurationError(
            f"api key is required: set ${settings.secret_env_var} "
            f"or write it to {path}"
        )
    return key
