"""Environment-backed settings for the remote generation endpoint.

Environment variables
---------------------
- ``GOOGLE_API_KEY`` or ``GEMINI_API_KEY``: API key (first one set wins).
- ``GOOGLE_PROJECT_ID`` or ``GOOGLE_CLOUD_PROJECT``: project identifier.
- ``PARSE_FIELDS_MODEL``: primary model id (default ``gemini-2.5-flash``).
- ``PARSE_FIELDS_MODEL_FALLBACKS``: comma-separated model ids tried in order
  after the primary returns "not found".
- ``FINMATE_GENERATIVE_BASE_URL``: endpoint root (mainly for tests/proxies).

Nothing is read at import time; callers build settings per request with
:meth:`ExtractionSettings.from_env`.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .errors import ConfigurationError

DEFAULT_PRIMARY_MODEL = "gemini-2.5-flash"
DEFAULT_FALLBACK_MODELS: tuple[str, ...] = ("text-bison-001", "text-bison")
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta2"


def _first_set(env: Mapping[str, str], *names: str) -> str | None:
    for name in names:
        val = env.get(name)
        if val and val.strip():
            return val.strip()
    return None


def parse_model_list(raw: str | None) -> tuple[str, ...]:
    """Split a comma-separated model list, trimming and dropping blanks."""

    if not raw:
        return ()
    return tuple(s.strip() for s in raw.split(",") if s.strip())


@dataclass(frozen=True, slots=True)
class ExtractionSettings:
    api_key: str | None = None
    project_id: str | None = None
    primary_model: str = DEFAULT_PRIMARY_MODEL
    configured_fallbacks: tuple[str, ...] = ()
    base_url: str = DEFAULT_BASE_URL

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> ExtractionSettings:
        env = os.environ if env is None else env
        return cls(
            api_key=_first_set(env, "GOOGLE_API_KEY", "GEMINI_API_KEY"),
            project_id=_first_set(env, "GOOGLE_PROJECT_ID", "GOOGLE_CLOUD_PROJECT"),
            primary_model=_first_set(env, "PARSE_FIELDS_MODEL") or DEFAULT_PRIMARY_MODEL,
            configured_fallbacks=parse_model_list(env.get("PARSE_FIELDS_MODEL_FALLBACKS")),
            base_url=(_first_set(env, "FINMATE_GENERATIVE_BASE_URL") or DEFAULT_BASE_URL).rstrip(
                "/"
            ),
        )

    @property
    def fallback_models(self) -> tuple[str, ...]:
        """Configured fallbacks, or the built-in default pair when none are set."""

        return self.configured_fallbacks or DEFAULT_FALLBACK_MODELS

    def require_credentials(self) -> str:
        """Return the API key, raising :class:`ConfigurationError` when unusable."""

        if not self.api_key or not self.project_id:
            raise ConfigurationError(
                "Missing API key or project id: set GOOGLE_API_KEY or GEMINI_API_KEY "
                "and GOOGLE_PROJECT_ID in server env"
            )
        return self.api_key
