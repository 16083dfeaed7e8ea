"""Pytest configuration for test isolation.

The extraction pipeline and the suggestion flow read credentials and model
ids from the environment on every call. A developer shell (or a ``.env``
loaded by an earlier test) may have real values set, which would make tests
depend on the machine they run on and could send real network traffic.

To keep tests hermetic, an autouse fixture removes every variable the
package reads before each test. Tests that need credentials set them
explicitly with ``monkeypatch.setenv`` or pass ``ExtractionSettings``.
"""

from __future__ import annotations

import pytest

_ENV_VARS: tuple[str, ...] = (
    "GOOGLE_API_KEY",
    "GEMINI_API_KEY",
    "GOOGLE_PROJECT_ID",
    "GOOGLE_CLOUD_PROJECT",
    "PARSE_FIELDS_MODEL",
    "PARSE_FIELDS_MODEL_FALLBACKS",
    "FINMATE_GENERATIVE_BASE_URL",
)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
