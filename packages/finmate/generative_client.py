"""Thin client for the Generative Language ``generateText`` endpoint.

Non-streaming POST to ``<base_url>/models/<model>:generateText?key=<api key>``
with body ``{"prompt": {"text": ...}, "temperature": 0.0,
"maxOutputTokens": 800}``. Returns the decoded JSON body (``None`` when a
successful response is not JSON).

Failures are raised as :class:`~finmate.errors.UpstreamError`: non-success
statuses carry the HTTP code and the decoded error body; transport failures,
including malformed or truncated responses, carry ``status=None``. No retries
and no explicit timeout beyond the platform default.
"""

from __future__ import annotations

import http.client
import json
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Mapping
from typing import Any

from .config import DEFAULT_BASE_URL
from .errors import UpstreamError

DEFAULT_TEMPERATURE: float = 0.0
DEFAULT_MAX_OUTPUT_TOKENS: int = 800


def model_url(model: str, *, api_key: str, base_url: str = DEFAULT_BASE_URL) -> str:
    key = urllib.parse.quote(api_key, safe="")
    return f"{base_url}/models/{model}:generateText?key={key}"


def _decode_body(raw: bytes) -> Any:
    text = raw.decode("utf-8", errors="replace")
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text or None


def generate_text(
    *,
    model: str,
    prompt: str,
    api_key: str,
    base_url: str = DEFAULT_BASE_URL,
    temperature: float = DEFAULT_TEMPERATURE,
    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
    timeout: float | None = None,
) -> Any:
    """Execute one ``generateText`` call and return the parsed JSON body."""

    payload = {
        "prompt": {"text": prompt},
        "temperature": temperature,
        "maxOutputTokens": max_output_tokens,
    }
    data = json.dumps(payload).encode("utf-8")
    req = urllib.request.Request(
        model_url(model, api_key=api_key, base_url=base_url), data=data, method="POST"
    )
    req.add_header("Content-Type", "application/json")

    kwargs: dict[str, Any] = {}
    if timeout is not None:
        kwargs["timeout"] = timeout
    try:
        with urllib.request.urlopen(req, **kwargs) as resp:
            body = resp.read()
    except urllib.error.HTTPError as e:
        try:
            err_body = _decode_body(e.read())
        except (OSError, http.client.HTTPException):
            err_body = None
        raise UpstreamError(model, e.code, err_body) from e
    except (OSError, http.client.HTTPException) as e:
        raise UpstreamError(model, None, str(e)) from e

    try:
        return json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None


def _content_text(content: Any) -> str | None:
    if isinstance(content, str):
        return content
    # Newer response shapes nest text under ``parts``.
    if isinstance(content, Mapping):
        parts = content.get("parts")
        if isinstance(parts, list):
            texts = [p.get("text") for p in parts if isinstance(p, Mapping)]
            joined = "".join(t for t in texts if isinstance(t, str))
            return joined or None
    return None


def extract_output_text(body: Any) -> str:
    """Return generated text from ``candidates[0].content`` or ``output[0].content``.

    Any other shape yields an empty string.
    """

    if not isinstance(body, Mapping):
        return ""
    for key in ("candidates", "output"):
        items = body.get(key)
        if isinstance(items, list) and items and isinstance(items[0], Mapping):
            text = _content_text(items[0].get("content"))
            if text is not None:
                return text
    return ""
