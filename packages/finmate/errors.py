"""Error taxonomy shared by the extraction pipeline and the HTTP boundary.

- :class:`ClientError`: the caller sent empty or missing required input.
- :class:`ConfigurationError`: service credentials are absent; nothing can be
  done locally.
- :class:`UpstreamError`: the remote generation endpoint failed (transport
  error or non-success status). Always absorbed by callers and converted into
  a heuristic result or a safe default message.
"""

from __future__ import annotations

from typing import Any


class ClientError(ValueError):
    """Empty or missing required input (maps to HTTP 400)."""


class ConfigurationError(RuntimeError):
    """Missing service credentials (maps to HTTP 500)."""


class UpstreamError(RuntimeError):
    """A single failed call to the remote generation endpoint.

    ``status`` is ``None`` when the request never produced an HTTP response
    (DNS failure, refused connection, timeout).
    """

    def __init__(self, model: str, status: int | None, body: Any = None) -> None:
        self.model = model
        self.status = status
        self.body = body
        label = status if status is not None else "fetch-error"
        super().__init__(f"generative API error for model {model!r}: {label}")

    @property
    def is_not_found(self) -> bool:
        return self.status == 404
