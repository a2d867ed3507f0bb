"""Relay error taxonomy.

Architectural role:
    Defines the failures a relay call can end in. `chat_relay.core.relay` raises
    them and `chat_relay.api.http_api` converts them into JSON responses at the
    route boundary.

Error classes:
    - `ValidationError`: caller input is unusable (missing/empty message).
    - `ConfigError`: a server-side credential is missing for the provider.
    - `UpstreamError`: the provider answered with a non-success status, or the
      transport failed (timeout, DNS, refused connection, unreadable body).

A malformed-but-successful provider body is not an error; it degrades to a
fallback reply inside `chat_relay.llm.adapters`.
"""

from typing import Any, Optional


class RelayError(Exception):
    """Base class for failures surfaced by a relay call."""

    status_code = 500

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(RelayError):
    """Request body did not carry a usable message. Maps to HTTP 400."""

    status_code = 400


class ConfigError(RelayError):
    """Provider credential is not configured. Maps to HTTP 500."""


class UpstreamError(RelayError):
    """Provider call failed.

    `upstream_status` is the HTTP status returned by the provider, or `None` when
    the request never produced a response.
    """

    def __init__(
        self,
        message: str,
        upstream_status: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.upstream_status = upstream_status
