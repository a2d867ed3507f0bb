"""Provider HTTP transport for relay requests.

Architectural role:
    Executes the single outbound POST for a relay call and returns the decoded JSON
    body. Payload construction and reply extraction live in `chat_relay.llm.adapters`.

Model invocation flow:
    `relay.ChatRelay.relay` -> `send_request(config, api_key, payload)` -> auth
    placement by `config.auth_mode` -> one `requests` POST -> decoded body.

Retry behavior:
    No retry loop is implemented. Each call is attempted once. A timeout applies
    only when one is configured.

Failure handling model:
    Non-2xx statuses and transport failures raise `UpstreamError`; the HTTP layer
    turns them into user-facing reply strings.
"""

import json
import logging
from typing import Any, Optional

import requests

from chat_relay.core.errors import UpstreamError
from chat_relay.llm.provider_config import AuthMode, ProviderConfig


logger = logging.getLogger(__name__)

ERROR_BODY_PLACEHOLDER = {"message": "Could not parse error response"}


def build_request(config: ProviderConfig, api_key: str) -> tuple[str, dict, dict]:
    """Return `(url, params, headers)` for a provider call.

    Query-param providers receive `key=<api_key>` on the URL; bearer providers
    receive an `Authorization` header.
    """
    headers = {"Content-Type": "application/json"}
    headers.update(config.extra_headers)
    params = {}

    if config.auth_mode == AuthMode.QUERY_PARAM:
        params["key"] = api_key
    else:
        headers["Authorization"] = f"Bearer {api_key}"

    return config.endpoint, params, headers


def _read_error_body(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return dict(ERROR_BODY_PLACEHOLDER)


def send_request(
    config: ProviderConfig,
    api_key: str,
    payload: dict,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> Any:
    """Send one request to a provider and return its decoded JSON body.

    Args:
        config: Provider description.
        api_key: Resolved credential.
        payload: Request body built by `adapters.build_payload`.
        session: Shared `requests.Session`; a module-level `requests.post` is used
            when omitted.
        timeout: Seconds to wait; `None` blocks until the transport resolves.

    Failure scenarios:
        - Non-2xx status -> `UpstreamError` with status and parsed error body.
        - Connection/timeout/DNS failures -> `UpstreamError` without status.
        - Success body that is not JSON -> `UpstreamError` without status.
    """
    url, params, headers = build_request(config, api_key)
    post = session.post if session is not None else requests.post
    logger.debug("POST %s (%s)", url, config.display_name)

    try:
        response = post(
            url,
            params=params or None,
            headers=headers,
            json=payload,
            timeout=timeout,
        )
    except requests.exceptions.RequestException as err:
        raise UpstreamError(str(err)) from err

    if not 200 <= response.status_code < 300:
        error_body = _read_error_body(response)
        details = json.dumps(error_body, separators=(",", ":"), ensure_ascii=False)
        raise UpstreamError(
            f"{config.display_name} API error! Status: {response.status_code}, "
            f"Details: {details}",
            upstream_status=response.status_code,
            details={"body": error_body},
        )

    try:
        return response.json()
    except ValueError as err:
        raise UpstreamError(
            f"{config.display_name} returned a non-JSON response body"
        ) from err
