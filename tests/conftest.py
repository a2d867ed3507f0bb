"""Shared fixtures: settings with fake keys, a fake HTTP session, and a test client."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from chat_relay.api.http_api import create_app
from chat_relay.core.relay import ChatRelay
from chat_relay.llm.provider_config import PROVIDERS, RelaySettings
from chat_relay.memory.message_log import MessageLog

API_KEYS = {
    "gemini": "gemini-test-key",
    "mistral": "mistral-test-key",
    "groq": "groq-test-key",
}


def make_response(status_code=200, body=None, json_error=False):
    """Build a stand-in for `requests.Response`."""
    response = MagicMock()
    response.status_code = status_code
    if json_error:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = body
    return response


def make_settings(api_keys=None, **overrides) -> RelaySettings:
    return RelaySettings(
        providers=dict(PROVIDERS),
        api_keys=dict(API_KEYS if api_keys is None else api_keys),
        **overrides,
    )


@pytest.fixture
def session():
    """Fake `requests.Session`; set `session.post.return_value` per test."""
    fake = MagicMock()
    fake.post.return_value = make_response(200, {})
    return fake


@pytest.fixture
def message_log():
    return MessageLog()


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def relay(settings, message_log, session):
    return ChatRelay(settings, message_log=message_log, session=session)


@pytest.fixture
def client(relay):
    app = create_app(relay=relay, serve_static=False)
    with TestClient(app) as test_client:
        yield test_client
