"""Relay orchestration: one user message in, one provider reply out.

Architectural role:
    Provides the single execution path used by every provider route. The HTTP
    layer only parses the body and maps errors; everything between validation and
    the final reply happens here.

Control-flow model (per call, linear, no retry):
    1. Validate the message (non-empty string).
    2. Append the user entry to the message log.
    3. Resolve the provider credential from the injected settings.
    4. Build the provider payload (`adapters.build_payload`).
    5. Send exactly one request (`client.send_request`).
    6. Extract the reply, falling back to fixed text on malformed bodies.
    7. Append the assistant entry and return the reply.

Log invariant:
    Successful calls append exactly two entries (user, then assistant). Failures
    after validation append only the user entry; validation failures append none.

Dependencies:
    Settings, message log and HTTP session are passed in at construction time;
    nothing here reads the process environment.
"""

import logging
from typing import Optional

import requests

from chat_relay.core.errors import ConfigError, ValidationError
from chat_relay.llm.adapters import build_payload, extract_reply
from chat_relay.llm.client import send_request
from chat_relay.llm.provider_config import RelaySettings
from chat_relay.memory.message_log import MessageLog, Role


logger = logging.getLogger(__name__)

MISSING_MESSAGE_ERROR = "Message not provided in request body."


def validate_message(message) -> str:
    """Return `message` when it is a non-empty string, else raise `ValidationError`."""
    if not isinstance(message, str) or not message:
        raise ValidationError(MISSING_MESSAGE_ERROR)
    return message


class ChatRelay:
    """Forward chat messages to configured providers and record the exchange."""

    def __init__(
        self,
        settings: RelaySettings,
        message_log: Optional[MessageLog] = None,
        session: Optional[requests.Session] = None,
    ):
        self.settings = settings
        self.message_log = message_log if message_log is not None else MessageLog(
            settings.log_max_entries
        )
        self.session = session if session is not None else requests.Session()

    def relay(self, provider_name: str, message) -> str:
        """Relay one message to `provider_name` and return the reply text.

        Raises:
            ValidationError: `message` missing, empty or not a string.
            ConfigError: provider credential not configured.
            UpstreamError: non-2xx status or transport failure.
            KeyError: `provider_name` is not in the settings' provider table.
        """
        config = self.settings.provider(provider_name)
        message = validate_message(message)

        self.message_log.append(Role.USER, message, config.display_name)
        logger.info("Received message for %s: %s", config.display_name, message)

        api_key = self.settings.api_key(provider_name)
        if not api_key:
            logger.error("%s is not set in the .env file.", config.api_key_env)
            raise ConfigError(
                f"Server error: {config.display_name} API key is missing. "
                "Please set it in your .env file."
            )

        payload = build_payload(config, message)
        data = send_request(
            config,
            api_key,
            payload,
            session=self.session,
            timeout=self.settings.request_timeout,
        )
        reply = extract_reply(config, data)

        self.message_log.append(Role.ASSISTANT, reply, config.display_name)
        logger.info("%s replied: %s", config.display_name, reply)
        return reply
