"""Message-to-payload and response-to-reply translation per request shape.

Architectural role:
    Keeps provider wire formats out of the relay control flow. `relay` asks for a
    payload built from one user message and hands the decoded response body back for
    reply extraction.

Request shapes:
    - Gemini: single `contents` turn, no generation config.
    - OpenAI-compatible (Mistral, Groq): `model`, optional system message, user
      message, `temperature` and `max_tokens`.

Degraded responses:
    A success body without the expected reply path is not an error. Extraction
    returns `None` and the caller substitutes `fallback_reply(config)`.
"""

import logging
from typing import Any, Optional

from chat_relay.llm.provider_config import ProviderConfig, RequestShape


logger = logging.getLogger(__name__)


def build_gemini_payload(config: ProviderConfig, message: str) -> dict:
    return {
        "contents": [
            {"role": "user", "parts": [{"text": message}]}
        ]
    }


def build_openai_payload(config: ProviderConfig, message: str) -> dict:
    messages = []
    if config.system_prompt:
        messages.append({"role": "system", "content": config.system_prompt})
    messages.append({"role": "user", "content": message})

    return {
        "model": config.model_id,
        "messages": messages,
        "temperature": config.temperature,
        "max_tokens": config.max_tokens,
    }


def extract_gemini_reply(data: Any) -> Optional[str]:
    """Return `candidates[0].content.parts[0].text`, or `None` when absent."""
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) else None


def extract_openai_reply(data: Any) -> Optional[str]:
    """Return `choices[0].message.content`, or `None` when absent or empty."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(content, str) or not content:
        return None
    return content


PAYLOAD_BUILDERS = {
    RequestShape.GEMINI: build_gemini_payload,
    RequestShape.OPENAI_COMPATIBLE: build_openai_payload,
}

REPLY_EXTRACTORS = {
    RequestShape.GEMINI: extract_gemini_reply,
    RequestShape.OPENAI_COMPATIBLE: extract_openai_reply,
}


def build_payload(config: ProviderConfig, message: str) -> dict:
    """Build the provider request body for one user message."""
    return PAYLOAD_BUILDERS[config.request_shape](config, message)


def fallback_reply(config: ProviderConfig) -> str:
    return f"I received an unexpected response from {config.display_name}. Please try again."


def extract_reply(config: ProviderConfig, data: Any) -> str:
    """Extract reply text from a decoded success body.

    Returns the provider's nested text field unchanged, or the fixed fallback text
    when the body does not have the expected structure.
    """
    reply = REPLY_EXTRACTORS[config.request_shape](data)
    if reply is None:
        logger.warning(
            "Unexpected %s API response structure: %r", config.display_name, data
        )
        return fallback_reply(config)
    return reply
