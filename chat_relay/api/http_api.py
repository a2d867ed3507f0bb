"""
HTTP API adapter for the chat relay.

Architectural role:
- Expose one POST route per provider.
- Parse the JSON body into `ChatRequest`.
- Delegate the relay work to `chat_relay.core.relay.ChatRelay`.
- Convert relay errors into the JSON bodies callers expect.

Endpoint responsibilities:
- `POST /chat`: Gemini.
- `POST /mistral_chat`: Mistral AI.
- `POST /groq_chat`: Groq.

API request lifecycle:
1. Parse request JSON; malformed or non-object bodies count as a missing message.
2. Run `ChatRelay.relay` in a worker thread (the provider call is blocking).
3. Return `{"reply": ...}` on success, or the mapped error body.

Error handling strategy:
- `ValidationError` -> HTTP 400 `{"error": ...}`.
- `ConfigError` -> HTTP 500 `{"reply": "Server error: ..."}`.
- `UpstreamError` and unexpected exceptions -> HTTP 500
  `{"reply": "Oops! There was an issue connecting to <Provider>. Error: ..."}`.
- A malformed provider success body is not an error (200 with fallback text).

Side effects:
- Appends to the relay's message log.
- Serves static files from the configured directory when one is set.
"""

import asyncio
import logging
import os
from pathlib import PurePath
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError as SchemaValidationError

from chat_relay.api.schemas import ChatReply, ChatRequest, ErrorBody
from chat_relay.core.errors import ConfigError, RelayError, UpstreamError, ValidationError
from chat_relay.core.relay import ChatRelay
from chat_relay.llm.provider_config import (
    KEY_FILE_DIR,
    ProviderConfig,
    RelaySettings,
    load_settings,
)


logger = logging.getLogger(__name__)

# Route path -> provider name in the settings' provider table.
PROVIDER_ROUTES = {
    "/chat": "gemini",
    "/mistral_chat": "mistral",
    "/groq_chat": "groq",
}


# ============================================================
# Static Files
# ============================================================

class PublicStaticFiles(StaticFiles):
    """
    `StaticFiles` that refuses dotfiles (`.env`) and the key-file directory.

    Both live in the working directory served by default, and both can hold
    provider credentials.
    """

    def lookup_path(self, path: str):
        for part in PurePath(path).parts:
            if part.startswith(".") or part == KEY_FILE_DIR:
                return "", None
        return super().lookup_path(path)


# ============================================================
# Body Parsing
# ============================================================

async def read_chat_request(request: Request) -> ChatRequest:
    """Parse the body into `ChatRequest`, mapping unusable bodies to no message."""
    try:
        body = await request.json()
    except ValueError:
        return ChatRequest()

    if not isinstance(body, dict):
        return ChatRequest()

    try:
        return ChatRequest.model_validate(body)
    except SchemaValidationError:
        return ChatRequest()


# ============================================================
# Error Mapping
# ============================================================

def connection_error_reply(config: ProviderConfig, message: str) -> str:
    return f"Oops! There was an issue connecting to {config.display_name}. Error: {message}"


def error_response(config: ProviderConfig, exc: Exception) -> JSONResponse:
    """Convert a relay failure into the caller-facing JSON response."""
    if isinstance(exc, ValidationError):
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorBody(error=exc.message).model_dump(),
        )

    if isinstance(exc, ConfigError):
        return JSONResponse(
            status_code=exc.status_code,
            content=ChatReply(reply=exc.message).model_dump(),
        )

    message = exc.message if isinstance(exc, RelayError) else str(exc)
    return JSONResponse(
        status_code=500,
        content=ChatReply(reply=connection_error_reply(config, message)).model_dump(),
    )


# ============================================================
# Route Factory
# ============================================================

def make_chat_endpoint(provider_name: str):
    """Build the POST handler bound to one provider."""

    async def chat_endpoint(request: Request):
        relay: ChatRelay = request.app.state.relay
        config = relay.settings.provider(provider_name)
        chat_request = await read_chat_request(request)

        try:
            reply = await asyncio.to_thread(relay.relay, provider_name, chat_request.message)
        except (ValidationError, ConfigError) as exc:
            return error_response(config, exc)
        except UpstreamError as exc:
            logger.error("Error calling %s API: %s", config.display_name, exc.message)
            return error_response(config, exc)
        except Exception as exc:
            logger.exception("Unexpected failure relaying to %s", config.display_name)
            return error_response(config, exc)

        return ChatReply(reply=reply).model_dump()

    chat_endpoint.__name__ = f"{provider_name}_chat"
    return chat_endpoint


# ============================================================
# Application Factory
# ============================================================

def create_app(
    settings: Optional[RelaySettings] = None,
    relay: Optional[ChatRelay] = None,
    serve_static: bool = True,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Loaded settings; `load_settings()` is used when omitted.
        relay: Pre-built relay (tests inject one with a fake HTTP session). It
            carries its own settings, so passing both raises `ValueError`.
        serve_static: Mount `settings.static_dir` at `/` after the API routes.
    """
    if relay is not None and settings is not None:
        raise ValueError("pass either settings or relay, not both")
    if relay is None:
        settings = settings or load_settings()
        relay = ChatRelay(settings)
    settings = relay.settings

    app = FastAPI(title="Chat Relay", version="0.1.0")
    app.state.relay = relay

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for path, provider_name in PROVIDER_ROUTES.items():
        if provider_name not in settings.providers:
            continue
        app.add_api_route(
            path,
            make_chat_endpoint(provider_name),
            methods=["POST"],
            response_model=ChatReply,
        )

    # Mounted last so API routes take precedence over files of the same path.
    static_dir = settings.static_dir
    if serve_static and static_dir and os.path.isdir(static_dir):
        app.mount("/", PublicStaticFiles(directory=static_dir, html=True), name="static")

    return app
