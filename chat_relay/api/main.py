"""
Server entrypoint for the chat relay.

Startup sequence:
1. Load settings from `.env` and the process environment.
2. Configure logging at the configured level.
3. Build the FastAPI app and log the startup banner.
4. Run `uvicorn` until interrupted.

Missing API keys do not stop startup; each one disables only its own route and
is reported in the banner.
"""

import logging

import uvicorn

from chat_relay.api.http_api import create_app
from chat_relay.llm.provider_config import RelaySettings, load_settings
from chat_relay.logging_config import configure_logging


logger = logging.getLogger(__name__)


def log_startup_banner(settings: RelaySettings) -> None:
    """Report the listening address and any provider without a credential."""
    logger.info("Backend server listening at http://localhost:%s", settings.port)
    logger.info(
        "Open http://localhost:%s/frontpage.html in your browser to start.",
        settings.port,
    )
    for name in settings.missing_keys():
        config = settings.provider(name)
        logger.warning(
            "%s is not set; the %s route will answer with a configuration error.",
            config.api_key_env,
            config.display_name,
        )


def main():
    settings = load_settings()
    configure_logging(settings.log_level)

    app = create_app(settings)
    log_startup_banner(settings)

    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
