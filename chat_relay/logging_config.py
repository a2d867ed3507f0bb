"""Process logging setup.

Called once by `chat_relay.api.main` before the server starts. Library modules
only create module loggers (`logging.getLogger(__name__)`) and never configure
handlers themselves.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stdout handler to the root logger at `level`."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if root.handlers:
        root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
