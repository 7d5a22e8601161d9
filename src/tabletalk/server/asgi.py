"""ASGI entry point for running the tabletalk server via uvicorn CLI.

    python -m uvicorn tabletalk.server.asgi:app --host ... --port ...
"""

from tabletalk.config.loader import load_config
from tabletalk.logging_setup import configure_logging
from tabletalk.server.app import create_app

config = load_config()
configure_logging(config.logging.level)
app = create_app(config)
