import logging
import os

try:
    from backend.buzzroom.server import create_app
except ImportError:  # pragma: no cover
    from buzzroom.server import create_app

logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())

app, socketio = create_app()
