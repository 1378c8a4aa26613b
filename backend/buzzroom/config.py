import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    # "" picks eventlet where it works, threading otherwise
    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()

    # Logging
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Server
    HOST = os.environ.get("HOST", "0.0.0.0")
    PORT = int(os.environ.get("PORT", "3000"))

    # Rooms
    ROOM_CODE_LENGTH = int(os.environ.get("ROOM_CODE_LENGTH", "6"))
    DELETE_EMPTY_ROOMS = os.environ.get("DELETE_EMPTY_ROOMS", "1") == "1"

    # Game
    BUZZ_COOLDOWN_MS = int(os.environ.get("BUZZ_COOLDOWN_MS", "300"))
    DEFAULT_POINTS_PER_PART = int(os.environ.get("DEFAULT_POINTS_PER_PART", "5"))
    MAX_POINTS_PER_PART = 100
    PLAYER_NAME_MAX_LEN = 32
    DEFAULT_PLAYER_NAME = "Player"
