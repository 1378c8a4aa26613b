from __future__ import annotations

import logging

from flask_socketio import SocketIO

from ..game import service
from ..game.models import Room
from . import events

logger = logging.getLogger(__name__)


class Broadcaster:
    """Outbound side of the socket layer.

    Room-wide sends go to the Socket.IO room named by the room code; targeted
    sends go to a single connection id. Delivery is fire-and-forget.
    """

    def __init__(self, socketio: SocketIO) -> None:
        self.socketio = socketio

    def to_room(self, room_code: str, event: str, payload: dict) -> None:
        self.socketio.emit(event, payload, to=room_code)

    def to_connection(self, sid: str, event: str, payload: dict) -> None:
        self.socketio.emit(event, payload, to=sid)

    def notice(self, target: str, severity: str, message: str) -> None:
        """``target`` is a room code or a connection id."""
        self.socketio.emit(events.notice_event(severity), {"message": message}, to=target)

    def error(self, sid: str, error: str) -> None:
        self.notice(sid, "error", events.ERROR_MESSAGES.get(error, error))

    def state(self, room: Room) -> None:
        self.to_room(room.code, events.STATE_SYNC, service.room_public_state(room))

    def safe_state(self, room: Room) -> None:
        try:
            self.state(room)
        except Exception:
            logger.exception("state broadcast failed for room %s", room.code)
