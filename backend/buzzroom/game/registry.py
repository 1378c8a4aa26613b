from __future__ import annotations

import logging
import secrets
from threading import RLock

from ..config import Config
from . import service
from .models import Player, Room, RoomConfig

logger = logging.getLogger(__name__)

# app.extensions key
EXTENSION_KEY = "buzzroom.registry"

# No I, L, O, 0 or 1: codes get read aloud and typed from a projector.
ROOM_CODE_ALPHABET = "ABCDEFGHJKMNPQRSTUVWXYZ23456789"


def normalize_code(code) -> str:
    return str(code or "").strip().upper()


def is_valid_code(code: str, length: int | None = None) -> bool:
    length = length or Config.ROOM_CODE_LENGTH
    return len(code) == length and all(ch in ROOM_CODE_ALPHABET for ch in code)


class RoomRegistry:
    """Owns every live room of the process, keyed by room code.

    One instance is created per app and handed to the socket handlers and
    HTTP routes; nothing else holds references to the room map.
    """

    def __init__(
        self,
        code_length: int | None = None,
        default_points_per_part: int | None = None,
    ) -> None:
        self.code_length = code_length or Config.ROOM_CODE_LENGTH
        if default_points_per_part is None:
            default_points_per_part = Config.DEFAULT_POINTS_PER_PART
        self.default_points_per_part = default_points_per_part
        self._lock = RLock()
        self._rooms: dict[str, Room] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)

    def __contains__(self, code) -> bool:
        with self._lock:
            return normalize_code(code) in self._rooms

    def generate_code(self) -> str:
        return "".join(secrets.choice(ROOM_CODE_ALPHABET) for _ in range(self.code_length))

    def _new_room(self, code: str) -> Room:
        room = Room(
            code=code,
            config=RoomConfig(points_per_part=self.default_points_per_part),
            created_at_ms=service.now_ms(),
        )
        self._rooms[code] = room
        return room

    def create_room(self) -> Room:
        with self._lock:
            code = self.generate_code()
            while code in self._rooms:
                code = self.generate_code()

            room = self._new_room(code)
            logger.info("room %s created", code)
            return room

    def get_or_create_room(self, code) -> Room | None:
        """Returns the room for ``code``, creating it if the code is free.

        Malformed codes return None instead of creating a room.
        """
        c = normalize_code(code)
        with self._lock:
            room = self._rooms.get(c)
            if room is not None:
                return room
            if not is_valid_code(c, self.code_length):
                return None
            room = self._new_room(c)
            logger.info("room %s created on join", c)
            return room

    def get_room(self, code) -> Room | None:
        c = normalize_code(code)
        if not c:
            return None
        with self._lock:
            return self._rooms.get(c)

    def join_as_host(self, code, sid: str, create: bool = False) -> Room | None:
        """Registers ``sid`` as a host of a live room, or returns None.

        Runs under the registry lock so the room cannot be discarded between
        the lookup and the membership change.
        """
        with self._lock:
            room = self.get_or_create_room(code) if create else self.get_room(code)
            if room is None:
                return None
            service.add_host(room, sid)
            return room

    def join_as_player(self, code, sid: str, name, max_name_len: int | None = None) -> tuple[Room, Player] | None:
        with self._lock:
            room = self.get_room(code)
            if room is None:
                return None
            return room, service.upsert_player(room, sid, name, max_name_len)

    def delete_room(self, code) -> bool:
        c = normalize_code(code)
        with self._lock:
            if c in self._rooms:
                del self._rooms[c]
                logger.info("room %s deleted", c)
                return True
            return False

    def discard_if_empty(self, room: Room) -> bool:
        """Deletes ``room`` if it has no hosts and no players left."""
        with self._lock, room.lock:
            if room.is_empty() and self._rooms.get(room.code) is room:
                del self._rooms[room.code]
                logger.info("room %s deleted (empty)", room.code)
                return True
            return False

    def list_rooms(self) -> list[Room]:
        with self._lock:
            return list(self._rooms.values())

    def rooms_for_connection(self, sid: str) -> list[Room]:
        return [r for r in self.list_rooms() if r.has_member(sid)]

    def clear(self) -> None:
        with self._lock:
            self._rooms.clear()
