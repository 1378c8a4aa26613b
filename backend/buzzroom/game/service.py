from __future__ import annotations

import math
import time
import unicodedata

from ..config import Config
from .models import Player, Room


def now_ms() -> int:
    return int(time.time() * 1000)


def monotonic_ms() -> int:
    """Clock for cooldowns; never steps backwards when the wall clock is adjusted."""
    return int(time.monotonic() * 1000)


def sanitize_name(raw, max_len: int | None = None) -> str:
    max_len = max_len or Config.PLAYER_NAME_MAX_LEN
    name = "".join(ch for ch in str(raw or "") if unicodedata.category(ch) != "Cc")
    name = name.strip()[:max_len].strip()
    return name or Config.DEFAULT_PLAYER_NAME


def parse_points_per_part(raw, max_points: int | None = None) -> int | None:
    """Returns the value as an int in range, or None if it is not acceptable."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        try:
            raw = float(raw.strip())
        except ValueError:
            return None
    if isinstance(raw, float):
        if not math.isfinite(raw) or not raw.is_integer():
            return None
        raw = int(raw)
    if not isinstance(raw, int):
        return None
    if max_points is None:
        max_points = Config.MAX_POINTS_PER_PART
    if raw < 0 or raw > max_points:
        return None
    return raw


# Membership


def add_host(room: Room, socket_id: str) -> None:
    with room.lock:
        room.host_connections.add(socket_id)


def upsert_player(room: Room, socket_id: str, name, max_name_len: int | None = None) -> Player:
    with room.lock:
        clean = sanitize_name(name, max_name_len)
        player = room.players.get(socket_id)
        if player is None:
            player = Player(id=socket_id, name=clean)
            room.players[socket_id] = player
        else:
            player.name = clean
        return player


def remove_connection(room: Room, socket_id: str) -> bool:
    """Drops a connection from every role it holds in the room.

    Returns True if the connection was a member.
    """
    with room.lock:
        was_member = room.has_member(socket_id)
        room.host_connections.discard(socket_id)
        room.players.pop(socket_id, None)
        room.last_buzz_at.pop(socket_id, None)
        if socket_id in room.queue:
            room.queue.remove(socket_id)
        return was_member


# Round lifecycle


def start_round(room: Room) -> int:
    with room.lock:
        room.round_active = True
        room.round_number += 1
        room.queue = []
        room.last_buzz_at = {}

        # A DQ is a one round penalty: it becomes active now and is spent.
        for p in room.players.values():
            p.dq_this_round = p.dq_next_round
            p.dq_next_round = False

        return room.round_number


def end_round(room: Room) -> int:
    with room.lock:
        room.round_active = False
        room.queue = []
        for p in room.players.values():
            p.dq_this_round = False
        return room.round_number


def new_game(room: Room) -> None:
    with room.lock:
        room.round_active = False
        room.round_number = 0
        room.queue = []
        room.last_buzz_at = {}
        for p in room.players.values():
            p.score = 0
            p.dq_next_round = False
            p.dq_this_round = False


def set_points_per_part(room: Room, raw, max_points: int | None = None) -> bool:
    points = parse_points_per_part(raw, max_points)
    if points is None:
        return False
    with room.lock:
        room.config.points_per_part = points
        return True


# Queue adjudication


def _queue_head(room: Room) -> Player | None:
    while room.queue:
        player = room.players.get(room.queue[0])
        if player is not None:
            return player
        room.queue.pop(0)
    return None


def award_partial(room: Room) -> tuple[Player, int] | None:
    with room.lock:
        player = _queue_head(room)
        if player is None:
            return None
        points = room.config.points_per_part
        player.score += points
        return player, points


def award_full(room: Room) -> tuple[Player, int] | None:
    with room.lock:
        player = _queue_head(room)
        if player is None:
            return None
        points = room.config.points_per_part * 2
        player.score += points
        room.queue.pop(0)
        return player, points


def skip(room: Room) -> Player | None:
    with room.lock:
        player = _queue_head(room)
        if player is None:
            return None
        room.queue.pop(0)
        return player


def disqualify_next_round(room: Room) -> Player | None:
    with room.lock:
        player = _queue_head(room)
        if player is None:
            return None
        player.dq_next_round = True
        room.queue.pop(0)
        return player


# Snapshot


def leaderboard(room: Room) -> list[dict]:
    with room.lock:
        ranked = sorted(room.players.values(), key=lambda p: (-p.score, p.name.casefold(), p.name, p.id))
        return [
            {
                "playerId": p.id,
                "name": p.name,
                "score": p.score,
                "dqThisRound": p.dq_this_round,
                "dqNextRound": p.dq_next_round,
            }
            for p in ranked
        ]


def room_public_state(room: Room) -> dict:
    with room.lock:
        queue = [
            {"playerId": pid, "name": room.players[pid].name}
            for pid in room.queue
            if pid in room.players
        ]

        return {
            "code": room.code,
            "roundActive": room.round_active,
            "roundNumber": room.round_number,
            "queue": queue,
            "leaderboard": leaderboard(room),
            "config": {"pointsPerPart": room.config.points_per_part},
            "hostCount": len(room.host_connections),
            "playerCount": len(room.players),
        }
