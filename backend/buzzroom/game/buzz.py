from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from ..config import Config
from .models import Room


BuzzStatus = Literal[
    "accepted",
    "duplicate",
    "round_inactive",
    "unknown_player",
    "disqualified",
    "cooldown",
]


@dataclass(frozen=True)
class BuzzResult:
    status: BuzzStatus
    remaining_ms: int = 0

    @property
    def accepted(self) -> bool:
        return self.status == "accepted"

    @property
    def rejected(self) -> bool:
        # A duplicate is ignored, not rejected.
        return self.status not in ("accepted", "duplicate")


def attempt_buzz(room: Room, player_id: str, now: int, cooldown_ms: int | None = None) -> BuzzResult:
    if cooldown_ms is None:
        cooldown_ms = Config.BUZZ_COOLDOWN_MS

    with room.lock:
        if not room.round_active:
            return BuzzResult("round_inactive")

        player = room.players.get(player_id)
        if player is None:
            return BuzzResult("unknown_player")

        if player.dq_this_round:
            return BuzzResult("disqualified")

        last = room.last_buzz_at.get(player_id)
        if last is not None:
            elapsed = now - last
            if elapsed < cooldown_ms:
                return BuzzResult("cooldown", remaining_ms=max(0, cooldown_ms - elapsed))

        if player_id in room.queue:
            return BuzzResult("duplicate")

        room.queue.append(player_id)
        room.last_buzz_at[player_id] = now
        return BuzzResult("accepted")
