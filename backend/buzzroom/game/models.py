from __future__ import annotations

from dataclasses import dataclass, field
from threading import RLock

from ..config import Config


@dataclass
class Player:
    id: str
    name: str = Config.DEFAULT_PLAYER_NAME
    score: int = 0
    dq_next_round: bool = False
    dq_this_round: bool = False


@dataclass
class RoomConfig:
    points_per_part: int = Config.DEFAULT_POINTS_PER_PART


@dataclass
class Room:
    code: str
    round_active: bool = False
    round_number: int = 0
    # Player ids in buzz order for the current round.
    queue: list[str] = field(default_factory=list)
    players: dict[str, Player] = field(default_factory=dict)
    host_connections: set[str] = field(default_factory=set)
    # Player id -> ms timestamp of the last accepted buzz.
    last_buzz_at: dict[str, int] = field(default_factory=dict)
    config: RoomConfig = field(default_factory=RoomConfig)
    created_at_ms: int | None = None
    lock: RLock = field(default_factory=RLock, repr=False, compare=False)

    def is_empty(self) -> bool:
        return not self.host_connections and not self.players

    def has_member(self, sid: str) -> bool:
        return sid in self.host_connections or sid in self.players
