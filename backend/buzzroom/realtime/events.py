# Inbound (host)
HOST_CREATE_ROOM = "host:createRoom"
HOST_JOIN_ROOM = "host:joinRoom"
HOST_START_ROUND = "host:startRound"
HOST_END_ROUND = "host:endRound"
HOST_PART_CORRECT = "host:actionPartCorrect"
HOST_FULL_CORRECT = "host:actionFullCorrect"
HOST_NEXT = "host:actionNext"
HOST_DQ_NEXT_ROUND = "host:actionDQNextRound"
HOST_NEW_GAME = "host:newGame"
CONFIG_UPDATE = "config:update"

# Inbound (player / any)
PLAYER_JOIN_ROOM = "player:joinRoom"
PLAYER_BUZZ = "player:buzz"
ROOM_LEAVE = "room:leave"

# Outbound
ROOM_CREATED = "host:roomCreated"
STATE_SYNC = "state:sync"
ROUND_START = "round:start"
ROUND_END = "round:end"
CONFIG_SYNC = "config:sync"
PLAYER_JOINED = "player:joined"
PLAYER_COOLDOWN = "player:cooldown"
LAN_INFO = "server:lanInfo"

NOTICE_SEVERITIES = ("info", "warning", "error")

# Error codes carried in acks and error notices
ROOM_NOT_FOUND = "room_not_found"
NOT_HOST = "not_host"
INVALID_PAYLOAD = "invalid_payload"
INVALID_CONFIG = "invalid_config"
QUEUE_EMPTY = "queue_empty"

ERROR_MESSAGES = {
    ROOM_NOT_FOUND: "Room not found.",
    NOT_HOST: "Only a host of this room can do that.",
    INVALID_PAYLOAD: "Invalid request.",
    "round_inactive": "No round is active.",
    "unknown_player": "Join the room before buzzing.",
    "disqualified": "You are disqualified for this round.",
}


def notice_event(severity: str) -> str:
    if severity not in NOTICE_SEVERITIES:
        raise ValueError(f"unknown notice severity: {severity!r}")
    return f"toast:{severity}"
