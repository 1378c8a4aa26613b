from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable

from flask import current_app, request
from flask_socketio import SocketIO, emit, join_room, leave_room

from ..game import buzz, service
from ..game.models import Room
from ..game.registry import RoomRegistry, normalize_code
from ..utils.ip import get_client_ip, get_lan_ipv4
from . import events
from .broadcast import Broadcaster

logger = logging.getLogger(__name__)

RoomAction = Callable[[Room, dict], "dict[str, Any] | None"]


def _payload(data) -> dict:
    return data if isinstance(data, dict) else {}


def _room_code(payload: dict) -> str:
    return normalize_code(payload.get("roomCode", ""))


def register_socketio_handlers(
    socketio: SocketIO,
    registry: RoomRegistry,
    broadcaster: Broadcaster | None = None,
) -> Broadcaster:
    broadcaster = broadcaster or Broadcaster(socketio)
    lan_ip = get_lan_ipv4()

    def _fail(error: str) -> dict:
        broadcaster.error(request.sid, error)
        return {"ok": False, "error": error}

    def _drop_connection(room: Room, sid: str) -> None:
        service.remove_connection(room, sid)
        if current_app.config.get("DELETE_EMPTY_ROOMS", True) and registry.discard_if_empty(room):
            return
        broadcaster.safe_state(room)

    def host_command(event: str):
        """Registers a host-only action on an existing room.

        The action mutates the room and returns its ack. A snapshot goes out
        after every action whose ack is ok; failed actions changed nothing.
        """

        def decorator(fn: RoomAction):
            @wraps(fn)
            def handler(data=None):
                payload = _payload(data)
                room = registry.get_room(_room_code(payload))
                if room is None:
                    logger.warning("%s from %s: room %r not found", event, request.sid, payload.get("roomCode"))
                    return _fail(events.ROOM_NOT_FOUND)

                if request.sid not in room.host_connections:
                    logger.warning("%s from %s: not a host of %s", event, request.sid, room.code)
                    return _fail(events.NOT_HOST)

                ack = fn(room, payload) or {"ok": True}
                if ack.get("ok"):
                    broadcaster.state(room)
                return ack

            socketio.on_event(event, handler)
            return handler

        return decorator

    @socketio.on("connect")
    def on_connect(auth=None):
        logger.debug("connect %s from %s", request.sid, get_client_ip(request))
        emit(events.LAN_INFO, {"lanIp": lan_ip, "port": current_app.config.get("PORT")})

    @socketio.on("disconnect")
    def on_disconnect(reason=None):
        for room in registry.rooms_for_connection(request.sid):
            logger.info("disconnect %s from room %s", request.sid, room.code)
            _drop_connection(room, request.sid)

    @socketio.on(events.HOST_CREATE_ROOM)
    def host_create_room(data=None):
        room = registry.create_room()
        join_room(room.code)
        service.add_host(room, request.sid)

        emit(events.ROOM_CREATED, {"roomCode": room.code})
        broadcaster.state(room)
        return {"ok": True, "roomCode": room.code}

    @socketio.on(events.HOST_JOIN_ROOM)
    def host_join_room(data=None):
        payload = _payload(data)
        room_code = _room_code(payload)
        if not room_code:
            return _fail(events.INVALID_PAYLOAD)

        room = registry.join_as_host(room_code, request.sid, create=bool(payload.get("createIfMissing")))
        if room is None:
            return _fail(events.ROOM_NOT_FOUND)

        join_room(room.code)
        logger.info("host %s joined room %s", request.sid, room.code)

        broadcaster.state(room)
        return {"ok": True, "roomCode": room.code}

    @socketio.on(events.PLAYER_JOIN_ROOM)
    def player_join_room(data=None):
        payload = _payload(data)
        room_code = _room_code(payload)
        if not room_code:
            return _fail(events.INVALID_PAYLOAD)

        membership = registry.join_as_player(
            room_code,
            request.sid,
            payload.get("playerName"),
            max_name_len=current_app.config.get("PLAYER_NAME_MAX_LEN"),
        )
        if membership is None:
            return _fail(events.ROOM_NOT_FOUND)

        room, player = membership
        join_room(room.code)
        logger.info("player %s (%s) joined room %s", request.sid, player.name, room.code)

        joined = {"roomCode": room.code, "name": player.name, "playerId": player.id}
        emit(events.PLAYER_JOINED, joined)
        broadcaster.state(room)
        return {"ok": True, **joined}

    @socketio.on(events.ROOM_LEAVE)
    def room_leave(data=None):
        room = registry.get_room(_room_code(_payload(data)))
        if room is None:
            return _fail(events.ROOM_NOT_FOUND)

        leave_room(room.code)
        _drop_connection(room, request.sid)
        return {"ok": True}

    @socketio.on(events.PLAYER_BUZZ)
    def player_buzz(data=None):
        room = registry.get_room(_room_code(_payload(data)))
        if room is None:
            return _fail(events.ROOM_NOT_FOUND)

        cooldown_ms = current_app.config.get("BUZZ_COOLDOWN_MS")
        result = buzz.attempt_buzz(room, request.sid, service.monotonic_ms(), cooldown_ms)

        if result.accepted:
            logger.debug("buzz %s in room %s", request.sid, room.code)
            broadcaster.state(room)
            return {"ok": True, "status": result.status}

        if result.status == "duplicate":
            return {"ok": True, "status": result.status}

        if result.status == "cooldown":
            emit(events.PLAYER_COOLDOWN, {"msRemaining": result.remaining_ms})
            return {"ok": False, "error": result.status, "msRemaining": result.remaining_ms}

        broadcaster.notice(request.sid, "warning", events.ERROR_MESSAGES[result.status])
        return {"ok": False, "error": result.status}

    @host_command(events.HOST_START_ROUND)
    def host_start_round(room: Room, payload: dict):
        number = service.start_round(room)
        logger.info("room %s: round %d started", room.code, number)
        broadcaster.to_room(room.code, events.ROUND_START, {"roomCode": room.code, "roundNumber": number})
        return {"ok": True, "roundNumber": number}

    @host_command(events.HOST_END_ROUND)
    def host_end_round(room: Room, payload: dict):
        number = service.end_round(room)
        logger.info("room %s: round %d ended", room.code, number)
        broadcaster.to_room(room.code, events.ROUND_END, {"roomCode": room.code, "roundNumber": number})
        return {"ok": True, "roundNumber": number}

    @host_command(events.HOST_PART_CORRECT)
    def host_part_correct(room: Room, payload: dict):
        awarded = service.award_partial(room)
        if awarded is None:
            return {"ok": False, "error": events.QUEUE_EMPTY}
        player, points = awarded
        broadcaster.notice(room.code, "info", f"{player.name} +{points} (part)")
        return {"ok": True, "playerId": player.id, "points": points}

    @host_command(events.HOST_FULL_CORRECT)
    def host_full_correct(room: Room, payload: dict):
        awarded = service.award_full(room)
        if awarded is None:
            return {"ok": False, "error": events.QUEUE_EMPTY}
        player, points = awarded
        broadcaster.notice(room.code, "info", f"{player.name} +{points} (full)")
        return {"ok": True, "playerId": player.id, "points": points}

    @host_command(events.HOST_NEXT)
    def host_next(room: Room, payload: dict):
        player = service.skip(room)
        if player is None:
            return {"ok": False, "error": events.QUEUE_EMPTY}
        broadcaster.notice(room.code, "warning", f"{player.name}: no score")
        return {"ok": True, "playerId": player.id}

    @host_command(events.HOST_DQ_NEXT_ROUND)
    def host_dq_next_round(room: Room, payload: dict):
        player = service.disqualify_next_round(room)
        if player is None:
            return {"ok": False, "error": events.QUEUE_EMPTY}
        broadcaster.notice(room.code, "warning", f"{player.name} DQ next round")
        return {"ok": True, "playerId": player.id}

    @host_command(events.CONFIG_UPDATE)
    def config_update(room: Room, payload: dict):
        max_points = current_app.config.get("MAX_POINTS_PER_PART")
        if not service.set_points_per_part(room, payload.get("pointsPerPart"), max_points):
            logger.warning("room %s: rejected pointsPerPart=%r", room.code, payload.get("pointsPerPart"))
            broadcaster.notice(
                request.sid, "error", f"Points per part must be an integer between 0 and {max_points}."
            )
            return {"ok": False, "error": events.INVALID_CONFIG}

        config = {"pointsPerPart": room.config.points_per_part}
        logger.info("room %s: pointsPerPart=%d", room.code, room.config.points_per_part)
        broadcaster.to_room(room.code, events.CONFIG_SYNC, {"roomCode": room.code, "config": config})
        return {"ok": True, "config": config}

    @host_command(events.HOST_NEW_GAME)
    def host_new_game(room: Room, payload: dict):
        service.new_game(room)
        logger.info("room %s: new game", room.code)
        broadcaster.notice(room.code, "info", "New game started.")
        return {"ok": True}

    return broadcaster
