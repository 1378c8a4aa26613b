from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from ..game import service
from ..game.registry import EXTENSION_KEY

bp = Blueprint("rooms", __name__)


@bp.get("/rooms/<code>")
def get_room(code: str):
    room = current_app.extensions[EXTENSION_KEY].get_room(code)
    if not room:
        return jsonify({"error": "room_not_found"}), 404
    return jsonify(service.room_public_state(room))
