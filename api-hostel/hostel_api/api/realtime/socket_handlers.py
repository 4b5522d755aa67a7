# hostel_api/api/realtime/socket_handlers.py
from __future__ import annotations

import logging

from flask import request
from flask_socketio import ConnectionRefusedError, join_room

from hostel_api.core.exceptions import UnauthorizedError
from hostel_api.infrastructure.realtime.socketio_server import socketio, user_room
from hostel_api.infrastructure.security.jwt_provider import JwtProvider

logger = logging.getLogger(__name__)


def _get_bearer_token(auth: dict | None) -> str | None:
    # 1) socket.io auth payload: {"token": "..."}
    if isinstance(auth, dict) and auth.get("token"):
        return str(auth["token"]).strip()

    # 2) Authorization: Bearer <token>
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header.split(" ", 1)[1].strip()

    # 3) querystring ?token=...
    token = request.args.get("token")
    if token:
        return str(token).strip()

    return None


def register_socket_handlers() -> None:
    @socketio.on("connect")
    def on_connect(auth=None):
        token = _get_bearer_token(auth)
        if not token:
            raise ConnectionRefusedError("unauthorized")

        try:
            claims = JwtProvider().decode(token)
        except UnauthorizedError as e:
            logger.debug("socket auth failed: %s", e)
            raise ConnectionRefusedError("unauthorized") from e

        join_room(user_room(claims.subject_id))
