# hostel_api/infrastructure/realtime/socketio_session_notifier.py
from __future__ import annotations

from hostel_api.core.interfaces.session_notifier import SessionNotifier, SessionsRevokedEvent
from hostel_api.infrastructure.realtime.socketio_server import socketio, user_room


class SocketIOSessionNotifier(SessionNotifier):
    def notify_sessions_revoked(self, event: SessionsRevokedEvent) -> None:
        payload = {
            "user_id": event.user_id,
            "session_ids": list(event.session_ids) if event.session_ids is not None else None,
            "reason": event.reason,
            "revoked_at": event.revoked_at_iso,
        }
        socketio.emit("session:revoked", payload, to=user_room(event.user_id))
