# hostel_api/__init__.py
from __future__ import annotations

import logging

from flask import Flask
from flask_cors import CORS

from hostel_api.config.settings import settings
from hostel_api.core.interfaces.session_notifier import SessionNotifier

import hostel_api.infrastructure.database.models  # noqa: F401


def _configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(*, session_notifier: SessionNotifier | None = None) -> Flask:
    from hostel_api.api.middlewares.error_handler import register_error_handlers
    from hostel_api.api.realtime.socket_handlers import register_socket_handlers
    from hostel_api.api.routes import register_routes
    from hostel_api.api.routes._helpers import NOTIFIER_EXTENSION
    from hostel_api.cli import register_commands
    from hostel_api.config.flask_config import configure_app
    from hostel_api.infrastructure.realtime.socketio_server import socketio
    from hostel_api.infrastructure.realtime.socketio_session_notifier import SocketIOSessionNotifier

    _configure_logging()

    app = Flask(__name__)

    app_prefix = settings.app_prefix.rstrip("/")
    api_prefix = settings.api_prefix

    # credentials: o refresh token vai em cookie
    CORS(
        app,
        resources={rf"{api_prefix}/*": {"origins": settings.cors_origins}},
        supports_credentials=True,
        allow_headers=["Content-Type", "Authorization"],
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    )

    configure_app(app)

    register_routes(app, api_prefix=api_prefix, app_prefix=app_prefix)
    register_error_handlers(app)
    register_commands(app)

    app.extensions[NOTIFIER_EXTENSION] = session_notifier or SocketIOSessionNotifier()

    socketio.init_app(app, path=f"{app_prefix}/socket.io")
    register_socket_handlers()

    return app
