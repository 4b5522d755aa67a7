# hostel_api/main.py
from __future__ import annotations

import eventlet

# ✅ PRECISA ser o primeiro comando do arquivo
eventlet.monkey_patch()

from hostel_api import create_app  # noqa: E402
from hostel_api.config.settings import settings  # noqa: E402
from hostel_api.infrastructure.realtime.socketio_server import socketio  # noqa: E402

app = create_app()

if __name__ == "__main__":
    # em produção: gunicorn -k eventlet -w 1 hostel_api.main:app
    socketio.run(app, host="0.0.0.0", port=5000, debug=settings.debug)
