from flask import Flask

from hostel_api.config.settings import settings

# payloads de auth são pequenos (e-mail, nome, senha)
MAX_BODY_BYTES = 16 * 1024


def configure_app(app: Flask) -> None:
    app.config["DEBUG"] = settings.debug
    app.config["MAX_CONTENT_LENGTH"] = MAX_BODY_BYTES
    app.json.sort_keys = False
