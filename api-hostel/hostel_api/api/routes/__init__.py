# hostel_api/api/routes/__init__.py

from flask import Flask

from hostel_api.api.routes.admin_routes import bp_admin
from hostel_api.api.routes.auth_routes import bp_auth
from hostel_api.api.routes.health_routes import bp_health


def register_routes(app: Flask, *, api_prefix: str, app_prefix: str) -> None:
    # health fora de /api (mas dentro do app)
    app.register_blueprint(bp_health, url_prefix=f"{app_prefix}/health")

    app.register_blueprint(bp_auth, url_prefix=f"{api_prefix}/auth")
    app.register_blueprint(bp_admin, url_prefix=f"{api_prefix}/admin")
