# hostel_api/api/routes/health_routes.py
import time

from flask import Blueprint, jsonify
from sqlalchemy import func, select, text

from hostel_api.config.settings import settings
from hostel_api.infrastructure.database.models.refresh_token_model import RefreshTokenModel
from hostel_api.infrastructure.database.session import db_session

bp_health = Blueprint("health", __name__, url_prefix="/health")


@bp_health.get("")
def health():
    return jsonify({"status": "ok", "environment": settings.environment}), 200


@bp_health.get("/db")
def health_db():
    # falha de conexão vira 503 (InfrastructureError) no db_session
    started = time.perf_counter()
    with db_session() as session:
        session.execute(text("select 1"))
        # tabela de sessões acessível (migrations aplicadas)
        session.execute(select(func.count()).select_from(RefreshTokenModel).limit(1))
    latency_ms = round((time.perf_counter() - started) * 1000, 2)
    return jsonify({"db": "ok", "latency_ms": latency_ms}), 200
