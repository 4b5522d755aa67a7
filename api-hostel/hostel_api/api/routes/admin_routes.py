# hostel_api/api/routes/admin_routes.py

from dataclasses import asdict

from flask import Blueprint, jsonify

from hostel_api.api.middlewares.auth_middleware import current_principal, require_auth, require_roles
from hostel_api.api.routes._helpers import (
    build_audit,
    build_session_service,
    build_user_service,
    client_ip,
    notify_revoked,
)
from hostel_api.api.schemas.auth_schema import RevokedCountResponse, SessionResponse
from hostel_api.core.audit.audit_actions import AuditAction
from hostel_api.core.audit.audit_entities import AuditEntity
from hostel_api.entities.principal import Role
from hostel_api.entities.session import RevocationReason
from hostel_api.infrastructure.database.session import db_session

bp_admin = Blueprint("admin", __name__, url_prefix="/admin")


@bp_admin.get("/users/<int:user_id>/sessions")
@require_auth
@require_roles(Role.ADMIN)
def list_user_sessions(user_id: int):
    with db_session() as session:
        build_user_service(session).get_user(user_id)
        views = build_session_service(session).list_sessions(user_id=user_id)

    return jsonify([SessionResponse(**asdict(v)).model_dump(mode="json") for v in views]), 200


@bp_admin.post("/users/<int:user_id>/sessions/revoke")
@require_auth
@require_roles(Role.ADMIN)
def revoke_user_sessions(user_id: int):
    admin = current_principal()

    with db_session() as session:
        build_user_service(session).get_user(user_id)
        count = build_session_service(session).revoke_all_sessions(
            user_id=user_id,
            reason=RevocationReason.MANUAL_REVOKE,
        )
        build_audit(session).log(
            entity_name=AuditEntity.SESSION,
            entity_id=user_id,
            action_name=AuditAction.SESSION_REVOKED,
            user_id=admin.id,
            ip_address=client_ip(),
            details=f"target_user={user_id}; revoked={count}",
        )

    notify_revoked(user_id=user_id, reason=RevocationReason.MANUAL_REVOKE)

    return jsonify(RevokedCountResponse(message="Sessions revoked", revoked=count).model_dump()), 200
