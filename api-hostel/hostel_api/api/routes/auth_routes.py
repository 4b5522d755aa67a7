# hostel_api/api/routes/auth_routes.py

from dataclasses import asdict

from flask import Blueprint, jsonify, request

from hostel_api.api.middlewares.auth_middleware import current_principal, require_auth
from hostel_api.api.routes._helpers import (
    build_audit,
    build_session_service,
    build_user_service,
    clear_refresh_cookie,
    client_ip,
    device_from_request,
    notify_revoked,
    read_refresh_cookie,
    set_refresh_cookie,
)
from hostel_api.api.schemas.auth_schema import (
    AccessTokenResponse,
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    RevokedCountResponse,
    SessionResponse,
    UserResponse,
)
from hostel_api.core.audit.audit_actions import AuditAction
from hostel_api.core.audit.audit_entities import AuditEntity
from hostel_api.core.exceptions import UnauthorizedError
from hostel_api.entities.session import IssuedSession, RevocationReason
from hostel_api.infrastructure.database.session import db_session
from hostel_api.services.session_service import RefreshRejectedError

bp_auth = Blueprint("auth", __name__, url_prefix="/auth")


# -------------------------
# Helpers
# -------------------------

def _user_response(user) -> UserResponse:
    return UserResponse(id=user.id, full_name=user.full_name, email=user.email, role=user.role)


def _issued_response(issued: IssuedSession, status: int):
    body = AuthResponse(user=_user_response(issued.user), access_token=issued.access_token)
    response = jsonify(body.model_dump())
    response.status_code = status
    set_refresh_cookie(response, issued.refresh_token, issued.refresh_ttl)
    return response


# -------------------------
# Rotas públicas
# -------------------------

@bp_auth.post("/register")
def register():
    payload = RegisterRequest.model_validate(request.get_json(force=True))
    device = device_from_request()

    with db_session() as session:
        issued = build_session_service(session).register(
            full_name=payload.full_name,
            email=payload.email,
            password=payload.password,
            device=device,
        )
        build_audit(session).log(
            entity_name=AuditEntity.USER,
            entity_id=issued.user.id,
            action_name=AuditAction.REGISTERED,
            user_id=issued.user.id,
            ip_address=device.ip_address,
        )

    return _issued_response(issued, 201)


@bp_auth.post("/login")
def login():
    payload = LoginRequest.model_validate(request.get_json(force=True))
    device = device_from_request()

    # commit_on: a auditoria da falha é gravada mesmo com o 401
    with db_session(commit_on=(UnauthorizedError,)) as session:
        audit = build_audit(session)
        try:
            issued = build_session_service(session).login(
                email=payload.email,
                password=payload.password,
                device=device,
            )
        except UnauthorizedError:
            audit.log(
                entity_name=AuditEntity.AUTH,
                action_name=AuditAction.LOGIN_FAILED,
                user_id=None,
                ip_address=device.ip_address,
                details=f"email={payload.email}",
            )
            raise

        audit.log(
            entity_name=AuditEntity.AUTH,
            entity_id=issued.session_id,
            action_name=AuditAction.LOGIN_SUCCESS,
            user_id=issued.user.id,
            ip_address=device.ip_address,
        )

    return _issued_response(issued, 200)


@bp_auth.post("/refresh")
def refresh():
    raw = read_refresh_cookie()
    device = device_from_request()

    try:
        with db_session(commit_on=(UnauthorizedError,)) as session:
            audit = build_audit(session)
            try:
                issued = build_session_service(session).refresh(raw_secret=raw or "", device=device)
            except RefreshRejectedError as err:
                audit.log(
                    entity_name=AuditEntity.SESSION,
                    entity_id=err.token_id,
                    action_name=(
                        AuditAction.REFRESH_REUSED if err.reason == "reused" else AuditAction.REFRESH_FAILED
                    ),
                    user_id=err.user_id,
                    ip_address=device.ip_address,
                    details=f"reason={err.reason}",
                )
                raise

            audit.log(
                entity_name=AuditEntity.SESSION,
                entity_id=issued.session_id,
                action_name=AuditAction.REFRESH_SUCCESS,
                user_id=issued.user.id,
                ip_address=device.ip_address,
            )
    except UnauthorizedError as err:
        # refresh falhou: o cliente perde o cookie e precisa logar de novo
        response = jsonify({"error": str(err)})
        response.status_code = 401
        clear_refresh_cookie(response)
        return response

    response = jsonify(AccessTokenResponse(access_token=issued.access_token).model_dump())
    set_refresh_cookie(response, issued.refresh_token, issued.refresh_ttl)
    return response


@bp_auth.post("/logout")
def logout():
    raw = read_refresh_cookie()

    with db_session() as session:
        user_id = build_session_service(session).logout(raw_secret=raw)
        if user_id is not None:
            build_audit(session).log(
                entity_name=AuditEntity.AUTH,
                action_name=AuditAction.LOGOUT,
                user_id=user_id,
                ip_address=client_ip(),
            )

    response = jsonify(MessageResponse(message="Logged out").model_dump())
    clear_refresh_cookie(response)
    return response


# -------------------------
# Rotas autenticadas
# -------------------------

@bp_auth.post("/logout-all")
@require_auth
def logout_all():
    principal = current_principal()

    with db_session() as session:
        count = build_session_service(session).logout_all(user_id=principal.id)
        build_audit(session).log(
            entity_name=AuditEntity.AUTH,
            action_name=AuditAction.LOGOUT_ALL,
            user_id=principal.id,
            ip_address=client_ip(),
            details=f"revoked={count}",
        )

    notify_revoked(user_id=principal.id, reason=RevocationReason.LOGOUT_ALL)

    response = jsonify(RevokedCountResponse(message="Logged out from all devices", revoked=count).model_dump())
    clear_refresh_cookie(response)
    return response


@bp_auth.get("/me")
@require_auth
def me():
    principal = current_principal()

    with db_session() as session:
        user = build_user_service(session).get_user(principal.id)
        body = _user_response(user)

    return jsonify(body.model_dump()), 200


@bp_auth.get("/sessions")
@require_auth
def list_sessions():
    principal = current_principal()

    with db_session() as session:
        views = build_session_service(session).list_sessions(user_id=principal.id)

    items = [SessionResponse(**asdict(v)).model_dump(mode="json") for v in views]
    return jsonify(items), 200


@bp_auth.delete("/sessions/<int:session_id>")
@require_auth
def revoke_session(session_id: int):
    principal = current_principal()

    with db_session() as session:
        build_session_service(session).revoke_session(user_id=principal.id, session_id=session_id)
        build_audit(session).log(
            entity_name=AuditEntity.SESSION,
            entity_id=session_id,
            action_name=AuditAction.SESSION_REVOKED,
            user_id=principal.id,
            ip_address=client_ip(),
        )

    notify_revoked(user_id=principal.id, reason=RevocationReason.MANUAL_REVOKE, session_ids=(session_id,))

    return jsonify(MessageResponse(message="Session revoked").model_dump()), 200
