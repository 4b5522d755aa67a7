# hostel_api/api/routes/_helpers.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from flask import Response, current_app, request
from sqlalchemy.orm import Session

from hostel_api.config.settings import settings
from hostel_api.core.interfaces.session_notifier import SessionNotifier, SessionsRevokedEvent
from hostel_api.entities.session import DeviceInfo, RevocationReason
from hostel_api.infrastructure.security.device_fingerprint import extract_device_info
from hostel_api.infrastructure.security.jwt_provider import JwtProvider
from hostel_api.repositories.audit_log_repository import AuditLogRepository
from hostel_api.repositories.refresh_token_repository import RefreshTokenRepository
from hostel_api.repositories.user_repository import UserRepository
from hostel_api.services.audit_service import AuditService
from hostel_api.services.refresh_token_service import RefreshTokenService
from hostel_api.services.session_service import SessionService
from hostel_api.services.user_service import UserService

NOTIFIER_EXTENSION = "session_notifier"


def build_user_service(session: Session) -> UserService:
    return UserService(UserRepository(session))


def build_session_service(session: Session) -> SessionService:
    return SessionService(
        jwt_provider=JwtProvider(),
        refresh_tokens=RefreshTokenService(repo=RefreshTokenRepository(session)),
        users=build_user_service(session),
    )


def build_audit(session: Session) -> AuditService:
    return AuditService(AuditLogRepository(session))


def notify_revoked(*, user_id: int, reason: RevocationReason, session_ids: tuple[int, ...] | None = None) -> None:
    notifier: SessionNotifier = current_app.extensions[NOTIFIER_EXTENSION]
    notifier.notify_sessions_revoked(
        SessionsRevokedEvent(
            user_id=user_id,
            reason=reason.value,
            revoked_at_iso=datetime.now(timezone.utc).isoformat(),
            session_ids=session_ids,
        )
    )


def client_ip() -> str | None:
    if settings.trust_proxy_headers:
        forwarded = request.headers.get("X-Forwarded-For", "")
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.remote_addr


def device_from_request() -> DeviceInfo:
    return extract_device_info(request.headers.get("User-Agent"), client_ip())


def read_refresh_cookie() -> str | None:
    return request.cookies.get(settings.refresh_cookie_name) or None


def set_refresh_cookie(response: Response, raw_secret: str, ttl: timedelta) -> None:
    response.set_cookie(
        settings.refresh_cookie_name,
        raw_secret,
        max_age=int(ttl.total_seconds()),
        path=settings.refresh_cookie_path,
        secure=settings.cookie_secure,
        httponly=True,
        samesite=settings.refresh_cookie_samesite,
    )


def clear_refresh_cookie(response: Response) -> None:
    response.delete_cookie(
        settings.refresh_cookie_name,
        path=settings.refresh_cookie_path,
        secure=settings.cookie_secure,
        httponly=True,
        samesite=settings.refresh_cookie_samesite,
    )
