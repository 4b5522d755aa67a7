# hostel_api/services/session_service.py
"""Ciclo de vida das sessões: login, rotação do refresh token, logout e revogação.

Cada refresh token passa por um único estado terminal (rotated, logout,
logout_all, manual_revoke, expired); nada volta a ficar ativo. A rotação
depende do UPDATE condicional do repositório: com o mesmo segredo
apresentado duas vezes ao mesmo tempo, só uma chamada casa a linha.
"""

import logging

from hostel_api.core.exceptions import NotFoundError, UnauthorizedError
from hostel_api.entities.principal import Role
from hostel_api.entities.session import DeviceInfo, IssuedSession, RevocationReason, SessionView
from hostel_api.infrastructure.database.models.refresh_token_model import RefreshTokenModel
from hostel_api.infrastructure.database.models.user_model import UserModel
from hostel_api.infrastructure.security.jwt_provider import JwtProvider
from hostel_api.services.refresh_token_service import RefreshTokenService
from hostel_api.services.user_service import UserService

logger = logging.getLogger(__name__)

INVALID_REFRESH = "Invalid or expired refresh token."


class RefreshRejectedError(UnauthorizedError):
    # a mensagem é sempre a mesma; o motivo fica só para log/auditoria
    def __init__(self, reason: str, *, user_id: int | None = None, token_id: int | None = None) -> None:
        super().__init__(INVALID_REFRESH)
        self.reason = reason
        self.user_id = user_id
        self.token_id = token_id


def to_view(model: RefreshTokenModel) -> SessionView:
    return SessionView(
        id=model.id,
        user_agent=model.user_agent,
        ip_address=model.ip_address,
        fingerprint=model.fingerprint,
        created_at=model.created_at,
        last_used_at=model.last_used_at,
        expires_at=model.expires_at,
    )


class SessionService:
    def __init__(
        self,
        *,
        jwt_provider: JwtProvider,
        refresh_tokens: RefreshTokenService,
        users: UserService,
    ) -> None:
        self._jwt = jwt_provider
        self._tokens = refresh_tokens
        self._users = users

    def _start(self, user: UserModel, device: DeviceInfo, *, rotated_from_id: int | None = None) -> IssuedSession:
        raw, stored = self._tokens.issue(user_id=user.id, device=device, rotated_from_id=rotated_from_id)
        access = self._jwt.issue_access_token(subject_id=user.id, role=user.role)
        return IssuedSession(
            user=user,
            access_token=access,
            refresh_token=raw,
            session_id=stored.id,
            refresh_ttl=self._tokens.ttl,
        )

    def register(self, *, full_name: str, email: str, password: str, device: DeviceInfo) -> IssuedSession:
        # cadastro público nunca cria admin
        user = self._users.create_user(full_name=full_name, email=email, password=password, role=Role.USER)
        issued = self._start(user, device)
        logger.info("user registered user_id=%s session_id=%s", user.id, issued.session_id)
        return issued

    def login(self, *, email: str, password: str, device: DeviceInfo) -> IssuedSession:
        user = self._users.authenticate(email=email, password=password)
        issued = self._start(user, device)
        logger.info("login user_id=%s session_id=%s", user.id, issued.session_id)
        return issued

    def refresh(self, *, raw_secret: str, device: DeviceInfo) -> IssuedSession:
        if not raw_secret:
            raise RefreshRejectedError("missing")

        try:
            stored = self._tokens.lookup(raw_secret)
        except NotFoundError:
            logger.debug("refresh rejected: unknown token")
            raise RefreshRejectedError("unknown") from None

        now = self._tokens.now()
        if stored.is_expired(now):
            self._tokens.revoke(stored, RevocationReason.EXPIRED)
            logger.debug("refresh rejected: expired token_id=%s", stored.id)
            raise RefreshRejectedError("expired", user_id=stored.user_id, token_id=stored.id)

        if stored.is_revoked:
            if stored.revoked_reason == RevocationReason.ROTATED.value:
                # segredo já rotacionado sendo reapresentado: retry do cliente ou roubo
                logger.warning(
                    "refresh rejected: rotated token reused token_id=%s user_id=%s",
                    stored.id,
                    stored.user_id,
                )
                raise RefreshRejectedError("reused", user_id=stored.user_id, token_id=stored.id)
            logger.debug("refresh rejected: revoked token_id=%s reason=%s", stored.id, stored.revoked_reason)
            raise RefreshRejectedError("revoked", user_id=stored.user_id, token_id=stored.id)

        user = self._users.find_active(stored.user_id)
        if user is None:
            raise RefreshRejectedError("user_inactive", user_id=stored.user_id, token_id=stored.id)

        if not self._tokens.revoke(stored, RevocationReason.ROTATED, mark_used=True):
            # outra requisição rotacionou esta linha primeiro
            logger.info("refresh lost rotation race token_id=%s", stored.id)
            raise RefreshRejectedError("race", user_id=stored.user_id, token_id=stored.id)

        issued = self._start(user, device, rotated_from_id=stored.id)
        logger.info("refresh user_id=%s token_id=%s -> %s", user.id, stored.id, issued.session_id)
        return issued

    def logout(self, *, raw_secret: str | None) -> int | None:
        # idempotente: segredo ausente/desconhecido não é erro
        if not raw_secret:
            return None
        try:
            stored = self._tokens.lookup(raw_secret)
        except NotFoundError:
            return None

        if self._tokens.revoke(stored, RevocationReason.LOGOUT):
            logger.info("logout user_id=%s token_id=%s", stored.user_id, stored.id)
        return stored.user_id

    def revoke_all_sessions(self, *, user_id: int, reason: RevocationReason) -> int:
        count = self._tokens.revoke_all(user_id, reason)
        logger.info("revoked %s sessions user_id=%s reason=%s", count, user_id, reason.value)
        return count

    def logout_all(self, *, user_id: int) -> int:
        return self.revoke_all_sessions(user_id=user_id, reason=RevocationReason.LOGOUT_ALL)

    def list_sessions(self, *, user_id: int) -> list[SessionView]:
        return [to_view(m) for m in self._tokens.list_active(user_id)]

    def revoke_session(self, *, user_id: int, session_id: int) -> None:
        # ausente, de outro usuário ou já inativa: mesma resposta (404)
        stored = self._tokens.get_owned(token_id=session_id, user_id=user_id)
        if stored is None or stored.is_expired(self._tokens.now()):
            raise NotFoundError("Session not found.")

        if not self._tokens.revoke(stored, RevocationReason.MANUAL_REVOKE):
            raise NotFoundError("Session not found.")
        logger.info("session revoked user_id=%s token_id=%s", user_id, session_id)
