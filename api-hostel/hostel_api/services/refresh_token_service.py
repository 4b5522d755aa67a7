# hostel_api/services/refresh_token_service.py

import hashlib
import secrets
from datetime import datetime, timedelta
from typing import Callable

from hostel_api.config.settings import settings
from hostel_api.core.clock import utcnow
from hostel_api.core.exceptions import NotFoundError
from hostel_api.entities.session import DeviceInfo, RevocationReason
from hostel_api.infrastructure.database.models.refresh_token_model import RefreshTokenModel
from hostel_api.repositories.refresh_token_repository import RefreshTokenRepository

SECRET_BYTES = 64


def hash_secret(raw: str) -> str:
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


class RefreshTokenService:
    """Persistência dos refresh tokens (um registro por segredo emitido)."""

    def __init__(
        self,
        *,
        repo: RefreshTokenRepository,
        ttl: timedelta | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._repo = repo
        self._ttl = ttl if ttl is not None else timedelta(days=settings.jwt_refresh_days)
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def now(self) -> datetime:
        return self._clock()

    def issue(
        self,
        *,
        user_id: int,
        device: DeviceInfo,
        rotated_from_id: int | None = None,
    ) -> tuple[str, RefreshTokenModel]:
        raw = secrets.token_hex(SECRET_BYTES)
        now = self._clock()

        model = RefreshTokenModel(
            user_id=user_id,
            token_hash=hash_secret(raw),
            user_agent=device.user_agent,
            ip_address=device.ip_address,
            fingerprint=device.fingerprint,
            rotated_from_id=rotated_from_id,
            created_at=now,
            last_used_at=now,
            expires_at=now + self._ttl,
            is_revoked=False,
            revoked_at=None,
            revoked_reason=None,
        )
        return raw, self._repo.add(model)

    def lookup(self, raw: str) -> RefreshTokenModel:
        stored = self._repo.get_by_hash(hash_secret(raw))
        if stored is None:
            raise NotFoundError("Refresh token not found.")
        return stored

    def revoke(self, model: RefreshTokenModel, reason: RevocationReason, *, mark_used: bool = False) -> bool:
        # False quando já estava revogado: motivo e data da primeira revogação ficam
        return self._repo.revoke_if_active(
            token_id=model.id,
            reason=reason.value,
            now=self._clock(),
            mark_used=mark_used,
        )

    def list_active(self, user_id: int) -> list[RefreshTokenModel]:
        return self._repo.list_active(user_id=user_id, now=self._clock())

    def get_owned(self, *, token_id: int, user_id: int) -> RefreshTokenModel | None:
        return self._repo.get_owned(token_id=token_id, user_id=user_id)

    def revoke_all(self, user_id: int, reason: RevocationReason) -> int:
        return self._repo.revoke_all_active(user_id=user_id, reason=reason.value, now=self._clock())

    def purge_expired(self, now: datetime | None = None) -> int:
        return self._repo.delete_expired(now=now or self._clock())
