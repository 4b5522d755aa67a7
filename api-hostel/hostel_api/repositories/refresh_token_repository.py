# hostel_api/repositories/refresh_token_repository.py

from datetime import datetime

from sqlalchemy import delete, select, update

from hostel_api.core.base_repository import BaseRepository
from hostel_api.infrastructure.database.models.refresh_token_model import RefreshTokenModel


class RefreshTokenRepository(BaseRepository[RefreshTokenModel]):
    # UPDATEs abaixo não sincronizam a sessão; os SELECTs sempre recarregam do banco

    def _one(self, *criteria) -> RefreshTokenModel | None:
        stmt = (
            select(RefreshTokenModel)
            .where(*criteria)
            .execution_options(populate_existing=True)
        )
        return self._session.execute(stmt).scalar_one_or_none()

    def get_by_hash(self, token_hash: str) -> RefreshTokenModel | None:
        # sem filtrar revogados: quem chama precisa distinguir "revogado" de "inexistente"
        return self._one(RefreshTokenModel.token_hash == token_hash)

    def get_by_id(self, token_id: int) -> RefreshTokenModel | None:
        return self._one(RefreshTokenModel.id == token_id)

    def get_owned(self, *, token_id: int, user_id: int) -> RefreshTokenModel | None:
        return self._one(RefreshTokenModel.id == token_id, RefreshTokenModel.user_id == user_id)

    def list_active(self, *, user_id: int, now: datetime) -> list[RefreshTokenModel]:
        stmt = (
            select(RefreshTokenModel)
            .where(
                RefreshTokenModel.user_id == user_id,
                RefreshTokenModel.is_revoked.is_(False),
                RefreshTokenModel.expires_at > now,
            )
            .order_by(RefreshTokenModel.created_at.desc(), RefreshTokenModel.id.desc())
            .execution_options(populate_existing=True)
        )
        return list(self._session.execute(stmt).scalars().all())

    def revoke_if_active(
        self,
        *,
        token_id: int,
        reason: str,
        now: datetime,
        mark_used: bool = False,
    ) -> bool:
        # UPDATE condicional: só uma transação concorrente consegue casar a linha
        values = {"is_revoked": True, "revoked_at": now, "revoked_reason": reason}
        if mark_used:
            values["last_used_at"] = now

        stmt = (
            update(RefreshTokenModel)
            .where(RefreshTokenModel.id == token_id, RefreshTokenModel.is_revoked.is_(False))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = self._session.execute(stmt)
        return (result.rowcount or 0) == 1

    def revoke_all_active(self, *, user_id: int, reason: str, now: datetime) -> int:
        stmt = (
            update(RefreshTokenModel)
            .where(RefreshTokenModel.user_id == user_id, RefreshTokenModel.is_revoked.is_(False))
            .values(is_revoked=True, revoked_at=now, revoked_reason=reason)
            .execution_options(synchronize_session=False)
        )
        result = self._session.execute(stmt)
        return int(result.rowcount or 0)

    def delete_expired(self, *, now: datetime) -> int:
        stmt = (
            delete(RefreshTokenModel)
            .where(RefreshTokenModel.expires_at < now)
            .execution_options(synchronize_session=False)
        )
        result = self._session.execute(stmt)
        return int(result.rowcount or 0)
