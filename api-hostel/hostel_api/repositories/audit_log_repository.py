# hostel_api/repositories/audit_log_repository.py

from __future__ import annotations

from sqlalchemy import select

from hostel_api.core.base_repository import BaseRepository
from hostel_api.infrastructure.database.models.audit_log_model import AuditLogModel


class AuditLogRepository(BaseRepository[AuditLogModel]):
    def list_for_user(self, user_id: int, *, limit: int = 50) -> list[AuditLogModel]:
        stmt = (
            select(AuditLogModel)
            .where(AuditLogModel.user_id == user_id)
            .order_by(AuditLogModel.id.desc())
            .limit(limit)
        )
        return list(self._session.execute(stmt).scalars().all())

    def list_by_action(self, action_name: str, *, limit: int = 50) -> list[AuditLogModel]:
        stmt = (
            select(AuditLogModel)
            .where(AuditLogModel.action_name == action_name)
            .order_by(AuditLogModel.id.desc())
            .limit(limit)
        )
        return list(self._session.execute(stmt).scalars().all())
