# hostel_api/services/audit_service.py

import logging

from hostel_api.infrastructure.database.models.audit_log_model import AuditLogModel
from hostel_api.repositories.audit_log_repository import AuditLogRepository

logger = logging.getLogger(__name__)


class AuditService:
    """Grava a trilha na mesma transação da operação auditada."""

    def __init__(self, repo: AuditLogRepository) -> None:
        self._repo = repo

    def log(
        self,
        *,
        entity_name: str,
        action_name: str,
        user_id: int | None,
        entity_id: int | None = None,
        ip_address: str | None = None,
        details: str | None = None,
    ) -> AuditLogModel:
        model = self._repo.add(
            AuditLogModel(
                entity_name=entity_name,
                entity_id=entity_id,
                action_name=action_name,
                user_id=user_id,
                ip_address=ip_address,
                details=details,
            )
        )
        logger.debug("audit %s %s user_id=%s entity_id=%s", entity_name, action_name, user_id, entity_id)
        return model

    def history(self, user_id: int, *, limit: int = 50) -> list[AuditLogModel]:
        return self._repo.list_for_user(user_id, limit=limit)
