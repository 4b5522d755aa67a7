# hostel_api/infrastructure/database/models/audit_log_model.py

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from hostel_api.infrastructure.database.base_model import BaseModel, PkType


class AuditLogModel(BaseModel):
    """Trilha de eventos de autenticação e sessão (login, refresh, revogações)."""

    __tablename__ = "tbAuthAudit"
    __table_args__ = (
        Index("ix_auth_audit_user_occurred", "user_id", "occurred_at"),
        Index("ix_auth_audit_action", "action_name"),
    )

    id: Mapped[int] = mapped_column(PkType, primary_key=True)

    # AuditEntity / AuditAction
    entity_name: Mapped[str] = mapped_column(String(20), nullable=False)
    entity_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    action_name: Mapped[str] = mapped_column(String(30), nullable=False)

    # None em login com e-mail desconhecido
    user_id: Mapped[int | None] = mapped_column(BigInteger, ForeignKey("tbUsers.id"), nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    details: Mapped[str | None] = mapped_column(Text, nullable=True)

    occurred_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
