# hostel_api/infrastructure/database/models/refresh_token_model.py

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, CHAR, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from hostel_api.infrastructure.database.base_model import BaseModel, PkType


class RefreshTokenModel(BaseModel):
    __tablename__ = "tbRefreshTokens"
    __table_args__ = (
        Index("ix_tbRefreshTokens_user_active", "user_id", "is_revoked"),
        Index("ix_tbRefreshTokens_expires_at", "expires_at"),
    )

    id: Mapped[int] = mapped_column(PkType, primary_key=True)

    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("tbUsers.id"), nullable=False)

    # sha256 do segredo; o segredo em si nunca é gravado
    token_hash: Mapped[str] = mapped_column(CHAR(64), nullable=False, unique=True)

    user_agent: Mapped[str] = mapped_column(String(512), nullable=True)
    ip_address: Mapped[str] = mapped_column(String(64), nullable=True)
    fingerprint: Mapped[str] = mapped_column(CHAR(32), nullable=True)

    # linhagem da rotação (nulo = login)
    rotated_from_id: Mapped[int] = mapped_column(BigInteger, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    last_used_at: Mapped[datetime] = mapped_column(DateTime, nullable=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    is_revoked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    revoked_at: Mapped[datetime] = mapped_column(DateTime, nullable=True)
    revoked_reason: Mapped[str] = mapped_column(String(20), nullable=True)

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at
