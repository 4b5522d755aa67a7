# hostel_api/entities/session.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hostel_api.infrastructure.database.models.user_model import UserModel


class RevocationReason(str, Enum):
    EXPIRED = "expired"
    ROTATED = "rotated"
    LOGOUT = "logout"
    LOGOUT_ALL = "logout_all"
    MANUAL_REVOKE = "manual_revoke"


@dataclass(frozen=True)
class DeviceInfo:
    user_agent: str
    ip_address: str
    fingerprint: str


@dataclass(frozen=True)
class SessionView:
    id: int
    user_agent: str | None
    ip_address: str | None
    fingerprint: str | None
    created_at: datetime
    last_used_at: datetime | None
    expires_at: datetime


@dataclass(frozen=True)
class IssuedSession:
    user: "UserModel"
    access_token: str
    refresh_token: str
    session_id: int
    # validade do refresh token; o max_age do cookie vem daqui
    refresh_ttl: timedelta
