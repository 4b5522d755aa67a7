# hostel_api/core/interfaces/session_notifier.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class SessionsRevokedEvent:
    user_id: int
    reason: str
    revoked_at_iso: str
    # None = todas as sessões do usuário
    session_ids: tuple[int, ...] | None = None


class SessionNotifier(Protocol):
    def notify_sessions_revoked(self, event: SessionsRevokedEvent) -> None: ...
