# hostel_api/entities/principal.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


@dataclass(frozen=True)
class Principal:
    id: int
    role: Role

    def has_role(self, *roles: Role | str) -> bool:
        return self.role in {Role(r) for r in roles}
