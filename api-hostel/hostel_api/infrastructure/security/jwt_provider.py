# hostel_api/infrastructure/security/jwt_provider.py

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable
from uuid import uuid4

import jwt

from hostel_api.config.settings import settings
from hostel_api.core.exceptions import TokenExpiredError, TokenMalformedError, TokenSignatureError
from hostel_api.entities.principal import Principal, Role


@dataclass(frozen=True)
class AccessClaims:
    subject_id: int
    role: Role
    issued_at: datetime
    expires_at: datetime

    @property
    def principal(self) -> Principal:
        return Principal(id=self.subject_id, role=self.role)


class JwtProvider:
    """Assina e valida os access tokens (stateless, sem consulta ao banco)."""

    def __init__(
        self,
        *,
        secret: str | None = None,
        access_minutes: int | None = None,
        issuer: str | None = None,
        audience: str | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._secret = secret or settings.jwt_secret
        self._issuer = issuer or settings.jwt_issuer
        self._audience = audience or settings.jwt_audience
        self._access_minutes = access_minutes if access_minutes is not None else settings.jwt_access_minutes
        self._clock = clock or (lambda: datetime.now(tz=timezone.utc))
        self._algorithm = "HS256"

    @property
    def access_ttl(self) -> timedelta:
        return timedelta(minutes=self._access_minutes)

    def issue_access_token(self, *, subject_id: int, role: Role | str) -> str:
        now = self._clock()
        exp = now + self.access_ttl

        claims = {
            "iss": self._issuer,
            "aud": self._audience,
            "sub": str(subject_id),
            "role": Role(role).value,
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
            "jti": uuid4().hex,
            "typ": "access",
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> AccessClaims:
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                audience=self._audience,
                issuer=self._issuer,
                options={"require": ["exp", "iat", "sub", "role", "typ"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError() from e
        except jwt.InvalidSignatureError as e:
            raise TokenSignatureError() from e
        except jwt.InvalidTokenError as e:
            raise TokenMalformedError() from e

        if claims.get("typ") != "access":
            raise TokenMalformedError()

        try:
            return AccessClaims(
                subject_id=int(claims["sub"]),
                role=Role(claims["role"]),
                issued_at=datetime.fromtimestamp(int(claims["iat"]), tz=timezone.utc),
                expires_at=datetime.fromtimestamp(int(claims["exp"]), tz=timezone.utc),
            )
        except (TypeError, ValueError) as e:
            raise TokenMalformedError() from e
