# hostel_api/infrastructure/security/password_hasher.py

import base64
import hashlib
import hmac
import secrets
from dataclasses import dataclass

from hostel_api.config.settings import settings


@dataclass(frozen=True)
class HashedPassword:
    password_hash: str
    password_salt: str
    algo: str
    iterations: int


class PasswordHasher:
    DEFAULT_ALGO = "pbkdf2_sha256"
    SALT_BYTES = 16
    MIN_LENGTH = 8

    # usado quando o e-mail não existe, para o custo da verificação ser o mesmo
    _DUMMY_SALT = b"\x00" * SALT_BYTES

    @classmethod
    def _derive(cls, password: str, salt: bytes, iterations: int) -> bytes:
        return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)

    @classmethod
    def hash_password(cls, password: str, *, iterations: int | None = None) -> HashedPassword:
        if not password or len(password) < cls.MIN_LENGTH:
            raise ValueError(f"Password must have at least {cls.MIN_LENGTH} characters.")

        it = iterations or settings.password_iterations
        salt = secrets.token_bytes(cls.SALT_BYTES)
        dk = cls._derive(password, salt, it)

        return HashedPassword(
            password_hash=base64.b64encode(dk).decode("utf-8"),
            password_salt=base64.b64encode(salt).decode("utf-8"),
            algo=cls.DEFAULT_ALGO,
            iterations=it,
        )

    @classmethod
    def verify_password(
        cls,
        password: str,
        *,
        password_hash: str,
        password_salt: str,
        iterations: int,
        algo: str,
    ) -> bool:
        if algo != cls.DEFAULT_ALGO:
            return False

        try:
            salt = base64.b64decode(password_salt.encode("utf-8"), validate=True)
            expected = base64.b64decode(password_hash.encode("utf-8"), validate=True)
        except (ValueError, TypeError):
            return False

        return hmac.compare_digest(cls._derive(password, salt, iterations), expected)

    @classmethod
    def burn(cls, password: str) -> None:
        cls._derive(password or "", cls._DUMMY_SALT, settings.password_iterations)
