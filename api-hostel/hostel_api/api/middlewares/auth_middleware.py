# hostel_api/api/middlewares/auth_middleware.py
from functools import wraps
from typing import Any, Callable, TypeVar

from flask import g, request

from hostel_api.core.exceptions import ForbiddenError, UnauthorizedError
from hostel_api.entities.principal import Principal, Role
from hostel_api.infrastructure.security.jwt_provider import JwtProvider

F = TypeVar("F", bound=Callable[..., Any])


def _get_bearer_token() -> str:
    auth = request.headers.get("Authorization", "")
    parts = auth.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    raise UnauthorizedError("Missing bearer token.")


def current_principal() -> Principal:
    principal = getattr(g, "principal", None)
    if principal is None:
        raise UnauthorizedError("Missing bearer token.")
    return principal


def require_auth(fn: F) -> F:
    # só assinatura + expiração; access token não é consultado no banco
    @wraps(fn)
    def wrapper(*args, **kwargs):
        claims = JwtProvider().decode(_get_bearer_token())
        g.principal = claims.principal
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_roles(*allowed: Role):
    def decorator(fn: F) -> F:
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not current_principal().has_role(*allowed):
                raise ForbiddenError("Access denied.")
            return fn(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
