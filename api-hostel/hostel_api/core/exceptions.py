# hostel_api/core/exceptions.py

class AppError(Exception):
    def __init__(self, message: str, *, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


class ValidationError(AppError):
    def __init__(self, message: str = "Invalid input") -> None:
        super().__init__(message, status_code=400)


class NotFoundError(AppError):
    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, status_code=404)


class ConflictError(AppError):
    def __init__(self, message: str = "Conflict") -> None:
        super().__init__(message, status_code=409)


class UnauthorizedError(AppError):
    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message, status_code=401)


class TokenMalformedError(UnauthorizedError):
    def __init__(self, message: str = "Malformed token.") -> None:
        super().__init__(message)


class TokenSignatureError(UnauthorizedError):
    def __init__(self, message: str = "Invalid token signature.") -> None:
        super().__init__(message)


class TokenExpiredError(UnauthorizedError):
    def __init__(self, message: str = "Token expired.") -> None:
        super().__init__(message)


class ForbiddenError(AppError):
    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message, status_code=403)


class InfrastructureError(AppError):
    # falha de banco/rede; o cliente pode tentar de novo
    def __init__(self, message: str = "Service temporarily unavailable") -> None:
        super().__init__(message, status_code=503)
