from typing import Any, Dict, Optional


class AppException(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 400,
        error_code: str = "BUSINESS_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)


class InvalidRequestError(AppException):
    def __init__(self, message: str = "Dados inválidos", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=400,
            error_code="INVALID_REQUEST",
            details=details
        )


class AuthenticationError(AppException):
    def __init__(self, message: str = "Credenciais inválidas"):
        super().__init__(
            message=message,
            status_code=401,
            error_code="AUTH_FAILED"
        )


class InvalidTokenError(AuthenticationError):
    """Bad signature, malformed payload, wrong issuer or expired token."""
    def __init__(self, message: str = "Token inválido ou expirado"):
        super().__init__(message=message)
        self.error_code = "INVALID_TOKEN"


class AccessDeniedError(AppException):
    """Custom permission error. Named AccessDeniedError to avoid shadowing Python's built-in PermissionError."""
    def __init__(self, message: str = "Acesso negado", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=403,
            error_code="PERMISSION_DENIED",
            details=details
        )


class NotFoundError(AppException):
    def __init__(self, message: str = "Recurso não encontrado"):
        super().__init__(
            message=message,
            status_code=404,
            error_code="NOT_FOUND"
        )


class ConflictError(AppException):
    def __init__(self, message: str):
        super().__init__(
            message=message,
            status_code=409,
            error_code="CONFLICT"
        )


class InternalError(AppException):
    def __init__(self, message: str = "Erro interno do servidor"):
        super().__init__(
            message=message,
            status_code=500,
            error_code="INTERNAL_ERROR"
        )


class MalformedHashError(Exception):
    """Stored password hash is not a recognizable bcrypt hash."""


class MigrationError(Exception):
    def __init__(self, migration_id: str, cause: Exception):
        self.migration_id = migration_id
        self.cause = cause
        super().__init__(f"Migration {migration_id} failed: {cause}")
