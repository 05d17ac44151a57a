"""Error taxonomy shared by the components and the REST layer."""

from typing import Optional

from fastapi import status


class AppError(Exception):
    """Base error translated into a ``{success: false, message}`` envelope."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class TokenError(Unauthorized):
    default_message = "Invalid token"


class TokenInvalid(TokenError):
    pass


class TokenExpired(TokenError):
    pass


class InsertFailed(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Failed to add transaction"


class AggregationFailed(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Failed to fetch transactions"


class HashError(AppError):
    default_message = "Password hashing failed"


class ConfigurationError(RuntimeError):
    """Fatal misconfiguration detected at startup."""
