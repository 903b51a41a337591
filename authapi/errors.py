"""Application errors carrying the HTTP status they are reported with."""

from fastapi import status


class AppError(Exception):
    """Base error turned into a ``{"success": false, "error": ...}`` response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    """Bad or duplicate input."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(AppError):
    """Bad credentials, bad token or missing authentication."""

    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class DeliveryError(AppError):
    """Outbound mail could not be handed to the transport."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
