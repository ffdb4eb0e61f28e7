from fastapi import status


class AppError(Exception):
    """Base for errors that carry a user-facing message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Missing field, empty/invalid file or unsupported file type."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class QuotaExceededError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class RemoteGenerationError(AppError):
    """The generation backend could not be reached or returned a bad answer."""

    status_code = status.HTTP_502_BAD_GATEWAY
