"""Error taxonomy shared by the services and the HTTP layer.

Every error carries the status code it maps to and a message that is safe to
return to the caller. Store and hashing details are logged where they happen
and never travel inside these exceptions.
"""

from fastapi import status


class ServiceError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    headers: dict[str, str] | None = None

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """The client omitted a required field."""
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(ServiceError):
    """Unknown email or wrong password. Both cases look the same."""
    status_code = status.HTTP_401_UNAUTHORIZED


class UnauthenticatedError(ServiceError):
    """No bearer token was supplied."""
    status_code = status.HTTP_401_UNAUTHORIZED
    headers = {"WWW-Authenticate": "Bearer"}


class ForbiddenError(ServiceError):
    """A bearer token was supplied but is invalid or expired."""
    status_code = status.HTTP_403_FORBIDDEN


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT


class InternalError(ServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
