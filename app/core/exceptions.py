"""
Domain Exceptions

Services raise these; app.main maps every LMSError to a JSON
response carrying its status code.
"""

from fastapi import status


class LMSError(Exception):
    """Base class for all expected, request-terminating failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request could not be processed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(LMSError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ForbiddenError(LMSError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have permission to perform this action"


class ValidationFailedError(LMSError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class ConcurrencyConflictError(LMSError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "The record was modified by another request"


class AuthenticationError(LMSError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Could not validate credentials"
