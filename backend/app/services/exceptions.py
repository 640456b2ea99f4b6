"""
Domain exceptions raised by services.

Each exception carries the HTTP status code it maps to; the API layer turns
them into error responses.
"""


class ServiceError(Exception):
    """Base exception for service errors."""
    status_code = 400


class NotFoundError(ServiceError):
    """Raised when a requested record does not exist."""
    status_code = 404


class InvalidRequestError(ServiceError):
    """Raised when a request is well-formed but cannot be applied."""
    status_code = 400


class ConflictError(ServiceError):
    """Raised when a record already exists."""
    status_code = 400


class ForbiddenError(ServiceError):
    """Raised when the acting user may not perform the operation."""
    status_code = 403
