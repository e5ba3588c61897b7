"""
Service Errors

Typed failures raised inside the ingestion and results code. They never
cross the public boundary: services and pipelines convert them into the
standard response envelope (status + message + error_code).
"""

from schemas.common import ApiStatus


class ServiceError(Exception):
    """Base class for expected, user-facing failures."""

    status: ApiStatus = ApiStatus.ERROR
    error_code: str = "SERVICE_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DuplicateMatchError(ServiceError):
    """Raised when a game id (or schedule slot) already has a committed match."""

    status = ApiStatus.CONFLICT
    error_code = "DUPLICATE"


class NotFoundError(ServiceError):
    """Raised when a schedule, event, point system or match cannot be resolved."""

    status = ApiStatus.NOT_FOUND
    error_code = "NOT_FOUND"


class MalformedDataError(ServiceError):
    """Raised on telemetry or group/team linkage with an unexpected shape."""

    status = ApiStatus.VALIDATION_ERROR
    error_code = "MALFORMED"
