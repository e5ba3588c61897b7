"""
Response Envelope

Services, pipelines and routes all answer with the same envelope: a status,
a human-readable message, optional data and a machine-readable error_code.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel

INTERNAL_ERROR = "INTERNAL_ERROR"


class ApiStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    VALIDATION_ERROR = "validation_error"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"


class BaseResponse(BaseModel):
    """
    Envelope every response model extends; subclasses narrow `data`.

    Failures never raise across the service boundary, they come back here
    with a non-success status.
    """
    status: ApiStatus
    message: str
    data: Optional[Any] = None
    error_code: Optional[str] = None

    class Config:
        use_enum_values = True

    @property
    def ok(self) -> bool:
        return self.status == ApiStatus.SUCCESS

    @classmethod
    def from_error(cls, error, **fields):
        """Envelope for a typed failure carrying status, message and error_code."""
        return cls(
            status=error.status,
            message=error.message,
            error_code=error.error_code,
            **fields,
        )

    @classmethod
    def internal_error(cls, message: str, **fields):
        """Envelope for an unexpected failure; details stay in the logs."""
        return cls(
            status=ApiStatus.ERROR,
            message=message,
            error_code=INTERNAL_ERROR,
            **fields,
        )


def error_response(
    message: str,
    status: ApiStatus = ApiStatus.ERROR,
    error_code: Optional[str] = None,
    data: Any = None,
) -> dict:
    """JSON-ready failure envelope for handlers that bypass the response models."""
    return BaseResponse(
        status=status,
        message=message,
        error_code=error_code,
        data=data,
    ).model_dump()
