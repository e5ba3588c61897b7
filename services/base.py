"""
Service Boundary

Decorator that turns typed failures raised inside a service function into
the standard response envelope, so callers only ever see a response model.
"""

import traceback
from functools import wraps
from typing import Callable, Type, TypeVar

from core.errors import ServiceError
from core.logging import get_logger
from schemas.common import BaseResponse

log = get_logger("service")

ResponseT = TypeVar("ResponseT", bound=BaseResponse)


def service_call(
    failure_message: str,
    response_model: Type[ResponseT],
) -> Callable[[Callable[..., ResponseT]], Callable[..., ResponseT]]:
    """
    Wrap a service function so it never raises.

    ServiceError subclasses keep their status, message and error code.
    Anything else is logged with its traceback and reported as
    failure_message.
    """

    def decorator(func: Callable[..., ResponseT]) -> Callable[..., ResponseT]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> ResponseT:
            try:
                return func(*args, **kwargs)
            except ServiceError as e:
                log.info(
                    "service_rejected",
                    operation=func.__name__,
                    error=e.message,
                    error_code=e.error_code,
                )
                return response_model.from_error(e)
            except Exception as e:
                log.error(
                    "service_failed",
                    operation=func.__name__,
                    error=f"{type(e).__name__}: {e}",
                    traceback=traceback.format_exc(),
                )
                return response_model.internal_error(failure_message)

        return wrapper

    return decorator
