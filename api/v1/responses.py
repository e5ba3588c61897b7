"""
Route helpers.

Services report failures in the body; routes mirror the envelope status in
the HTTP status code so clients can branch on either.
"""

import asyncio
from typing import Callable

from fastapi import Response

from db.base import thread_connection
from schemas.common import ApiStatus

HTTP_STATUS_BY_API_STATUS = {
    ApiStatus.SUCCESS.value: 200,
    ApiStatus.VALIDATION_ERROR.value: 422,
    ApiStatus.NOT_FOUND.value: 404,
    ApiStatus.CONFLICT.value: 409,
    ApiStatus.ERROR.value: 500,
}


def apply_status(response: Response, result):
    """Set the HTTP status code from result.status and return result."""
    response.status_code = HTTP_STATUS_BY_API_STATUS.get(result.status, 500)
    return result


def _with_connection(func: Callable, *args):
    with thread_connection():
        return func(*args)


async def run_blocking(func: Callable, *args):
    """
    Run a synchronous service call in a worker thread.

    Peewee connections are thread-local, so the worker opens its own
    connection and releases it when the call returns.
    """
    return await asyncio.to_thread(_with_connection, func, *args)
