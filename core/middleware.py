"""
HTTP error handling and CORS.

Errors raised before a route runs (body validation, authentication) are
returned in the same envelope the services use.
"""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.logging import get_logger
from core.settings import settings
from schemas.common import ApiStatus, error_response

log = get_logger("middleware")

ERROR_CODE_BY_HTTP_STATUS = {
    401: "UNAUTHORIZED",
    403: "UNAUTHORIZED",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def setup_middleware(app: FastAPI):
    """Register the envelope exception handlers and CORS."""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        log.warning("request_validation_failed", url=str(request.url), errors=exc.errors())
        return JSONResponse(
            status_code=422,
            content=error_response(
                message="Request validation failed",
                status=ApiStatus.VALIDATION_ERROR,
                error_code="VALIDATION_ERROR",
                data={"errors": jsonable_encoder(exc.errors())},
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        status = ApiStatus.NOT_FOUND if exc.status_code == 404 else ApiStatus.ERROR
        log.info("request_rejected", url=str(request.url), status_code=exc.status_code)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(
                message=str(exc.detail),
                status=status,
                error_code=ERROR_CODE_BY_HTTP_STATUS.get(exc.status_code, "HTTP_ERROR"),
            ),
            headers=getattr(exc, "headers", None),
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
