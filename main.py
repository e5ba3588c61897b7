"""
Battle Stats Core API Server

Match telemetry ingestion, roster validation and tournament leaderboards.

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8001

Environment Variables:
    DATABASE_URL - Database URL (postgres URLs use a connection pool)
    API_TOKEN - Shared bearer token for the write endpoints
    LOG_LEVEL / LOG_FORMAT - Logging configuration
"""

from contextlib import asynccontextmanager
from datetime import datetime

import pytz
from fastapi import FastAPI
from pydantic import BaseModel

from core.correlation_middleware import CorrelationMiddleware
from core.logging import setup_logging, get_logger
from core.middleware import setup_middleware
from core.settings import settings
from db.base import close_db, init_db
from api.v1 import matches, results


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(
        log_level=settings.log_level,
        json_format=settings.log_format == "json",
        service_name=settings.service_name,
    )
    log = get_logger()
    log.info("server_starting", service=settings.service_name)

    init_db(settings.database_url)

    yield

    close_db()
    log.info("server_stopped")


app = FastAPI(
    title="Battle Stats Core",
    description="Match telemetry ingestion and tournament leaderboards",
    version="1.0.0",
    lifespan=lifespan,
)

# Middlewares (first added = outermost)
app.add_middleware(CorrelationMiddleware)
setup_middleware(app)

app.include_router(matches.router, prefix="/v1")
app.include_router(results.router, prefix="/v1")


class HealthResponse(BaseModel):
    status: str
    timestamp: str


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint (no auth required)."""
    now = datetime.now(pytz.timezone(settings.timezone))
    return HealthResponse(status="healthy", timestamp=now.isoformat())


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8001)
