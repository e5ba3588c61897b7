"""
Structured Logging

structlog setup shared by the API, the ingestion pipelines and the export
script. Every event carries the service name, the component that logged it
and, inside a request, the correlation id of the upload or query.
"""

import logging
import sys
from contextvars import ContextVar
from typing import Any, Optional

import structlog

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

# Chatty third-party loggers kept at WARNING unless running at DEBUG
QUIET_LOGGERS = ("peewee", "uvicorn.access")


def set_correlation_id(cid: str) -> None:
    correlation_id_var.set(cid)


def _correlation_processor(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    cid = correlation_id_var.get()
    if cid:
        event_dict.setdefault("correlation_id", cid)
    return event_dict


def _service_processor(service_name: str) -> structlog.typing.Processor:
    def processor(
        logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict["service"] = service_name
        return event_dict

    return processor


def _renderer(json_format: bool) -> list[structlog.typing.Processor]:
    if json_format:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.plain_traceback)]


def setup_logging(
    log_level: str = "INFO",
    json_format: bool = True,
    service_name: str = "battle-stats-core",
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        json_format: JSON lines when True, coloured console output otherwise
        service_name: Added to every event as "service"
    """
    level = logging.getLevelName(log_level.upper())

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    if level > logging.DEBUG:
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _service_processor(service_name),
            _correlation_processor,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            *_renderer(json_format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """
    Logger for one component; the name is emitted as "component".

        log = get_logger("results")
        log.info("leaderboard_built", matches=3, teams=16)
    """
    log = structlog.get_logger()
    return log.bind(component=name) if name else log
