"""
Pipeline Context

Per-run state: the PipelineRun audit row, a logger bound to the run,
timing, the record counter and the payload handed back to the caller.
"""

from __future__ import annotations

import traceback
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Any

import pytz

from core.errors import ServiceError
from core.logging import get_logger
from core.settings import settings
from db.models.pipeline_run import RUN_FAILED, RUN_SUCCESS, PipelineRun
from schemas.common import INTERNAL_ERROR, ApiStatus
from schemas.pipeline import PipelineResult


def _now() -> datetime:
    return datetime.now(pytz.timezone(settings.timezone))


@dataclass
class PipelineContext:
    """
    Usage:
        ctx = PipelineContext("match_ingest", subject=game_id)
        ctx.start_tracking()
        try:
            ctx.increment_records(len(rows))
            ctx.set_result("Game data successfully updated!", match_id=match.id)
            return ctx.mark_success()
        except Exception as e:
            return ctx.mark_failed(e)
    """

    pipeline_name: str
    subject: Optional[str] = None
    run_id: uuid.UUID = field(default_factory=uuid.uuid4)
    started_at: datetime = field(default_factory=_now)
    records_processed: int = 0

    result_message: Optional[str] = None
    result_data: dict[str, Any] = field(default_factory=dict)

    _db_run: Optional[PipelineRun] = field(default=None, repr=False)
    _log: Any = field(default=None, repr=False)

    def __post_init__(self):
        self._log = get_logger("pipeline").bind(
            pipeline=self.pipeline_name,
            subject=self.subject,
        )

    @property
    def log(self):
        return self._log

    def start_tracking(self) -> None:
        """Insert the PipelineRun row; its id becomes the run id."""
        self._db_run = PipelineRun.start_run(self.pipeline_name, subject=self.subject)
        self.run_id = self._db_run.id
        self._log = self._log.bind(run_id=str(self.run_id))
        self._log.info("pipeline_started")

    def increment_records(self, count: int = 1) -> None:
        self.records_processed += count

    def set_result(self, message: str, **data: Any) -> None:
        """Message and payload returned on success."""
        self.result_message = message
        self.result_data.update(data)

    def _result(self, status: ApiStatus, message: str, **fields: Any) -> PipelineResult:
        completed_at = _now()
        return PipelineResult(
            status=status,
            message=message,
            run_id=str(self.run_id),
            started_at=self.started_at.isoformat(),
            completed_at=completed_at.isoformat(),
            duration_seconds=(completed_at - self.started_at).total_seconds(),
            records_processed=self.records_processed,
            **fields,
        )

    def mark_success(self) -> PipelineResult:
        message = self.result_message or f"{self.pipeline_name} completed"
        result = self._result(ApiStatus.SUCCESS, message, data=self.result_data or None)

        if self._db_run:
            self._db_run.finish(RUN_SUCCESS, message, records_processed=self.records_processed)

        self._log.info(
            "pipeline_completed",
            records_processed=self.records_processed,
            duration_seconds=result.duration_seconds,
        )
        return result

    def mark_failed(self, error: Exception) -> PipelineResult:
        """
        Report a failed run.

        ServiceError keeps its status, message and error code. Anything else
        becomes "<pipeline> failed" and is logged with its traceback.
        """
        error_text = f"{type(error).__name__}: {error}"

        if isinstance(error, ServiceError):
            status, message, error_code = error.status, error.message, error.error_code
            self._log.warning("pipeline_rejected", error=message, error_code=error_code)
        else:
            status, message, error_code = ApiStatus.ERROR, f"{self.pipeline_name} failed", INTERNAL_ERROR
            self._log.error("pipeline_failed", error=error_text, traceback=traceback.format_exc())

        # Not counted: the transaction was rolled back
        self.records_processed = 0

        if self._db_run:
            self._db_run.finish(RUN_FAILED, message, error_message=error_text, error_code=error_code)

        return self._result(status, message, error=error_text, error_code=error_code)
