"""
Pipeline Registry and Exports

Entry points for match ingestion and stat re-derivation. Both return the
standard response envelope; failures never raise to the caller.
"""

import asyncio
from typing import Any, Type

from core.errors import MalformedDataError
from core.logging import get_logger
from db.models.pipeline_run import PipelineRun
from pipelines.base import BasePipeline
from pipelines.config import PipelineConfig
from pipelines.context import PipelineContext
from pipelines.match_ingest import MatchIngestPipeline
from pipelines.team_stats import TeamStatsPipeline, derive_match_stats, resolve_team_ids
from schemas.pipeline import PipelineInfo, PipelineResult, PipelineRunInfo
from schemas.results import IngestData, IngestResponse
from schemas.telemetry import MatchTelemetry

log = get_logger("pipeline")


# Registry of all available pipelines
PIPELINE_REGISTRY: dict[str, Type[BasePipeline]] = {
    "match_ingest": MatchIngestPipeline,
    "team_stats": TeamStatsPipeline,
}


def _to_ingest_response(result: PipelineResult) -> IngestResponse:
    data = None
    if result.ok and result.data:
        data = IngestData(
            **result.data,
            run_id=result.run_id,
            duration_seconds=result.duration_seconds,
        )
    return IngestResponse(
        status=result.status,
        message=result.message,
        data=data,
        error_code=result.error_code,
    )


def ingest_match_sync(telemetry: Any, schedule_id: int) -> IngestResponse:
    """
    Validate telemetry and ingest it for a schedule, in the calling thread.

    Args:
        telemetry: Raw telemetry (decoded JSON) or a MatchTelemetry
        schedule_id: Schedule slot the game was played for

    Returns:
        IngestResponse; duplicate, missing and malformed inputs come back
        as non-success statuses
    """
    try:
        parsed = MatchTelemetry.from_payload(telemetry)
    except MalformedDataError as e:
        log.warning("telemetry_rejected", schedule_id=schedule_id, error=e.message)
        return IngestResponse.from_error(e)

    result = MatchIngestPipeline(parsed, schedule_id).run_sync()
    return _to_ingest_response(result)


async def ingest_match(telemetry: Any, schedule_id: int) -> IngestResponse:
    """Async entry point: ingestion runs in a worker thread."""
    return await asyncio.to_thread(ingest_match_sync, telemetry, schedule_id)


def rederive_match_stats_sync(match_id: int) -> IngestResponse:
    """Recompute a match's stat rows from its stored telemetry snapshot."""
    result = TeamStatsPipeline(match_id).run_sync()
    return _to_ingest_response(result)


async def rederive_match_stats(match_id: int) -> IngestResponse:
    """Async entry point for re-derivation."""
    result = await TeamStatsPipeline(match_id).run()
    return _to_ingest_response(result)


def list_runs(subject: str) -> list[PipelineRunInfo]:
    """Audit history of the runs that touched a game id or match."""
    return [
        PipelineRunInfo(
            run_id=str(run.id),
            pipeline_name=run.pipeline_name,
            subject=run.subject,
            status=run.status,
            message=run.message,
            started_at=run.started_at.isoformat(),
            completed_at=run.completed_at.isoformat() if run.completed_at else None,
            duration_seconds=run.duration_seconds,
            records_processed=run.records_processed,
            error=run.error_message,
            error_code=run.error_code,
        )
        for run in PipelineRun.history_for(subject)
    ]


def list_pipelines() -> list[PipelineInfo]:
    """Registered pipelines with the tables they write."""
    return [PipelineInfo(**cls.get_info()) for cls in PIPELINE_REGISTRY.values()]


__all__ = [
    # Base classes
    "BasePipeline",
    "PipelineConfig",
    "PipelineContext",
    # Pipelines
    "MatchIngestPipeline",
    "TeamStatsPipeline",
    "derive_match_stats",
    "resolve_team_ids",
    # Entry points
    "PIPELINE_REGISTRY",
    "ingest_match",
    "ingest_match_sync",
    "rederive_match_stats",
    "rederive_match_stats_sync",
    "list_runs",
    "list_pipelines",
]
