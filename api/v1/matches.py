"""
Match API Routes

Telemetry upload and roster validation for a schedule slot, plus
re-derivation of an ingested match's stat rows. Writes require the shared
bearer token; validation is read-only and open.
"""

from fastapi import APIRouter, Response, Security

from api.v1.responses import apply_status, run_blocking
from core.auth import verify_api_token
from core.logging import get_logger
from pipelines import ingest_match, list_pipelines, list_runs, rederive_match_stats
from schemas.common import ApiStatus
from schemas.pipeline import PipelineListResponse, PipelineRunHistoryResponse
from schemas.results import (
    IngestResponse,
    MatchUploadRequest,
    RosterValidationResponse,
)
from services.roster_validation import validate_roster

router = APIRouter(prefix="/matches", tags=["matches"])
log = get_logger("matches_api")


@router.post("/validate", response_model=RosterValidationResponse)
async def validate_match_roster(
    body: MatchUploadRequest,
    response: Response,
) -> RosterValidationResponse:
    """
    Reconcile telemetry players with the registered rosters of the schedule.

    Returns both mismatch sets; mismatches are reported, not rejected.
    """
    result = await run_blocking(validate_roster, body.telemetry, body.schedule_id)
    return apply_status(response, result)


@router.post("", response_model=IngestResponse)
async def upload_match(
    body: MatchUploadRequest,
    response: Response,
    _: str = Security(verify_api_token),
) -> IngestResponse:
    """
    Ingest telemetry for a schedule slot.

    Creates the match, links it to the schedule and derives per-match
    player and team stat rows in one transaction.
    """
    result = await ingest_match(body.telemetry, body.schedule_id)
    log.info(
        "match_upload_handled",
        schedule_id=body.schedule_id,
        status=result.status,
    )
    return apply_status(response, result)


@router.post("/{match_id}/rederive", response_model=IngestResponse)
async def rederive_match(
    match_id: int,
    response: Response,
    _: str = Security(verify_api_token),
) -> IngestResponse:
    """Recompute a match's stat rows from its stored telemetry."""
    result = await rederive_match_stats(match_id)
    return apply_status(response, result)


@router.get("/runs/{subject}", response_model=PipelineRunHistoryResponse)
async def get_match_runs(
    subject: str,
    _: str = Security(verify_api_token),
) -> PipelineRunHistoryResponse:
    """
    Audit trail of ingestion/re-derivation runs.

    subject is a game id, or "match:<id>" for re-derivation runs.
    """
    runs = await run_blocking(list_runs, subject)
    return PipelineRunHistoryResponse(
        status=ApiStatus.SUCCESS,
        message=f"Found {len(runs)} run(s)",
        data=runs,
    )


@router.get("/pipelines", response_model=PipelineListResponse)
async def get_available_pipelines(
    _: str = Security(verify_api_token),
) -> PipelineListResponse:
    """List the registered pipelines with the tables they write."""
    pipelines = list_pipelines()
    return PipelineListResponse(
        status=ApiStatus.SUCCESS,
        message=f"Found {len(pipelines)} pipeline(s)",
        data=pipelines,
    )
