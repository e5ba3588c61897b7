"""
Results API Routes

Read-only leaderboards: single match, star of the match, a set of matches,
a group's schedule, a stage, and schedule slots.
"""

from fastapi import APIRouter, Response

from api.v1.responses import apply_status, run_blocking
from schemas.results import (
    LeaderboardResponse,
    OverallResultRequest,
    ScheduleResultRequest,
    ScheduleResultResponse,
    StarOfMatchResponse,
)
from services.results import (
    get_group_result,
    get_group_schedule_result,
    get_schedule_results,
    get_single_match_result,
    get_stage_result,
    get_star_of_match,
)

router = APIRouter(prefix="/results", tags=["results"])


@router.get("/matches/{match_id}", response_model=LeaderboardResponse)
async def match_results(match_id: int, response: Response) -> LeaderboardResponse:
    """Team and player leaderboards for one match."""
    result = await run_blocking(get_single_match_result, match_id)
    return apply_status(response, result)


@router.get("/matches/{match_id}/stars", response_model=StarOfMatchResponse)
async def match_stars(match_id: int, response: Response) -> StarOfMatchResponse:
    """Star-of-the-match award lists for one match."""
    result = await run_blocking(get_star_of_match, match_id)
    return apply_status(response, result)


@router.post("/overall", response_model=LeaderboardResponse)
async def overall_results(
    body: OverallResultRequest,
    response: Response,
) -> LeaderboardResponse:
    """Combined leaderboards across the given matches."""
    result = await run_blocking(get_group_result, body.match_ids)
    return apply_status(response, result)


@router.get("/groups/{group_id}", response_model=LeaderboardResponse)
async def group_results(group_id: int, response: Response) -> LeaderboardResponse:
    """Combined leaderboards across every played match of a group."""
    result = await run_blocking(get_group_schedule_result, group_id)
    return apply_status(response, result)


@router.get("/stages/{stage_id}", response_model=LeaderboardResponse)
async def stage_results(stage_id: int, response: Response) -> LeaderboardResponse:
    """Combined leaderboards across every played match of a stage."""
    result = await run_blocking(get_stage_result, stage_id)
    return apply_status(response, result)


@router.post("/schedules", response_model=ScheduleResultResponse)
async def schedule_results(
    body: ScheduleResultRequest,
    response: Response,
) -> ScheduleResultResponse:
    """Leaderboards for one schedule slot, or combined across several."""
    result = await run_blocking(get_schedule_results, body.schedule_ids)
    return apply_status(response, result)
