"""
Roster Validation Service

Reconciles the players found in match telemetry against the registered
rosters of the teams scheduled in the match. Read-only: nothing is written,
so organizers can fix registrations before the upload.
"""

from typing import Any, Iterable

from core.errors import DuplicateMatchError, NotFoundError
from core.logging import get_logger
from db.models.tournament import Match, Player, Schedule
from pipelines.team_stats import resolve_team_ids
from schemas.common import ApiStatus
from schemas.results import (
    RosterMismatch,
    RosterValidationData,
    RosterValidationResponse,
)
from schemas.telemetry import MatchTelemetry
from services.base import service_call
from utils.constants import DUPLICATE_GAME_MESSAGE
from utils.text import decode_game_text, normalize_uid

log = get_logger("roster_validation")


def find_unmatched(
    candidates: Iterable[tuple[str, str]],
    known_uids: set[str],
) -> list[RosterMismatch]:
    """
    Entries of (uid, name) whose uid is not in known_uids.

    Deduplicated by uid, in first-seen order.
    """
    unmatched: list[RosterMismatch] = []
    seen: set[str] = set()
    for uid, name in candidates:
        if uid in known_uids or uid in seen:
            continue
        seen.add(uid)
        unmatched.append(RosterMismatch(player_name=name, uid=uid))
    return unmatched


@service_call("Error validating player data", RosterValidationResponse)
def validate_roster(telemetry: Any, schedule_id: int) -> RosterValidationResponse:
    """
    Compare telemetry uids with the registered players of a schedule.

    Args:
        telemetry: Raw telemetry (decoded JSON) or a MatchTelemetry
        schedule_id: Schedule slot the game was played for

    Returns:
        RosterValidationResponse with both mismatch sets. Mismatches are not
        an error: the status stays success and has_mismatches is set.

    A game id that already has a committed match is reported as Duplicate
    (conflict), the same kind ingestion returns for it, rather than NotFound.
    """
    parsed = MatchTelemetry.from_payload(telemetry)

    if Match.exists_for_game(parsed.game_id):
        raise DuplicateMatchError(DUPLICATE_GAME_MESSAGE)

    schedule = Schedule.get_or_none(Schedule.id == schedule_id)
    if schedule is None:
        raise NotFoundError("Schedule not found")

    team_ids = resolve_team_ids(schedule)

    registered = [
        (normalize_uid(player.uid), decode_game_text(player.name))
        for player in Player.for_teams(team_ids)
    ]
    in_game = [
        (normalize_uid(entry.uid), decode_game_text(entry.player_name))
        for entry in parsed.players
    ]

    game_unmatched = find_unmatched(in_game, {uid for uid, _ in registered})
    db_unmatched = find_unmatched(registered, {uid for uid, _ in in_game})
    has_mismatches = bool(game_unmatched or db_unmatched)

    log.info(
        "roster_validated",
        game_id=parsed.game_id,
        schedule_id=schedule_id,
        teams=len(team_ids),
        registered_players=len(registered),
        game_players=len(in_game),
        game_unmatched=len(game_unmatched),
        db_unmatched=len(db_unmatched),
    )

    return RosterValidationResponse(
        status=ApiStatus.SUCCESS,
        message="Game data successfully validated!",
        data=RosterValidationData(
            game_players_unmatched=game_unmatched,
            db_players_unmatched=db_unmatched,
            has_mismatches=has_mismatches,
        ),
    )
