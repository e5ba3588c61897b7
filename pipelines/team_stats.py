"""
Team Stats Pipeline

Derives the per-match PlayerStats and TeamStats rows of a match from its
telemetry player list and the registered rosters of the teams scheduled in it.

Derivation runs as the last step of match ingestion (same transaction) and
standalone through TeamStatsPipeline, which rebuilds the rows from the stored
match snapshot. Rows are upserted on (entity, match), so re-running never
duplicates, and rows of entities that no longer match are removed.
"""

from core.errors import MalformedDataError, NotFoundError
from db.models.tournament import (
    Group,
    Match,
    Player,
    PlayerStats,
    Schedule,
    TeamStats,
)
from pipelines.base import BasePipeline
from pipelines.config import PipelineConfig
from pipelines.context import PipelineContext
from pipelines.transformers import accumulate_team_totals, player_stat_values
from schemas.telemetry import TelemetryPlayer
from utils.text import normalize_uid


def resolve_team_ids(schedule: Schedule) -> list[int]:
    """
    Teams attached to a schedule slot through its groups.

    Raises:
        MalformedDataError: If the schedule is not linked to any group
    """
    group_ids = schedule.group_ids()
    if not group_ids:
        raise MalformedDataError("Invalid group data")
    return Group.team_ids_for(group_ids)


def derive_match_stats(
    match_id: int,
    team_ids: list[int],
    players: list[TelemetryPlayer],
    ctx: PipelineContext,
) -> tuple[int, int]:
    """
    Upsert PlayerStats for every registered player found in the telemetry and
    one TeamStats row per team with at least one matched player.

    Telemetry entries whose uid is not registered on any of the teams are
    skipped. When a uid appears more than once, the first entry wins.

    Returns:
        (team rows written, player rows written)
    """
    telemetry_by_uid: dict[str, TelemetryPlayer] = {}
    for entry in players:
        telemetry_by_uid.setdefault(normalize_uid(entry.uid), entry)

    roster: dict[int, dict[str, Player]] = {team_id: {} for team_id in team_ids}
    for player in Player.for_teams(team_ids):
        roster[player.team_id].setdefault(normalize_uid(player.uid), player)

    written_team_ids: list[int] = []
    written_player_ids: list[int] = []

    for team_id in team_ids:
        registered = roster[team_id]
        matched_values: list[dict] = []

        for uid, entry in telemetry_by_uid.items():
            player = registered.get(uid)
            if player is None:
                continue

            values = player_stat_values(entry)
            PlayerStats.upsert_stats(
                player_id=player.id,
                match_id=match_id,
                stats=values,
                pipeline_run_id=ctx.run_id,
            )
            matched_values.append(values)
            written_player_ids.append(player.id)

        totals = accumulate_team_totals(matched_values)
        if totals is None:
            ctx.log.debug("team_without_matched_players", team_id=team_id)
            continue

        TeamStats.upsert_stats(
            team_id=team_id,
            match_id=match_id,
            stats=totals,
            pipeline_run_id=ctx.run_id,
        )
        written_team_ids.append(team_id)

    # Rows left over from an earlier derivation whose entity no longer matches
    stale_players = (
        PlayerStats.delete()
        .where((PlayerStats.match == match_id) & PlayerStats.player.not_in(written_player_ids))
        .execute()
    )
    stale_teams = (
        TeamStats.delete()
        .where((TeamStats.match == match_id) & TeamStats.team.not_in(written_team_ids))
        .execute()
    )

    team_rows = len(written_team_ids)
    player_rows = len(written_player_ids)

    ctx.increment_records(team_rows + player_rows)
    ctx.log.info(
        "match_stats_derived",
        match_id=match_id,
        teams=len(team_ids),
        team_rows=team_rows,
        player_rows=player_rows,
        unmatched_entries=len(telemetry_by_uid) - player_rows,
        stale_rows_removed=stale_players + stale_teams,
    )
    return team_rows, player_rows


class TeamStatsPipeline(BasePipeline):
    """
    Re-derive the stat rows of an already ingested match.

    Useful after a missing player has been registered: the stored telemetry
    snapshot is matched against the current rosters and every row is
    upserted again.
    """

    config = PipelineConfig(
        name="team_stats",
        display_name="Team Stats",
        description="Re-derives per-match player and team stat rows from a stored match",
        target_tables=("player_stats", "team_stats"),
    )

    def __init__(self, match_id: int):
        super().__init__()
        self.match_id = match_id

    @property
    def subject(self) -> str:
        return f"match:{self.match_id}"

    def execute(self, ctx: PipelineContext) -> None:
        """Execute the re-derivation."""
        match = Match.get_or_none(Match.id == self.match_id)
        if match is None:
            raise NotFoundError("Match not found")

        schedule = Schedule.get_or_none(Schedule.id == match.schedule_id)
        if schedule is None:
            raise NotFoundError("Schedule not found for the match")

        team_ids = resolve_team_ids(schedule)
        players = [TelemetryPlayer.model_validate(entry) for entry in match.players]

        ctx.log.info("rederive_started", match_id=match.id, game_id=match.game_id)

        team_rows, player_rows = derive_match_stats(match.id, team_ids, players, ctx)

        ctx.set_result(
            "Match stats re-derived",
            game_id=match.game_id,
            match_id=match.id,
            team_rows=team_rows,
            player_rows=player_rows,
        )
