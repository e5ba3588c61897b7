"""
Match Ingest Pipeline

Persists one completed game against its schedule slot and derives the
per-match stat rows.

The whole write path (match row, schedule link, stat rows) runs in a single
transaction: a failed ingestion leaves nothing behind, and a retried upload
of the same game is rejected by the unique index on match.game_id even when
two uploads race past the advisory check.
"""

from peewee import IntegrityError

from core.errors import DuplicateMatchError, NotFoundError
from db.models.tournament import Event, Match, PointSystem, Schedule
from pipelines.base import BasePipeline
from pipelines.config import PipelineConfig
from pipelines.context import PipelineContext
from pipelines.team_stats import derive_match_stats, resolve_team_ids
from schemas.telemetry import MatchTelemetry
from utils.constants import DUPLICATE_GAME_MESSAGE, INGEST_SUCCESS_MESSAGE


class MatchIngestPipeline(BasePipeline):
    """
    Ingest validated telemetry for a schedule slot.

    This pipeline:
    1. Rejects game ids that already have a committed match
    2. Resolves the schedule, its event and the event's point system
    3. Rejects schedules that already have a match
    4. Creates the match with the raw telemetry snapshot
    5. Links the schedule to the match
    6. Derives PlayerStats/TeamStats for every team of the schedule's groups
    """

    config = PipelineConfig(
        name="match_ingest",
        display_name="Match Ingest",
        description="Stores match telemetry for a schedule and derives its stat rows",
        target_tables=("matches", "schedules", "player_stats", "team_stats"),
    )

    def __init__(self, telemetry: MatchTelemetry, schedule_id: int):
        super().__init__()
        self.telemetry = telemetry
        self.schedule_id = schedule_id

        # Resolved in before_execute()
        self._schedule: Schedule | None = None
        self._point_system: PointSystem | None = None
        self._team_ids: list[int] = []

    @property
    def subject(self) -> str:
        return self.telemetry.game_id

    def before_execute(self, ctx: PipelineContext) -> None:
        """Resolve everything the write path needs; fail before opening the transaction."""
        game_id = self.telemetry.game_id

        ctx.log.info(
            "match_ingest_started",
            game_id=game_id,
            schedule_id=self.schedule_id,
            players=len(self.telemetry.players),
            teams=len(self.telemetry.teams),
        )

        if Match.exists_for_game(game_id):
            raise DuplicateMatchError(DUPLICATE_GAME_MESSAGE)

        schedule = Schedule.get_or_none(Schedule.id == self.schedule_id)
        if schedule is None:
            raise NotFoundError("Schedule not found")

        event = Event.get_or_none(Event.id == schedule.event_id)
        if event is None:
            raise NotFoundError("Event not found")

        point_system = None
        if event.point_system_id is not None:
            point_system = PointSystem.get_or_none(PointSystem.id == event.point_system_id)
        if point_system is None:
            raise NotFoundError("Point system not found")

        if schedule.match_id is not None:
            raise DuplicateMatchError("Match already recorded for this schedule")

        self._schedule = schedule
        self._point_system = point_system
        self._team_ids = resolve_team_ids(schedule)

    def execute(self, ctx: PipelineContext) -> None:
        """Execute the ingestion."""
        schedule = self._schedule
        group_ids = schedule.group_ids()

        try:
            match = Match.create_for_game(
                game_id=self.telemetry.game_id,
                schedule_id=schedule.id,
                point_system_id=self._point_system.id,
                game_global_info=self.telemetry.global_info,
                team_info=self.telemetry.team_snapshot(),
                player_info=self.telemetry.player_snapshot(),
                group_id=group_ids[0] if group_ids else None,
            )
        except IntegrityError as e:
            ctx.log.warning("match_insert_conflict", game_id=self.telemetry.game_id, error=str(e))
            raise DuplicateMatchError(DUPLICATE_GAME_MESSAGE) from e

        Schedule.update(match=match.id).where(Schedule.id == schedule.id).execute()
        ctx.log.info("match_created", match_id=match.id, schedule_id=schedule.id)

        team_rows, player_rows = derive_match_stats(
            match.id,
            self._team_ids,
            self.telemetry.players,
            ctx,
        )

        ctx.set_result(
            INGEST_SUCCESS_MESSAGE,
            game_id=match.game_id,
            match_id=match.id,
            team_rows=team_rows,
            player_rows=player_rows,
        )
