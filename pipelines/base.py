"""
Base Pipeline

Run lifecycle shared by match ingestion and stat re-derivation.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import ClassVar

from db.base import db, thread_connection
from pipelines.config import PipelineConfig
from pipelines.context import PipelineContext
from schemas.pipeline import PipelineResult


class BasePipeline(ABC):
    """
    Template for a tracked, transactional write.

    Lifecycle of run_sync():
        1. insert the PipelineRun row
        2. before_execute(): lookups and checks, outside the transaction
        3. execute(): the writes, inside db.atomic() when config.atomic
        4. after_execute()
        5. close the run row as success or failed

    Any exception ends the run as failed; callers always get a
    PipelineResult back.

    Subclasses set `config`, implement execute() and usually override
    `subject`:

        class TeamStatsPipeline(BasePipeline):
            config = PipelineConfig(
                name="team_stats",
                display_name="Team Stats",
                description="Re-derives per-match stat rows from a stored match",
                target_tables=("player_stats", "team_stats"),
            )

            def execute(self, ctx):
                team_rows, player_rows = derive_match_stats(...)
                ctx.set_result("Match stats re-derived", team_rows=team_rows)
    """

    config: ClassVar[PipelineConfig]

    def __init__(self):
        if getattr(self.__class__, "config", None) is None:
            raise ValueError(
                f"{self.__class__.__name__} must define a 'config' class attribute"
            )

    @property
    def subject(self) -> str | None:
        """What the run touches, recorded on the PipelineRun row."""
        return None

    def before_execute(self, ctx: PipelineContext) -> None:
        pass

    @abstractmethod
    def execute(self, ctx: PipelineContext) -> None:
        """Perform the writes. Raising rolls back everything done here."""

    def after_execute(self, ctx: PipelineContext) -> None:
        pass

    def run_sync(self) -> PipelineResult:
        with thread_connection():
            ctx = PipelineContext(self.config.name, subject=self.subject)
            ctx.start_tracking()

            try:
                self.before_execute(ctx)
                if self.config.atomic:
                    with db.atomic():
                        self.execute(ctx)
                else:
                    self.execute(ctx)
                self.after_execute(ctx)
            except Exception as e:
                return ctx.mark_failed(e)

            return ctx.mark_success()

    async def run(self) -> PipelineResult:
        """Run in a worker thread so the event loop is never blocked on the database."""
        return await asyncio.to_thread(self.run_sync)

    @classmethod
    def get_info(cls) -> dict:
        return cls.config.describe()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name={self.config.name})>"
