"""
Pipeline Run Model

One row per ingestion or re-derivation attempt, kept whether the attempt
committed or rolled back. The subject is the game id for uploads and
"match:<id>" for re-derivations.
"""

import uuid
from datetime import datetime

from peewee import (
    UUIDField,
    CharField,
    DateTimeField,
    IntegerField,
    TextField,
)

from db.base import BaseModel

RUN_RUNNING = "running"
RUN_SUCCESS = "success"
RUN_FAILED = "failed"


class PipelineRun(BaseModel):
    id = UUIDField(primary_key=True, default=uuid.uuid4)
    pipeline_name = CharField(max_length=50, index=True)
    subject = CharField(max_length=64, null=True, index=True)
    status = CharField(max_length=20, default=RUN_RUNNING, index=True)
    message = TextField(null=True)  # what the caller was told
    error_message = TextField(null=True)  # exception type and text
    error_code = CharField(max_length=32, null=True)
    records_processed = IntegerField(default=0)
    started_at = DateTimeField(default=datetime.utcnow)
    completed_at = DateTimeField(null=True)

    class Meta:
        table_name = "pipeline_runs"

    def __repr__(self) -> str:
        return f"<PipelineRun({self.pipeline_name} {self.subject} {self.status})>"

    @classmethod
    def start_run(cls, pipeline_name: str, subject: str | None = None) -> "PipelineRun":
        return cls.create(pipeline_name=pipeline_name, subject=subject)

    def finish(
        self,
        status: str,
        message: str,
        records_processed: int = 0,
        error_message: str | None = None,
        error_code: str | None = None,
    ) -> None:
        """
        Close the run.

        Called outside the pipeline's transaction, so the row survives a
        rollback of the work it describes.
        """
        self.status = status
        self.message = message
        self.records_processed = records_processed
        self.error_message = error_message
        self.error_code = error_code
        self.completed_at = datetime.utcnow()
        self.save()

    @property
    def duration_seconds(self) -> float | None:
        if self.completed_at is None:
            return None
        return (self.completed_at - self.started_at).total_seconds()

    @classmethod
    def history_for(cls, subject: str) -> list["PipelineRun"]:
        """Runs that touched a subject, newest first."""
        return list(
            cls.select()
            .where(cls.subject == subject)
            .order_by(cls.started_at.desc(), cls.completed_at.desc())
        )
