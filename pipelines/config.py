"""
Pipeline Configuration

Static description of a pipeline: its name and the tables it writes.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PipelineConfig:
    """
    Attributes:
        name: Recorded on every PipelineRun row (e.g. "match_ingest")
        display_name: Shown in the pipeline listing
        description: One line on what the pipeline does
        target_tables: Tables execute() writes to
        atomic: Run execute() in one transaction so a failure rolls back every table
    """

    name: str
    display_name: str
    description: str
    target_tables: tuple[str, ...]
    atomic: bool = True

    def __post_init__(self):
        if not self.name:
            raise ValueError("Pipeline name is required")
        if not self.target_tables:
            raise ValueError(f"Pipeline {self.name!r} must declare the tables it writes")

    def describe(self) -> dict:
        return {
            "name": self.name,
            "display_name": self.display_name,
            "description": self.description,
            "target_tables": list(self.target_tables),
            "atomic": self.atomic,
        }
