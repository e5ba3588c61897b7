"""
Data Transformers

Pure functions for transforming validated telemetry into stat rows.
"""

from pipelines.transformers.stat_rows import (
    accumulate_team_totals,
    player_stat_values,
)

__all__ = [
    "accumulate_team_totals",
    "player_stat_values",
]
