"""
Stat Row Transformers

Pure functions turning telemetry player entries into PlayerStats and
TeamStats column values.
"""

from typing import Iterable

from db.models.tournament.stats import COUNTER_FIELDS

# Team rows take the longest kill and the best (lowest) finishing rank;
# every other counter is summed over the team's players.
MAX_FIELDS = frozenset({"max_kill_distance"})
MIN_FIELDS = frozenset({"rank"})


def player_stat_values(player) -> dict:
    """Counter columns for a PlayerStats row, copied from a TelemetryPlayer."""
    return {name: getattr(player, name) for name in COUNTER_FIELDS}


def accumulate_team_totals(player_rows: Iterable[dict]) -> dict | None:
    """
    Fold the counter values of a team's matched players into one team row.

    Returns:
        Counter values for a TeamStats row, or None when no player matched
    """
    totals: dict | None = None

    for row in player_rows:
        if totals is None:
            totals = {name: row.get(name, 0) for name in COUNTER_FIELDS}
            continue

        for name in COUNTER_FIELDS:
            value = row.get(name, 0)
            if name in MAX_FIELDS:
                totals[name] = max(totals[name], value)
            elif name in MIN_FIELDS:
                totals[name] = min(totals[name], value)
            else:
                totals[name] += value

    return totals
