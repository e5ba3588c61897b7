"""
Export leaderboards to CSV.

This script:
1. Builds the team and player leaderboards for a group, a stage or a list of matches
2. Converts them to DataFrames
3. Writes <prefix>_teams.csv and <prefix>_players.csv to the output directory

Usage:
    python -m scripts.export_results --group 3 --out-dir exports/
"""
from pathlib import Path

from core.settings import settings
from db.base import init_db, close_db
from services.export import leaderboard_frames
from services.results import get_group_result, get_group_schedule_result, get_stage_result


def export_results(
    out_dir: Path,
    group_id: int | None = None,
    stage_id: int | None = None,
    match_ids: list[int] | None = None,
) -> list[Path]:
    """
    Build a leaderboard and write it as CSV files.

    Exactly one of group_id, stage_id or match_ids selects the window.

    Returns:
        Paths of the written files (empty when the leaderboard failed)
    """
    print("Initializing database connection...")
    init_db(settings.database_url)

    try:
        if group_id is not None:
            prefix = f"group_{group_id}"
            response = get_group_schedule_result(group_id)
        elif stage_id is not None:
            prefix = f"stage_{stage_id}"
            response = get_stage_result(stage_id)
        else:
            prefix = "matches_" + "-".join(str(match_id) for match_id in match_ids)
            response = get_group_result(match_ids)

        if not response.ok or response.data is None:
            print(f"Could not build leaderboard: {response.message}")
            return []

        out_dir.mkdir(parents=True, exist_ok=True)
        written = []
        for sheet, frame in leaderboard_frames(response.data).items():
            path = out_dir / f"{prefix}_{sheet}.csv"
            frame.to_csv(path)
            written.append(path)
            print(f"  Wrote {len(frame)} rows -> {path}")

        return written

    finally:
        close_db()


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Export tournament leaderboards to CSV")
    window = parser.add_mutually_exclusive_group(required=True)
    window.add_argument("--group", type=int, help="Group id (all played matches on its schedule)")
    window.add_argument("--stage", type=int, help="Stage id (all played matches of the stage)")
    window.add_argument("--matches", type=int, nargs="+", help="Explicit match ids")
    parser.add_argument("--out-dir", type=Path, default=Path("exports"), help="Output directory (default: exports/)")

    args = parser.parse_args()

    export_results(
        out_dir=args.out_dir,
        group_id=args.group,
        stage_id=args.stage,
        match_ids=args.matches,
    )
