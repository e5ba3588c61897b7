"""Shared fixtures: a temporary SQLite database and a small tournament."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from typing import Any, Callable

import pytest
from peewee import SqliteDatabase

from db.base import create_tables, db
from db.models.tournament import (
    Event,
    Group,
    GroupTeam,
    Player,
    PointSystem,
    Schedule,
    ScheduleGroup,
    Stage,
    Team,
)

POINT_TABLE = {1: 10, 2: 6, 3: 5, 4: 4, 5: 3, 6: 2, 7: 1, 8: 1}


@pytest.fixture(autouse=True)
def database(tmp_path: Path):
    # A file rather than :memory: so worker threads share the same data
    test_db = SqliteDatabase(str(tmp_path / "test.db"), pragmas={"foreign_keys": 1})
    db.initialize(test_db)
    db.connect(reuse_if_open=True)
    create_tables()
    yield test_db
    if not test_db.is_closed():
        test_db.close()


@pytest.fixture
def tournament() -> SimpleNamespace:
    """
    One event with a point system, one stage and one group of two teams.

    Alpha: Ace (1001), Blaze (1002)
    Bravo: Cobra (2001), Dusk (2002)
    Schedules s1/s2 belong to the group; `unlinked` has no group.
    """
    point_system = PointSystem.create_from_table("Test Points", POINT_TABLE)
    event = Event.create(name="Spring Cup", organizer="Org", point_system=point_system)
    stage = Stage.create(name="Group Stage", event=event)
    group = Group.create(name="Group A", event=event, stage=stage)

    alpha = Team.create(name="Alpha", tag="ALP", slot=1)
    bravo = Team.create(name="Bravo", tag="BRV", slot=2)
    GroupTeam.create(group=group, team=alpha)
    GroupTeam.create(group=group, team=bravo)

    players = {
        "ace": Player.create(name="Ace", uid="1001", team=alpha),
        "blaze": Player.create(name="Blaze", uid="1002", team=alpha),
        "cobra": Player.create(name="Cobra", uid="2001", team=bravo),
        "dusk": Player.create(name="Dusk", uid="2002", team=bravo),
    }

    s1 = Schedule.create(event=event, stage=stage, match_no=1, overall_match_no=1, map="Erangel")
    s2 = Schedule.create(event=event, stage=stage, match_no=2, overall_match_no=2, map="Miramar")
    ScheduleGroup.create(schedule=s1, group=group)
    ScheduleGroup.create(schedule=s2, group=group)
    unlinked = Schedule.create(event=event, stage=stage, match_no=3, map="Sanhok")

    return SimpleNamespace(
        point_system=point_system,
        event=event,
        stage=stage,
        group=group,
        alpha=alpha,
        bravo=bravo,
        players=players,
        s1=s1,
        s2=s2,
        unlinked=unlinked,
    )


def player_entry(uid: Any, name: str, team_name: str = "", **counters: Any) -> dict:
    """A TotalPlayerList entry in wire format (camelCase counters)."""
    entry = {"uId": uid, "playerName": name, "teamName": team_name}
    entry.update(counters)
    return entry


@pytest.fixture
def make_telemetry() -> Callable[..., dict]:
    def factory(game_id: str, players: list[dict], wrapped: bool = True) -> dict:
        body = {
            "GameID": game_id,
            "GameStartTime": "1714000000",
            "FightingStartTime": "1714000090",
            "FinishedStartTime": "1714001800",
            "CurrentTime": "1714001805",
            "TotalPlayerList": players,
            "TeamInfoList": [
                {"teamId": 1, "teamName": "Alpha", "killNum": 0, "liveMemberNum": 0},
                {"teamId": 2, "teamName": "Bravo", "killNum": 0, "liveMemberNum": 0},
            ],
        }
        return {"allinfo": body} if wrapped else body

    return factory


@pytest.fixture
def full_lobby() -> list[dict]:
    """All four registered players; Alpha wins with 5 kills, Bravo second with 8."""
    return [
        player_entry("1001", "Ace", "Alpha", killNum=3, damage=420.5, rank=1,
                     survivalTime=1700, maxKillDistance=180.0, assists=1, rescueTimes=0, driveDistance=900),
        player_entry("1002", "Blaze", "Alpha", killNum=2, damage=310.0, rank=1,
                     survivalTime=1650, maxKillDistance=95.5, assists=2, rescueTimes=2, driveDistance=300),
        player_entry("2001", "Cobra", "Bravo", killNum=6, damage=800.0, rank=2,
                     survivalTime=1500, maxKillDistance=250.0, assists=0, rescueTimes=1),
        player_entry("2002", "Dusk", "Bravo", killNum=2, damage=150.0, rank=2,
                     survivalTime=1200, maxKillDistance=40.0, assists=3, rescueTimes=2),
    ]


@pytest.fixture
def entry() -> Callable[..., dict]:
    return player_entry
