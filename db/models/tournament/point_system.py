"""
Point System Table

Named rank -> points table used to turn a team's finishing placement into
tournament points. Events point at one; matches capture a reference to the
one in effect when they were scored.
"""

import json
from datetime import datetime
from typing import Mapping

from peewee import AutoField, CharField, DateTimeField, TextField

from db.base import BaseModel


class PointSystem(BaseModel):
    """
    Placement scoring configuration.

    Attributes:
        id: Auto-incrementing primary key
        name: Display name (e.g., "PMGC 2024")
        entries_json: JSON list of {"rank": int, "point": int}, ordered by rank
    """

    id = AutoField(primary_key=True)
    name = CharField(max_length=100)
    entries_json = TextField(default="[]")  # JSON string
    created_at = DateTimeField(default=datetime.utcnow)

    class Meta:
        table_name = "point_systems"

    def __repr__(self) -> str:
        return f"<PointSystem(id={self.id}, name='{self.name}')>"

    @property
    def entries(self) -> list[dict]:
        """Rank/point entries in rank order."""
        return json.loads(self.entries_json or "[]")

    @property
    def points_by_rank(self) -> dict[int, int]:
        return {int(entry["rank"]): int(entry["point"]) for entry in self.entries}

    def points_for_rank(self, rank: int) -> int:
        """Placement points for a finishing rank; ranks without an entry score 0."""
        return self.points_by_rank.get(rank, 0)

    @staticmethod
    def encode_table(table: Mapping[int, int]) -> str:
        return json.dumps(
            [{"rank": int(rank), "point": int(point)} for rank, point in sorted(table.items())]
        )

    @classmethod
    def build(cls, name: str, table: Mapping[int, int]) -> "PointSystem":
        """Build an unsaved point system from a {rank: points} mapping."""
        return cls(name=name, entries_json=cls.encode_table(table))

    @classmethod
    def create_from_table(cls, name: str, table: Mapping[int, int]) -> "PointSystem":
        """Persist a point system from a {rank: points} mapping."""
        return cls.create(name=name, entries_json=cls.encode_table(table))
