"""
Move logs: ordered records of who marked which cell in which round.

Each entry: {round, actor, row, col}
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Sequence

from .errors import MalformedMoveLog
from .game import Position


class Actor(str, Enum):
    PLAYER = "player"
    COMPUTER = "computer"


@dataclass(frozen=True)
class MoveRecord:
    round: int
    actor: Actor
    row: int
    col: int

    @property
    def position(self) -> Position:
        return (self.row, self.col)

    def to_dict(self) -> dict:
        return {"round": self.round, "actor": self.actor.value, "row": self.row, "col": self.col}

    @classmethod
    def from_dict(cls, d: dict) -> "MoveRecord":
        """
        Raises:
            MalformedMoveLog: missing field, unknown actor or non-integer value
        """
        try:
            return cls(round=int(d["round"]), actor=Actor(d["actor"]),
                       row=int(d["row"]), col=int(d["col"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedMoveLog(f"bad move record {d!r}: {exc}") from exc


class MoveLog:
    """Append-only sequence of MoveRecords in play order."""

    def __init__(self, records: Sequence[MoveRecord] = ()):
        self.records: List[MoveRecord] = list(records)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[MoveRecord]:
        return iter(self.records)

    def __getitem__(self, i):
        return self.records[i]

    def __eq__(self, other) -> bool:
        return isinstance(other, MoveLog) and self.records == other.records

    def append(self, record: MoveRecord) -> None:
        self.records.append(record)

    def copy(self) -> "MoveLog":
        return MoveLog(self.records)

    def positions(self, actor: Actor) -> List[Position]:
        """Positions marked by `actor`, in play order."""
        return [r.position for r in self.records if r.actor == actor]

    def to_list(self) -> List[dict]:
        return [r.to_dict() for r in self.records]

    @classmethod
    def from_list(cls, items: Sequence[dict]) -> "MoveLog":
        if not isinstance(items, (list, tuple)):
            raise MalformedMoveLog(f"move log dump must be a list, got {type(items).__name__}")
        return cls([MoveRecord.from_dict(d) for d in items])

    def dumps(self) -> str:
        return json.dumps(self.to_list())

    @classmethod
    def loads(cls, text: str) -> "MoveLog":
        try:
            items = json.loads(text)
        except json.JSONDecodeError as exc:
            raise MalformedMoveLog(f"move log dump is not valid JSON: {exc.msg}") from exc
        return cls.from_list(items)


def replay(log: MoveLog, engine) -> None:
    """
    Restore a game by starting `engine` and re-applying every record.

    Any illegal record surfaces as the engine's own MoveError; moves before it
    stay applied.
    """
    engine.start()
    for record in log:
        if record.actor == Actor.PLAYER:
            engine.apply_player_move(record.row, record.col)
        else:
            engine.apply_computer_move(record.row, record.col)
