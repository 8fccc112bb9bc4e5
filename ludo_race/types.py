from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple


class Color(Enum):
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"

    @property
    def seat(self) -> int:
        """Index into the per-color board tables (Red=0 .. Blue=3)."""
        return SEAT_ORDER.index(self)

    @property
    def label(self) -> str:
        return self.value.capitalize()


SEAT_ORDER: Tuple[Color, ...] = (Color.RED, Color.GREEN, Color.YELLOW, Color.BLUE)


class TurnPhase(Enum):
    AWAITING_ROLL = "awaiting_roll"
    MOVES_COMPUTED = "moves_computed"
    MOVE_IN_PROGRESS = "move_in_progress"
    TURN_SETTLED = "turn_settled"


@dataclass(frozen=True, slots=True)
class Move:
    token_id: int
    color: Color
    from_position: int
    path: Tuple[int, ...]

    @property
    def final_cell(self) -> int:
        return self.path[-1]

    @property
    def leaves_yard(self) -> bool:
        return self.from_position == -1


@dataclass(frozen=True, slots=True)
class CapturedToken:
    color: Color
    token_id: int
    cell: int


@dataclass(slots=True)
class AppliedMove:
    player_index: int
    token_id: int
    dice: int
    from_position: int
    path: Tuple[int, ...]
    captured: List[CapturedToken] = field(default_factory=list)
    finished: bool = False
    won: bool = False
    bonus_turn: bool = False


@dataclass(frozen=True, slots=True)
class LastMove:
    color: Color
    from_index: int
    to_index: int
