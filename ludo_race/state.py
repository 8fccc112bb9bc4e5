from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterator, List, Optional, Sequence

from .config import config
from .errors import InvalidSetup
from .player import Player
from .token import Token
from .types import SEAT_ORDER, Color, LastMove, Move


@dataclass(slots=True)
class GameSetup:
    """Setup form for a new game.

    Seat ``i`` is computer-controlled iff ``i < ai_count``. Human seats take
    their names, in order, from ``names``; missing names fall back to
    ``"<Color> Player"``.
    """

    player_count: int = 4
    ai_count: int = 0
    names: Sequence[str] = ()
    colors: Optional[Sequence[Color]] = None

    def validate(self) -> List[Color]:
        if not config.MIN_PLAYERS <= self.player_count <= config.MAX_PLAYERS:
            raise InvalidSetup(
                f"player_count must be between {config.MIN_PLAYERS} and "
                f"{config.MAX_PLAYERS}, got {self.player_count}"
            )
        if not 0 <= self.ai_count <= self.player_count:
            raise InvalidSetup(
                f"ai_count must be between 0 and {self.player_count}, got {self.ai_count}"
            )
        if self.colors is None:
            return list(SEAT_ORDER[: self.player_count])
        try:
            colors = [Color(c) for c in self.colors]
        except ValueError as e:
            raise InvalidSetup(f"unknown color in {list(self.colors)}") from e
        if len(colors) != self.player_count:
            raise InvalidSetup(
                f"expected {self.player_count} colors, got {len(colors)}"
            )
        if len(set(colors)) != len(colors):
            raise InvalidSetup("colors must be unique")
        return colors

    def build_players(self) -> List[Player]:
        colors = self.validate()
        names = [n.strip() for n in self.names if n and n.strip()]
        players: List[Player] = []
        human_idx = 0
        for seat, color in enumerate(colors):
            is_ai = seat < self.ai_count
            name = f"{color.label} Player"
            if is_ai:
                name = f"{name} (CPU)"
            else:
                if human_idx < len(names):
                    name = names[human_idx]
                human_idx += 1
            players.append(Player(player_id=seat, color=color, name=name, is_ai=is_ai))
        return players


@dataclass(slots=True)
class GameState:
    """Mutable entities of one game. Owned and mutated by a single TurnEngine."""

    players: List[Player] = field(default_factory=list)
    current_player_index: int = 0
    dice_value: int = 0  # 0 = no pending roll
    consecutive_sixes: int = 0
    dice_rolls: int = 0
    total_moves: int = 0
    started: bool = False
    finished: bool = False
    winner_index: Optional[int] = None
    valid_moves: List[Move] = field(default_factory=list)
    # transient, never persisted
    dice_history: Deque[int] = field(
        default_factory=lambda: deque(maxlen=config.DICE_HISTORY_LENGTH)
    )
    last_move: Optional[LastMove] = None

    @classmethod
    def from_setup(cls, setup: GameSetup) -> "GameState":
        return cls(players=setup.build_players(), started=True)

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    @property
    def winner(self) -> Optional[Player]:
        if self.winner_index is None:
            return None
        return self.players[self.winner_index]

    def all_tokens(self) -> Iterator[Token]:
        for player in self.players:
            yield from player.tokens

    def tokens_on(self, cell: int) -> List[Token]:
        """Unfinished tokens of every color sitting on ``cell``."""
        return [
            t for t in self.all_tokens() if t.position == cell and not t.is_finished
        ]

    def opponents_on(self, cell: int, color: Color) -> List[Token]:
        return [t for t in self.tokens_on(cell) if t.color != color]

    def record_roll(self, value: int) -> None:
        self.dice_rolls += 1
        self.dice_history.appendleft(value)
