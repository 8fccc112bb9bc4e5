from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple, Type

from .types import Color


@dataclass(frozen=True, slots=True)
class GameEvent:
    """Base class for everything the engine reports to collaborators."""


@dataclass(frozen=True, slots=True)
class GameStarted(GameEvent):
    player_names: Tuple[str, ...]
    first_player_index: int


@dataclass(frozen=True, slots=True)
class GameRestored(GameEvent):
    current_player_index: int


@dataclass(frozen=True, slots=True)
class DiceRolled(GameEvent):
    player_index: int
    value: int
    consecutive_sixes: int


@dataclass(frozen=True, slots=True)
class TripleSixForfeit(GameEvent):
    player_index: int


@dataclass(frozen=True, slots=True)
class MovesComputed(GameEvent):
    player_index: int
    dice: int
    token_ids: Tuple[int, ...]


@dataclass(frozen=True, slots=True)
class TokenStepped(GameEvent):
    color: Color
    token_id: int
    from_cell: int
    to_cell: int


@dataclass(frozen=True, slots=True)
class TokenCaptured(GameEvent):
    color: Color
    token_id: int
    cell: int
    by_color: Color


@dataclass(frozen=True, slots=True)
class TokenFinished(GameEvent):
    color: Color
    token_id: int
    finished_tokens: int


@dataclass(frozen=True, slots=True)
class BonusTurn(GameEvent):
    player_index: int


@dataclass(frozen=True, slots=True)
class TurnEnded(GameEvent):
    previous_player_index: int
    next_player_index: int


@dataclass(frozen=True, slots=True)
class GameWon(GameEvent):
    player_index: int
    name: str
    color: Color


Listener = Callable[[GameEvent], None]


@dataclass(slots=True)
class EventBus:
    """Synchronous fan-out of engine events.

    Listeners run in subscription order on the engine's call stack. A
    listener that raises aborts the emitting request.
    """

    _listeners: Dict[Optional[Type[GameEvent]], List[Listener]] = field(
        default_factory=dict
    )

    def subscribe(
        self, callback: Listener, event_type: Optional[Type[GameEvent]] = None
    ) -> None:
        """Register ``callback`` for ``event_type`` (all events when None)."""
        self._listeners.setdefault(event_type, []).append(callback)

    def emit(self, event: GameEvent) -> None:
        for event_type, listeners in list(self._listeners.items()):
            if event_type is None or isinstance(event, event_type):
                for callback in list(listeners):
                    callback(event)
