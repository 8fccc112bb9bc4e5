"""
Ludo Race rule engine
Turn sequencing, movement, captures, bonus turns, a greedy CPU opponent and
resumable saves for a four-seat race board.
"""

from .board import BoardTopology, board
from .config import AIWeights, Config, ai_weights, config
from .engine import TurnEngine
from .errors import (
    CorruptSave,
    EngineBusy,
    GameNotActive,
    InvalidMove,
    InvalidSetup,
    LudoError,
    NoSavedGame,
)
from .events import (
    BonusTurn,
    DiceRolled,
    EventBus,
    GameEvent,
    GameRestored,
    GameStarted,
    GameWon,
    MovesComputed,
    TokenCaptured,
    TokenFinished,
    TokenStepped,
    TripleSixForfeit,
    TurnEnded,
)
from .heuristic import AIHeuristic
from .moves import MoveResolver
from .persistence import JsonFileStore, MemoryStore, PersistenceCodec, SaveStore
from .player import Player
from .state import GameSetup, GameState
from .token import Token
from .types import (
    SEAT_ORDER,
    AppliedMove,
    CapturedToken,
    Color,
    LastMove,
    Move,
    TurnPhase,
)

__all__ = [
    "TurnEngine",
    "GameSetup",
    "GameState",
    "Player",
    "Token",
    "Color",
    "SEAT_ORDER",
    "TurnPhase",
    "Move",
    "AppliedMove",
    "CapturedToken",
    "LastMove",
    "BoardTopology",
    "board",
    "MoveResolver",
    "AIHeuristic",
    "PersistenceCodec",
    "SaveStore",
    "MemoryStore",
    "JsonFileStore",
    "EventBus",
    "GameEvent",
    "GameStarted",
    "GameRestored",
    "DiceRolled",
    "TripleSixForfeit",
    "MovesComputed",
    "TokenStepped",
    "TokenCaptured",
    "TokenFinished",
    "BonusTurn",
    "TurnEnded",
    "GameWon",
    "LudoError",
    "InvalidSetup",
    "InvalidMove",
    "EngineBusy",
    "GameNotActive",
    "NoSavedGame",
    "CorruptSave",
    "Config",
    "AIWeights",
    "config",
    "ai_weights",
]
