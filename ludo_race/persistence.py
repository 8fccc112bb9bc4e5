"""
Save/restore of the minimal game state needed to resume a game.

The record layout matches the one written by earlier versions of the game
(camelCase keys under the versioned ``ludo_save_v1`` entry), so saves stay
readable across releases.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol

from loguru import logger

from .board import BoardTopology, board
from .config import config
from .errors import CorruptSave, NoSavedGame
from .player import Player
from .state import GameState
from .token import Token
from .types import SEAT_ORDER, Color


def _non_negative_int(value: Any) -> int:
    # bool is an int subclass; treat it as malformed
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return 0
    return value


@dataclass(slots=True)
class PersistenceCodec:
    """Encodes a GameState to a plain dict and validates it back."""

    topology: BoardTopology = field(default_factory=lambda: board)

    def encode(self, state: GameState) -> Dict[str, Any]:
        return {
            "players": [p.to_dict() for p in state.players],
            "currentPlayerIndex": state.current_player_index,
            "diceValue": state.dice_value,
            "diceRolls": state.dice_rolls,
            "totalMoves": state.total_moves,
            "consecutiveSixes": state.consecutive_sixes,
            "gameStarted": state.started,
        }

    def decode(self, record: Any) -> GameState:
        """Build a fully-typed GameState from ``record``.

        Raises:
            NoSavedGame: record is empty, has no players, or holds a game
                that is not in progress.
            CorruptSave: record is present but cannot describe a valid game.
        """
        if not record:
            raise NoSavedGame("no saved record")
        if not isinstance(record, Mapping):
            raise CorruptSave(f"record must be a mapping, got {type(record).__name__}")
        raw_players = record.get("players")
        if not raw_players:
            raise NoSavedGame("record has no players")
        if not isinstance(raw_players, list):
            raise CorruptSave("players must be a list")
        if not config.MIN_PLAYERS <= len(raw_players) <= config.MAX_PLAYERS:
            raise CorruptSave(f"unsupported player count {len(raw_players)}")

        players = [self._decode_player(seat, raw) for seat, raw in enumerate(raw_players)]
        colors = [p.color for p in players]
        if len(set(colors)) != len(colors):
            raise CorruptSave(f"duplicate colors {[c.value for c in colors]}")
        # saves are cleared on a win, so a finished game is never resumable
        if any(p.has_won for p in players):
            raise NoSavedGame("record describes a finished game")

        # a record with players but no flag is treated as a running game
        if not record.get("gameStarted", True):
            raise NoSavedGame("record describes a game that never started")

        current = record.get("currentPlayerIndex")
        if isinstance(current, bool) or not isinstance(current, int) or not 0 <= current < len(players):
            current = 0

        state = GameState(
            players=players,
            current_player_index=current,
            dice_rolls=_non_negative_int(record.get("diceRolls", 0)),
            total_moves=_non_negative_int(record.get("totalMoves", 0)),
            consecutive_sixes=_non_negative_int(record.get("consecutiveSixes", 0)),
            started=True,
        )
        if state.consecutive_sixes >= config.MAX_CONSECUTIVE_SIXES:
            state.consecutive_sixes = 0
        # A resumed game always waits for a fresh roll
        state.dice_value = 0
        return state

    def try_decode(self, record: Any) -> Optional[GameState]:
        try:
            return self.decode(record)
        except NoSavedGame as e:
            logger.info(f"Saved game not usable: {e}")
            return None

    # --- Raw text helpers for stores ---
    @staticmethod
    def dumps(record: Mapping[str, Any]) -> str:
        return json.dumps(record, indent=2)

    @staticmethod
    def loads(text: str) -> Any:
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise CorruptSave(f"saved record is not valid JSON: {e}") from e

    # --- Internals ---
    def _decode_player(self, seat: int, raw: Any) -> Player:
        if not isinstance(raw, Mapping):
            raise CorruptSave(f"player {seat} is not a mapping")
        try:
            color = Color(raw.get("color", SEAT_ORDER[seat].value))
        except ValueError as e:
            raise CorruptSave(f"player {seat} has unknown color {raw.get('color')!r}") from e

        name = raw.get("name") or "Player"
        raw_tokens = raw.get("tokens")
        if raw_tokens is None:
            tokens = None
        else:
            tokens = self._decode_tokens(color, raw_tokens)
        return Player(
            player_id=seat,
            color=color,
            name=str(name),
            is_ai=bool(raw.get("isAI", False)),
            tokens=tokens,
        )

    def _decode_tokens(self, color: Color, raw_tokens: Any) -> List[Token]:
        if not isinstance(raw_tokens, list) or len(raw_tokens) != config.TOKENS_PER_PLAYER:
            raise CorruptSave(f"{color.value} must have {config.TOKENS_PER_PLAYER} tokens")
        tokens: List[Token] = []
        for idx, raw in enumerate(raw_tokens):
            if not isinstance(raw, Mapping):
                raise CorruptSave(f"{color.value} token {idx} is not a mapping")
            token_id = raw.get("id", idx)
            if isinstance(token_id, bool) or not isinstance(token_id, int):
                raise CorruptSave(f"{color.value} token {idx} has id {token_id!r}")
            position = raw.get("position", config.YARD_POSITION)
            if isinstance(position, bool) or not isinstance(position, int):
                raise CorruptSave(f"{color.value} token {idx} has position {position!r}")
            if not self.topology.is_valid_position(color, position):
                raise CorruptSave(
                    f"{color.value} token {idx} cannot stand on cell {position}"
                )
            token_color = raw.get("color", color.value)
            if token_color != color.value:
                raise CorruptSave(
                    f"{color.value} token {idx} is tagged {token_color!r}"
                )
            if bool(raw.get("isFinished", False)) != (position == config.FINISH_SENTINEL):
                logger.debug(
                    f"{color.value} token {idx}: isFinished flag disagrees with position {position}, using position"
                )
            tokens.append(Token(token_id=token_id, color=color, position=position))
        ids = sorted(t.token_id for t in tokens)
        if ids != list(range(config.TOKENS_PER_PLAYER)):
            raise CorruptSave(f"{color.value} token ids must be 0..3, got {ids}")
        return tokens


class SaveStore(Protocol):
    """Key-value store holding one record per key."""

    def load(self, key: str) -> Optional[Any]: ...

    def save(self, key: str, record: Mapping[str, Any]) -> bool: ...

    def delete(self, key: str) -> bool: ...


@dataclass(slots=True)
class MemoryStore:
    """In-process store; records are kept as JSON text like a browser store."""

    entries: Dict[str, str] = field(default_factory=dict)

    def load(self, key: str) -> Optional[Any]:
        text = self.entries.get(key)
        if text is None:
            return None
        try:
            return PersistenceCodec.loads(text)
        except CorruptSave as e:
            logger.warning(f"Failed to parse saved state '{key}': {e}")
            return None

    def save(self, key: str, record: Mapping[str, Any]) -> bool:
        self.entries[key] = PersistenceCodec.dumps(record)
        return True

    def delete(self, key: str) -> bool:
        return self.entries.pop(key, None) is not None


class JsonFileStore:
    """Stores each record as ``<save_dir>/<key>.json``.

    Every I/O failure is logged and reported as an absent save.
    """

    def __init__(self, save_dir: str = config.SAVE_DIR):
        self.save_dir = save_dir

    def _path(self, key: str) -> str:
        return os.path.join(self.save_dir, f"{key}.json")

    @staticmethod
    def _discard(path: str) -> None:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Failed to remove partial save {path}: {e}")

    def load(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r") as f:
                return PersistenceCodec.loads(f.read())
        except (OSError, CorruptSave) as e:
            logger.warning(f"Failed to load saved state from {path}: {e}")
            return None

    def save(self, key: str, record: Mapping[str, Any]) -> bool:
        path = self._path(key)
        tmp = f"{path}.tmp"
        try:
            os.makedirs(self.save_dir, exist_ok=True)
            with open(tmp, "w") as f:
                f.write(PersistenceCodec.dumps(record))
            os.replace(tmp, path)
        except (OSError, TypeError) as e:
            logger.warning(f"Failed to save state to {path}: {e}")
            self._discard(tmp)
            return False
        logger.debug(f"State saved to {path}")
        return True

    def delete(self, key: str) -> bool:
        path = self._path(key)
        try:
            os.remove(path)
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning(f"Failed to clear saved state {path}: {e}")
            return False
        logger.info(f"Saved state cleared: {path}")
        return True
