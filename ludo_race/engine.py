from __future__ import annotations

import random
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

import numpy as np
from loguru import logger

from .board import BoardTopology, board
from .config import config
from .errors import EngineBusy, GameNotActive, InvalidMove
from .events import (
    BonusTurn,
    DiceRolled,
    EventBus,
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
from .persistence import PersistenceCodec, SaveStore
from .player import Player
from .state import GameSetup, GameState
from .types import AppliedMove, CapturedToken, LastMove, Move, TurnPhase


class TurnEngine:
    """
    Drives one game: roll -> legal moves -> apply -> captures -> bonus or
    rotation -> win check.

    Every request is settled completely before the method returns. The
    current ``TurnPhase`` gates requests; anything that arrives in the wrong
    phase is rejected with a typed error and leaves the state untouched.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        topology: Optional[BoardTopology] = None,
        heuristic: Optional[AIHeuristic] = None,
        store: Optional[SaveStore] = None,
        save_key: str = config.SAVE_KEY,
        auto_play_ai: bool = config.AUTO_PLAY_AI,
        events: Optional[EventBus] = None,
    ):
        """
        Args:
            rng: Dice source. Also feeds the AI tie-breaker unless a
                heuristic is given.
            store: Key-value store for the resumable snapshot; None disables
                persistence.
            auto_play_ai: Roll and choose automatically for computer seats.
                When False, computer seats are driven through
                ``roll_dice``/``request_ai_move``/``choose_move``.
        """
        self.rng = rng or random.Random()
        self.topology = topology or board
        self.resolver = MoveResolver(self.topology)
        self.heuristic = heuristic or AIHeuristic(rng=self.rng, topology=self.topology)
        self.codec = PersistenceCodec(self.topology)
        self.store = store
        self.save_key = save_key
        self.auto_play_ai = auto_play_ai
        self.events = events or EventBus()
        self._state: Optional[GameState] = None
        self._phase = TurnPhase.AWAITING_ROLL
        # > 0 while a request is being settled (listeners run inside it)
        self._settling_depth = 0

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def state(self) -> GameState:
        if self._state is None:
            raise GameNotActive("no game has been started")
        return self._state

    @property
    def phase(self) -> TurnPhase:
        return self._phase

    @property
    def current_player(self) -> Player:
        return self.state.current_player

    @property
    def is_over(self) -> bool:
        return self._state is not None and self._state.finished

    def occupancy(self) -> np.ndarray:
        return self.topology.occupancy(self.state.all_tokens())

    # ------------------------------------------------------------------
    # Game lifecycle
    # ------------------------------------------------------------------
    def start_game(self, setup: GameSetup) -> GameState:
        self._require_idle("start a game")
        players = setup.build_players()  # raises InvalidSetup before any mutation
        self._state = GameState(players=players, started=True)
        self._phase = TurnPhase.AWAITING_ROLL
        logger.info(
            f"Game started with {len(players)} players "
            f"({sum(p.is_ai for p in players)} CPU). {players[0].name} plays first."
        )
        self._save()
        with self._settling():
            self.events.emit(
                GameStarted(
                    player_names=tuple(p.name for p in players),
                    first_player_index=0,
                )
            )
            self._drive_ai()
        return self._state

    def reset_game(self) -> None:
        """Drop the running game and its saved snapshot."""
        self._require_idle("reset")
        self.clear_saved_state()
        self._state = None
        self._phase = TurnPhase.AWAITING_ROLL
        logger.info("Game reset")

    # ------------------------------------------------------------------
    # Turn requests
    # ------------------------------------------------------------------
    def roll_dice(self, value: Optional[int] = None) -> int:
        """Roll for the current player and settle everything that follows.

        ``value`` forces the dice face (external dice, replays, tests).
        """
        self._require_active()
        if self._phase is not TurnPhase.AWAITING_ROLL or self._state.dice_value != 0:
            raise EngineBusy(f"cannot roll while {self._phase.value}")
        if value is not None and not config.DICE_MIN <= value <= config.DICE_MAX:
            raise ValueError(f"dice value must be in [1, 6], got {value}")

        with self._settling():
            dice = self._roll(value)
            self._drive_ai()
        return dice

    def get_legal_moves(self) -> List[Move]:
        """Moves pending a choice; empty unless a roll awaits resolution."""
        self._require_active()
        return list(self._state.valid_moves)

    def choose_move(self, token_id: int) -> AppliedMove:
        self._require_active()
        if self._phase is TurnPhase.MOVE_IN_PROGRESS:
            raise EngineBusy("a move is already in progress")
        move = self._find_move(token_id)
        with self._settling():
            result = self._apply(move)
            self._drive_ai()
        return result

    def request_ai_move(self) -> int:
        """Token id the heuristic would play for the current computer seat."""
        self._require_active()
        player = self._state.current_player
        if not player.is_ai:
            raise InvalidMove(f"{player.name} is not computer-controlled")
        if self._phase is not TurnPhase.MOVES_COMPUTED or not self._state.valid_moves:
            raise InvalidMove("no legal moves are pending")
        return self.heuristic.choose(self._state.valid_moves, self._state).token_id

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def serialize_state(self) -> dict:
        return self.codec.encode(self.state)

    def restore_state(self, record: Any) -> bool:
        self._require_idle("restore")
        state = self.codec.try_decode(record)
        if state is None:
            return False
        self._state = state
        self._phase = TurnPhase.AWAITING_ROLL
        logger.info(
            f"Restored saved game: {len(state.players)} players, "
            f"{state.current_player.name} to roll"
        )
        with self._settling():
            self.events.emit(GameRestored(current_player_index=state.current_player_index))
            self._drive_ai()
        return True

    def resume_saved_game(self) -> bool:
        """Restore from the configured store; False when no usable save exists."""
        if self.store is None:
            return False
        try:
            record = self.store.load(self.save_key)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to read saved state: {e}")
            return False
        if record is None:
            return False
        return self.restore_state(record)

    def clear_saved_state(self) -> None:
        if self.store is None:
            return
        try:
            self.store.delete(self.save_key)
        except OSError as e:
            logger.warning(f"Failed to clear saved state: {e}")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _require_active(self) -> None:
        if self._state is None or not self._state.started:
            raise GameNotActive("no game is running")
        if self._state.finished:
            raise GameNotActive("the game is over")

    @contextmanager
    def _settling(self) -> Iterator[None]:
        self._settling_depth += 1
        try:
            yield
        finally:
            self._settling_depth -= 1

    def _require_idle(self, action: str) -> None:
        """Lifecycle requests may not replace the game a request is settling."""
        if self._settling_depth:
            raise EngineBusy(f"cannot {action} while a turn is being settled")

    def _find_move(self, token_id: int) -> Move:
        if self._phase is TurnPhase.MOVES_COMPUTED:
            for move in self._state.valid_moves:
                if move.token_id == token_id:
                    return move
        raise InvalidMove(f"token {token_id} has no legal move")

    def _roll(self, value: Optional[int]) -> int:
        state = self._state
        player_index = state.current_player_index
        player = state.current_player

        dice = value if value is not None else self.rng.randint(config.DICE_MIN, config.DICE_MAX)
        state.dice_value = dice
        state.record_roll(dice)
        # consecutive_sixes only resets when a turn actually ends
        if dice == config.EXIT_ROLL:
            state.consecutive_sixes += 1
        logger.info(f"{player.name} rolled {dice}")
        self.events.emit(DiceRolled(player_index, dice, state.consecutive_sixes))

        if state.consecutive_sixes >= config.MAX_CONSECUTIVE_SIXES:
            logger.info(f"Three 6s! {player.name}'s turn skipped.")
            state.consecutive_sixes = 0
            self.events.emit(TripleSixForfeit(player_index))
            self._end_turn()
            return dice

        moves = self.resolver.legal_moves(player, dice)
        state.valid_moves = moves
        self._phase = TurnPhase.MOVES_COMPUTED
        self.events.emit(
            MovesComputed(player_index, dice, tuple(m.token_id for m in moves))
        )

        if not moves:
            self._end_turn()
        elif len(moves) == 1:
            # a single option is played for humans and CPUs alike
            self._apply(moves[0])
        elif player.is_ai and self.auto_play_ai:
            self._apply(self.heuristic.choose(moves, state))
        return dice

    def _apply(self, move: Move) -> AppliedMove:
        state = self._state
        player_index = state.current_player_index
        player = state.current_player
        token = player.token(move.token_id)
        dice = state.dice_value

        self._phase = TurnPhase.MOVE_IN_PROGRESS
        state.valid_moves = []
        state.last_move = LastMove(player.color, move.from_position, move.final_cell)
        result = AppliedMove(
            player_index=player_index,
            token_id=token.token_id,
            dice=dice,
            from_position=move.from_position,
            path=move.path,
        )

        for cell in move.path:
            previous = token.position
            token.move_to(cell)
            self.events.emit(TokenStepped(player.color, token.token_id, previous, cell))
        state.total_moves += 1

        if token.is_finished:
            result.finished = True
            logger.info(f"{player.name} finished a token!")
            self.events.emit(
                TokenFinished(player.color, token.token_id, player.finished_tokens)
            )
            if player.has_won:
                result.won = True
                self._win(player_index)
                return result

        final = move.final_cell
        if self.topology.is_main_loop(final) and not self.topology.is_safe(final):
            for victim in state.opponents_on(final, player.color):
                victim.send_home()
                result.captured.append(CapturedToken(victim.color, victim.token_id, final))
                logger.info(f"{player.name} captured {victim.color.value}!")
                self.events.emit(
                    TokenCaptured(victim.color, victim.token_id, final, player.color)
                )

        result.bonus_turn = (
            dice == config.EXIT_ROLL or bool(result.captured) or result.finished
        )
        self._phase = TurnPhase.TURN_SETTLED
        if result.bonus_turn:
            state.dice_value = 0
            self._phase = TurnPhase.AWAITING_ROLL
            logger.info("Bonus Turn!")
            self._save()
            self.events.emit(BonusTurn(player_index))
        else:
            self._end_turn()
        return result

    def _end_turn(self) -> None:
        state = self._state
        state.dice_value = 0
        state.valid_moves = []
        state.consecutive_sixes = 0
        self._phase = TurnPhase.TURN_SETTLED

        previous = state.current_player_index
        count = len(state.players)
        loops = 0
        while True:
            state.current_player_index = (state.current_player_index + 1) % count
            loops += 1
            if not state.current_player.has_won or loops >= count:
                break

        self._phase = TurnPhase.AWAITING_ROLL
        logger.debug(f"Turn passes to {state.current_player.name}")
        self._save()
        self.events.emit(TurnEnded(previous, state.current_player_index))

    def _win(self, player_index: int) -> None:
        state = self._state
        winner = state.players[player_index]
        state.finished = True
        state.winner_index = player_index
        state.dice_value = 0
        state.valid_moves = []
        self._phase = TurnPhase.TURN_SETTLED
        self.clear_saved_state()
        logger.info(f"{winner.name} wins the game!")
        self.events.emit(GameWon(player_index, winner.name, winner.color))

    def _drive_ai(self) -> None:
        if not self.auto_play_ai:
            return
        while (
            self._state is not None
            and self._state.started
            and not self._state.finished
            and self._phase is TurnPhase.AWAITING_ROLL
            and self._state.dice_value == 0
            and self._state.current_player.is_ai
        ):
            self._roll(None)

    def _save(self) -> None:
        if self.store is None or self._state is None:
            return
        try:
            self.store.save(self.save_key, self.codec.encode(self._state))
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Failed to save state: {e}")
