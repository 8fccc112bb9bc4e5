from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from loguru import logger

from .board import BoardTopology, board
from .config import config
from .player import Player
from .types import Color, Move


@dataclass(slots=True)
class MoveResolver:
    """Enumerates legal moves for a player and a dice value."""

    topology: BoardTopology = field(default_factory=lambda: board)

    # --- Rules: paths and legality ---
    def path_for(self, color: Color, position: int, dice: int) -> Tuple[int, ...]:
        """Cells visited when a token of ``color`` at ``position`` moves ``dice``.

        Returns an empty tuple when the move is illegal: a yard token without
        the exit roll, a finished token, or a walk that would pass through
        the center with steps left over.
        """
        if not config.DICE_MIN <= dice <= config.DICE_MAX:
            raise ValueError(f"dice must be in [{config.DICE_MIN}, {config.DICE_MAX}], got {dice}")

        finish = self.topology.finish_sentinel
        if position == finish:
            return ()
        if position == config.YARD_POSITION:
            if dice == config.EXIT_ROLL:
                return (self.topology.start_index(color),)
            return ()

        path: List[int] = []
        cell = position
        for step in range(dice):
            cell = self.topology.next_cell(color, cell)
            # overshoot: cannot pass through the center
            if cell == finish and step < dice - 1:
                return ()
            path.append(cell)
            if cell == finish:
                break
        return tuple(path)

    def legal_moves(self, player: Player, dice: int) -> List[Move]:
        moves: List[Move] = []
        for token in player.tokens:
            if token.is_finished:
                continue
            path = self.path_for(player.color, token.position, dice)
            if not path:
                continue
            moves.append(
                Move(
                    token_id=token.token_id,
                    color=player.color,
                    from_position=token.position,
                    path=path,
                )
            )
        logger.debug(
            f"legal moves for {player.color.value} (dice={dice}): "
            f"{[(m.token_id, m.final_cell) for m in moves]}"
        )
        return moves
