from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .board import BoardTopology, board
from .config import AIWeights, ai_weights
from .state import GameState
from .types import Move


@dataclass(slots=True)
class AIHeuristic:
    """Greedy move picker for computer-controlled seats.

    Bonuses stack: a move that finishes a token and captures scores both.
    Equal-score moves are separated by a uniform tie-breaker drawn from
    ``rng``, so a seeded ``random.Random`` makes choices reproducible.
    """

    rng: random.Random = field(default_factory=random.Random)
    weights: AIWeights = field(default_factory=lambda: ai_weights)
    topology: BoardTopology = field(default_factory=lambda: board)

    def base_score(self, move: Move, state: GameState) -> float:
        """Deterministic part of the score (no tie-breaker)."""
        score = 0.0
        target = move.final_cell

        # 1) Finishing beats everything else
        if target == self.topology.finish_sentinel:
            score += self.weights.finish

        # 2) Bringing a token out of the yard
        if move.leaves_yard:
            score += self.weights.exit_yard

        # 3) Capture opportunity on an open loop cell
        if self.topology.is_main_loop(target) and not self.topology.is_safe(target):
            if state.opponents_on(target, move.color):
                score += self.weights.capture

        # 4) Landing somewhere protected
        if self.topology.is_safe(target):
            score += self.weights.safe_cell

        return score

    def score(self, move: Move, state: GameState) -> float:
        return self.base_score(move, state) + self.rng.random() * self.weights.tie_break

    def choose(self, moves: Sequence[Move], state: GameState) -> Optional[Move]:
        if not moves:
            return None
        best = moves[0]
        best_score = float("-inf")
        for move in moves:
            s = self.score(move, state)
            if s > best_score:
                best, best_score = move, s
        return best
