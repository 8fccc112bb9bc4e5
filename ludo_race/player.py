"""
Player representation for the race board.
Each player has a unique color and controls 4 tokens.
"""

from dataclasses import dataclass
from typing import List, Optional

from .config import config
from .token import Token
from .types import Color


@dataclass(slots=True)
class Player:
    player_id: int
    color: Color
    name: str
    is_ai: bool = False
    tokens: Optional[List[Token]] = None

    def __post_init__(self) -> None:
        if self.tokens is None:
            self.tokens = [
                Token(token_id=i, color=self.color)
                for i in range(config.TOKENS_PER_PLAYER)
            ]

    @property
    def finished_tokens(self) -> int:
        return sum(1 for t in self.tokens if t.is_finished)

    @property
    def has_won(self) -> bool:
        return self.finished_tokens == config.TOKENS_PER_PLAYER

    def token(self, token_id: int) -> Token:
        for t in self.tokens:
            if t.token_id == token_id:
                return t
        raise KeyError(f"{self.color.value} has no token {token_id}")

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "color": self.color.value,
            "isAI": self.is_ai,
            "tokens": [t.to_dict() for t in self.tokens],
        }

    def __str__(self) -> str:
        return f"Player({self.name}, {self.color.value}, tokens: {[str(t) for t in self.tokens]})"
