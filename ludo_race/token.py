"""
Token representation for the race board.
Each player owns 4 tokens that travel from the yard to the center.
"""

from dataclasses import dataclass

from .config import config
from .types import Color


@dataclass(slots=True)
class Token:
    """A single piece. Holds state only; movement rules live in the resolver."""

    token_id: int  # 0..3 within the owner
    color: Color
    position: int = config.YARD_POSITION  # -1 yard; 0..51 loop; own stretch; 72 center

    @property
    def is_finished(self) -> bool:
        return self.position == config.FINISH_SENTINEL

    @property
    def in_yard(self) -> bool:
        return self.position == config.YARD_POSITION

    def move_to(self, new_position: int) -> None:
        self.position = new_position

    def send_home(self) -> None:
        self.position = config.YARD_POSITION

    def to_dict(self) -> dict:
        return {
            "id": self.token_id,
            "position": self.position,
            "isFinished": self.is_finished,
            "color": self.color.value,
        }

    def __str__(self) -> str:
        return f"Token({self.color.value}_{self.token_id} at {self.position})"
