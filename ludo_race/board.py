from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Optional

import numpy as np

from .config import Config, config
from .types import SEAT_ORDER, Color


@dataclass(frozen=True, slots=True)
class ColorLane:
    """Per-color landmarks on the shared path."""

    start_index: int
    home_entry_index: int
    home_stretch_start: int
    home_stretch_end: int  # last private cell, one step from the center


@dataclass(frozen=True, slots=True)
class BoardTopology:
    """Static path model: main loop, per-color lanes, finish and safe cells.

    Owns no tokens. Every answer is derived from the configuration at
    construction time.
    """

    cfg: Config = field(default_factory=lambda: config)
    lanes: Dict[Color, ColorLane] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        lanes = {}
        for color in SEAT_ORDER:
            seat = color.seat
            stretch_start = self.cfg.HOME_STRETCH_STARTS[seat]
            lanes[color] = ColorLane(
                start_index=self.cfg.START_INDICES[seat],
                home_entry_index=self.cfg.HOME_ENTRY_INDICES[seat],
                home_stretch_start=stretch_start,
                home_stretch_end=stretch_start + self.cfg.HOME_STRETCH_LENGTH - 1,
            )
        # frozen dataclass: bypass __setattr__ once during construction
        object.__setattr__(self, "lanes", lanes)

    # --- Constants ---
    @property
    def main_loop_length(self) -> int:
        return self.cfg.MAIN_LOOP_LENGTH

    @property
    def finish_sentinel(self) -> int:
        return self.cfg.FINISH_SENTINEL

    @property
    def safe_cells(self) -> FrozenSet[int]:
        return self.cfg.SAFE_CELLS

    # --- Per-color lookups ---
    def start_index(self, color: Color) -> int:
        return self.lanes[color].start_index

    def home_entry_index(self, color: Color) -> int:
        return self.lanes[color].home_entry_index

    def home_stretch_start(self, color: Color) -> int:
        return self.lanes[color].home_stretch_start

    def home_stretch_end(self, color: Color) -> int:
        return self.lanes[color].home_stretch_end

    # --- Cell classification ---
    def is_main_loop(self, cell: int) -> bool:
        return 0 <= cell < self.main_loop_length

    def is_safe(self, cell: int) -> bool:
        return cell in self.cfg.SAFE_CELLS

    def is_home_stretch(self, cell: int, color: Optional[Color] = None) -> bool:
        if color is not None:
            lane = self.lanes[color]
            return lane.home_stretch_start <= cell <= lane.home_stretch_end
        return self.stretch_owner(cell) is not None

    def stretch_owner(self, cell: int) -> Optional[Color]:
        for color, lane in self.lanes.items():
            if lane.home_stretch_start <= cell <= lane.home_stretch_end:
                return color
        return None

    def is_valid_position(self, color: Color, position: int) -> bool:
        """True when a token of ``color`` may legally sit at ``position``."""
        return (
            position == self.cfg.YARD_POSITION
            or position == self.finish_sentinel
            or self.is_main_loop(position)
            or self.is_home_stretch(position, color)
        )

    def next_cell(self, color: Color, cell: int) -> int:
        """Single forward step from ``cell`` for a token of ``color``."""
        lane = self.lanes[color]
        if cell == lane.home_entry_index:
            return lane.home_stretch_start
        if lane.home_stretch_start <= cell < lane.home_stretch_end:
            return cell + 1
        if cell == lane.home_stretch_end:
            return self.finish_sentinel
        return (cell + 1) % self.main_loop_length

    # --- Snapshots for collaborators ---
    def occupancy(self, tokens: Iterable) -> np.ndarray:
        """Count tokens per (seat, cell) for every on-board or finished token.

        Returns an int array of shape (4, FINISH_SENTINEL + 1). Yard tokens
        are not represented.
        """
        grid = np.zeros((len(SEAT_ORDER), self.cfg.BOARD_CELLS), dtype=np.int64)
        for token in tokens:
            if token.position < 0:
                continue
            grid[token.color.seat, token.position] += 1
        return grid


board = BoardTopology()
