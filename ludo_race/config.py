import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    return bool(int(os.getenv(name, int(default))))


@dataclass(slots=True)
class Config:
    # --- Board ---
    MAIN_LOOP_LENGTH: int = 52
    TOKENS_PER_PLAYER: int = 4
    MIN_PLAYERS: int = 2
    MAX_PLAYERS: int = 4

    # Seat order: Red, Green, Yellow, Blue
    START_INDICES: list[int] = field(default_factory=lambda: [0, 13, 26, 39])
    HOME_ENTRY_INDICES: list[int] = field(default_factory=lambda: [50, 11, 24, 37])
    HOME_STRETCH_STARTS: list[int] = field(default_factory=lambda: [52, 57, 62, 67])
    # 4 intermediate cells + the pivot cell that steps into the center
    HOME_STRETCH_LENGTH: int = 5
    STAR_CELLS: list[int] = field(default_factory=lambda: [8, 21, 34, 47])
    FINISH_SENTINEL: int = 72
    YARD_POSITION: int = -1

    # --- Rules ---
    DICE_MIN: int = 1
    DICE_MAX: int = 6
    EXIT_ROLL: int = 6
    MAX_CONSECUTIVE_SIXES: int = 3
    DICE_HISTORY_LENGTH: int = 10

    # --- Persistence ---
    SAVE_KEY: str = os.getenv("LUDO_SAVE_KEY", "ludo_save_v1")
    SAVE_DIR: str = os.getenv("LUDO_SAVE_DIR", "saved_states")

    # --- Engine ---
    AUTO_PLAY_AI: bool = _env_flag("LUDO_AUTO_PLAY_AI", True)

    # Derived (populated in __post_init__ due to slots)
    SAFE_CELLS: frozenset[int] = frozenset()
    BOARD_CELLS: int = 0

    def __post_init__(self):
        self.SAFE_CELLS = frozenset(self.START_INDICES) | frozenset(self.STAR_CELLS)
        # main loop + every stretch + the center
        self.BOARD_CELLS = self.FINISH_SENTINEL + 1

        if not 2 <= self.MIN_PLAYERS <= self.MAX_PLAYERS <= 4:
            raise ValueError("player bounds must satisfy 2 <= MIN <= MAX <= 4")
        arc = self.MAIN_LOOP_LENGTH // 4
        for i, start in enumerate(self.START_INDICES):
            if start != i * arc:
                raise ValueError("start indices must split the loop into four arcs")
        last_stretch = self.HOME_STRETCH_STARTS[-1] + self.HOME_STRETCH_LENGTH - 1
        if last_stretch >= self.FINISH_SENTINEL:
            raise ValueError("FINISH_SENTINEL must lie beyond every home stretch")


@dataclass(slots=True)
class AIWeights:
    finish: float = float(os.getenv("AI_FINISH_WEIGHT", 1000))
    exit_yard: float = float(os.getenv("AI_EXIT_WEIGHT", 200))
    capture: float = float(os.getenv("AI_CAPTURE_WEIGHT", 500))
    safe_cell: float = float(os.getenv("AI_SAFE_WEIGHT", 100))
    # upper bound (exclusive) of the uniform tie-breaker
    tie_break: float = float(os.getenv("AI_TIE_BREAK", 50))


config = Config()
ai_weights = AIWeights()
