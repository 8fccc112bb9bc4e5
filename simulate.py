import random
import sys
import time
from collections import Counter
from typing import List, Optional

import numpy as np
from loguru import logger

from arguments import SimulateConfig, parse_simulate_args
from ludo_race import GameSetup, JsonFileStore, TurnEngine, TurnPhase


def seed_environ(seed_value: Optional[int] = None):
    random.seed(seed_value)
    np.random.seed(seed_value)


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level)


def play_game(engine: TurnEngine, players: int, resume: bool = False) -> dict:
    """Run one all-CPU game to completion and summarise it."""
    if not (resume and engine.resume_saved_game()):
        engine.start_game(GameSetup(player_count=players, ai_count=players))

    # computer seats are driven automatically; a restored game with human
    # seats is played by the heuristic on their behalf
    while not engine.is_over:
        if engine.phase is TurnPhase.MOVES_COMPUTED:
            moves = engine.get_legal_moves()
            best = engine.heuristic.choose(moves, engine.state)
            engine.choose_move(best.token_id)
        else:
            engine.roll_dice()

    state = engine.state
    finished = [p.finished_tokens for p in state.players]
    return {
        "winner": state.winner.name,
        "color": state.winner.color.value,
        "dice_rolls": state.dice_rolls,
        "total_moves": state.total_moves,
        "finished_tokens": finished,
    }


def main(args: Optional[List[str]] = None) -> None:
    cfg: SimulateConfig = parse_simulate_args(args)
    configure_logging(cfg.log_level)
    seed_environ(cfg.seed)

    store = JsonFileStore(cfg.save_dir) if cfg.save_dir else None
    engine = TurnEngine(rng=random.Random(cfg.seed), store=store, auto_play_ai=True)

    print(f"--- Simulating {cfg.games} game(s) with {cfg.players} CPU players ---")
    start_time = time.time()
    wins: Counter = Counter()
    moves_per_game = []

    for game_idx in range(cfg.games):
        summary = play_game(engine, cfg.players, resume=cfg.resume and game_idx == 0)
        wins[summary["color"]] += 1
        moves_per_game.append(summary["total_moves"])
        print(
            f"Game {game_idx + 1}: {summary['winner']} won after "
            f"{summary['dice_rolls']} rolls / {summary['total_moves']} moves "
            f"(finished tokens {summary['finished_tokens']})"
        )
        engine.reset_game()

    elapsed = time.time() - start_time
    print("\n--- Summary ---")
    for color, count in wins.most_common():
        print(f"{color:>7}: {count} win(s) ({count / cfg.games:.0%})")
    print(
        f"Average moves per game: {np.mean(moves_per_game):.1f} "
        f"(min {np.min(moves_per_game)}, max {np.max(moves_per_game)})"
    )
    print(f"Elapsed: {elapsed:.2f}s")


if __name__ == "__main__":
    main()
