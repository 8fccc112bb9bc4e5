from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Optional

from ludo_race.config import config


@dataclass
class SimulateConfig:
    games: int
    players: int
    seed: Optional[int]
    save_dir: Optional[str]
    resume: bool
    log_level: str


def build_simulate_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play all-CPU Ludo Race games")
    parser.add_argument("--games", type=int, default=10)
    parser.add_argument(
        "--players",
        type=int,
        default=config.MAX_PLAYERS,
        choices=range(config.MIN_PLAYERS, config.MAX_PLAYERS + 1),
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--save-dir",
        type=str,
        default=None,
        help="Persist the running game as JSON under this directory",
    )
    parser.add_argument(
        "--resume",
        action="store_true",
        help="Continue the saved game in --save-dir before starting new ones",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR"],
    )
    return parser


def parse_simulate_args(args: list[str] | None = None) -> SimulateConfig:
    parser = build_simulate_parser()
    namespace = parser.parse_args(args=args)

    if namespace.games < 1:
        parser.error("--games must be at least 1")
    if namespace.resume and not namespace.save_dir:
        parser.error("--resume requires --save-dir")

    return SimulateConfig(
        games=namespace.games,
        players=namespace.players,
        seed=namespace.seed,
        save_dir=namespace.save_dir,
        resume=namespace.resume,
        log_level=namespace.log_level,
    )
