import os

import pytest

from arguments import parse_simulate_args
from simulate import main


def test_parse_defaults():
    cfg = parse_simulate_args([])
    assert cfg.games == 10
    assert cfg.players == 4
    assert cfg.save_dir is None
    assert not cfg.resume


def test_resume_requires_save_dir():
    with pytest.raises(SystemExit):
        parse_simulate_args(["--resume"])


def test_rejects_player_count():
    with pytest.raises(SystemExit):
        parse_simulate_args(["--players", "5"])


def test_simulation_prints_summary(capsys, tmp_path):
    save_dir = tmp_path / "saves"
    main(["--games", "2", "--players", "2", "--seed", "7", "--save-dir", str(save_dir)])
    out = capsys.readouterr().out
    assert "Game 1:" in out
    assert "Game 2:" in out
    assert "Average moves per game" in out
    # finished games leave no save behind
    assert not os.path.exists(save_dir / "ludo_save_v1.json")
