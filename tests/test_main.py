from __future__ import annotations

import logging

import pytest

from flappy import __main__ as cli
from flappy.game import GameEnv


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


def test_smoke_run_exits_cleanly(caplog) -> None:
    with caplog.at_level(logging.INFO, logger="flappy"):
        assert cli.main(["--smoke", "--seed", "0", "--log-level", "info"]) == 0

    assert any("Smoke run finished" in record.getMessage() for record in caplog.records)


def test_smoke_run_reports_progress() -> None:
    env = GameEnv(sound=False)
    try:
        info = cli.run_smoke(env, seed=3, frames=120)
    finally:
        env.close()

    assert info["steps"] == 120
    assert info["state"] == "playing"


def test_level_flag_rejects_unknown_presets() -> None:
    with pytest.raises(SystemExit):
        cli.main(["--smoke", "--level", "insane"])


@pytest.mark.parametrize("value", ["0", "-5", "fast"])
def test_fps_flag_requires_a_positive_integer(value: str) -> None:
    with pytest.raises(SystemExit):
        cli.main(["--smoke", "--fps", value])


def test_fps_flag_reaches_the_environment() -> None:
    assert cli._parse_args(["--fps", "30"]).fps == 30
