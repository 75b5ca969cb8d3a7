"""Command-line tests through typer's CliRunner."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from colorsort.engine.gamegenerator.generator import MAX_LEVEL_NUMBER
from colorsort.models.levelstore import LevelStore
from main import app

runner = CliRunner()


@pytest.fixture()
def store(tmp_path: Path) -> Path:
    return tmp_path / "levels.json"


def _run(store: Path, *args: str):
    return runner.invoke(app, ["--store", str(store), *args])


@pytest.mark.timeout(300)
def test_generate_solve_hint_check(store: Path) -> None:
    result = _run(store, "generate", "easy", "-n", "2", "--pack", "daily")
    assert result.exit_code == 0, result.output
    assert [level.id for level in LevelStore(store).get_pack("daily")] == [
        "daily_001",
        "daily_002",
    ]

    result = _run(store, "solve", "daily_001")
    assert result.exit_code == 0, result.output
    assert "Solution:" in result.output

    result = _run(store, "hint", "daily_001")
    assert result.exit_code == 0, result.output
    assert "Hint:" in result.output

    result = _run(store, "check", "--pack", "daily")
    assert result.exit_code == 0, result.output
    assert "Summary" in result.output


def test_generate_with_explicit_seed_is_repeatable(store: Path) -> None:
    first = _run(store, "generate", "easy", "--seed", "99", "--pack", "a")
    second = _run(store, "generate", "easy", "--seed", "99", "--pack", "b")
    assert first.exit_code == 0 and second.exit_code == 0
    saved = LevelStore(store)
    assert saved.get_pack("a")[0].vessels == saved.get_pack("b")[0].vessels


def test_seed_with_several_levels_is_an_error(store: Path) -> None:
    result = _run(store, "generate", "easy", "-n", "2", "--seed", "1")
    assert result.exit_code == 1


def test_unknown_level(store: Path) -> None:
    result = _run(store, "solve", "missing_001")
    assert result.exit_code == 1
    assert "no level" in result.output


def test_check_empty_store(store: Path) -> None:
    result = _run(store, "check")
    assert result.exit_code == 0
    assert "No levels" in result.output


def test_policy_generation_failure_is_reported(store: Path, tmp_path: Path) -> None:
    policy = tmp_path / "policy.json"
    policy.write_text(json.dumps({"max_attempts": 1, "min_optimal_moves": 1000}))
    result = runner.invoke(
        app, ["--store", str(store), "--policy", str(policy), "generate", "easy"]
    )
    assert result.exit_code == 1
    assert "Error" in result.output


def test_bad_policy_file(store: Path, tmp_path: Path) -> None:
    policy = tmp_path / "policy.json"
    policy.write_text("{not json")
    result = runner.invoke(
        app, ["--store", str(store), "--policy", str(policy), "check"]
    )
    assert result.exit_code == 1


def test_level_numbers_past_the_last_slot(store: Path) -> None:
    result = _run(store, "generate", "easy", "--start", str(MAX_LEVEL_NUMBER))
    assert result.exit_code == 1
    assert "last numbered slot" in result.output
