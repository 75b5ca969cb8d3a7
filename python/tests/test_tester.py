"""LevelTester tests — batch QA, statistics, duplicates and progression."""

from __future__ import annotations

from dataclasses import replace

import pytest

from colorsort.engine.gamegenerator.generator import GameGenerator
from colorsort.engine.gametester.tester import LevelTester
from colorsort.models.color import ColorToken
from colorsort.models.level import Level, Tier
from colorsort.models.vessel import Vessel

R, B = ColorToken.RED, ColorToken.BLUE


def _swap_level(level_id: str = "swap_001", tier: Tier = Tier.EASY, **kwargs) -> Level:
    fields = dict(
        id=level_id,
        name=level_id,
        tier=tier,
        vessels=(
            Vessel.with_units("A", [R, B], capacity=2),
            Vessel.with_units("B", [B, R], capacity=2),
            Vessel.empty("C", capacity=2),
        ),
        optimal_moves=3,
        move_budget=6,
        star_thresholds=(4, 4, 5),
    )
    fields.update(kwargs)
    return Level(**fields)


def _stuck_level() -> Level:
    return _swap_level(
        "stuck_001",
        vessels=(
            Vessel.with_units("A", [R, B], capacity=2),
            Vessel.with_units("B", [B, R], capacity=2),
        ),
    )


def test_good_level_passes() -> None:
    result = LevelTester.test_level(_swap_level())
    assert result.solvable
    assert result.passes_quality
    assert result.optimal_moves == 3
    assert "PASS" in str(result)


def test_wrong_recorded_optimal_fails_quality() -> None:
    result = LevelTester.test_level(_swap_level(optimal_moves=2))
    assert result.solvable
    assert not result.passes_quality


def test_generous_budget_fails_quality() -> None:
    assert not LevelTester.test_level(_swap_level(move_budget=20)).passes_quality


def test_unsolvable_level_fails() -> None:
    result = LevelTester.test_level(_stuck_level())
    assert not result.solvable
    assert result.error == "puzzle is unsolvable"
    assert result.states_explored == 1


def test_batch_and_statistics() -> None:
    levels = [_swap_level(), _swap_level("swap_002"), _stuck_level()]
    seen: list[int] = []
    batch = LevelTester.test_levels(levels, on_progress=lambda done, total: seen.append(done))
    assert seen == [1, 2, 3]
    assert batch.total == 3
    assert batch.passed == 2
    assert batch.failed == 1
    assert batch.pass_rate == pytest.approx(2 / 3)

    stats = LevelTester.statistics(levels, batch)
    assert stats.total_levels == 3
    assert stats.solvable == 2
    assert stats.min_optimal_moves == stats.max_optimal_moves == 3
    assert stats.tier_distribution == {Tier.EASY: 3}
    assert stats.vessel_distribution == {3: 2, 2: 1}


@pytest.mark.timeout(300)
def test_generated_levels_pass_quality() -> None:
    levels = GameGenerator.generate_levels(Tier.EASY, 3)
    batch = LevelTester.test_levels(levels)
    assert batch.pass_rate == 1.0


def test_find_duplicates_ignores_ids_and_order() -> None:
    original = _swap_level("a_001")
    shuffled = replace(
        _swap_level("a_002"),
        vessels=(
            Vessel.empty("x", capacity=2),
            Vessel.with_units("y", [B, R], capacity=2),
            Vessel.with_units("z", [R, B], capacity=2),
        ),
    )
    groups = LevelTester.find_duplicates([original, shuffled, _stuck_level()])
    assert len(groups) == 1
    assert {level.id for level in groups[0]} == {"a_001", "a_002"}


def test_difficulty_progression() -> None:
    rising = [
        _swap_level("e", Tier.EASY, optimal_moves=3),
        _swap_level("m", Tier.MEDIUM, optimal_moves=5),
        _swap_level("h", Tier.HARD, optimal_moves=5),
    ]
    result = LevelTester.verify_difficulty_progression(rising)
    assert result.monotonic
    assert result.averages == {Tier.EASY: 3, Tier.MEDIUM: 5, Tier.HARD: 5}

    falling = rising + [_swap_level("x", Tier.EXPERT, optimal_moves=2)]
    assert not LevelTester.verify_difficulty_progression(falling).monotonic
