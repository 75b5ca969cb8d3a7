"""Generator tests — determinism, reverse scrambling and solvability per tier."""

from __future__ import annotations

import json
import random
import zlib
from collections import Counter
from statistics import quantiles

import pytest

from colorsort.config import DEFAULT_POLICY, DEFAULT_TIERS, GenerationPolicy
from colorsort.engine.gamegenerator.generator import (
    MAX_LEVEL_NUMBER,
    GameGenerator,
    derive_seed,
    pack_distribution,
)
from colorsort.engine.gamerules.rules import apply_move, is_solved
from colorsort.engine.gamesolver.solver import Solver
from colorsort.engine.gamestate.state import PuzzleState
from colorsort.engine.gamevalidator.validator import Validator
from colorsort.errors import GenerationFailed
from colorsort.models.color import ColorToken
from colorsort.models.level import Tier

R, B, G = ColorToken.RED, ColorToken.BLUE, ColorToken.GREEN

# Every tier generated with easy parameters, for tests that exercise pack
# plumbing rather than difficulty.
_EASY_EVERYWHERE = GenerationPolicy(tiers={t: DEFAULT_TIERS[Tier.EASY] for t in Tier})


def _layout(state: PuzzleState) -> list[tuple]:
    return [(v.id, v.units, v.capacity) for v in state.vessels]


# -- solved layout and reverse steps ------------------------------------------


def test_solved_layout() -> None:
    state = GameGenerator.solved([R, B, G], empty_vessels=2, capacity=4)
    assert [v.id for v in state.vessels] == ["v1", "v2", "v3", "v4", "v5"]
    assert is_solved(state)
    assert sum(1 for v in state.vessels if v.is_empty) == 2


def test_reverse_candidates_are_inverses_of_legal_pours() -> None:
    rng = random.Random(7)
    state = GameGenerator.solved([R, B, G], empty_vessels=2, capacity=4)
    for _ in range(25):
        candidates = GameGenerator.reverse_candidates(state)
        if not candidates:
            break
        for move in candidates:
            before = GameGenerator.unpour(state, move)
            replayed = apply_move(before, move.from_vessel_id, move.to_vessel_id)
            assert _layout(replayed) == _layout(state), move
            assert replayed.history[-1].count == move.count, move
        state = GameGenerator.unpour(state, rng.choice(candidates))


def test_scramble_preserves_tokens_and_order_of_ids() -> None:
    goal = GameGenerator.solved([R, B, G], empty_vessels=2, capacity=4)
    scrambled = GameGenerator.scramble(goal, 12, random.Random(3))
    assert [v.id for v in scrambled.vessels] == [v.id for v in goal.vessels]
    counts = Counter(t for v in scrambled.vessels for t in v.units)
    assert counts == Counter({R: 4, B: 4, G: 4})


def test_scramble_stays_within_its_step_count() -> None:
    goal = GameGenerator.solved([R, B], empty_vessels=1, capacity=3)
    for seed in range(10):
        scrambled = GameGenerator.scramble(goal, 5, random.Random(seed))
        result = Solver.solve(scrambled)
        assert result.found
        assert len(result.path) <= 5


# -- generate -----------------------------------------------------------------


def test_generate_is_deterministic() -> None:
    _, first = GameGenerator.generate(Tier.EASY, 3, seed=1234)
    _, second = GameGenerator.generate(Tier.EASY, 3, seed=1234)
    assert json.dumps(first.to_dict()) == json.dumps(second.to_dict())


def test_generate_varies_with_seed() -> None:
    layouts = {
        json.dumps(GameGenerator.generate(Tier.EASY, 1, seed=s)[1].to_dict()["vessels"])
        for s in range(5)
    }
    assert len(layouts) > 1


@pytest.mark.timeout(600)
@pytest.mark.parametrize("tier", list(Tier), ids=lambda t: t.value)
def test_generated_levels_are_solvable(tier: Tier) -> None:
    params = DEFAULT_POLICY.tier(tier)
    state, level = GameGenerator.generate(tier, 1, seed=derive_seed(tier, 1))

    assert not is_solved(state)
    assert level.tier is tier
    assert level.vessel_count == level.color_count + params.empty_vessels
    assert level.optimal_moves >= DEFAULT_POLICY.min_optimal_moves
    assert level.move_budget >= level.optimal_moves
    assert list(level.star_thresholds) == sorted(level.star_thresholds)
    assert level.star_thresholds[0] >= level.optimal_moves

    for count in Counter(t for v in level.vessels for t in v.units).values():
        assert count == params.capacity

    bounds = params.bounds
    result = Solver.solve(state, max_depth=bounds.max_depth, max_states=bounds.max_states)
    assert result.found
    assert len(result.path) == level.optimal_moves


# 4 tiers x 250 slots: one thousand generated levels in total.
BULK_LEVELS_PER_TIER = 250


@pytest.mark.slow
@pytest.mark.timeout(1800)
@pytest.mark.parametrize("tier", list(Tier), ids=lambda t: t.value)
def test_bulk_generated_levels_all_validate(tier: Tier) -> None:
    search_times: list[float] = []
    for n in range(1, BULK_LEVELS_PER_TIER + 1):
        state, level = GameGenerator.generate(tier, n, seed=derive_seed(tier, n))
        report = Validator.validate(state, tier=tier)
        assert report.solvable, level.id
        assert report.optimal_moves == level.optimal_moves, level.id
        search_times.append(report.search_time_ms)

    # 95th percentile of the validating solve stays inside the 500 ms target
    assert quantiles(search_times, n=20)[-1] < 500.0


@pytest.mark.timeout(300)
@pytest.mark.parametrize("tier", [Tier.EASY, Tier.MEDIUM], ids=lambda t: t.value)
def test_generate_levels_numbers_and_ids(tier: Tier) -> None:
    levels = GameGenerator.generate_levels(tier, 3, start=4, theme="Deep Sea")
    assert [level.level_number for level in levels] == [4, 5, 6]
    assert [level.id for level in levels] == ["deep_sea_004", "deep_sea_005", "deep_sea_006"]
    assert [level.seed for level in levels] == [derive_seed(tier, n, "Deep Sea") for n in (4, 5, 6)]


def test_generation_failure_after_attempts() -> None:
    policy = GenerationPolicy(max_attempts=2, min_optimal_moves=1000)
    with pytest.raises(GenerationFailed) as exc_info:
        GameGenerator.generate(Tier.EASY, 1, seed=5, policy=policy)
    assert exc_info.value.attempts == 2


# -- packs --------------------------------------------------------------------


def test_pack_distribution() -> None:
    assert pack_distribution(50) == {
        Tier.EASY: 10,
        Tier.MEDIUM: 15,
        Tier.HARD: 15,
        Tier.EXPERT: 10,
    }
    for total in (1, 4, 7, 13):
        assert sum(pack_distribution(total).values()) == total


def test_generate_pack() -> None:
    progress: list[tuple[str, int, int]] = []
    pack = GameGenerator.generate_pack(
        ["Ocean"],
        levels_per_theme=4,
        policy=_EASY_EVERYWHERE,
        on_progress=lambda theme, done, total: progress.append((theme, done, total)),
    )
    levels = pack["Ocean"]
    assert [level.id for level in levels] == [f"ocean_00{n}" for n in range(1, 5)]
    assert [level.tier for level in levels] == list(Tier)
    assert progress[-1] == ("Ocean", 4, 4)


def test_derive_seed_is_stable() -> None:
    expected = (zlib.crc32(b"Ocean") << 21) | (Tier.HARD.rank << 19) | 7
    assert derive_seed(Tier.HARD, 7, "Ocean") == expected
    assert derive_seed(Tier.EASY, 1) == 1
    assert derive_seed(Tier.EXPERT, MAX_LEVEL_NUMBER - 1, "Ocean") < 2**53


def test_derive_seed_slots_never_share_a_seed() -> None:
    assert derive_seed(Tier.EASY, 10_001) != derive_seed(Tier.MEDIUM, 1)
    numbers = (0, 1, 9_999, 10_000, 10_001, 99_999, MAX_LEVEL_NUMBER - 1)
    seeds = [
        derive_seed(tier, n, theme)
        for theme in (None, "Ocean", "Forest")
        for tier in Tier
        for n in numbers
    ]
    assert len(set(seeds)) == len(seeds)


@pytest.mark.parametrize("level_number", [-1, MAX_LEVEL_NUMBER])
def test_derive_seed_rejects_out_of_range_numbers(level_number: int) -> None:
    with pytest.raises(ValueError):
        derive_seed(Tier.EASY, level_number)


def test_generate_levels_refuses_slots_past_the_range() -> None:
    with pytest.raises(ValueError):
        GameGenerator.generate_levels(Tier.EASY, 2, start=MAX_LEVEL_NUMBER - 1)
