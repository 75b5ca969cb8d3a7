"""Generation policy defaults and JSON overrides."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from colorsort.config import (
    DEFAULT_POLICY,
    ScoringPolicy,
    SolverBounds,
    TierParams,
    load_policy,
    policy_from_dict,
    policy_to_dict,
)
from colorsort.models.level import Tier


def test_defaults() -> None:
    assert DEFAULT_POLICY.max_attempts == 50
    assert DEFAULT_POLICY.scoring.star_multipliers == (1.05, 1.2, 1.4)
    assert DEFAULT_POLICY.tier(Tier.EASY).budget_multiplier == 2.0
    assert DEFAULT_POLICY.tier("expert").budget_multiplier == 1.2
    assert DEFAULT_POLICY.tier(Tier.MEDIUM).bounds == SolverBounds(50, 5000)


def test_overrides_keep_unspecified_values() -> None:
    policy = policy_from_dict(
        {
            "tiers": {"easy": {"scramble_range": [2, 4], "bounds": {"max_states": 100}}},
            "max_attempts": 5,
        }
    )
    easy = policy.tier(Tier.EASY)
    assert easy.scramble_range == (2, 4)
    assert easy.bounds == SolverBounds(max_depth=50, max_states=100)
    assert easy.budget_multiplier == 2.0
    assert policy.max_attempts == 5
    assert policy.tier(Tier.HARD) == DEFAULT_POLICY.tier(Tier.HARD)
    assert policy.scoring == DEFAULT_POLICY.scoring


def test_policy_survives_json(tmp_path: Path) -> None:
    path = tmp_path / "policy.json"
    path.write_text(json.dumps(policy_to_dict(DEFAULT_POLICY)))
    assert load_policy(path) == DEFAULT_POLICY


@pytest.mark.parametrize(
    "factory",
    [
        lambda: SolverBounds(max_states=0),
        lambda: TierParams((3, 2), 2, (1, 2), 1.5),
        lambda: TierParams((2, 3), 0, (1, 2), 1.5),
        lambda: TierParams((2, 3), 2, (1, 2), 0.5),
        lambda: ScoringPolicy((1.4, 1.2, 1.05)),
    ],
    ids=["zero-states", "colour-range", "no-empties", "budget-below-one", "descending-stars"],
)
def test_invalid_values(factory) -> None:
    with pytest.raises(ValueError):
        factory()


def test_unknown_tier_override() -> None:
    with pytest.raises(ValueError):
        policy_from_dict({"tiers": {"legendary": {}}})
