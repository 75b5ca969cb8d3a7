"""Tunable generation and scoring policy.

Everything here is calibration data rather than algorithm: per-tier
generation parameters, solver bounds, the move-budget multiplier and the
star-threshold multipliers.  ``DEFAULT_POLICY`` is used unless a caller
passes its own ``GenerationPolicy`` (for instance one read with
:func:`load_policy`).
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path

from colorsort.models.level import Tier

DEFAULT_MAX_DEPTH = 50
DEFAULT_MAX_STATES = 5000


@dataclass(frozen=True)
class SolverBounds:
    max_depth: int = DEFAULT_MAX_DEPTH
    max_states: int = DEFAULT_MAX_STATES

    def __post_init__(self) -> None:
        if self.max_depth < 0 or self.max_states < 1:
            raise ValueError(f"Invalid solver bounds: {self}.")


@dataclass(frozen=True)
class TierParams:
    """Generation parameters for one difficulty tier.

    Ranges are inclusive ``(low, high)`` pairs drawn from the seeded stream.
    """

    color_range: tuple[int, int]
    empty_vessels: int
    scramble_range: tuple[int, int]
    budget_multiplier: float
    capacity: int = 4
    bounds: SolverBounds = field(default_factory=SolverBounds)

    def __post_init__(self) -> None:
        object.__setattr__(self, "color_range", tuple(self.color_range))
        object.__setattr__(self, "scramble_range", tuple(self.scramble_range))
        lo, hi = self.color_range
        if not 1 <= lo <= hi:
            raise ValueError(f"Invalid colour range {self.color_range}.")
        lo, hi = self.scramble_range
        if not 1 <= lo <= hi:
            raise ValueError(f"Invalid scramble range {self.scramble_range}.")
        if self.empty_vessels < 1:
            raise ValueError("A tier needs at least one empty vessel.")
        if self.capacity < 2:
            raise ValueError("Vessel capacity below 2 cannot be scrambled.")
        if self.budget_multiplier < 1.0:
            raise ValueError("Move budget multiplier must be >= 1.")


@dataclass(frozen=True)
class ScoringPolicy:
    """Multipliers applied to the optimal move count (3, 2, 1 stars)."""

    star_multipliers: tuple[float, float, float] = (1.05, 1.2, 1.4)

    def __post_init__(self) -> None:
        object.__setattr__(self, "star_multipliers", tuple(self.star_multipliers))
        if len(self.star_multipliers) != 3:
            raise ValueError("Exactly three star multipliers are required.")
        if list(self.star_multipliers) != sorted(self.star_multipliers):
            raise ValueError("Star multipliers must ascend (3 stars first).")


DEFAULT_TIERS: dict[Tier, TierParams] = {
    Tier.EASY: TierParams(
        color_range=(3, 3),
        empty_vessels=2,
        scramble_range=(3, 6),
        budget_multiplier=2.0,
    ),
    Tier.MEDIUM: TierParams(
        color_range=(4, 4),
        empty_vessels=2,
        scramble_range=(6, 10),
        budget_multiplier=1.5,
    ),
    Tier.HARD: TierParams(
        color_range=(5, 5),
        empty_vessels=2,
        scramble_range=(8, 12),
        budget_multiplier=1.3,
        bounds=SolverBounds(max_states=20000),
    ),
    Tier.EXPERT: TierParams(
        color_range=(6, 6),
        empty_vessels=2,
        scramble_range=(10, 14),
        budget_multiplier=1.2,
        bounds=SolverBounds(max_states=30000),
    ),
}


@dataclass(frozen=True)
class GenerationPolicy:
    tiers: dict[Tier, TierParams] = field(default_factory=lambda: dict(DEFAULT_TIERS))
    scoring: ScoringPolicy = field(default_factory=ScoringPolicy)
    max_attempts: int = 50
    min_optimal_moves: int = 2

    def tier(self, tier: Tier) -> TierParams:
        return self.tiers[Tier(tier)]


DEFAULT_POLICY = GenerationPolicy()


# -- JSON overrides -----------------------------------------------------------


def policy_to_dict(policy: GenerationPolicy) -> dict:
    return {
        "tiers": {tier.value: asdict(params) for tier, params in policy.tiers.items()},
        "scoring": asdict(policy.scoring),
        "max_attempts": policy.max_attempts,
        "min_optimal_moves": policy.min_optimal_moves,
    }


def policy_from_dict(data: dict, base: GenerationPolicy = DEFAULT_POLICY) -> GenerationPolicy:
    """Overlay *data* on *base*; keys that are absent keep the base value."""
    tiers = dict(base.tiers)
    for name, overrides in data.get("tiers", {}).items():
        tier = Tier(name)
        overrides = dict(overrides)
        if "bounds" in overrides:
            overrides["bounds"] = replace(tiers[tier].bounds, **overrides["bounds"])
        tiers[tier] = replace(tiers[tier], **overrides)

    scoring = base.scoring
    if "scoring" in data:
        scoring = replace(scoring, **data["scoring"])

    return GenerationPolicy(
        tiers=tiers,
        scoring=scoring,
        max_attempts=int(data.get("max_attempts", base.max_attempts)),
        min_optimal_moves=int(data.get("min_optimal_moves", base.min_optimal_moves)),
    )


def load_policy(path: Path) -> GenerationPolicy:
    return policy_from_dict(json.loads(Path(path).read_text()))
