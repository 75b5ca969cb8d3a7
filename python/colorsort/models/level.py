"""Level model: an initial vessel layout plus its generation metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from colorsort.models.color import ColorToken
from colorsort.models.vessel import DEFAULT_CAPACITY, Vessel


class Tier(StrEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"

    @property
    def rank(self) -> int:
        return list(Tier).index(self)

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class Level:
    """Immutable level data handed to the host application.

    ``star_thresholds`` holds three ascending move ceilings, in the order
    3 stars, 2 stars, 1 star.
    """

    id: str
    name: str
    tier: Tier
    vessels: tuple[Vessel, ...]
    optimal_moves: int
    move_budget: int
    star_thresholds: tuple[int, int, int]
    seed: int | None = None
    level_number: int = 1
    description: str = ""
    warnings: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "vessels", tuple(self.vessels))
        object.__setattr__(self, "star_thresholds", tuple(self.star_thresholds))
        object.__setattr__(self, "warnings", tuple(self.warnings))
        if len(self.star_thresholds) != 3:
            raise ValueError(
                f"Level {self.id!r}: expected 3 star thresholds, "
                f"got {len(self.star_thresholds)}."
            )
        if list(self.star_thresholds) != sorted(self.star_thresholds):
            raise ValueError(
                f"Level {self.id!r}: star thresholds must ascend, "
                f"got {self.star_thresholds}."
            )

    # -- queries --------------------------------------------------------------

    @property
    def vessel_count(self) -> int:
        return len(self.vessels)

    @property
    def color_count(self) -> int:
        return len({t for v in self.vessels for t in v.units})

    @property
    def total_units(self) -> int:
        return sum(len(v.units) for v in self.vessels)

    def stars_for(self, moves: int) -> int:
        """Star rating (0-3) earned by finishing in *moves* moves."""
        three, two, one = self.star_thresholds
        if moves <= three:
            return 3
        if moves <= two:
            return 2
        if moves <= one:
            return 1
        return 0

    @property
    def complexity_score(self) -> float:
        """Rough difficulty score used for sorting level lists."""
        score = self.vessel_count * 2 + self.total_units * 0.5
        if self.move_budget > 0:
            score += self.total_units / self.move_budget * 5
        return score * _TIER_WEIGHT[self.tier]

    # -- serialisation --------------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "tier": self.tier.value,
            "levelNumber": self.level_number,
            "seed": self.seed,
            "description": self.description,
            "optimalMoves": self.optimal_moves,
            "moveBudget": self.move_budget,
            "starThresholds": list(self.star_thresholds),
            "warnings": list(self.warnings),
            "vessels": [
                {
                    "id": v.id,
                    "capacity": v.capacity,
                    "units": [t.name.lower() for t in v.units],
                }
                for v in self.vessels
            ],
        }

    @classmethod
    def from_dict(cls, data: dict) -> Level:
        vessels = tuple(
            Vessel.with_units(
                id=str(v["id"]),
                units=[ColorToken.from_name(name) for name in v["units"]],
                capacity=int(v.get("capacity", DEFAULT_CAPACITY)),
            )
            for v in data["vessels"]
        )
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            tier=Tier(data["tier"]),
            vessels=vessels,
            optimal_moves=int(data["optimalMoves"]),
            move_budget=int(data["moveBudget"]),
            star_thresholds=tuple(int(x) for x in data["starThresholds"]),
            seed=data.get("seed"),
            level_number=int(data.get("levelNumber", 1)),
            description=data.get("description", ""),
            warnings=tuple(data.get("warnings", ())),
        )


_TIER_WEIGHT: dict[Tier, float] = {
    Tier.EASY: 0.5,
    Tier.MEDIUM: 1.0,
    Tier.HARD: 1.5,
    Tier.EXPERT: 2.0,
}
