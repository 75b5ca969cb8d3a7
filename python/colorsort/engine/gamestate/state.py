"""Immutable puzzle state and its canonical key."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from typing import Iterable

from colorsort.models.level import Level
from colorsort.models.move import Move
from colorsort.models.vessel import Vessel


def canonical_key(vessels: Iterable[Vessel]) -> str:
    """Order-independent encoding of a vessel multiset.

    Vessel ids are ignored, so two layouts that only differ by which id holds
    which stack collapse to the same key.  Capacity and token order are exact.
    """
    return "|".join(sorted(v.code for v in vessels))


@dataclass(frozen=True, eq=False)
class PuzzleState:
    """The vessels of a puzzle plus the moves that led here.

    Equality and hashing use :func:`canonical_key`, so history and vessel order
    do not take part in comparisons.
    """

    vessels: tuple[Vessel, ...]
    history: tuple[Move, ...] = field(default=())

    def __post_init__(self) -> None:
        if not isinstance(self.vessels, tuple):
            object.__setattr__(self, "vessels", tuple(self.vessels))
        if not isinstance(self.history, tuple):
            object.__setattr__(self, "history", tuple(self.history))
        ids = [v.id for v in self.vessels]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate vessel ids in {ids}.")

    # -- construction helpers -------------------------------------------------

    @classmethod
    def from_level(cls, level: Level) -> PuzzleState:
        return cls(vessels=level.vessels)

    # -- queries --------------------------------------------------------------

    @cached_property
    def canonical_key(self) -> str:
        return canonical_key(self.vessels)

    def vessel(self, vessel_id: str) -> Vessel:
        for v in self.vessels:
            if v.id == vessel_id:
                return v
        raise KeyError(vessel_id)

    def index_of(self, vessel_id: str) -> int:
        for i, v in enumerate(self.vessels):
            if v.id == vessel_id:
                return i
        raise KeyError(vessel_id)

    @property
    def move_count(self) -> int:
        return len(self.history)

    @property
    def total_units(self) -> int:
        return sum(len(v.units) for v in self.vessels)

    @property
    def colors(self) -> frozenset:
        return frozenset(t for v in self.vessels for t in v.units)

    def replace_vessels(self, updates: dict[str, Vessel], move: Move | None = None) -> PuzzleState:
        """Return a new state with vessels swapped by id, optionally logging *move*."""
        vessels = tuple(updates.get(v.id, v) for v in self.vessels)
        history = self.history + (move,) if move is not None else self.history
        return PuzzleState(vessels=vessels, history=history)

    # -- equality -------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PuzzleState):
            return NotImplemented
        return self.canonical_key == other.canonical_key

    def __hash__(self) -> int:
        return hash(self.canonical_key)

    def pretty(self) -> str:
        return "\n".join(v.describe() for v in self.vessels)
