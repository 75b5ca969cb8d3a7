"""Vessel model — a capacity-bounded stack of colour tokens."""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Iterable

from colorsort.errors import InvalidCount
from colorsort.models.color import ColorToken

DEFAULT_CAPACITY = 4


@dataclass(frozen=True)
class Vessel:
    """An immutable tube of tokens.

    ``units[0]`` is the bottom of the vessel and ``units[-1]`` the top.  Every
    operation that changes contents returns a new ``Vessel``; units are held in
    a tuple so no two vessels ever share a mutable sequence.
    """

    id: str
    units: tuple[ColorToken, ...]
    capacity: int

    def __post_init__(self) -> None:
        if not isinstance(self.units, tuple):
            object.__setattr__(self, "units", tuple(self.units))
        if isinstance(self.capacity, bool) or not isinstance(self.capacity, int):
            raise ValueError(f"Vessel {self.id!r}: capacity must be an int.")
        if self.capacity <= 0:
            raise ValueError(
                f"Vessel {self.id!r}: capacity must be positive, got {self.capacity}."
            )
        if len(self.units) > self.capacity:
            raise InvalidCount(
                f"Vessel {self.id!r} holds {len(self.units)} units "
                f"but capacity is {self.capacity}."
            )

    # -- construction helpers -------------------------------------------------

    @classmethod
    def empty(cls, id: str, capacity: int = DEFAULT_CAPACITY) -> Vessel:
        return cls(id=id, units=(), capacity=capacity)

    @classmethod
    def with_units(
        cls,
        id: str,
        units: Iterable[ColorToken | int],
        capacity: int = DEFAULT_CAPACITY,
    ) -> Vessel:
        """Create a vessel from bottom-to-top tokens.

        Example::

            Vessel.with_units("A", [ColorToken.RED, ColorToken.BLUE], capacity=2)
        """
        return cls(id=id, units=tuple(ColorToken(u) for u in units), capacity=capacity)

    # -- derived properties ---------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self.units

    @property
    def is_full(self) -> bool:
        return len(self.units) >= self.capacity

    @property
    def available_space(self) -> int:
        return self.capacity - len(self.units)

    @property
    def top_token(self) -> ColorToken | None:
        return self.units[-1] if self.units else None

    @property
    def top_run_length(self) -> int:
        """Number of contiguous equal tokens at the top."""
        if not self.units:
            return 0
        top = self.units[-1]
        count = 0
        for token in reversed(self.units):
            if token != top:
                break
            count += 1
        return count

    @property
    def is_resolved(self) -> bool:
        """Empty, or full of a single colour."""
        if not self.units:
            return True
        if len(self.units) < self.capacity:
            return False
        first = self.units[0]
        return all(token == first for token in self.units)

    @cached_property
    def code(self) -> str:
        """Capacity and bottom-to-top token codes, e.g. ``"4:aab"``."""
        return f"{self.capacity}:{''.join(t.code for t in self.units)}"

    # -- transitions ----------------------------------------------------------

    def add_units(self, tokens: Iterable[ColorToken]) -> Vessel:
        """Return a new vessel with *tokens* stacked on top (in order)."""
        added = tuple(tokens)
        if len(self.units) + len(added) > self.capacity:
            raise InvalidCount(
                f"Cannot add {len(added)} units to vessel {self.id!r}: "
                f"only {self.available_space} free."
            )
        return Vessel(id=self.id, units=self.units + added, capacity=self.capacity)

    def remove_top(self, count: int) -> Vessel:
        """Return a new vessel with the top *count* units removed."""
        if count < 0 or count > len(self.units):
            raise InvalidCount(
                f"Cannot remove {count} units from vessel {self.id!r}: "
                f"it holds {len(self.units)}."
            )
        return Vessel(
            id=self.id,
            units=self.units[: len(self.units) - count],
            capacity=self.capacity,
        )

    # -- debugging ------------------------------------------------------------

    def describe(self) -> str:
        if self.is_empty:
            return f"{self.id}: [empty]"
        names = ", ".join(t.name.lower() for t in self.units)
        return f"{self.id}: [{names}] ({len(self.units)}/{self.capacity})"
