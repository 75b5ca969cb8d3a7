"""Move value object."""

from __future__ import annotations

from dataclasses import dataclass

from colorsort.models.color import ColorToken


@dataclass(frozen=True)
class Move:
    """A transfer of ``count`` units of ``token`` between two vessels.

    ``count`` is always what the rules allow, never a player-chosen amount.
    """

    from_vessel_id: str
    to_vessel_id: str
    token: ColorToken
    count: int

    def reverse(self) -> Move:
        """Swap source and destination, keeping token and count.

        Only meaningful to the generator; the reverse of a forward move is not
        in general a legal forward move.
        """
        return Move(
            from_vessel_id=self.to_vessel_id,
            to_vessel_id=self.from_vessel_id,
            token=self.token,
            count=self.count,
        )

    def to_dict(self) -> dict:
        return {
            "from": self.from_vessel_id,
            "to": self.to_vessel_id,
            "token": self.token.name.lower(),
            "count": self.count,
        }

    def __str__(self) -> str:
        return (
            f"{self.from_vessel_id} -> {self.to_vessel_id} "
            f"({self.count} x {self.token.name.lower()})"
        )
