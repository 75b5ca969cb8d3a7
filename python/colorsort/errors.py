"""Exception types raised by the puzzle core."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from colorsort.engine.gamesolver.solver import SolutionResult


class SortPuzzleError(Exception):
    """Base class for every recoverable error raised by ``colorsort``."""


class IllegalMove(SortPuzzleError, ValueError):
    """A pour that the rules do not allow (or that names an unknown vessel)."""

    def __init__(self, from_id: str, to_id: str, reason: str) -> None:
        super().__init__(f"Illegal move {from_id} -> {to_id}: {reason}")
        self.from_id = from_id
        self.to_id = to_id
        self.reason = reason


class NothingToUndo(SortPuzzleError):
    """Undo requested on a state with an empty history."""


class InvalidCount(SortPuzzleError, ValueError):
    """A vessel operation asked for more units than it holds or can hold."""


class GenerationFailed(SortPuzzleError):
    """The generator exhausted its retry budget without an accepted level."""

    def __init__(self, message: str, attempts: int) -> None:
        super().__init__(message)
        self.attempts = attempts


class Rejected(SortPuzzleError):
    """The validator refused a puzzle.

    ``result`` carries the solver run that led to the rejection, if any, so
    callers can tell "unsolvable" apart from "not found within bounds".
    """

    def __init__(self, reason: str, result: SolutionResult | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.result = result
