"""Core gameplay logic — processes pours and checks win/lose conditions."""

from __future__ import annotations

from colorsort.config import SolverBounds
from colorsort.engine.gamerules.rules import apply_move, has_valid_moves, is_solved, undo
from colorsort.engine.gamesolver.solver import HintResult, Solver
from colorsort.engine.gamestate.state import PuzzleState
from colorsort.errors import IllegalMove, NothingToUndo
from colorsort.models.level import Level
from colorsort.models.move import Move


class GamePlay:
    """Orchestrates a single play-through of a level."""

    def __init__(self, level: Level, bounds: SolverBounds | None = None) -> None:
        self.level = level
        self.bounds = bounds or SolverBounds()
        self.state = PuzzleState.from_level(level)
        self._budget: int | None = level.move_budget
        self._initial = self.state

    @classmethod
    def from_state(
        cls,
        state: PuzzleState,
        move_budget: int | None = None,
        bounds: SolverBounds | None = None,
    ) -> GamePlay:
        """Create a session from a bare state (e.g. one loaded from a fixture).

        Without a level there are no star thresholds; *move_budget* defaults
        to unlimited.
        """
        obj = object.__new__(cls)
        obj.level = None
        obj.bounds = bounds or SolverBounds()
        obj.state = state
        obj._budget = move_budget
        obj._initial = state
        return obj

    # -- movement -------------------------------------------------------------

    def move(self, from_id: str, to_id: str) -> bool:
        """Pour *from_id* into *to_id*.

        Returns True if the pour was legal and applied.  Nothing changes once
        the level is won or lost.
        """
        if self.is_won or self.is_lost:
            return False
        try:
            self.state = apply_move(self.state, from_id, to_id)
        except IllegalMove:
            return False
        return True

    def undo(self) -> bool:
        try:
            self.state = undo(self.state)
        except NothingToUndo:
            return False
        return True

    def reset(self) -> None:
        self.state = self._initial

    # -- solver helpers -------------------------------------------------------

    def hint(self) -> HintResult:
        return Solver.hint(
            self.state,
            max_depth=self.bounds.max_depth,
            max_states=self.bounds.max_states,
        )

    def apply_hint(self) -> Move | None:
        """Play the hinted pour, returning it, or None when there is none."""
        result = self.hint()
        if not result.found or result.next_move is None:
            return None
        move = result.next_move
        if not self.move(move.from_vessel_id, move.to_vessel_id):
            return None
        return move

    # -- queries --------------------------------------------------------------

    @property
    def moves_made(self) -> int:
        return self.state.move_count

    @property
    def move_budget(self) -> int | None:
        return self._budget

    @property
    def moves_remaining(self) -> int | None:
        budget = self.move_budget
        if budget is None:
            return None
        return max(0, budget - self.moves_made)

    @property
    def is_won(self) -> bool:
        return is_solved(self.state)

    @property
    def is_lost(self) -> bool:
        """Unsolved with the budget spent, or with no legal pour left."""
        if self.is_won:
            return False
        if self.moves_remaining == 0:
            return True
        return not has_valid_moves(self.state)

    @property
    def stars(self) -> int:
        if not self.is_won or self.level is None:
            return 0
        return self.level.stars_for(self.moves_made)

