"""Level validation: solvability, optimal move count and scoring metadata."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from colorsort.config import DEFAULT_POLICY, GenerationPolicy, ScoringPolicy, SolverBounds
from colorsort.engine.gamerules.rules import has_valid_moves, is_solved
from colorsort.engine.gamesolver.solver import SolutionResult, Solver
from colorsort.engine.gamestate.state import PuzzleState
from colorsort.errors import Rejected
from colorsort.models.level import Tier

logger = logging.getLogger(__name__)

# Above this many vessels a full solve is considered too slow to attempt.
QUICK_CHECK_MAX_VESSELS = 12


@dataclass(frozen=True)
class ValidationReport:
    solvable: bool
    optimal_moves: int
    move_budget: int
    star_thresholds: tuple[int, int, int]
    states_explored: int
    search_time_ms: float
    tier: Tier
    solution: SolutionResult | None = None
    warnings: tuple[str, ...] = field(default=())

    def __str__(self) -> str:
        text = (
            f"Solvable in {self.optimal_moves} moves "
            f"(budget {self.move_budget}, stars {list(self.star_thresholds)}, "
            f"{self.states_explored} states)"
        )
        if self.warnings:
            text += " Warning: " + "; ".join(self.warnings)
        return text


def _ceil(value: float) -> int:
    # round first so 10 * 1.2 == 12.000000000000002 does not ceil to 13
    return math.ceil(round(value, 9))


def move_budget(optimal_moves: int, multiplier: float) -> int:
    return _ceil(optimal_moves * multiplier)


def star_thresholds(optimal_moves: int, scoring: ScoringPolicy) -> tuple[int, int, int]:
    """Ascending ceilings for 3, 2 and 1 stars."""
    three, two, one = (_ceil(optimal_moves * m) for m in scoring.star_multipliers)
    return three, two, one


class Validator:
    """Stateless validator — all methods are static."""

    @staticmethod
    def validate(
        state: PuzzleState,
        tier: Tier = Tier.MEDIUM,
        policy: GenerationPolicy = DEFAULT_POLICY,
        bounds: SolverBounds | None = None,
    ) -> ValidationReport:
        """Solve *state* and derive its budget and star thresholds.

        Raises :class:`Rejected` when the puzzle has no vessels or the solver
        does not find a solution within bounds.  The attached ``result`` tells
        an unsolvable puzzle apart from one that merely exceeded the bounds.
        """
        tier = Tier(tier)
        params = policy.tier(tier)
        bounds = bounds or params.bounds

        if not state.vessels:
            raise Rejected("level has no vessels")

        result = Solver.solve(state, max_depth=bounds.max_depth, max_states=bounds.max_states)
        if not result.found:
            logger.debug("Rejected %s candidate: %s", tier, result.message)
            raise Rejected(result.message, result)

        warnings = list(color_distribution_warnings(state))
        if not result.path:
            warnings.append("level is already solved")

        optimal = len(result.path)
        return ValidationReport(
            solvable=True,
            optimal_moves=optimal,
            move_budget=move_budget(optimal, params.budget_multiplier),
            star_thresholds=star_thresholds(optimal, policy.scoring),
            states_explored=result.states_explored,
            search_time_ms=result.search_time_ms,
            tier=tier,
            solution=result,
            warnings=tuple(warnings),
        )

    @staticmethod
    def quick_check(state: PuzzleState) -> bool:
        """Cheap structural screen run before committing to a full solve."""
        if not state.vessels:
            return False
        if is_solved(state):
            return True
        has_empty = any(v.is_empty for v in state.vessels)
        if not has_empty and not has_valid_moves(state):
            return False
        return len(state.vessels) <= QUICK_CHECK_MAX_VESSELS

    @staticmethod
    def estimate_difficulty(
        state: PuzzleState,
        lookahead_depth: int = 4,
        lookahead_states: int = 300,
    ) -> float:
        """Heuristic difficulty score in ``[0, 100]`` (higher is harder).

        Combines vessel count, colour variety, empty-vessel ratio and mixed
        vessels with a shallow bounded search: puzzles solved inside the lookahead
        score by their solution length, the rest are assumed deeper.
        """
        vessels = state.vessels
        if not vessels:
            return 0.0

        score = len(vessels) * 2.0
        score += len(state.colors) * 3.0
        empty = sum(1 for v in vessels if v.is_empty)
        score -= empty / len(vessels) * 10.0
        score += sum(1 for v in vessels if not v.is_empty and not v.is_resolved) * 2.0

        lookahead = Solver.solve(state, max_depth=lookahead_depth, max_states=lookahead_states)
        if lookahead.found:
            score += len(lookahead.path) * 2.0
        else:
            score += lookahead_depth * 2.0 + 5.0

        return max(0.0, min(100.0, score))


def color_distribution_warnings(state: PuzzleState) -> list[str]:
    warnings: list[str] = []
    full = [v for v in state.vessels if v.is_full]
    resolved = [v for v in full if v.is_resolved]
    if full and len(resolved) / len(full) > 0.5:
        warnings.append("more than half of the full vessels are already sorted")
    if len(state.colors) < 2:
        warnings.append("level has fewer than 2 colours")
    return warnings
