"""Breadth-first puzzle solver.

Nodes are vessel layouts deduplicated by their canonical key; edges are legal
pours between distinct vessels.  Because the frontier is FIFO, the first
solved layout reached has a shortest path, which is what hints and the
validator's optimal move count rely on.  The search is bounded by a depth
cap and a cap on expanded states; hitting either bound is reported as
``BOUNDS_EXCEEDED`` and never as ``UNSOLVABLE``.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass
from enum import StrEnum
from typing import Iterator

from colorsort.config import DEFAULT_MAX_DEPTH, DEFAULT_MAX_STATES
from colorsort.engine.gamerules.rules import can_move, is_solved, quantity
from colorsort.engine.gamestate.state import PuzzleState, canonical_key
from colorsort.models.move import Move
from colorsort.models.vessel import Vessel

logger = logging.getLogger(__name__)

Layout = tuple[Vessel, ...]


class SolveOutcome(StrEnum):
    SOLVED = "solved"
    BOUNDS_EXCEEDED = "bounds_exceeded"
    UNSOLVABLE = "unsolvable"


@dataclass(frozen=True)
class SolutionResult:
    found: bool
    path: tuple[Move, ...]
    states_explored: int
    search_time_ms: float
    outcome: SolveOutcome
    message: str = ""

    @property
    def move_count(self) -> int | None:
        return len(self.path) if self.found else None

    @property
    def bounds_exceeded(self) -> bool:
        return self.outcome is SolveOutcome.BOUNDS_EXCEEDED

    def __str__(self) -> str:
        stats = f"{self.states_explored} states, {self.search_time_ms:.1f}ms"
        if self.found:
            return f"Solution: {len(self.path)} moves ({stats})"
        return f"No solution: {self.message} ({stats})"


@dataclass(frozen=True)
class HintResult:
    found: bool
    next_move: Move | None
    moves_to_solution: int | None
    states_explored: int
    search_time_ms: float
    outcome: SolveOutcome
    message: str = ""

    def __str__(self) -> str:
        if self.found:
            return f"Hint: {self.next_move} ({self.moves_to_solution} moves to solution)"
        return f"No hint: {self.message}"


class Solver:
    """Stateless solver — all methods are static."""

    @staticmethod
    def solve(
        state: PuzzleState,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_states: int = DEFAULT_MAX_STATES,
    ) -> SolutionResult:
        """Return a shortest move sequence that solves *state*, if one is found."""
        started = time.perf_counter()

        if is_solved(state):
            return SolutionResult(
                found=True,
                path=(),
                states_explored=0,
                search_time_ms=_elapsed_ms(started),
                outcome=SolveOutcome.SOLVED,
                message="already solved",
            )

        root = state.vessels
        root_key = canonical_key(root)
        # key -> (parent key, move that produced it); doubles as the visited set
        parents: dict[str, tuple[str, Move] | None] = {root_key: None}
        queue: deque[tuple[Layout, str, int]] = deque([(root, root_key, 0)])
        explored = 0
        depth_capped = False

        while queue:
            if explored >= max_states:
                logger.debug(
                    "Search stopped at %d states (frontier %d)", explored, len(queue)
                )
                return SolutionResult(
                    found=False,
                    path=(),
                    states_explored=explored,
                    search_time_ms=_elapsed_ms(started),
                    outcome=SolveOutcome.BOUNDS_EXCEEDED,
                    message=f"search exceeded maximum states ({max_states})",
                )

            layout, key, depth = queue.popleft()
            explored += 1

            if depth >= max_depth:
                depth_capped = True
                continue

            for move, successor in _successors(layout):
                succ_key = canonical_key(successor)
                if succ_key in parents:
                    continue
                parents[succ_key] = (key, move)
                if all(v.is_resolved for v in successor):
                    path = _trace(parents, succ_key)
                    return SolutionResult(
                        found=True,
                        path=path,
                        states_explored=explored,
                        search_time_ms=_elapsed_ms(started),
                        outcome=SolveOutcome.SOLVED,
                    )
                queue.append((successor, succ_key, depth + 1))

        if depth_capped:
            logger.debug("Search exhausted below depth cap %d", max_depth)
            return SolutionResult(
                found=False,
                path=(),
                states_explored=explored,
                search_time_ms=_elapsed_ms(started),
                outcome=SolveOutcome.BOUNDS_EXCEEDED,
                message=f"no solution within {max_depth} moves",
            )
        return SolutionResult(
            found=False,
            path=(),
            states_explored=explored,
            search_time_ms=_elapsed_ms(started),
            outcome=SolveOutcome.UNSOLVABLE,
            message="puzzle is unsolvable",
        )

    @staticmethod
    def hint(
        state: PuzzleState,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_states: int = DEFAULT_MAX_STATES,
    ) -> HintResult:
        """Return the first move of a shortest solution, or no hint."""
        solution = Solver.solve(state, max_depth=max_depth, max_states=max_states)

        if solution.found and solution.path:
            return HintResult(
                found=True,
                next_move=solution.path[0],
                moves_to_solution=len(solution.path),
                states_explored=solution.states_explored,
                search_time_ms=solution.search_time_ms,
                outcome=solution.outcome,
            )

        return HintResult(
            found=False,
            next_move=None,
            moves_to_solution=0 if solution.found else None,
            states_explored=solution.states_explored,
            search_time_ms=solution.search_time_ms,
            outcome=solution.outcome,
            message=solution.message or "no hint available",
        )

    @staticmethod
    def is_solvable(
        state: PuzzleState,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_states: int = DEFAULT_MAX_STATES,
    ) -> bool | None:
        """True/False when the search decides, ``None`` when it hit a bound."""
        result = Solver.solve(state, max_depth=max_depth, max_states=max_states)
        if result.bounds_exceeded:
            return None
        return result.found


# -- helpers ------------------------------------------------------------------


def _successors(layout: Layout) -> Iterator[tuple[Move, Layout]]:
    for i, source in enumerate(layout):
        if source.is_empty:
            continue
        for j, target in enumerate(layout):
            if i == j or not can_move(source, target):
                continue
            count = quantity(source, target)
            successor = list(layout)
            successor[i] = source.remove_top(count)
            successor[j] = target.add_units(source.units[len(source.units) - count:])
            move = Move(
                from_vessel_id=source.id,
                to_vessel_id=target.id,
                token=source.top_token,
                count=count,
            )
            yield move, tuple(successor)


def _trace(parents: dict[str, tuple[str, Move] | None], key: str) -> tuple[Move, ...]:
    path: list[Move] = []
    link = parents[key]
    while link is not None:
        key, move = link
        path.append(move)
        link = parents[key]
    path.reverse()
    return tuple(path)


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000.0
