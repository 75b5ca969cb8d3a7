"""Batch quality checks over generated levels."""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass, field
from statistics import mean
from typing import Callable, Sequence

from colorsort.config import DEFAULT_POLICY, GenerationPolicy
from colorsort.engine.gamestate.state import PuzzleState
from colorsort.engine.gamevalidator.validator import ValidationReport, Validator
from colorsort.errors import Rejected
from colorsort.models.level import Level, Tier

# Acceptable move budget / optimal ratio for a level to pass QA.
BUDGET_RATIO_RANGE = (1.1, 3.0)
MIN_OPTIMAL_MOVES = 2


@dataclass(frozen=True)
class LevelTestResult:
    level: Level
    solvable: bool
    optimal_moves: int | None
    states_explored: int | None
    passes_quality: bool
    error: str | None = None
    warnings: tuple[str, ...] = ()

    def __str__(self) -> str:
        status = "PASS" if self.solvable and self.passes_quality else "FAIL"
        return (
            f"{self.level.id}: {status}, optimal={self.optimal_moves}, "
            f"states={self.states_explored}"
        )


@dataclass(frozen=True)
class BatchTestResult:
    results: tuple[LevelTestResult, ...]

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.solvable and r.passes_quality)

    @property
    def failed(self) -> int:
        return self.total - self.passed

    @property
    def warnings(self) -> int:
        return sum(1 for r in self.results if r.warnings)

    @property
    def pass_rate(self) -> float:
        return self.passed / self.total if self.total else 0.0


@dataclass(frozen=True)
class LevelStatistics:
    total_levels: int
    solvable: int
    quality_passed: int
    tier_distribution: dict[Tier, int]
    vessel_distribution: dict[int, int]
    average_optimal_moves: float
    min_optimal_moves: int
    max_optimal_moves: int
    average_states_explored: float


@dataclass(frozen=True)
class DifficultyProgression:
    averages: dict[Tier, float] = field(default_factory=dict)
    monotonic: bool = True


class LevelTester:
    """Stateless level QA helpers — all methods are static."""

    @staticmethod
    def test_level(level: Level, policy: GenerationPolicy = DEFAULT_POLICY) -> LevelTestResult:
        try:
            report = Validator.validate(
                PuzzleState.from_level(level), tier=level.tier, policy=policy
            )
        except Rejected as exc:
            explored = exc.result.states_explored if exc.result is not None else None
            return LevelTestResult(
                level=level,
                solvable=False,
                optimal_moves=None,
                states_explored=explored,
                passes_quality=False,
                error=exc.reason,
            )
        return LevelTestResult(
            level=level,
            solvable=True,
            optimal_moves=report.optimal_moves,
            states_explored=report.states_explored,
            passes_quality=_passes_quality(level, report),
            warnings=report.warnings,
        )

    @staticmethod
    def test_levels(
        levels: Sequence[Level],
        policy: GenerationPolicy = DEFAULT_POLICY,
        on_progress: Callable[[int, int], None] | None = None,
    ) -> BatchTestResult:
        results: list[LevelTestResult] = []
        for i, level in enumerate(levels):
            results.append(LevelTester.test_level(level, policy))
            if on_progress is not None:
                on_progress(i + 1, len(levels))
        return BatchTestResult(results=tuple(results))

    @staticmethod
    def statistics(
        levels: Sequence[Level],
        batch: BatchTestResult | None = None,
    ) -> LevelStatistics:
        """Summarise *levels*; pass an existing *batch* to skip re-solving."""
        batch = batch or LevelTester.test_levels(levels)
        optimal = [r.optimal_moves for r in batch.results if r.optimal_moves is not None]
        explored = [r.states_explored for r in batch.results if r.states_explored is not None]
        return LevelStatistics(
            total_levels=len(levels),
            solvable=sum(1 for r in batch.results if r.solvable),
            quality_passed=sum(1 for r in batch.results if r.passes_quality),
            tier_distribution=dict(Counter(level.tier for level in levels)),
            vessel_distribution=dict(Counter(level.vessel_count for level in levels)),
            average_optimal_moves=mean(optimal) if optimal else 0.0,
            min_optimal_moves=min(optimal, default=0),
            max_optimal_moves=max(optimal, default=0),
            average_states_explored=mean(explored) if explored else 0.0,
        )

    @staticmethod
    def find_duplicates(levels: Sequence[Level]) -> list[list[Level]]:
        """Groups of levels whose starting layouts are identical up to vessel order."""
        groups: dict[str, list[Level]] = defaultdict(list)
        for level in levels:
            groups[PuzzleState.from_level(level).canonical_key].append(level)
        return [group for group in groups.values() if len(group) > 1]

    @staticmethod
    def verify_difficulty_progression(levels: Sequence[Level]) -> DifficultyProgression:
        """Check that average optimal length never drops from one tier to the next.

        Uses the optimal move counts recorded on the levels.
        """
        by_tier: dict[Tier, list[int]] = defaultdict(list)
        for level in levels:
            by_tier[level.tier].append(level.optimal_moves)
        averages = {tier: mean(by_tier[tier]) for tier in Tier if by_tier[tier]}

        ordered = [averages[tier] for tier in Tier if tier in averages]
        monotonic = all(a <= b for a, b in zip(ordered, ordered[1:]))
        return DifficultyProgression(averages=averages, monotonic=monotonic)


def _passes_quality(level: Level, report: ValidationReport) -> bool:
    if report.optimal_moves < MIN_OPTIMAL_MOVES:
        return False
    if report.optimal_moves != level.optimal_moves:
        return False
    low, high = BUDGET_RATIO_RANGE
    ratio = level.move_budget / report.optimal_moves
    return low <= ratio <= high
