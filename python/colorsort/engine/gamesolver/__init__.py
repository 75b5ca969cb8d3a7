from colorsort.engine.gamesolver.solver import (
    HintResult,
    SolutionResult,
    SolveOutcome,
    Solver,
)

__all__ = ["HintResult", "SolutionResult", "SolveOutcome", "Solver"]
