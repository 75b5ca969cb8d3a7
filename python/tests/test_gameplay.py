"""GamePlay session tests — moves, undo, budget, hints and stars."""

from __future__ import annotations

from colorsort.engine.gameplay.game import GamePlay
from colorsort.engine.gamestate.state import PuzzleState
from colorsort.models.color import ColorToken
from colorsort.models.level import Level, Tier
from colorsort.models.vessel import Vessel

R, B = ColorToken.RED, ColorToken.BLUE


def _level(move_budget: int = 6) -> Level:
    return Level(
        id="test_001",
        name="Test #1",
        tier=Tier.EASY,
        vessels=(
            Vessel.with_units("A", [R, B], capacity=2),
            Vessel.with_units("B", [B, R], capacity=2),
            Vessel.empty("C", capacity=2),
        ),
        optimal_moves=3,
        move_budget=move_budget,
        star_thresholds=(4, 4, 5),
    )


def test_new_game() -> None:
    game = GamePlay(_level())
    assert game.moves_made == 0
    assert game.moves_remaining == 6
    assert not game.is_won
    assert not game.is_lost
    assert game.stars == 0


def test_legal_and_illegal_moves() -> None:
    game = GamePlay(_level())
    assert not game.move("A", "B")
    assert not game.move("C", "A")
    assert not game.move("A", "nope")
    assert game.moves_made == 0

    assert game.move("A", "C")
    assert game.moves_made == 1
    assert game.moves_remaining == 5


def test_winning_awards_stars() -> None:
    game = GamePlay(_level())
    for from_id, to_id in [("A", "C"), ("B", "A"), ("B", "C")]:
        assert game.move(from_id, to_id)
    assert game.is_won
    assert not game.is_lost
    assert game.stars == 3
    # finished games ignore further input
    assert not game.move("A", "B")


def test_undo_and_reset() -> None:
    game = GamePlay(_level())
    assert not game.undo()
    game.move("A", "C")
    game.move("B", "A")
    assert game.undo()
    assert game.moves_made == 1
    assert game.state.vessel("A").units == (R,)

    game.reset()
    assert game.moves_made == 0
    assert game.state.vessel("A").units == (R, B)


def test_running_out_of_budget_loses() -> None:
    game = GamePlay(_level(move_budget=1))
    assert game.move("A", "C")
    assert game.moves_remaining == 0
    assert game.is_lost
    assert not game.move("B", "A")


def test_apply_hint_solves_optimally() -> None:
    game = GamePlay(_level())
    played = []
    while not game.is_won:
        move = game.apply_hint()
        assert move is not None
        played.append(move)
    assert len(played) == 3
    assert game.apply_hint() is None


def test_hint_does_not_change_state() -> None:
    game = GamePlay(_level())
    hint = game.hint()
    assert hint.found
    assert hint.moves_to_solution == 3
    assert game.moves_made == 0


def test_session_from_state_without_budget() -> None:
    state = PuzzleState(
        vessels=(Vessel.with_units("A", [R], capacity=2), Vessel.with_units("B", [R], capacity=2))
    )
    game = GamePlay.from_state(state)
    assert game.moves_remaining is None
    assert game.move("A", "B")
    assert game.is_won
    assert game.stars == 0


def test_dead_end_is_lost() -> None:
    state = PuzzleState(
        vessels=(
            Vessel.with_units("A", [R, B], capacity=2),
            Vessel.with_units("B", [B, R], capacity=2),
        )
    )
    assert GamePlay.from_state(state).is_lost
