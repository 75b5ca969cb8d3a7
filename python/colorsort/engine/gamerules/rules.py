"""Pour rules as pure functions over vessels and puzzle states."""

from __future__ import annotations

from colorsort.engine.gamestate.state import PuzzleState
from colorsort.errors import IllegalMove, NothingToUndo
from colorsort.models.move import Move
from colorsort.models.vessel import Vessel


def validate_move(source: Vessel, target: Vessel) -> str | None:
    """Return why pouring *source* into *target* is illegal, or ``None``."""
    if source.is_empty:
        return "source vessel is empty"
    if target.is_full:
        return "target vessel is full"
    if not target.is_empty and target.top_token != source.top_token:
        return (
            f"colours do not match ({source.top_token.name.lower()} "
            f"onto {target.top_token.name.lower()})"
        )
    return None


def can_move(source: Vessel, target: Vessel) -> bool:
    return validate_move(source, target) is None


def quantity(source: Vessel, target: Vessel) -> int:
    """Units a pour actually transfers: the top run, limited by free space."""
    return min(source.top_run_length, target.capacity - len(target.units))


def is_solved(state: PuzzleState) -> bool:
    return all(v.is_resolved for v in state.vessels)


def apply_move(state: PuzzleState, from_id: str, to_id: str) -> PuzzleState:
    """Pour from *from_id* into *to_id* and return the resulting state.

    Raises :class:`IllegalMove` when the ids are equal, unknown, or the pour
    breaks the rules.  *state* is never modified.
    """
    if from_id == to_id:
        raise IllegalMove(from_id, to_id, "cannot pour a vessel into itself")
    try:
        source = state.vessel(from_id)
        target = state.vessel(to_id)
    except KeyError as exc:
        raise IllegalMove(from_id, to_id, f"unknown vessel {exc.args[0]!r}") from None

    reason = validate_move(source, target)
    if reason is not None:
        raise IllegalMove(from_id, to_id, reason)

    count = quantity(source, target)
    moved = source.units[len(source.units) - count:]
    move = Move(
        from_vessel_id=from_id,
        to_vessel_id=to_id,
        token=source.top_token,
        count=count,
    )
    return state.replace_vessels(
        {from_id: source.remove_top(count), to_id: target.add_units(moved)},
        move,
    )


def undo(state: PuzzleState) -> PuzzleState:
    """Invert the last recorded pour exactly and drop it from history."""
    if not state.history:
        raise NothingToUndo("No moves to undo.")
    last = state.history[-1]
    poured_into = state.vessel(last.to_vessel_id)
    poured_from = state.vessel(last.from_vessel_id)

    returned = poured_into.units[len(poured_into.units) - last.count:]
    restored = PuzzleState(
        vessels=state.vessels,
        history=state.history[:-1],
    )
    return restored.replace_vessels(
        {
            last.to_vessel_id: poured_into.remove_top(last.count),
            last.from_vessel_id: poured_from.add_units(returned),
        }
    )


def legal_moves(state: PuzzleState) -> list[Move]:
    """Every legal pour, ordered by (source index, target index)."""
    moves: list[Move] = []
    for source in state.vessels:
        for target in state.vessels:
            if source.id == target.id or not can_move(source, target):
                continue
            moves.append(
                Move(
                    from_vessel_id=source.id,
                    to_vessel_id=target.id,
                    token=source.top_token,
                    count=quantity(source, target),
                )
            )
    return moves


def has_valid_moves(state: PuzzleState) -> bool:
    for source in state.vessels:
        for target in state.vessels:
            if source.id != target.id and can_move(source, target):
                return True
    return False
