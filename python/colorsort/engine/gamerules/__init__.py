from colorsort.engine.gamerules.rules import (
    apply_move,
    can_move,
    has_valid_moves,
    is_solved,
    legal_moves,
    quantity,
    undo,
    validate_move,
)

__all__ = [
    "apply_move",
    "can_move",
    "has_valid_moves",
    "is_solved",
    "legal_moves",
    "quantity",
    "undo",
    "validate_move",
]
