from colorsort.engine.gamestate.state import PuzzleState, canonical_key

__all__ = ["PuzzleState", "canonical_key"]
