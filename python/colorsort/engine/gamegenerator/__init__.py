from colorsort.engine.gamegenerator.generator import GameGenerator, derive_seed

__all__ = ["GameGenerator", "derive_seed"]
