from colorsort.models.color import ColorToken
from colorsort.models.level import Level, Tier
from colorsort.models.levelstore import LevelStore
from colorsort.models.move import Move
from colorsort.models.vessel import Vessel

__all__ = ["ColorToken", "Level", "LevelStore", "Move", "Tier", "Vessel"]
