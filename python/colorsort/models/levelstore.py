"""Level pack persistence backed by a JSON file."""

from __future__ import annotations

import json
from pathlib import Path

from colorsort.models.level import Level


class LevelStore:
    """Loads, saves, and queries named level packs from a JSON file.

    The file maps pack names to ordered lists of serialised levels; vessel
    order, token order and capacities survive a round trip unchanged.
    """

    def __init__(self, filepath: Path) -> None:
        self.filepath = Path(filepath)
        self._packs: dict[str, list[Level]] = {}
        self._load()

    # -- persistence ----------------------------------------------------------

    def _load(self) -> None:
        if self.filepath.exists():
            data = json.loads(self.filepath.read_text())
            for pack, entries in data.items():
                self._packs[pack] = [Level.from_dict(e) for e in entries]

    def save(self) -> None:
        self.filepath.parent.mkdir(parents=True, exist_ok=True)
        data = {
            pack: [level.to_dict() for level in levels]
            for pack, levels in self._packs.items()
        }
        self.filepath.write_text(json.dumps(data, indent=2) + "\n")

    # -- queries --------------------------------------------------------------

    def put_pack(self, pack: str, levels: list[Level]) -> None:
        """Replace *pack* with *levels* and write the file."""
        self._packs[pack] = list(levels)
        self.save()

    def add_level(self, pack: str, level: Level) -> None:
        self._packs.setdefault(pack, []).append(level)
        self.save()

    def get_pack(self, pack: str) -> list[Level]:
        return list(self._packs.get(pack, []))

    def get_level(self, level_id: str) -> Level | None:
        for levels in self._packs.values():
            for level in levels:
                if level.id == level_id:
                    return level
        return None

    def all_levels(self) -> list[Level]:
        return [level for levels in self._packs.values() for level in levels]

    def get_all_packs(self) -> list[str]:
        return sorted(self._packs)
