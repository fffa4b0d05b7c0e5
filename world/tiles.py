# world/tiles.py

from dataclasses import dataclass


@dataclass
class Tile:
    """
    A single map cell.

    `blocked` and `block_sight` are fixed once the tile is carved.
    `explored` only ever flips from False to True.
    """
    blocked: bool
    block_sight: bool
    explored: bool = False

    @classmethod
    def empty(cls) -> "Tile":
        return cls(blocked=False, block_sight=False)

    @classmethod
    def wall(cls) -> "Tile":
        return cls(blocked=True, block_sight=True)

    def explore(self) -> None:
        self.explored = True
