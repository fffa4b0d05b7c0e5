# world/game_map.py

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, List, Set, Tuple

from world.tiles import Tile

if TYPE_CHECKING:
    from world.entities import Roster


class GameMap:
    """
    A single dungeon level.

    Tiles are indexed tiles[x][y]. Holds collision and FOV helpers; the
    set of currently visible tiles is the FOV oracle the AI consumes.
    """

    def __init__(self, tiles: List[List[Tile]]) -> None:
        self.tiles: List[List[Tile]] = tiles
        self.width: int = len(tiles)
        self.height: int = len(tiles[0]) if self.width > 0 else 0

        # FOV state (recomputed by the front end when the player moves)
        self.visible: Set[Tuple[int, int]] = set()

    @classmethod
    def filled(cls, width: int, height: int) -> "GameMap":
        """A map made only of walls."""
        return cls([[Tile.wall() for _ in range(height)] for _ in range(width)])

    # ------------------------------------------------------------------
    # Tile helpers
    # ------------------------------------------------------------------

    def in_bounds(self, tile_x: int, tile_y: int) -> bool:
        """Return True if the tile coordinate is inside the map."""
        return 0 <= tile_x < self.width and 0 <= tile_y < self.height

    def is_blocked_tile(self, tile_x: int, tile_y: int) -> bool:
        """Terrain check only. Outside the map counts as blocked."""
        if not self.in_bounds(tile_x, tile_y):
            return True
        return self.tiles[tile_x][tile_y].blocked

    def is_blocked(self, tile_x: int, tile_y: int, roster: "Roster") -> bool:
        """Blocked by terrain or by any blocking entity."""
        if self.is_blocked_tile(tile_x, tile_y):
            return True
        return roster.is_blocked_by_entity(tile_x, tile_y)

    def blocks_sight(self, tile_x: int, tile_y: int) -> bool:
        """Return True if this tile blocks line of sight."""
        if not self.in_bounds(tile_x, tile_y):
            return True
        return self.tiles[tile_x][tile_y].block_sight

    def passable_tiles(self) -> Iterator[Tuple[int, int]]:
        for x, column in enumerate(self.tiles):
            for y, tile in enumerate(column):
                if not tile.blocked:
                    yield x, y

    # ------------------------------------------------------------------
    # FOV helpers
    # ------------------------------------------------------------------

    def is_visible(self, tile_x: int, tile_y: int) -> bool:
        return (tile_x, tile_y) in self.visible

    def _bresenham_line(self, x0: int, y0: int, x1: int, y1: int):
        """Yield tile coordinates along a Bresenham line from (x0, y0) to (x1, y1)."""
        dx = abs(x1 - x0)
        dy = abs(y1 - y0)
        sx = 1 if x0 < x1 else -1
        sy = 1 if y0 < y1 else -1
        err = dx - dy

        while True:
            yield x0, y0
            if x0 == x1 and y0 == y1:
                break
            e2 = 2 * err
            if e2 > -dy:
                err -= dy
                x0 += sx
            if e2 < dx:
                err += dy
                y0 += sy

    def _line_of_sight(self, x0: int, y0: int, x1: int, y1: int) -> bool:
        """
        True if there is clear LoS between (x0, y0) and (x1, y1).
        Tiles *before* the target tile can block sight, so walls are lit.
        """
        first = True
        for tx, ty in self._bresenham_line(x0, y0, x1, y1):
            if first:
                first = False
                continue  # skip the origin
            if (tx, ty) == (x1, y1):
                return True
            if self.blocks_sight(tx, ty):
                return False
        return True

    def compute_fov(self, center_tx: int, center_ty: int, radius: int) -> None:
        """
        Recompute FOV from (center_tx, center_ty).
        Fills self.visible and marks every visible tile explored.
        """
        self.visible.clear()

        if not self.in_bounds(center_tx, center_ty):
            return

        radius_sq = radius * radius

        # Always see your own tile
        self.visible.add((center_tx, center_ty))

        for tx in range(center_tx - radius, center_tx + radius + 1):
            for ty in range(center_ty - radius, center_ty + radius + 1):
                if not self.in_bounds(tx, ty):
                    continue
                dx = tx - center_tx
                dy = ty - center_ty
                if dx * dx + dy * dy > radius_sq:
                    continue
                if (tx, ty) == (center_tx, center_ty):
                    continue
                if self._line_of_sight(center_tx, center_ty, tx, ty):
                    self.visible.add((tx, ty))

        for tx, ty in self.visible:
            self.tiles[tx][ty].explore()
