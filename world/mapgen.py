# world/mapgen.py

from __future__ import annotations

import random
from typing import List, Tuple

from settings import (
    MAP_WIDTH,
    MAP_HEIGHT,
    ROOM_MAX_SIZE,
    ROOM_MIN_SIZE,
    MAX_ROOMS,
    WHITE,
)
from engine.error_handler import get_logger
from world.entities import Entity, Roster
from world.game_map import GameMap
from world.tiles import Tile
from systems.spawn_tables import (
    MAX_ROOM_ITEMS,
    MAX_ROOM_MONSTERS,
    Rng,
    choose_item,
    choose_monster,
    create_item,
    create_monster,
    from_dungeon_level,
)

log = get_logger("mapgen")


class Rect:
    """Axis-aligned rectangular room footprint on the tile grid."""
    __slots__ = ("x1", "y1", "x2", "y2")

    def __init__(self, x: int, y: int, w: int, h: int) -> None:
        self.x1 = x
        self.y1 = y
        self.x2 = x + w
        self.y2 = y + h

    def center(self) -> Tuple[int, int]:
        center_x = (self.x1 + self.x2) // 2
        center_y = (self.y1 + self.y2) // 2
        return center_x, center_y

    def intersects_with(self, other: "Rect") -> bool:
        return (
            self.x1 <= other.x2
            and self.x2 >= other.x1
            and self.y1 <= other.y2
            and self.y2 >= other.y1
        )

    def __repr__(self) -> str:
        return f"Rect({self.x1}, {self.y1}, {self.x2}, {self.y2})"


# Fixed layout carved on every level, whatever the random rooms did
BASELINE_ROOMS = (Rect(20, 15, 10, 15), Rect(50, 15, 10, 15))
BASELINE_HALL = (25, 55, 23)  # x1, x2, y


# ----------------------------------------------------------------------
# Carving
# ----------------------------------------------------------------------

def create_room(room: Rect, game_map: GameMap) -> None:
    # interior only, the border stays wall
    for x in range(room.x1 + 1, room.x2):
        for y in range(room.y1 + 1, room.y2):
            game_map.tiles[x][y] = Tile.empty()


def create_h_tunnel(x1: int, x2: int, y: int, game_map: GameMap) -> None:
    for x in range(min(x1, x2), max(x1, x2) + 1):
        game_map.tiles[x][y] = Tile.empty()


def create_v_tunnel(y1: int, y2: int, x: int, game_map: GameMap) -> None:
    for y in range(min(y1, y2), max(y1, y2) + 1):
        game_map.tiles[x][y] = Tile.empty()


def connect_rooms(
    prev: Tuple[int, int],
    new: Tuple[int, int],
    game_map: GameMap,
    rng: Rng = random,
) -> None:
    """
    L-shaped corridor between two centers. The bend is at (new_x, prev_y)
    when going horizontal first, at (prev_x, new_y) otherwise.
    """
    prev_x, prev_y = prev
    new_x, new_y = new
    if rng.random() < 0.5:
        # Horizontal then vertical
        create_h_tunnel(prev_x, new_x, prev_y, game_map)
        create_v_tunnel(prev_y, new_y, new_x, game_map)
    else:
        # Vertical then horizontal
        create_v_tunnel(prev_y, new_y, prev_x, game_map)
        create_h_tunnel(prev_x, new_x, new_y, game_map)


def _carve_baseline(game_map: GameMap) -> None:
    for room in BASELINE_ROOMS:
        create_room(room, game_map)
    x1, x2, y = BASELINE_HALL
    create_h_tunnel(x1, x2, y, game_map)


# ----------------------------------------------------------------------
# Generation
# ----------------------------------------------------------------------

def generate_floor(
    dungeon_level: int,
    rng: Rng = random,
    width: int = MAP_WIDTH,
    height: int = MAP_HEIGHT,
) -> Tuple[GameMap, Tuple[int, int], List[Rect]]:
    """
    Generate the tile layout of one level:
    - Random non-overlapping rectangular rooms, each joined to the previous one
    - The fixed baseline rooms + hallway, joined to the last random room

    Returns:
        game_map, spawn point (first room's center), accepted random rooms

    Individual room attempts may fail; generation itself never does.
    """
    game_map = GameMap.filled(width, height)
    rooms: List[Rect] = []

    for _ in range(MAX_ROOMS):
        # random width and height
        w = rng.randint(ROOM_MIN_SIZE, ROOM_MAX_SIZE)
        h = rng.randint(ROOM_MIN_SIZE, ROOM_MAX_SIZE)
        # random position without going out of the boundaries of the map
        x = rng.randint(0, width - w - 1)
        y = rng.randint(0, height - h - 1)

        new_room = Rect(x, y, w, h)
        if any(new_room.intersects_with(other) for other in rooms):
            continue  # discard this room and try another

        create_room(new_room, game_map)
        if rooms:
            connect_rooms(rooms[-1].center(), new_room.center(), game_map, rng)
        rooms.append(new_room)

    _carve_baseline(game_map)
    if rooms:
        connect_rooms(rooms[-1].center(), BASELINE_ROOMS[0].center(), game_map, rng)
        spawn = rooms[0].center()
    else:
        spawn = BASELINE_ROOMS[0].center()

    if len(rooms) < MAX_ROOMS:
        log.debug("Level %d: placed %d of %d rooms", dungeon_level, len(rooms), MAX_ROOMS)

    return game_map, spawn, rooms


def is_blocked(x: int, y: int, game_map: GameMap, roster: Roster) -> bool:
    return game_map.is_blocked(x, y, roster)


def place_objects(
    room: Rect,
    game_map: GameMap,
    roster: Roster,
    dungeon_level: int,
    rng: Rng = random,
) -> None:
    """Scatter level-scaled monsters and items inside one room."""
    max_monsters = from_dungeon_level(MAX_ROOM_MONSTERS, dungeon_level)
    num_monsters = rng.randint(0, max_monsters)

    for _ in range(num_monsters):
        # choose random spot for this monster
        x = rng.randint(room.x1 + 1, room.x2 - 1)
        y = rng.randint(room.y1 + 1, room.y2 - 1)

        if not is_blocked(x, y, game_map, roster):
            kind = choose_monster(dungeon_level, rng)
            roster.append(create_monster(kind, x, y, level=dungeon_level))

    max_items = from_dungeon_level(MAX_ROOM_ITEMS, dungeon_level)
    num_items = rng.randint(0, max_items)

    for _ in range(num_items):
        # choose random spot for this item
        x = rng.randint(room.x1 + 1, room.x2 - 1)
        y = rng.randint(room.y1 + 1, room.y2 - 1)

        # only place it if the tile is not blocked
        if not is_blocked(x, y, game_map, roster):
            kind = choose_item(dungeon_level, rng)
            item = create_item(kind, x, y)
            item.always_visible = True
            roster.append(item)


def create_stairs(x: int, y: int) -> Entity:
    return Entity(x, y, "<", WHITE, "stairs", always_visible=True)


def make_map(roster: Roster, dungeon_level: int, rng: Rng = random) -> GameMap:
    """
    Build a fresh level around the player: roster[0] is moved to the spawn
    point, then every accepted room gets monsters/items, and the last room
    gets the stairs down.
    """
    game_map, spawn, rooms = generate_floor(dungeon_level, rng)
    roster.player.set_pos(*spawn)

    for room in rooms:
        place_objects(room, game_map, roster, dungeon_level, rng)

    if rooms:
        stairs_x, stairs_y = rooms[-1].center()
    else:
        stairs_x, stairs_y = BASELINE_ROOMS[1].center()
    roster.append(create_stairs(stairs_x, stairs_y))

    log.info(
        "Generated dungeon level %d: %d rooms, %d entities",
        dungeon_level, len(rooms), len(roster),
    )
    return game_map
