# systems/spawn_tables.py

"""
Level-scaled spawn tables plus the monster and item factories.

A table is a list of (value, level) transitions: the value applies from
that dungeon level onward, until a later transition overrides it.
"""

from __future__ import annotations

import random
from typing import Callable, Dict, List, Protocol, Sequence, Tuple, TypeVar, Union

from settings import (
    BRASS,
    DARK_GREEN,
    DARK_SEPIA,
    DARKER_ORANGE,
    DESATURATED_GREEN,
    LIGHT_CYAN,
    SEPIA,
    SKY,
    VIOLET,
    YELLOW,
)
from world.ai import BasicAI, RangedAI
from world.entities import DeathCallback, Entity, Equipment, Fighter, Item, Slot

T = TypeVar("T")

Transition = Tuple[int, int]  # (value, level)
WeightTable = Union[int, List[Transition]]


class Rng(Protocol):
    """Anything shaped like the random module (or a random.Random)."""

    def randint(self, a: int, b: int) -> int: ...

    def random(self) -> float: ...


# ----------------------------------------------------------------------
# Table helpers
# ----------------------------------------------------------------------

def from_dungeon_level(table: Sequence[Transition], level: int) -> int:
    """
    Value of the highest transition whose level is <= `level`, or 0.
    Transitions are listed with strictly increasing levels.
    """
    for value, threshold in reversed(table):
        if level >= threshold:
            return value
    return 0


def _weight_for(weights: WeightTable, level: int) -> int:
    if isinstance(weights, int):
        return weights
    return from_dungeon_level(weights, level)


def random_choice_index(weights: Sequence[int], rng: Rng = random) -> int:
    """
    Cumulative-weight draw: index i is picked with probability
    weights[i] / sum(weights). Zero-weight entries are never picked.
    """
    total = sum(weights)
    if total <= 0:
        raise ValueError("random_choice_index needs at least one positive weight")

    dice = rng.randint(1, total)
    running_sum = 0
    for index, weight in enumerate(weights):
        running_sum += weight
        if dice <= running_sum:
            return index
    return len(weights) - 1


def random_choice(table: Sequence[Tuple[T, int]], rng: Rng = random) -> T:
    """Pick a key from (key, weight) pairs."""
    index = random_choice_index([weight for _, weight in table], rng)
    return table[index][0]


# ----------------------------------------------------------------------
# Monsters
# ----------------------------------------------------------------------

def _orc(x: int, y: int) -> Entity:
    return Entity(
        x, y, "o", DESATURATED_GREEN, "orc", blocks=True, alive=True,
        fighter=Fighter(base_max_hp=20, hp=20, base_defense=0, base_power=4,
                        xp=35, on_death=DeathCallback.MONSTER),
        ai=BasicAI(),
    )


def _troll(x: int, y: int) -> Entity:
    return Entity(
        x, y, "T", DARK_GREEN, "troll", blocks=True, alive=True,
        fighter=Fighter(base_max_hp=30, hp=30, base_defense=2, base_power=8,
                        xp=100, on_death=DeathCallback.MONSTER),
        ai=BasicAI(),
    )


def _broo(x: int, y: int) -> Entity:
    # spits from a distance
    return Entity(
        x, y, "b", SEPIA, "broo", blocks=True, alive=True,
        fighter=Fighter(base_max_hp=16, hp=16, base_defense=1, base_power=4,
                        xp=50, on_death=DeathCallback.MONSTER),
        ai=RangedAI(range=4),
    )


MONSTER_FACTORIES: Dict[str, Callable[[int, int], Entity]] = {
    "orc": _orc,
    "troll": _troll,
    "broo": _broo,
}

MAX_ROOM_MONSTERS: List[Transition] = [(2, 1), (3, 4), (5, 6)]

MONSTER_CHANCES: Dict[str, WeightTable] = {
    "orc": 80,
    "troll": [(15, 3), (30, 5), (60, 7)],
    "broo": [(10, 2), (20, 4)],
}


def create_monster(kind: str, x: int, y: int, level: int = 1) -> Entity:
    monster = MONSTER_FACTORIES[kind](x, y)
    monster.level = level
    return monster


def choose_monster(level: int, rng: Rng = random) -> str:
    table = [(kind, _weight_for(w, level)) for kind, w in MONSTER_CHANCES.items()]
    return random_choice(table, rng)


# ----------------------------------------------------------------------
# Items
# ----------------------------------------------------------------------

def create_item(kind: Item, x: int, y: int) -> Entity:
    if kind is Item.HEAL:
        entity = Entity(x, y, "!", VIOLET, "healing potion")
    elif kind is Item.LIGHTNING:
        entity = Entity(x, y, "#", YELLOW, "scroll of lightning bolt")
    elif kind is Item.FIREBALL:
        entity = Entity(x, y, "#", YELLOW, "scroll of fireball")
    elif kind is Item.CONFUSE:
        entity = Entity(x, y, "#", YELLOW, "scroll of confusion")
    elif kind is Item.SWORD:
        entity = Entity(x, y, "/", SKY, "sword",
                        equipment=Equipment(slot=Slot.RIGHT_HAND, power_bonus=3))
    elif kind is Item.SHIELD:
        entity = Entity(x, y, "[", DARKER_ORANGE, "shield",
                        equipment=Equipment(slot=Slot.LEFT_HAND, defense_bonus=1))
    elif kind is Item.HELMET:
        entity = Entity(x, y, "^", BRASS, "helmet",
                        equipment=Equipment(slot=Slot.HEAD, defense_bonus=1))
    elif kind is Item.CLOAK:
        entity = Entity(x, y, "(", DARK_SEPIA, "cloak",
                        equipment=Equipment(slot=Slot.BACK, max_hp_bonus=10))
    elif kind is Item.BOW:
        entity = Entity(x, y, "}", LIGHT_CYAN, "bow",
                        equipment=Equipment(slot=Slot.LEFT_HAND, range=6, damage=6, charges=10))
    else:
        raise ValueError(f"Unknown item kind: {kind!r}")

    entity.item = kind
    return entity


MAX_ROOM_ITEMS: List[Transition] = [(1, 1), (2, 4)]

ITEM_CHANCES: Dict[Item, WeightTable] = {
    Item.HEAL: 35,
    Item.LIGHTNING: [(25, 4)],
    Item.FIREBALL: [(25, 6)],
    Item.CONFUSE: [(10, 2)],
    Item.SWORD: [(5, 4)],
    Item.SHIELD: [(15, 8)],
    Item.HELMET: [(10, 3)],
    Item.CLOAK: [(10, 5)],
    Item.BOW: [(10, 3)],
}


def choose_item(level: int, rng: Rng = random) -> Item:
    table = [(kind, _weight_for(w, level)) for kind, w in ITEM_CHANCES.items()]
    return random_choice(table, rng)
