# world/entities.py

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterator, List, Optional, Tuple

from settings import PLAYER, LIGHT_GREEN, YELLOW
from engine.error_handler import InvalidIndexError

if TYPE_CHECKING:
    from engine.game import Game
    from engine.message_log import MessageLog
    from world.ai import AIState

Color = Tuple[int, int, int]


class Slot(str, Enum):
    """Equipment attachment points."""
    LEFT_HAND = "left hand"
    RIGHT_HAND = "right hand"
    HEAD = "head"
    BACK = "back"


class DeathCallback(str, Enum):
    PLAYER = "player"
    MONSTER = "monster"


class Item(str, Enum):
    HEAL = "heal"
    LIGHTNING = "lightning"
    CONFUSE = "confuse"
    FIREBALL = "fireball"
    SWORD = "sword"
    SHIELD = "shield"
    HELMET = "helmet"
    CLOAK = "cloak"
    BOW = "bow"


@dataclass
class Fighter:
    """
    Combat component.

    base_* values never change after creation (except level-up choices);
    effective stats are computed by Entity.power/defense/max_hp.
    """
    base_max_hp: int
    hp: int
    base_defense: int
    base_power: int
    xp: int
    on_death: DeathCallback


@dataclass
class Equipment:
    slot: Slot
    equipped: bool = False
    power_bonus: int = 0
    defense_bonus: int = 0
    max_hp_bonus: int = 0
    # Ranged weapons only
    range: int = 0
    damage: int = 0
    charges: int = 0

    @property
    def is_ranged(self) -> bool:
        return self.range > 0


@dataclass
class Entity:
    """Anything that lives on the map: player, monsters, items, stairs."""
    x: int
    y: int
    char: str
    color: Color
    name: str
    blocks: bool = False
    alive: bool = False
    fighter: Optional[Fighter] = None
    ai: Optional["AIState"] = None
    item: Optional[Item] = None
    equipment: Optional[Equipment] = None
    always_visible: bool = False
    level: int = 1

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def pos(self) -> Tuple[int, int]:
        return self.x, self.y

    def set_pos(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    def distance_to(self, other: "Entity") -> float:
        return self.distance(other.x, other.y)

    def distance(self, x: int, y: int) -> float:
        return math.sqrt((x - self.x) ** 2 + (y - self.y) ** 2)

    # ------------------------------------------------------------------
    # Effective stats (always computed, never cached)
    # ------------------------------------------------------------------

    @property
    def is_player(self) -> bool:
        return self.fighter is not None and self.fighter.on_death is DeathCallback.PLAYER

    def get_all_equipped(self, game: "Game") -> List[Equipment]:
        """Only the player carries equipment; it lives in the game inventory."""
        if not self.is_player:
            return []
        return [
            item.equipment
            for item in game.inventory
            if item.equipment is not None and item.equipment.equipped
        ]

    def power(self, game: "Game") -> int:
        if self.fighter is None:
            return 0
        bonus = sum(e.power_bonus for e in self.get_all_equipped(game))
        if not self.is_player:
            bonus += self.level // 4
        return self.fighter.base_power + bonus

    def defense(self, game: "Game") -> int:
        if self.fighter is None:
            return 0
        bonus = sum(e.defense_bonus for e in self.get_all_equipped(game))
        return self.fighter.base_defense + bonus

    def max_hp(self, game: "Game") -> int:
        if self.fighter is None:
            return 0
        bonus = sum(e.max_hp_bonus for e in self.get_all_equipped(game))
        return self.fighter.base_max_hp + bonus

    def heal(self, amount: int, game: "Game") -> None:
        """Heal by `amount`, never above the effective max hp."""
        max_hp = self.max_hp(game)
        if self.fighter is not None:
            self.fighter.hp = min(max_hp, self.fighter.hp + amount)

    def clamp_hp(self, game: "Game") -> None:
        """Pull hp back under the effective max hp (after a max hp bonus comes off)."""
        if self.fighter is not None:
            self.fighter.hp = min(self.fighter.hp, self.max_hp(game))

    # ------------------------------------------------------------------
    # Equipment flags (slot exclusivity is handled by systems.inventory)
    # ------------------------------------------------------------------

    def equip(self, messages: "MessageLog") -> None:
        if self.equipment is None:
            messages.add(f"Can't equip {self.name} because it's not an Equipment.", YELLOW)
            return
        if not self.equipment.equipped:
            self.equipment.equipped = True
            messages.add(f"Equipped {self.name} on {self.equipment.slot.value}.", LIGHT_GREEN)

    def dequip(self, messages: "MessageLog") -> None:
        if self.equipment is None:
            messages.add(f"Can't dequip {self.name} because it's not an Equipment.", YELLOW)
            return
        if self.equipment.equipped:
            self.equipment.equipped = False
            messages.add(f"Dequipped {self.name} from {self.equipment.slot.value}.", YELLOW)


@dataclass
class Roster:
    """
    Ordered, index-addressed collection of every entity on the level.

    Index 0 is always the player.
    """
    objects: List[Entity] = field(default_factory=list)

    @property
    def player(self) -> Entity:
        return self.objects[PLAYER]

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[Entity]:
        return iter(self.objects)

    def __getitem__(self, index: int) -> Entity:
        return self.objects[index]

    def append(self, entity: Entity) -> int:
        self.objects.append(entity)
        return len(self.objects) - 1

    def pop(self, index: int) -> Entity:
        if index == PLAYER:
            raise InvalidIndexError("The player cannot be removed from the roster")
        return self.objects.pop(index)

    def keep_only_player(self) -> None:
        del self.objects[PLAYER + 1:]

    def mut_two(self, first: int, second: int) -> Tuple[Entity, Entity]:
        """
        Return two distinct entities for a call that mutates both
        (attacker/defender). Equal or out-of-range indices are a bug.
        """
        count = len(self.objects)
        if first == second:
            raise InvalidIndexError(f"mut_two called with the same index twice ({first})")
        if not (0 <= first < count and 0 <= second < count):
            raise InvalidIndexError(
                f"mut_two indices out of range: {first}, {second} (roster size {count})"
            )
        return self.objects[first], self.objects[second]

    def is_blocked_by_entity(self, x: int, y: int) -> bool:
        return any(obj.blocks and obj.pos() == (x, y) for obj in self.objects)

    def fighter_at(self, x: int, y: int) -> Optional[int]:
        for i, obj in enumerate(self.objects):
            if obj.fighter is not None and obj.alive and obj.pos() == (x, y):
                return i
        return None
