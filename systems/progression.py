# systems/progression.py

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional

from settings import LEVEL_UP_BASE, LEVEL_UP_FACTOR, YELLOW

if TYPE_CHECKING:
    from engine.game import Game
    from world.entities import Entity


class LevelUpChoice(str, Enum):
    HP = "hp"
    POWER = "power"
    DEFENSE = "defense"


# Stat growth per level-up choice
HP_PER_LEVEL = 20
POWER_PER_LEVEL = 1
DEFENSE_PER_LEVEL = 1


def xp_to_next(level: int) -> int:
    """
    XP needed to leave `level`:
        level 1 -> 2: 350 XP
        level 2 -> 3: 500 XP
    etc.
    """
    return LEVEL_UP_BASE + level * LEVEL_UP_FACTOR


def can_level_up(player: "Entity") -> bool:
    if player.fighter is None or not player.alive:
        return False
    return player.fighter.xp >= xp_to_next(player.level)


def level_up_options(player: "Entity", game: "Game") -> list[str]:
    """Menu lines for the stat-allocation prompt, in LevelUpChoice order."""
    fighter = player.fighter
    return [
        f"Constitution (+{HP_PER_LEVEL} HP, from {fighter.base_max_hp})",
        f"Strength (+{POWER_PER_LEVEL} attack, from {fighter.base_power})",
        f"Agility (+{DEFENSE_PER_LEVEL} defense, from {fighter.base_defense})",
    ]


def apply_level_up(player: "Entity", choice: Optional[LevelUpChoice], game: "Game") -> bool:
    """
    Consume one level's worth of XP, raise the level and apply the chosen
    stat. A missing choice (prompt cancelled) changes nothing.
    """
    if choice is None or not can_level_up(player):
        return False

    fighter = player.fighter
    fighter.xp -= xp_to_next(player.level)
    player.level += 1

    if choice is LevelUpChoice.HP:
        fighter.base_max_hp += HP_PER_LEVEL
        fighter.hp += HP_PER_LEVEL
    elif choice is LevelUpChoice.POWER:
        fighter.base_power += POWER_PER_LEVEL
    elif choice is LevelUpChoice.DEFENSE:
        fighter.base_defense += DEFENSE_PER_LEVEL

    game.messages.add(
        f"Your battle skills grow stronger! You reached level {player.level}!",
        YELLOW,
    )
    return True
