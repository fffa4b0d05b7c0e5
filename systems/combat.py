# systems/combat.py

"""
Melee and ranged attack resolution, damage, death and XP.

An attack, once started, always runs its whole damage -> death -> XP
sequence before returning.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional

from settings import DARK_RED, GREEN, ORANGE, RED, LIGHT_GREEN
from world.entities import DeathCallback, Entity
from engine.error_handler import get_logger

if TYPE_CHECKING:
    from engine.game import Game

log = get_logger("combat")


class AttackOutcome(str, Enum):
    HIT = "hit"
    NO_EFFECT = "no_effect"
    KILLED = "killed"
    OUT_OF_RANGE = "out_of_range"


# ----------------------------------------------------------------------
# Death callbacks
# ----------------------------------------------------------------------

def player_death(player: Entity, game: "Game") -> None:
    # the game ended!
    game.messages.add("You died!", RED)
    # for added effect, transform the player into a corpse
    player.char = "%"
    player.color = DARK_RED
    player.blocks = False
    log.info("Player died on dungeon level %d", game.dungeon_level)


def monster_death(monster: Entity, game: "Game") -> None:
    # transform it into a nasty corpse! it doesn't block, can't be
    # attacked and doesn't move
    xp = monster.fighter.xp if monster.fighter is not None else 0
    game.messages.add(f"{monster.name} is dead! You gain {xp} experience points.", ORANGE)
    monster.char = "%"
    monster.color = DARK_RED
    monster.blocks = False
    monster.fighter = None
    monster.ai = None
    monster.name = f"remains of {monster.name}"


_DEATH_CALLBACKS = {
    DeathCallback.PLAYER: player_death,
    DeathCallback.MONSTER: monster_death,
}


# ----------------------------------------------------------------------
# Damage
# ----------------------------------------------------------------------

def take_damage(target: Entity, damage: int, game: "Game") -> Optional[int]:
    """
    Apply damage to a living fighter.

    Returns the victim's xp value if this hit killed it (exactly once per
    entity), otherwise None.
    """
    fighter = target.fighter
    if fighter is None or not target.alive:
        return None

    if damage > 0:
        fighter.hp -= damage

    if fighter.hp <= 0:
        target.alive = False
        xp = fighter.xp
        _DEATH_CALLBACKS[fighter.on_death](target, game)
        return xp
    return None


def _award_xp(attacker: Entity, xp: Optional[int]) -> None:
    # environmental damage has no fighter to credit
    if xp is not None and attacker.fighter is not None:
        attacker.fighter.xp += xp


def _resolve_hit(attacker: Entity, defender: Entity, damage: int, verb: str, game: "Game") -> AttackOutcome:
    if damage > 0:
        game.messages.add(
            f"{attacker.name} {verb} {defender.name} for {damage} hit points.",
            LIGHT_GREEN if attacker.is_player else ORANGE,
        )
        xp = take_damage(defender, damage, game)
        if xp is not None:
            _award_xp(attacker, xp)
            return AttackOutcome.KILLED
        return AttackOutcome.HIT

    game.messages.add(f"{attacker.name} {verb} {defender.name} but it has no effect!", GREEN)
    return AttackOutcome.NO_EFFECT


def attack(attacker: Entity, defender: Entity, game: "Game") -> AttackOutcome:
    """Melee attack: damage is attacker power minus defender defense."""
    damage = attacker.power(game) - defender.defense(game)
    return _resolve_hit(attacker, defender, damage, "attacks", game)


def ranged_attack(
    attacker: Entity,
    defender: Entity,
    game: "Game",
    max_range: int,
    damage: Optional[int] = None,
) -> AttackOutcome:
    """
    Like attack(), but the defender has to be within max_range.

    `damage` replaces the attacker's power as the base (ranged weapons).
    An out-of-range shot changes nothing but the message log.
    """
    if attacker.distance_to(defender) > max_range:
        game.messages.add(f"{attacker.name}'s shot falls short of {defender.name}.", GREEN)
        return AttackOutcome.OUT_OF_RANGE

    base = damage if damage is not None else attacker.power(game)
    return _resolve_hit(attacker, defender, base - defender.defense(game), "shoots", game)
