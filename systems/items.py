# systems/items.py

"""
Using inventory items: potions, scrolls, equipment and the bow.

Targeted items ask a TargetSelector (the UI's targeting prompt) for a tile
or a monster. A cancelled prompt, or one that yields nothing usable,
leaves the game exactly as it was and the item stays in the inventory.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Optional, Protocol, Tuple

from settings import (
    CONFUSE_NUM_TURNS,
    CONFUSE_RANGE,
    FIREBALL_DAMAGE,
    FIREBALL_RADIUS,
    HEAL_AMOUNT,
    LIGHTNING_DAMAGE,
    LIGHTNING_RANGE,
    LIGHT_CYAN,
    LIGHT_GREEN,
    LIGHT_VIOLET,
    ORANGE,
    RED,
    WHITE,
)
from engine.error_handler import NoValidTargetError, get_logger
from systems.combat import AttackOutcome, ranged_attack, take_damage
from systems.inventory import toggle_equipment
from world.ai import ConfusedAI, FovOracle
from world.entities import Item

if TYPE_CHECKING:
    from engine.game import Session

log = get_logger("items")


class UseResult(str, Enum):
    USED_UP = "used_up"
    USED_AND_KEPT = "used_and_kept"
    CANCELLED = "cancelled"


class TargetSelector(Protocol):
    """
    Targeting prompt supplied by the front end. Both methods block until
    the player picks something or cancels (None).
    """

    def select_tile(self, max_range: Optional[float]) -> Optional[Tuple[int, int]]: ...

    def select_monster(self, max_range: Optional[float]) -> Optional[int]: ...


class NoTargeting:
    """Selector for contexts without a targeting UI: always cancels."""

    def select_tile(self, max_range: Optional[float]) -> Optional[Tuple[int, int]]:
        return None

    def select_monster(self, max_range: Optional[float]) -> Optional[int]:
        return None


ItemHandler = Callable[[int, "Session", FovOracle, TargetSelector], UseResult]


# ----------------------------------------------------------------------
# Targeting helpers
# ----------------------------------------------------------------------

def closest_monster(max_range: float, session: "Session", fov: FovOracle) -> Optional[int]:
    """Closest visible, living monster within max_range of the player."""
    player = session.player
    closest_id: Optional[int] = None
    closest_dist = max_range + 1.0

    for index, obj in enumerate(session.roster):
        if obj is player or obj.fighter is None or not obj.alive or obj.ai is None:
            continue
        if not fov(obj.x, obj.y):
            continue
        dist = player.distance_to(obj)
        if dist < closest_dist:
            closest_id = index
            closest_dist = dist
    return closest_id


def _check_monster_target(
    target_id: int,
    max_range: Optional[float],
    session: "Session",
    fov: FovOracle,
) -> None:
    roster = session.roster
    if not 0 < target_id < len(roster):
        raise NoValidTargetError(f"no entity at roster index {target_id}")
    target = roster[target_id]
    if target.fighter is None or not target.alive:
        raise NoValidTargetError(f"{target.name} cannot be targeted", user_message="Nothing to target there.")
    if not fov(target.x, target.y):
        raise NoValidTargetError(f"{target.name} is not visible", user_message="You can't see that.")
    if max_range is not None and session.player.distance_to(target) > max_range:
        raise NoValidTargetError(f"{target.name} is out of range", user_message="That is too far away.")


# ----------------------------------------------------------------------
# Item effects
# ----------------------------------------------------------------------

def cast_heal(inventory_id: int, session: "Session", fov: FovOracle, targets: TargetSelector) -> UseResult:
    game = session.game
    player = session.player
    if player.fighter.hp >= player.max_hp(game):
        game.messages.add("You are already at full health.", RED)
        return UseResult.CANCELLED
    game.messages.add("Your wounds start to feel better!", LIGHT_VIOLET)
    player.heal(HEAL_AMOUNT, game)
    return UseResult.USED_UP


def cast_lightning(inventory_id: int, session: "Session", fov: FovOracle, targets: TargetSelector) -> UseResult:
    # find closest enemy (inside a maximum range) and damage it
    game = session.game
    monster_id = closest_monster(LIGHTNING_RANGE, session, fov)
    if monster_id is None:
        raise NoValidTargetError(
            "lightning found no monster in range",
            user_message="No enemy is close enough to strike.",
        )

    monster = session.roster[monster_id]
    game.messages.add(
        f"A lightning bolt strikes the {monster.name} with a loud thunder! "
        f"The damage is {LIGHTNING_DAMAGE} hit points.",
        LIGHT_CYAN,
    )
    xp = take_damage(monster, LIGHTNING_DAMAGE, game)
    if xp is not None:
        session.player.fighter.xp += xp
    return UseResult.USED_UP


def cast_confuse(inventory_id: int, session: "Session", fov: FovOracle, targets: TargetSelector) -> UseResult:
    game = session.game
    game.messages.add("Choose an enemy to confuse, or cancel.", LIGHT_CYAN)
    monster_id = targets.select_monster(CONFUSE_RANGE)
    if monster_id is None:
        return UseResult.CANCELLED
    _check_monster_target(monster_id, CONFUSE_RANGE, session, fov)

    monster = session.roster[monster_id]
    if monster.ai is None:
        raise NoValidTargetError(f"{monster.name} has no mind to confuse")

    old_ai = monster.ai
    if isinstance(old_ai, ConfusedAI):
        # re-confusing refreshes the duration, the original mind is kept
        old_ai = old_ai.previous
    monster.ai = ConfusedAI(previous=old_ai, num_turns=CONFUSE_NUM_TURNS)
    game.messages.add(
        f"The eyes of {monster.name} look vacant, as it starts to stumble around!",
        LIGHT_GREEN,
    )
    return UseResult.USED_UP


def cast_fireball(inventory_id: int, session: "Session", fov: FovOracle, targets: TargetSelector) -> UseResult:
    game = session.game
    game.messages.add(
        "Choose a target tile for the fireball, or cancel.",
        LIGHT_CYAN,
    )
    tile = targets.select_tile(None)
    if tile is None:
        return UseResult.CANCELLED
    x, y = tile
    if not fov(x, y):
        raise NoValidTargetError(f"fireball target {tile} not visible", user_message="You can't see that.")

    game.messages.add(
        f"The fireball explodes, burning everything within {FIREBALL_RADIUS} tiles!",
        ORANGE,
    )

    xp_to_gain = 0
    for obj in list(session.roster):
        if obj.fighter is None or not obj.alive or obj.distance(x, y) > FIREBALL_RADIUS:
            continue
        game.messages.add(f"The {obj.name} gets burned for {FIREBALL_DAMAGE} hit points.", ORANGE)
        xp = take_damage(obj, FIREBALL_DAMAGE, game)
        if xp is not None and not obj.is_player:
            xp_to_gain += xp

    session.player.fighter.xp += xp_to_gain
    return UseResult.USED_UP


def use_equipment(inventory_id: int, session: "Session", fov: FovOracle, targets: TargetSelector) -> UseResult:
    game = session.game
    item = game.inventory[inventory_id]
    equipment = item.equipment
    if equipment is not None and equipment.is_ranged and equipment.equipped:
        return fire_ranged_weapon(inventory_id, session, fov, targets)

    toggle_equipment(inventory_id, game, session.player)
    return UseResult.USED_AND_KEPT


def fire_ranged_weapon(inventory_id: int, session: "Session", fov: FovOracle, targets: TargetSelector) -> UseResult:
    """
    Shoot an equipped ranged weapon at a chosen monster. Each shot that
    leaves the bow costs one charge; the last charge uses the weapon up.
    """
    game = session.game
    weapon = game.inventory[inventory_id]
    equipment = weapon.equipment

    monster_id = targets.select_monster(equipment.range)
    if monster_id is None:
        return UseResult.CANCELLED
    _check_monster_target(monster_id, None, session, fov)

    outcome = ranged_attack(
        session.player,
        session.roster[monster_id],
        game,
        max_range=equipment.range,
        damage=equipment.damage,
    )
    if outcome is AttackOutcome.OUT_OF_RANGE:
        return UseResult.CANCELLED

    equipment.charges -= 1
    if equipment.charges <= 0:
        weapon.dequip(game.messages)
        game.messages.add(f"Your {weapon.name} is used up.", RED)
        return UseResult.USED_UP
    return UseResult.USED_AND_KEPT


_ITEM_HANDLERS: Dict[Item, ItemHandler] = {
    Item.HEAL: cast_heal,
    Item.LIGHTNING: cast_lightning,
    Item.CONFUSE: cast_confuse,
    Item.FIREBALL: cast_fireball,
    Item.SWORD: use_equipment,
    Item.SHIELD: use_equipment,
    Item.HELMET: use_equipment,
    Item.CLOAK: use_equipment,
    Item.BOW: use_equipment,
}


def use_item(
    inventory_id: int,
    session: "Session",
    fov: FovOracle,
    targets: Optional[TargetSelector] = None,
) -> UseResult:
    """
    Apply an inventory item. Used-up items leave the inventory; cancelled
    ones change nothing.
    """
    game = session.game
    targets = targets if targets is not None else NoTargeting()
    item = game.inventory[inventory_id]

    if item.item is None:
        game.messages.add(f"The {item.name} cannot be used.", WHITE)
        return UseResult.CANCELLED

    handler = _ITEM_HANDLERS[item.item]
    try:
        result = handler(inventory_id, session, fov, targets)
    except NoValidTargetError as e:
        log.debug("Item %s not used: %s", item.name, e)
        game.messages.add(e.user_message, RED)
        return UseResult.CANCELLED

    if result is UseResult.USED_UP:
        # destroy after use, unless it was cancelled for some reason
        game.inventory.pop(inventory_id)
    elif result is UseResult.CANCELLED:
        game.messages.add("Cancelled", WHITE)
    return result
