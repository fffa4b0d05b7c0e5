# systems/inventory.py

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from settings import INVENTORY_CAPACITY, GREEN, RED, YELLOW
from engine.error_handler import InventoryFullError, get_logger
from world.entities import Entity, Slot

if TYPE_CHECKING:
    from engine.game import Game, Session

log = get_logger("inventory")


# ---------- Equipment ----------

def get_equipped_in_slot(slot: Slot, inventory: List[Entity]) -> Optional[int]:
    """Inventory index of the item equipped in `slot`, if any."""
    for index, item in enumerate(inventory):
        if item.equipment is not None and item.equipment.equipped and item.equipment.slot is slot:
            return index
    return None


def equip_item(inventory_id: int, game: "Game", wearer: Optional[Entity] = None) -> None:
    """
    Equip an inventory item. Whatever already sits in that slot is
    dequipped first, so a slot never holds two equipped items.

    Pass `wearer` to keep its hp within the new max hp.
    """
    item = game.inventory[inventory_id]
    if item.equipment is None:
        item.equip(game.messages)  # reports the failure
        return

    current = get_equipped_in_slot(item.equipment.slot, game.inventory)
    if current is not None and current != inventory_id:
        game.inventory[current].dequip(game.messages)
    item.equip(game.messages)
    if wearer is not None:
        wearer.clamp_hp(game)


def dequip_item(inventory_id: int, game: "Game", wearer: Optional[Entity] = None) -> None:
    game.inventory[inventory_id].dequip(game.messages)
    if wearer is not None:
        wearer.clamp_hp(game)


def toggle_equipment(inventory_id: int, game: "Game", wearer: Optional[Entity] = None) -> None:
    item = game.inventory[inventory_id]
    if item.equipment is not None and item.equipment.equipped:
        dequip_item(inventory_id, game, wearer)
    else:
        equip_item(inventory_id, game, wearer)


# ---------- Inventory ----------

def add_to_inventory(item: Entity, game: "Game") -> int:
    """Append an item; raises InventoryFullError when there is no room."""
    if len(game.inventory) >= INVENTORY_CAPACITY:
        raise InventoryFullError(
            f"inventory holds {len(game.inventory)} items",
            user_message=f"Your inventory is full, cannot pick up {item.name}.",
        )
    game.inventory.append(item)
    return len(game.inventory) - 1


def item_at(x: int, y: int, session: "Session") -> Optional[int]:
    """Roster index of a pick-up-able item on (x, y)."""
    for index, obj in enumerate(session.roster):
        if obj.item is not None and obj.pos() == (x, y):
            return index
    return None


def pick_item_up(object_id: int, session: "Session") -> bool:
    """
    Move an item from the roster into the inventory. A full inventory
    leaves the item where it is. Equipment is put on right away when its
    slot is free.
    """
    game = session.game
    item = session.roster[object_id]
    try:
        inventory_id = add_to_inventory(item, game)
    except InventoryFullError as e:
        game.messages.add(e.user_message, RED)
        return False

    session.roster.pop(object_id)
    game.messages.add(f"You picked up a {item.name}!", GREEN)
    log.debug("Picked up %s (%d/%d)", item.name, len(game.inventory), INVENTORY_CAPACITY)

    # automatically equip, if the corresponding equipment slot is unused
    if item.equipment is not None and get_equipped_in_slot(item.equipment.slot, game.inventory) is None:
        equip_item(inventory_id, game, session.player)
    return True


def drop_item(inventory_id: int, session: "Session") -> None:
    """Take an item out of the inventory and leave it at the player's feet."""
    game = session.game
    item = game.inventory.pop(inventory_id)
    if item.equipment is not None:
        item.dequip(game.messages)
        session.player.clamp_hp(game)
    item.set_pos(*session.player.pos())
    session.roster.append(item)
    game.messages.add(f"You dropped a {item.name}.", YELLOW)
