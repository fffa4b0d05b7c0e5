"""
Save/Load system for the game.

Handles serialization of the full game state (map, roster, inventory,
messages, dungeon level) to JSON bytes, and save slots on disk.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from engine.error_handler import SaveError, get_logger, log_error
from engine.game import Game, Session
from engine.message_log import MessageLog
from world.ai import AIState, BasicAI, ConfusedAI, RangedAI
from world.entities import DeathCallback, Entity, Equipment, Fighter, Item, Roster, Slot
from world.game_map import GameMap
from world.tiles import Tile

log = get_logger("save")

SAVE_FORMAT_VERSION = "1.0"

# Save directory (in project root / saves)
SAVE_DIR = Path(__file__).resolve().parent.parent.parent / "saves"
SAVE_DIR.mkdir(exist_ok=True)


def get_save_path(slot: int = 1, save_dir: Optional[Path] = None) -> Path:
    """Get the file path for a save slot."""
    return (save_dir or SAVE_DIR) / f"save_{slot}.json"


def save_game(session: Session, slot: int = 1, save_dir: Optional[Path] = None) -> bool:
    """
    Save the current game state to a file.

    Args:
        session: The running session to save
        slot: Save slot number (1-9)
        save_dir: Directory override (defaults to SAVE_DIR)

    Returns:
        True if save was successful, False otherwise
    """
    try:
        data = serialize_game(session.game, session.roster)
        save_path = get_save_path(slot, save_dir)
        save_path.parent.mkdir(parents=True, exist_ok=True)

        # Write to a temporary file first, then rename (atomic write)
        temp_path = save_path.with_suffix(".tmp")
        temp_path.write_bytes(data)
        temp_path.replace(save_path)
    except OSError as e:
        log_error(e, "save_game")
        return False

    session.telemetry.log("game_saved", slot=slot, dungeon_level=session.game.dungeon_level)
    log.info("Saved game to slot %d", slot)
    return True


def load_game(slot: int = 1, save_dir: Optional[Path] = None) -> Optional[Tuple[Game, Roster]]:
    """
    Load a game from a save file.

    Returns:
        (game, roster) if load was successful, None if there is no usable
        save in that slot
    """
    save_path = get_save_path(slot, save_dir)
    if not save_path.exists():
        return None

    try:
        return deserialize_game(save_path.read_bytes())
    except (OSError, SaveError) as e:
        log_error(e, "load_game")
        return None


def list_saves(save_dir: Optional[Path] = None) -> Dict[int, Dict[str, Any]]:
    """
    List all available save files with metadata.

    Returns:
        Dict mapping slot numbers to save metadata (dungeon level, player level, timestamp)
    """
    saves = {}

    for slot in range(1, 10):  # Slots 1-9
        save_path = get_save_path(slot, save_dir)
        if not save_path.exists():
            continue

        try:
            data = json.loads(save_path.read_bytes().decode("utf-8"))
            player = data["roster"][0]
            saves[slot] = {
                "dungeon_level": data.get("dungeon_level", 1),
                "level": player.get("level", 1),
                "timestamp": save_path.stat().st_mtime,
            }
        except (OSError, ValueError, KeyError, IndexError, TypeError):
            # Corrupted save file, skip it
            continue

    return saves


# -----------------------------------------------------------------------------
# Serialization
# -----------------------------------------------------------------------------

def serialize_game(game: Game, roster: Roster) -> bytes:
    """Encode the whole game state as UTF-8 JSON."""
    save_data = {
        "version": SAVE_FORMAT_VERSION,
        "dungeon_level": game.dungeon_level,
        "map": _serialize_map(game.game_map),
        "messages": [[text, list(color)] for text, color in game.messages],
        "inventory": [_serialize_entity(item) for item in game.inventory],
        "roster": [_serialize_entity(obj) for obj in roster],
    }
    return json.dumps(save_data, ensure_ascii=False).encode("utf-8")


def _tile_code(tile: Tile) -> str:
    return str(int(tile.blocked) | int(tile.block_sight) << 1 | int(tile.explored) << 2)


def _serialize_map(game_map: GameMap) -> Dict[str, Any]:
    # one string per column, one digit per tile
    return {
        "width": game_map.width,
        "height": game_map.height,
        "tiles": ["".join(_tile_code(tile) for tile in column) for column in game_map.tiles],
    }


def _serialize_ai(ai: Optional[AIState]) -> Optional[Dict[str, Any]]:
    if ai is None:
        return None
    if isinstance(ai, BasicAI):
        return {"type": "basic"}
    if isinstance(ai, RangedAI):
        return {"type": "ranged", "range": ai.range}
    if isinstance(ai, ConfusedAI):
        return {
            "type": "confused",
            "num_turns": ai.num_turns,
            "previous": _serialize_ai(ai.previous),
        }
    raise TypeError(f"Unknown AI state: {ai!r}")


def _serialize_entity(entity: Entity) -> Dict[str, Any]:
    fighter = None
    if entity.fighter is not None:
        f = entity.fighter
        fighter = {
            "base_max_hp": f.base_max_hp,
            "hp": f.hp,
            "base_defense": f.base_defense,
            "base_power": f.base_power,
            "xp": f.xp,
            "on_death": f.on_death.value,
        }

    equipment = None
    if entity.equipment is not None:
        e = entity.equipment
        equipment = {
            "slot": e.slot.value,
            "equipped": e.equipped,
            "power_bonus": e.power_bonus,
            "defense_bonus": e.defense_bonus,
            "max_hp_bonus": e.max_hp_bonus,
            "range": e.range,
            "damage": e.damage,
            "charges": e.charges,
        }

    return {
        "x": entity.x,
        "y": entity.y,
        "char": entity.char,
        "color": list(entity.color),
        "name": entity.name,
        "blocks": entity.blocks,
        "alive": entity.alive,
        "fighter": fighter,
        "ai": _serialize_ai(entity.ai),
        "item": entity.item.value if entity.item is not None else None,
        "equipment": equipment,
        "always_visible": entity.always_visible,
        "level": entity.level,
    }


# -----------------------------------------------------------------------------
# Deserialization
# -----------------------------------------------------------------------------

def deserialize_game(data: bytes) -> Tuple[Game, Roster]:
    """
    Rebuild (game, roster) from serialize_game() output.

    Raises:
        SaveError: the data is not a readable save of a known version
    """
    try:
        save_data = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise SaveError(f"save data is not valid JSON: {e}", user_message="No saved game to load.") from e

    if not isinstance(save_data, dict) or save_data.get("version") != SAVE_FORMAT_VERSION:
        raise SaveError("unknown save format", user_message="No saved game to load.")

    try:
        game_map = _deserialize_map(save_data["map"])
        messages = MessageLog()
        for text, color in save_data["messages"]:
            messages.messages.append((text, tuple(color)))
        inventory = [_deserialize_entity(item) for item in save_data["inventory"]]
        roster = Roster([_deserialize_entity(obj) for obj in save_data["roster"]])
        dungeon_level = int(save_data["dungeon_level"])
    except (KeyError, ValueError, TypeError, IndexError) as e:
        raise SaveError(f"corrupt save data: {e!r}", user_message="No saved game to load.") from e

    if len(roster) == 0 or not roster.player.is_player:
        raise SaveError("save has no player at roster index 0", user_message="No saved game to load.")

    game = Game(
        game_map=game_map,
        messages=messages,
        inventory=inventory,
        dungeon_level=dungeon_level,
    )
    return game, roster


def _deserialize_map(data: Dict[str, Any]) -> GameMap:
    tiles: List[List[Tile]] = []
    for column in data["tiles"]:
        tiles.append([
            Tile(blocked=bool(code & 1), block_sight=bool(code & 2), explored=bool(code & 4))
            for code in (int(ch) for ch in column)
        ])
    game_map = GameMap(tiles)
    if game_map.width != data["width"] or game_map.height != data["height"]:
        raise ValueError("map dimensions do not match tile data")
    return game_map


def _deserialize_ai(data: Optional[Dict[str, Any]]) -> Optional[AIState]:
    if data is None:
        return None
    kind = data["type"]
    if kind == "basic":
        return BasicAI()
    if kind == "ranged":
        return RangedAI(range=int(data["range"]))
    if kind == "confused":
        previous = _deserialize_ai(data["previous"])
        if previous is None:
            raise ValueError("confused AI without a previous state")
        return ConfusedAI(previous=previous, num_turns=int(data["num_turns"]))
    raise ValueError(f"unknown AI type {kind!r}")


def _deserialize_entity(data: Dict[str, Any]) -> Entity:
    fighter = None
    if data["fighter"] is not None:
        f = data["fighter"]
        fighter = Fighter(
            base_max_hp=int(f["base_max_hp"]),
            hp=int(f["hp"]),
            base_defense=int(f["base_defense"]),
            base_power=int(f["base_power"]),
            xp=int(f["xp"]),
            on_death=DeathCallback(f["on_death"]),
        )

    equipment = None
    if data["equipment"] is not None:
        e = data["equipment"]
        equipment = Equipment(
            slot=Slot(e["slot"]),
            equipped=bool(e["equipped"]),
            power_bonus=int(e["power_bonus"]),
            defense_bonus=int(e["defense_bonus"]),
            max_hp_bonus=int(e["max_hp_bonus"]),
            range=int(e["range"]),
            damage=int(e["damage"]),
            charges=int(e["charges"]),
        )

    return Entity(
        x=int(data["x"]),
        y=int(data["y"]),
        char=data["char"],
        color=tuple(data["color"]),
        name=data["name"],
        blocks=bool(data["blocks"]),
        alive=bool(data["alive"]),
        fighter=fighter,
        ai=_deserialize_ai(data["ai"]),
        item=Item(data["item"]) if data["item"] is not None else None,
        equipment=equipment,
        always_visible=bool(data["always_visible"]),
        level=int(data["level"]),
    )
