"""
Game aggregate and the per-session context threaded through the engine.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Optional

from settings import (
    PLAYER_BASE_DEFENSE,
    PLAYER_BASE_MAX_HP,
    PLAYER_BASE_POWER,
    RED,
    WHITE,
)
from engine.error_handler import get_logger
from engine.message_log import MessageLog
from telemetry.logger import TelemetryLogger, telemetry as default_telemetry
from world.entities import DeathCallback, Entity, Fighter, Roster
from world.game_map import GameMap
from world.mapgen import make_map

log = get_logger("game")


@dataclass
class Game:
    """
    Everything about a run that is not an entity on the level:
    the map, the message log, the player's inventory and the depth.
    """
    game_map: GameMap
    messages: MessageLog = field(default_factory=MessageLog)
    inventory: List[Entity] = field(default_factory=list)
    dungeon_level: int = 1


@dataclass
class Session:
    """
    One play session: the game, the roster of the current level, and the
    random source every random decision is drawn from.
    """
    game: Game
    roster: Roster
    rng: random.Random = field(default_factory=random.Random)
    telemetry: TelemetryLogger = field(default_factory=lambda: default_telemetry)

    @property
    def player(self) -> Entity:
        return self.roster.player


def create_player() -> Entity:
    return Entity(
        0, 0, "@", WHITE, "player", blocks=True, alive=True,
        fighter=Fighter(
            base_max_hp=PLAYER_BASE_MAX_HP,
            hp=PLAYER_BASE_MAX_HP,
            base_defense=PLAYER_BASE_DEFENSE,
            base_power=PLAYER_BASE_POWER,
            xp=0,
            on_death=DeathCallback.PLAYER,
        ),
    )


def new_game(
    rng: Optional[random.Random] = None,
    telemetry: Optional[TelemetryLogger] = None,
) -> Session:
    """Create a fresh player and the first dungeon level."""
    rng = rng if rng is not None else random.Random()
    telemetry = telemetry if telemetry is not None else default_telemetry

    roster = Roster([create_player()])
    game_map = make_map(roster, 1, rng)
    game = Game(game_map=game_map, dungeon_level=1)

    # a warm welcoming message!
    game.messages.add(
        "Welcome stranger! Prepare to perish in the Tombs of the Ancient Kings.",
        RED,
    )
    telemetry.log("level_generated", dungeon_level=1, entities=len(roster))
    log.info("New game started")
    return Session(game=game, roster=roster, rng=rng, telemetry=telemetry)
