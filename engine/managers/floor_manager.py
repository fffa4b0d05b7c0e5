"""
Floor management system.

Handles stairs detection and level transitions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from settings import LIGHT_VIOLET, RED
from engine.error_handler import get_logger
from world.mapgen import make_map

if TYPE_CHECKING:
    from engine.game import Session

log = get_logger("floors")


class FloorManager:
    """
    Moves the run from one dungeon level to the next.

    Responsibilities:
    - Find the stairs on the current level
    - Rest the player before descending
    - Throw away everything but the player and build the next level
    """

    def __init__(self, session: "Session") -> None:
        self.session = session

    @property
    def dungeon_level(self) -> int:
        return self.session.game.dungeon_level

    def stairs_index(self) -> Optional[int]:
        """Roster index of the stairs entity, if the level has one."""
        for index, obj in enumerate(self.session.roster):
            if obj.name == "stairs":
                return index
        return None

    def player_on_stairs(self) -> bool:
        index = self.stairs_index()
        if index is None:
            return False
        return self.session.roster[index].pos() == self.session.player.pos()

    def next_level(self) -> int:
        """
        Advance to the next level: heal the player by half of its max hp,
        keep only the player in the roster and generate a fresh map.

        Returns:
            The new dungeon level
        """
        session = self.session
        game = session.game
        player = session.player

        game.messages.add(
            "You take a moment to rest, and recover your strength.",
            LIGHT_VIOLET,
        )
        player.heal(player.max_hp(game) // 2, game)

        game.messages.add(
            "After a rare moment of peace, you descend deeper into "
            "the heart of the dungeon...",
            RED,
        )
        game.dungeon_level += 1
        session.roster.keep_only_player()
        game.game_map = make_map(session.roster, game.dungeon_level, session.rng)

        session.telemetry.log(
            "level_generated",
            dungeon_level=game.dungeon_level,
            entities=len(session.roster),
        )
        log.info("Descended to dungeon level %d", game.dungeon_level)
        return game.dungeon_level
