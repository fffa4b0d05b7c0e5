from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional

from settings import PLAYER, WHITE, YELLOW
from engine.error_handler import get_logger
from engine.managers.floor_manager import FloorManager
from systems.combat import attack
from systems.input import InputAction, Intent
from systems.inventory import drop_item, item_at, pick_item_up
from systems.items import NoTargeting, TargetSelector, UseResult, use_item
from systems.progression import LevelUpChoice, apply_level_up, can_level_up
from world.ai import FovOracle, ai_take_turn, move_by

if TYPE_CHECKING:
    from engine.game import Session

log = get_logger("turns")


class PlayerAction(str, Enum):
    TOOK_TURN = "took_turn"
    DIDNT_TAKE_TURN = "didnt_take_turn"
    EXIT = "exit"


class TurnController:
    """
    Owns the turn rules:
    - Player phase: one intent -> TOOK_TURN / DIDNT_TAKE_TURN / EXIT
    - Monster phase: every living monster with an AI acts, in roster order
    - Level-up check, which suspends play until a stat is chosen

    The FOV oracle and the targeting prompt are supplied by the front end.
    Without an oracle, the current map's visible set is used.
    """

    def __init__(
        self,
        session: "Session",
        fov: Optional[FovOracle] = None,
        targets: Optional[TargetSelector] = None,
    ) -> None:
        self.session = session
        self.floors = FloorManager(session)
        self._fov = fov
        self.targets: TargetSelector = targets if targets is not None else NoTargeting()
        self.pending_level_up: bool = False

    def fov(self, x: int, y: int) -> bool:
        if self._fov is not None:
            return self._fov(x, y)
        return self.session.game.game_map.is_visible(x, y)

    # ---------------------------------------------------------------------
    # Public API used by the front end
    # ---------------------------------------------------------------------

    def play_turn(self, intent: Intent) -> PlayerAction:
        """
        Resolve one full tick: the player's intent, then (if a turn was
        taken) the monster phase and the level-up check.
        """
        if intent.action is InputAction.EXIT:
            return PlayerAction.EXIT

        player = self.session.player
        if not player.alive or self.pending_level_up:
            return PlayerAction.DIDNT_TAKE_TURN

        action = self.handle_player_intent(intent)
        if action is not PlayerAction.TOOK_TURN:
            return action

        self.session.telemetry.tick_turn()
        if player.alive:
            self.run_monster_phase()
        if not player.alive:
            self.session.telemetry.log("player_died", dungeon_level=self.session.game.dungeon_level)
            return action

        self.check_level_up()
        return action

    def handle_player_intent(self, intent: Intent) -> PlayerAction:
        session = self.session
        game = session.game
        kind = intent.action

        if kind is InputAction.MOVE:
            self.player_move_or_attack(intent.dx, intent.dy)
            return PlayerAction.TOOK_TURN

        if kind is InputAction.WAIT:
            return PlayerAction.TOOK_TURN

        if kind is InputAction.PICK_UP:
            item_id = item_at(session.player.x, session.player.y, session)
            if item_id is None:
                game.messages.add("There is nothing here to pick up.", WHITE)
                return PlayerAction.DIDNT_TAKE_TURN
            if pick_item_up(item_id, session):
                return PlayerAction.TOOK_TURN
            return PlayerAction.DIDNT_TAKE_TURN

        if kind is InputAction.USE_ITEM:
            if not 0 <= intent.index < len(game.inventory):
                return PlayerAction.DIDNT_TAKE_TURN
            result = use_item(intent.index, session, self.fov, self.targets)
            if result is UseResult.CANCELLED:
                return PlayerAction.DIDNT_TAKE_TURN
            return PlayerAction.TOOK_TURN

        if kind is InputAction.DROP_ITEM:
            if not 0 <= intent.index < len(game.inventory):
                return PlayerAction.DIDNT_TAKE_TURN
            drop_item(intent.index, session)
            return PlayerAction.TOOK_TURN

        if kind is InputAction.DESCEND:
            if not self.floors.player_on_stairs():
                game.messages.add("There are no stairs here.", WHITE)
                return PlayerAction.DIDNT_TAKE_TURN
            self.floors.next_level()
            # the new level starts with the player to move
            return PlayerAction.DIDNT_TAKE_TURN

        return PlayerAction.DIDNT_TAKE_TURN

    # ---------------------------------------------------------------------
    # Player phase helpers
    # ---------------------------------------------------------------------

    def player_move_or_attack(self, dx: int, dy: int) -> None:
        # the coordinates the player is moving to/attacking
        session = self.session
        x = session.player.x + dx
        y = session.player.y + dy

        # try to find an attackable object there
        target_id = session.roster.fighter_at(x, y)
        if target_id is not None and target_id != PLAYER:
            player, target = session.roster.mut_two(PLAYER, target_id)
            attack(player, target, session.game)
        else:
            move_by(PLAYER, dx, dy, session)

    # ---------------------------------------------------------------------
    # Monster phase
    # ---------------------------------------------------------------------

    def run_monster_phase(self) -> None:
        """
        Let every monster act once. The index range is fixed before the
        phase starts; each entity is re-checked when its turn comes, so
        monsters killed earlier in the phase never act.
        """
        roster = self.session.roster
        player = self.session.player
        for index in range(len(roster)):
            if not player.alive:
                break
            if index == PLAYER or index >= len(roster):
                continue
            monster = roster[index]
            if monster.alive and monster.ai is not None:
                ai_take_turn(index, self.session, self.fov)

    # ---------------------------------------------------------------------
    # Level up
    # ---------------------------------------------------------------------

    def check_level_up(self) -> bool:
        """Flag a pending level-up prompt when the player has enough XP."""
        player = self.session.player
        if not self.pending_level_up and can_level_up(player):
            self.pending_level_up = True
            self.session.game.messages.add(
                "You feel stronger! Choose a stat to raise.",
                YELLOW,
            )
        return self.pending_level_up

    def choose_level_up(self, choice: Optional[LevelUpChoice]) -> bool:
        """
        Answer the level-up prompt. None (cancelled) keeps the prompt
        pending and changes nothing.
        """
        if not self.pending_level_up:
            return False

        session = self.session
        player = session.player
        if not apply_level_up(player, choice, session.game):
            return False

        session.telemetry.log("level_up", level=player.level, choice=choice.value)
        log.info("Player reached level %d (%s)", player.level, choice.value)
        # enough XP may remain for another level
        self.pending_level_up = can_level_up(player)
        return True
