"""
Unit tests for the TurnController: player phase, monster phase and level-up suspension.
"""

import pytest

from settings import INVENTORY_CAPACITY
from engine.controllers.turns import PlayerAction, TurnController
from systems.input import InputAction, Intent
from systems.progression import LevelUpChoice
from systems.spawn_tables import create_item
from world.entities import Item


@pytest.fixture
def controller(session, see_all):
    return TurnController(session, fov=see_all)


class TestPlayerPhase:
    """Tests for resolving the player's intent."""

    def test_exit(self, controller):
        assert controller.play_turn(Intent(InputAction.EXIT)) is PlayerAction.EXIT

    def test_move_takes_a_turn(self, controller, session):
        assert controller.play_turn(Intent.move(1, 0)) is PlayerAction.TOOK_TURN
        assert session.player.pos() == (6, 5)
        assert session.telemetry.turn == 1

    def test_bumping_a_wall_still_takes_a_turn(self, controller, session):
        session.player.set_pos(1, 1)
        assert controller.play_turn(Intent.move(-1, 0)) is PlayerAction.TOOK_TURN
        assert session.player.pos() == (1, 1)

    def test_moving_into_a_monster_attacks_it(self, controller, session, add_monster):
        orc = add_monster("orc", 6, 5)

        controller.play_turn(Intent.move(1, 0))

        assert session.player.pos() == (5, 5)
        assert session.roster[orc].fighter.hp == 18
        # and the orc hits back in the monster phase
        assert session.player.fighter.hp == 97

    def test_moving_onto_a_corpse(self, controller, session, add_monster):
        orc = add_monster("orc", 6, 5)
        session.roster[orc].fighter.hp = 1
        controller.play_turn(Intent.move(1, 0))

        controller.play_turn(Intent.move(1, 0))

        assert session.player.pos() == (6, 5)

    def test_wait(self, controller, session):
        assert controller.play_turn(Intent(InputAction.WAIT)) is PlayerAction.TOOK_TURN
        assert session.player.pos() == (5, 5)

    def test_pick_up_with_nothing_there(self, controller, session):
        result = controller.play_turn(Intent(InputAction.PICK_UP))

        assert result is PlayerAction.DIDNT_TAKE_TURN
        assert session.game.messages.last_message == "There is nothing here to pick up."
        assert session.telemetry.turn == 0

    def test_pick_up_item_underfoot(self, controller, session):
        session.roster.append(create_item(Item.HEAL, 5, 5))

        assert controller.play_turn(Intent(InputAction.PICK_UP)) is PlayerAction.TOOK_TURN
        assert len(session.game.inventory) == 1

    def test_pick_up_with_full_inventory(self, controller, session):
        for _ in range(INVENTORY_CAPACITY):
            session.game.inventory.append(create_item(Item.HEAL, 0, 0))
        session.roster.append(create_item(Item.HEAL, 5, 5))

        assert controller.play_turn(Intent(InputAction.PICK_UP)) is PlayerAction.DIDNT_TAKE_TURN
        assert len(session.roster) == 2

    def test_use_item_bad_index(self, controller):
        assert controller.play_turn(Intent.use(3)) is PlayerAction.DIDNT_TAKE_TURN
        assert controller.play_turn(Intent.drop(0)) is PlayerAction.DIDNT_TAKE_TURN

    def test_cancelled_item_use_gives_monsters_no_turn(self, controller, session, add_item, add_monster):
        add_item(Item.HEAL)
        add_monster("broo", 8, 5)

        assert controller.play_turn(Intent.use(0)) is PlayerAction.DIDNT_TAKE_TURN
        assert session.player.fighter.hp == 100

    def test_drop_item(self, controller, session, add_item):
        add_item(Item.SWORD, equipped=True)

        assert controller.play_turn(Intent.drop(0)) is PlayerAction.TOOK_TURN
        assert session.game.inventory == []
        assert session.roster[1].pos() == (5, 5)

    def test_descend_without_stairs(self, controller, session):
        result = controller.play_turn(Intent(InputAction.DESCEND))

        assert result is PlayerAction.DIDNT_TAKE_TURN
        assert session.game.messages.last_message == "There are no stairs here."
        assert session.game.dungeon_level == 1

    def test_menu_intents_are_not_turns(self, controller):
        assert controller.play_turn(Intent(InputAction.OPEN_INVENTORY)) is PlayerAction.DIDNT_TAKE_TURN

    def test_dead_player_cannot_act(self, controller, session):
        session.player.alive = False

        assert controller.play_turn(Intent.move(1, 0)) is PlayerAction.DIDNT_TAKE_TURN
        assert session.player.pos() == (5, 5)
        assert controller.play_turn(Intent(InputAction.EXIT)) is PlayerAction.EXIT


class TestMonsterPhase:
    """Tests for the monsters' reactions."""

    def test_every_living_monster_acts(self, controller, session, add_monster):
        add_monster("broo", 8, 5)
        add_monster("orc", 4, 4)

        controller.play_turn(Intent(InputAction.WAIT))

        assert session.player.fighter.hp == 94

    def test_killed_monster_never_acts(self, controller, session, add_monster):
        orc = add_monster("orc", 6, 5)
        session.roster[orc].fighter.hp = 2

        controller.play_turn(Intent.move(1, 0))

        assert not session.roster[orc].alive
        assert session.player.fighter.hp == 100
        assert session.player.fighter.xp == 35

    def test_unseen_monsters_do_not_act(self, session, add_monster, see_nothing):
        controller = TurnController(session, fov=see_nothing)
        add_monster("broo", 8, 5)

        controller.play_turn(Intent(InputAction.WAIT))

        assert session.player.fighter.hp == 100

    def test_default_oracle_is_the_map_fov(self, session, add_monster):
        controller = TurnController(session)
        broo = add_monster("broo", 12, 5)

        controller.play_turn(Intent(InputAction.WAIT))
        assert session.roster[broo].pos() == (12, 5)

        session.game.game_map.compute_fov(5, 5, 10)
        controller.play_turn(Intent(InputAction.WAIT))
        assert session.roster[broo].pos() == (11, 5)

    def test_phase_stops_when_the_player_dies(self, controller, session, add_monster):
        session.player.fighter.hp = 3
        add_monster("broo", 8, 5)
        add_monster("broo", 5, 8)

        result = controller.play_turn(Intent(InputAction.WAIT))

        assert result is PlayerAction.TOOK_TURN
        assert not session.player.alive
        assert session.player.fighter.hp == 0
        assert len(session.telemetry.events("player_died")) == 1
        assert not controller.pending_level_up


class TestLevelUp:
    """Tests for the level-up suspension."""

    def _earn_level(self, controller, session, add_monster):
        session.player.fighter.xp = 349
        orc = add_monster("orc", 6, 5)
        session.roster[orc].fighter.hp = 1
        controller.play_turn(Intent.move(1, 0))

    def test_enough_xp_suspends_play(self, controller, session, add_monster):
        self._earn_level(controller, session, add_monster)

        assert controller.pending_level_up
        assert session.game.messages.last_message == "You feel stronger! Choose a stat to raise."
        assert controller.play_turn(Intent(InputAction.WAIT)) is PlayerAction.DIDNT_TAKE_TURN

    def test_cancelling_keeps_the_prompt(self, controller, session, add_monster):
        self._earn_level(controller, session, add_monster)

        assert controller.choose_level_up(None) is False
        assert controller.pending_level_up
        assert session.player.level == 1
        assert session.player.fighter.xp == 384

    def test_choice_resumes_play(self, controller, session, add_monster):
        self._earn_level(controller, session, add_monster)

        assert controller.choose_level_up(LevelUpChoice.POWER) is True

        assert not controller.pending_level_up
        assert session.player.level == 2
        assert session.player.fighter.xp == 34
        assert session.player.fighter.base_power == 3
        assert session.telemetry.events("level_up")[0]["choice"] == "power"
        assert controller.play_turn(Intent(InputAction.WAIT)) is PlayerAction.TOOK_TURN

    def test_several_levels_in_a_row(self, controller, session):
        session.player.fighter.xp = 2000
        assert controller.check_level_up()

        controller.choose_level_up(LevelUpChoice.HP)
        assert controller.pending_level_up
        controller.choose_level_up(LevelUpChoice.HP)
        assert controller.pending_level_up
        controller.choose_level_up(LevelUpChoice.HP)
        assert not controller.pending_level_up

        # 2000 - 350 - 500 - 650
        assert session.player.level == 4
        assert session.player.fighter.xp == 500
        assert session.player.max_hp(session.game) == 160

    def test_choose_without_prompt_does_nothing(self, controller, session):
        assert controller.choose_level_up(LevelUpChoice.HP) is False
        assert session.player.level == 1
