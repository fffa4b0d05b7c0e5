"""
Unit tests for the FloorManager class.
"""

from settings import MAP_HEIGHT, MAP_WIDTH
from engine.controllers.turns import PlayerAction, TurnController
from engine.managers.floor_manager import FloorManager
from systems.input import InputAction, Intent
from world.entities import Item
from world.mapgen import create_stairs


class TestFloorManager:
    """Tests for FloorManager."""

    def test_no_stairs(self, session):
        manager = FloorManager(session)
        assert manager.stairs_index() is None
        assert manager.player_on_stairs() is False

    def test_player_on_stairs(self, session):
        manager = FloorManager(session)
        index = session.roster.append(create_stairs(5, 5))

        assert manager.stairs_index() == index
        assert manager.player_on_stairs() is True

        session.player.set_pos(6, 5)
        assert manager.player_on_stairs() is False

    def test_next_level_keeps_only_the_player(self, session, add_monster, add_item):
        add_monster("orc", 8, 8)
        add_item(Item.SWORD, equipped=True)
        player = session.player
        manager = FloorManager(session)

        assert manager.next_level() == 2

        assert session.game.dungeon_level == 2
        assert manager.dungeon_level == 2
        assert session.roster.player is player
        assert all(obj.name != "orc" or obj.level == 2 for obj in session.roster)
        assert manager.stairs_index() is not None
        # the inventory travels with the player
        assert [item.name for item in session.game.inventory] == ["sword"]

    def test_next_level_builds_a_full_size_map(self, session):
        FloorManager(session).next_level()

        game_map = session.game.game_map
        assert game_map.width == MAP_WIDTH
        assert game_map.height == MAP_HEIGHT
        player = session.player
        assert not game_map.is_blocked_tile(player.x, player.y)

    def test_rest_heals_half_of_max_hp(self, session):
        session.player.fighter.hp = 30

        FloorManager(session).next_level()

        assert session.player.fighter.hp == 80
        texts = [text for text, _ in session.game.messages]
        assert "You take a moment to rest, and recover your strength." in texts
        assert texts[-1] == "After a rare moment of peace, you descend deeper into the heart of the dungeon..."

    def test_level_generated_event(self, session):
        FloorManager(session).next_level()

        events = session.telemetry.events("level_generated")
        assert events[-1]["dungeon_level"] == 2

    def test_descend_intent_on_stairs(self, session, see_all):
        session.roster.append(create_stairs(5, 5))
        session.player.fighter.hp = 50
        controller = TurnController(session, fov=see_all)

        result = controller.play_turn(Intent(InputAction.DESCEND))

        assert result is PlayerAction.DIDNT_TAKE_TURN
        assert session.game.dungeon_level == 2
        assert session.player.fighter.hp == 100
