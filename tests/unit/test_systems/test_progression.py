"""
Unit tests for experience and level-up choices.
"""

import pytest

from systems.progression import (
    LevelUpChoice,
    apply_level_up,
    can_level_up,
    level_up_options,
    xp_to_next,
)


class TestXpCurve:
    """Tests for the level-up threshold."""

    @pytest.mark.parametrize("level, needed", [(1, 350), (2, 500), (5, 950)])
    def test_threshold(self, level, needed):
        assert xp_to_next(level) == needed

    def test_can_level_up_at_threshold(self, session):
        player = session.player
        player.fighter.xp = 349
        assert not can_level_up(player)
        player.fighter.xp = 350
        assert can_level_up(player)

    def test_dead_player_does_not_level(self, session):
        player = session.player
        player.fighter.xp = 1000
        player.alive = False
        assert not can_level_up(player)


class TestApplyLevelUp:
    """Tests for applying a choice."""

    @pytest.mark.parametrize(
        "choice, hp, power, defense",
        [
            (LevelUpChoice.HP, 120, 2, 1),
            (LevelUpChoice.POWER, 100, 3, 1),
            (LevelUpChoice.DEFENSE, 100, 2, 2),
        ],
    )
    def test_each_choice(self, session, choice, hp, power, defense):
        player = session.player
        game = session.game
        player.fighter.xp = 400

        assert apply_level_up(player, choice, game) is True
        assert player.level == 2
        assert player.fighter.xp == 50
        assert player.max_hp(game) == hp
        assert player.power(game) == power
        assert player.defense(game) == defense
        assert game.messages.last_message == "Your battle skills grow stronger! You reached level 2!"

    def test_hp_choice_also_heals(self, session):
        player = session.player
        player.fighter.xp = 350
        player.fighter.hp = 40

        apply_level_up(player, LevelUpChoice.HP, session.game)
        assert player.fighter.hp == 60

    def test_cancelled_choice_changes_nothing(self, session):
        player = session.player
        player.fighter.xp = 400

        assert apply_level_up(player, None, session.game) is False
        assert player.level == 1
        assert player.fighter.xp == 400
        assert len(session.game.messages) == 0

    def test_options_follow_choice_order(self, session):
        options = level_up_options(session.player, session.game)
        assert len(options) == len(LevelUpChoice)
        assert options[0].startswith("Constitution")
        assert options[1].startswith("Strength")
        assert options[2].startswith("Agility")
