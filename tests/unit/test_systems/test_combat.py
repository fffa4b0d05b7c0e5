"""
Unit tests for attacks, damage, death and XP.
"""

from settings import DARK_RED, ORANGE
from systems.combat import AttackOutcome, attack, ranged_attack, take_damage
from world.entities import Item


class TestMeleeAttack:
    """Tests for attack()."""

    def test_damage_is_power_minus_defense(self, session, add_monster):
        orc = session.roster[add_monster("orc", 6, 5)]

        outcome = attack(session.player, orc, session.game)

        # player power 2 - orc defense 0
        assert outcome is AttackOutcome.HIT
        assert orc.fighter.hp == 18
        assert session.game.messages.last_message == "player attacks orc for 2 hit points."

    def test_no_effect_when_defense_absorbs_everything(self, session, add_monster):
        troll = session.roster[add_monster("troll", 6, 5)]

        outcome = attack(session.player, troll, session.game)

        assert outcome is AttackOutcome.NO_EFFECT
        assert troll.fighter.hp == 30
        assert session.game.messages.last_message == "player attacks troll but it has no effect!"

    def test_equipment_counts_toward_damage(self, session, add_monster, add_item):
        add_item(Item.SWORD, equipped=True)
        troll = session.roster[add_monster("troll", 6, 5)]

        attack(session.player, troll, session.game)

        # (2 + 3) - 2
        assert troll.fighter.hp == 27

    def test_kill_awards_xp_once(self, session, add_monster):
        orc = session.roster[add_monster("orc", 6, 5)]
        orc.fighter.hp = 2

        outcome = attack(session.player, orc, session.game)

        assert outcome is AttackOutcome.KILLED
        assert session.player.fighter.xp == 35
        assert not orc.alive
        assert orc.fighter is None
        assert orc.ai is None
        assert not orc.blocks
        assert orc.char == "%"
        assert orc.color == DARK_RED
        assert orc.name == "remains of orc"
        assert ("orc is dead! You gain 35 experience points.", ORANGE) in list(session.game.messages)

    def test_corpse_cannot_be_killed_twice(self, session, add_monster):
        orc = session.roster[add_monster("orc", 6, 5)]
        orc.fighter.hp = 1
        attack(session.player, orc, session.game)

        assert take_damage(orc, 50, session.game) is None
        assert session.player.fighter.xp == 35


class TestTakeDamage:
    """Tests for take_damage()."""

    def test_returns_xp_only_on_the_killing_blow(self, session, add_monster):
        orc = session.roster[add_monster("orc", 6, 5)]

        assert take_damage(orc, 10, session.game) is None
        assert take_damage(orc, 10, session.game) == 35
        assert take_damage(orc, 10, session.game) is None

    def test_zero_damage_changes_nothing(self, session, add_monster):
        orc = session.roster[add_monster("orc", 6, 5)]

        take_damage(orc, 0, session.game)

        assert orc.fighter.hp == 20
        assert orc.alive

    def test_player_death_leaves_a_non_blocking_corpse(self, session):
        player = session.player

        take_damage(player, 500, session.game)

        assert not player.alive
        assert not player.blocks
        assert player.char == "%"
        assert session.game.messages.last_message == "You died!"
        assert not session.roster.is_blocked_by_entity(player.x, player.y)


class TestRangedAttack:
    """Tests for ranged_attack()."""

    def test_broo_hits_fresh_player_for_three(self, session, add_monster):
        broo = session.roster[add_monster("broo", 8, 5)]

        outcome = ranged_attack(broo, session.player, session.game, max_range=4)

        assert outcome is AttackOutcome.HIT
        assert session.player.fighter.hp == 97

    def test_out_of_range_changes_nothing(self, session, add_monster):
        broo = session.roster[add_monster("broo", 15, 5)]

        outcome = ranged_attack(broo, session.player, session.game, max_range=4)

        assert outcome is AttackOutcome.OUT_OF_RANGE
        assert session.player.fighter.hp == 100
        assert session.game.messages.last_message == "broo's shot falls short of player."

    def test_weapon_damage_replaces_power(self, session, add_monster):
        troll = session.roster[add_monster("troll", 9, 5)]

        ranged_attack(session.player, troll, session.game, max_range=6, damage=6)

        # 6 - troll defense 2
        assert troll.fighter.hp == 26
