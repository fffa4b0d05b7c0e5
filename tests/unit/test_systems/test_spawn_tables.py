"""
Unit tests for spawn tables and weighted choices.
"""

import random

import pytest

from systems.spawn_tables import (
    ITEM_CHANCES,
    MAX_ROOM_ITEMS,
    MAX_ROOM_MONSTERS,
    MONSTER_FACTORIES,
    choose_item,
    choose_monster,
    create_item,
    create_monster,
    from_dungeon_level,
    random_choice,
    random_choice_index,
)
from world.ai import BasicAI, RangedAI
from world.entities import DeathCallback, Item


class FixedDice:
    """Rng stand-in whose randint always returns the same number."""

    def __init__(self, value):
        self.value = value

    def randint(self, a, b):
        assert a <= self.value <= b
        return self.value

    def random(self):
        return 0.0


class TestFromDungeonLevel:
    """Tests for level transitions."""

    @pytest.mark.parametrize("level, expected", [(1, 2), (3, 2), (4, 3), (5, 3), (6, 5), (40, 5)])
    def test_monster_caps(self, level, expected):
        assert from_dungeon_level(MAX_ROOM_MONSTERS, level) == expected

    def test_below_first_transition_is_zero(self):
        assert from_dungeon_level([(15, 3), (30, 5)], 2) == 0
        assert from_dungeon_level([(15, 3), (30, 5)], 3) == 15

    def test_item_caps(self):
        assert from_dungeon_level(MAX_ROOM_ITEMS, 1) == 1
        assert from_dungeon_level(MAX_ROOM_ITEMS, 4) == 2


class TestRandomChoice:
    """Tests for the cumulative weighted draw."""

    @pytest.mark.parametrize("dice, expected", [(1, 0), (3, 0), (4, 1), (5, 2), (10, 2)])
    def test_cumulative_buckets(self, dice, expected):
        assert random_choice_index([3, 1, 6], FixedDice(dice)) == expected

    def test_zero_weight_is_never_chosen(self):
        rng = random.Random(7)
        picks = {random_choice_index([5, 0, 5], rng) for _ in range(500)}
        assert picks == {0, 2}

    def test_all_zero_weights_is_an_error(self):
        with pytest.raises(ValueError):
            random_choice_index([0, 0], random.Random(1))

    def test_random_choice_returns_key(self):
        assert random_choice([("a", 0), ("b", 4)], FixedDice(2)) == "b"

    def test_level_one_spawns_only_orcs_and_potions(self):
        rng = random.Random(3)
        assert {choose_monster(1, rng) for _ in range(200)} == {"orc"}
        assert {choose_item(1, rng) for _ in range(200)} == {Item.HEAL}

    def test_deeper_levels_unlock_more(self):
        rng = random.Random(3)
        assert {choose_monster(7, rng) for _ in range(500)} == {"orc", "troll", "broo"}
        assert {choose_item(8, rng) for _ in range(2000)} == set(ITEM_CHANCES)


class TestFactories:
    """Tests for monster and item factories."""

    @pytest.mark.parametrize("kind", sorted(MONSTER_FACTORIES))
    def test_monsters_are_alive_blocking_fighters(self, kind):
        monster = create_monster(kind, 3, 4, level=2)
        assert monster.pos() == (3, 4)
        assert monster.alive and monster.blocks
        assert monster.fighter.on_death is DeathCallback.MONSTER
        assert monster.fighter.hp == monster.fighter.base_max_hp
        assert monster.level == 2

    def test_broo_is_ranged(self):
        assert create_monster("broo", 0, 0).ai == RangedAI(range=4)
        assert create_monster("orc", 0, 0).ai == BasicAI()

    @pytest.mark.parametrize("kind", list(Item))
    def test_items_are_passive(self, kind):
        item = create_item(kind, 1, 2)
        assert item.item is kind
        assert not item.blocks
        assert item.fighter is None
        assert item.ai is None
