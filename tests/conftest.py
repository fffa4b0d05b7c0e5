"""
Pytest configuration and shared fixtures.

This file is automatically discovered by pytest and provides fixtures
available to all test files.
"""

import os
import random

# Headless pygame: must be set before pygame creates a display
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pytest
import pygame
from typing import Callable, Generator


@pytest.fixture(scope="session", autouse=True)
def pygame_init() -> Generator[None, None, None]:
    """
    Initialize pygame for the test session.
    This runs once before all tests and cleans up after.
    """
    pygame.init()
    # Use a small headless surface (no display needed)
    pygame.display.set_mode((800, 600), pygame.HIDDEN)
    yield
    pygame.quit()


@pytest.fixture
def sample_screen() -> pygame.Surface:
    """
    Create a sample pygame surface for tests that need a screen.
    """
    return pygame.Surface((800, 600))


@pytest.fixture
def rng() -> random.Random:
    """A seeded random source, so every run draws the same numbers."""
    return random.Random(1234)


@pytest.fixture
def open_map():
    """
    A 20x20 map: walls around the border, floor everywhere else.
    """
    from world.game_map import GameMap
    from world.tiles import Tile

    width, height = 20, 20
    tiles = [
        [
            Tile.wall() if x in (0, width - 1) or y in (0, height - 1) else Tile.empty()
            for y in range(height)
        ]
        for x in range(width)
    ]
    return GameMap(tiles)


@pytest.fixture
def session(open_map, rng):
    """
    A session on the open map with only the player, standing at (5, 5).
    Telemetry is a private in-memory logger.
    """
    from engine.game import Game, Session, create_player
    from telemetry.logger import TelemetryLogger
    from world.entities import Roster

    player = create_player()
    player.set_pos(5, 5)
    return Session(
        game=Game(game_map=open_map),
        roster=Roster([player]),
        rng=rng,
        telemetry=TelemetryLogger(),
    )


@pytest.fixture
def see_all() -> Callable[[int, int], bool]:
    """FOV oracle that reports every tile as visible."""
    return lambda x, y: True


@pytest.fixture
def see_nothing() -> Callable[[int, int], bool]:
    """FOV oracle that reports every tile as hidden."""
    return lambda x, y: False


@pytest.fixture
def add_monster(session):
    """
    Factory: put a monster of the given kind on the session's roster.
    Returns its roster index.
    """
    from systems.spawn_tables import create_monster

    def _add(kind: str, x: int, y: int, level: int = 1) -> int:
        return session.roster.append(create_monster(kind, x, y, level=level))

    return _add


@pytest.fixture
def add_item(session):
    """
    Factory: put an item of the given kind straight into the inventory.
    Returns its inventory index.
    """
    from systems.spawn_tables import create_item

    def _add(kind, equipped: bool = False) -> int:
        item = create_item(kind, 0, 0)
        if equipped and item.equipment is not None:
            item.equipment.equipped = True
        session.game.inventory.append(item)
        return len(session.game.inventory) - 1

    return _add


class ScriptedTargets:
    """TargetSelector that answers from fixed values and records what was asked."""

    def __init__(self, tile=None, monster=None):
        self.tile = tile
        self.monster = monster
        self.asked = []

    def select_tile(self, max_range):
        self.asked.append(("tile", max_range))
        return self.tile

    def select_monster(self, max_range):
        self.asked.append(("monster", max_range))
        return self.monster


@pytest.fixture
def scripted_targets():
    """Factory for ScriptedTargets."""
    return ScriptedTargets
