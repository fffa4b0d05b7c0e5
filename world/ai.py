# world/ai.py

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Union

import pygame

from settings import PLAYER, RED
from engine.error_handler import get_logger
from systems.combat import attack, ranged_attack

if TYPE_CHECKING:
    from engine.game import Session

log = get_logger("ai")

# FOV oracle: "is tile (x, y) currently visible from the player"
FovOracle = Callable[[int, int], bool]

# Monsters closer than this attack in melee instead of stepping
MELEE_DISTANCE = 2.0


@dataclass
class BasicAI:
    """Chase the player on sight and hit it in melee."""


@dataclass
class RangedAI:
    """Keep closing in until within `range`, then shoot."""
    range: int


@dataclass
class ConfusedAI:
    """
    Wraps another AI state for `num_turns` turns of random stumbling,
    then hands back exactly the wrapped state.
    """
    previous: "AIState"
    num_turns: int


AIState = Union[BasicAI, RangedAI, ConfusedAI]


# ----------------------------------------------------------------------
# Movement
# ----------------------------------------------------------------------

def move_by(entity_id: int, dx: int, dy: int, session: "Session") -> bool:
    """
    Step an entity by (dx, dy) if the destination is free.
    Blocked steps are skipped silently; returns whether the step happened.
    """
    entity = session.roster[entity_id]
    x, y = entity.x + dx, entity.y + dy
    if session.game.game_map.is_blocked(x, y, session.roster):
        return False
    entity.set_pos(x, y)
    return True


def move_towards(entity_id: int, target_x: int, target_y: int, session: "Session") -> bool:
    """
    One greedy grid step toward a target: the normalized displacement,
    rounded so movement stays on the 8-way grid.
    """
    entity = session.roster[entity_id]
    direction = pygame.Vector2(target_x - entity.x, target_y - entity.y)
    if direction.length_squared() == 0:
        return False
    direction = direction.normalize()

    dx = int(round(direction.x))
    dy = int(round(direction.y))
    return move_by(entity_id, dx, dy, session)


# ----------------------------------------------------------------------
# Turn resolution
# ----------------------------------------------------------------------

def ai_take_turn(monster_id: int, session: "Session", fov: FovOracle) -> None:
    """
    Resolve one monster turn and store the resulting AI state.

    Only living entities with an AI take turns.
    """
    monster = session.roster[monster_id]
    if not monster.alive or monster.ai is None:
        return

    ai = monster.ai
    monster.ai = None
    if isinstance(ai, BasicAI):
        new_ai = _basic_turn(monster_id, ai, session, fov)
    elif isinstance(ai, RangedAI):
        new_ai = _ranged_turn(monster_id, ai, session, fov)
    elif isinstance(ai, ConfusedAI):
        new_ai = _confused_turn(monster_id, ai, session)
    else:
        raise TypeError(f"Unknown AI state: {ai!r}")

    # A monster killed during its own turn keeps no AI
    if monster.alive:
        monster.ai = new_ai


def _basic_turn(monster_id: int, ai: BasicAI, session: "Session", fov: FovOracle) -> AIState:
    # If you can see it, it can see you
    monster = session.roster[monster_id]
    player = session.roster.player
    if fov(monster.x, monster.y):
        if monster.distance_to(player) >= MELEE_DISTANCE:
            move_towards(monster_id, player.x, player.y, session)
        elif player.alive and player.fighter is not None:
            attacker, defender = session.roster.mut_two(monster_id, PLAYER)
            attack(attacker, defender, session.game)
    return ai


def _ranged_turn(monster_id: int, ai: RangedAI, session: "Session", fov: FovOracle) -> AIState:
    monster = session.roster[monster_id]
    player = session.roster.player
    if fov(monster.x, monster.y):
        if monster.distance_to(player) >= ai.range:
            move_towards(monster_id, player.x, player.y, session)
        elif player.alive and player.fighter is not None:
            attacker, defender = session.roster.mut_two(monster_id, PLAYER)
            ranged_attack(attacker, defender, session.game, max_range=ai.range)
    return ai


def _confused_turn(monster_id: int, ai: ConfusedAI, session: "Session") -> AIState:
    monster = session.roster[monster_id]
    if ai.num_turns > 0:
        dx = session.rng.randint(-1, 1)
        dy = session.rng.randint(-1, 1)
        move_by(monster_id, dx, dy, session)
        return ConfusedAI(previous=ai.previous, num_turns=ai.num_turns - 1)

    session.game.messages.add(f"The {monster.name} is no longer confused!", RED)
    log.debug("%s recovers from confusion, back to %r", monster.name, ai.previous)
    return ai.previous
