from __future__ import annotations

from typing import Dict, Optional, Tuple

import pygame

from systems.input import InputAction, InputManager, Intent


# Movement keys -> (dx, dy). Arrows, numpad and vi-keys.
DIRECTION_KEYS: Dict[int, Tuple[int, int]] = {
    pygame.K_UP: (0, -1),
    pygame.K_DOWN: (0, 1),
    pygame.K_LEFT: (-1, 0),
    pygame.K_RIGHT: (1, 0),
    pygame.K_KP8: (0, -1),
    pygame.K_KP2: (0, 1),
    pygame.K_KP4: (-1, 0),
    pygame.K_KP6: (1, 0),
    pygame.K_KP7: (-1, -1),
    pygame.K_KP9: (1, -1),
    pygame.K_KP1: (-1, 1),
    pygame.K_KP3: (1, 1),
    pygame.K_k: (0, -1),
    pygame.K_j: (0, 1),
    pygame.K_h: (-1, 0),
    pygame.K_l: (1, 0),
    pygame.K_y: (-1, -1),
    pygame.K_u: (1, -1),
    pygame.K_b: (-1, 1),
    pygame.K_n: (1, 1),
}


def create_default_input_manager() -> InputManager:
    """
    Create an InputManager instance with the game's default keyboard bindings.

    Movement is not bound here; DIRECTION_KEYS carries the direction too.
    """
    mgr = InputManager()

    # ------------------------------------------------------------------
    # Turn actions
    # ------------------------------------------------------------------
    mgr.bind_key(InputAction.WAIT, pygame.K_SPACE)
    mgr.bind_key(InputAction.WAIT, pygame.K_KP5)
    mgr.bind_key(InputAction.PICK_UP, pygame.K_g)
    mgr.bind_key(InputAction.PICK_UP, pygame.K_COMMA)
    mgr.bind_key(InputAction.DESCEND, pygame.K_GREATER)

    # ------------------------------------------------------------------
    # Menus / meta
    # ------------------------------------------------------------------
    mgr.bind_key(InputAction.OPEN_INVENTORY, pygame.K_i)
    mgr.bind_key(InputAction.OPEN_DROP_MENU, pygame.K_d)
    mgr.bind_key(InputAction.SHOW_CHARACTER, pygame.K_c)
    mgr.bind_key(InputAction.SAVE, pygame.K_s)

    mgr.bind_key(InputAction.CONFIRM, pygame.K_RETURN)
    mgr.bind_key(InputAction.CONFIRM, pygame.K_KP_ENTER)

    # ESC leaves the game from the map view, and closes menus elsewhere
    mgr.bind_key(InputAction.EXIT, pygame.K_ESCAPE)

    return mgr


def intent_from_event(event: pygame.event.Event, mgr: InputManager) -> Optional[Intent]:
    """Classify one event from the map view. Returns None for unbound input."""
    if event.type == pygame.QUIT:
        return Intent(InputAction.EXIT)
    if event.type != pygame.KEYDOWN:
        return None

    key = int(getattr(event, "key", -1))
    if key in DIRECTION_KEYS:
        dx, dy = DIRECTION_KEYS[key]
        return Intent.move(dx, dy)

    # '>' and '.' arrive as the period key on most layouts
    text = getattr(event, "unicode", "")
    if text == ">":
        return Intent(InputAction.DESCEND)
    if text == ".":
        return Intent(InputAction.WAIT)

    action = mgr.action_for_key(key)
    if action is None:
        return None
    return Intent(action)


def menu_intent_from_event(event: pygame.event.Event) -> Optional[Intent]:
    """
    Classify one event while a lettered menu is open:
    a-z selects an option, ESC cancels.
    """
    if event.type == pygame.QUIT:
        return Intent(InputAction.EXIT)
    if event.type != pygame.KEYDOWN:
        return None

    key = int(getattr(event, "key", -1))
    if key == pygame.K_ESCAPE:
        return Intent(InputAction.CANCEL)
    if key in (pygame.K_RETURN, pygame.K_KP_ENTER):
        return Intent(InputAction.CONFIRM)
    if pygame.K_a <= key <= pygame.K_z:
        return Intent.select(key - pygame.K_a)
    return None
