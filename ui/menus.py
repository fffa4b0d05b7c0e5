"""
Blocking pygame prompts: lettered menus, message boxes and the
targeting cursor used by scrolls and the bow.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

import pygame

from settings import BLACK, FPS, INVENTORY_CAPACITY, LEVEL_SCREEN_WIDTH, PLAYER, TILE_SIZE, WHITE, YELLOW
from engine.controllers.input import menu_intent_from_event
from systems.input import InputAction
from systems.progression import LevelUpChoice, level_up_options, xp_to_next

if TYPE_CHECKING:
    from engine.game import Session
    from ui.renderer import Renderer

INVENTORY_WIDTH = 50
MAX_MENU_OPTIONS = 26


class MenuClosed(Exception):
    """The window was closed while a prompt was open."""


def _wait_frame(clock: pygame.time.Clock) -> None:
    pygame.display.flip()
    clock.tick(FPS)


def menu(
    renderer: "Renderer",
    session: Optional["Session"],
    header: str,
    options: Sequence[str],
    width: int,
) -> Optional[int]:
    """
    Show a lettered menu over the current frame and block until a letter
    is pressed. Returns the chosen index, or None when cancelled or when
    the key is not one of the options.
    """
    if len(options) > MAX_MENU_OPTIONS:
        raise ValueError(f"Cannot have a menu with more than {MAX_MENU_OPTIONS} options.")

    screen = renderer.screen
    font = renderer.font
    lines: List[Tuple[str, Tuple[int, int, int]]] = [(line, YELLOW) for line in header.splitlines() if line]
    lines += [(f"({chr(ord('a') + i)}) {text}", WHITE) for i, text in enumerate(options)]

    box_w = width * TILE_SIZE // 2
    box_h = (len(lines) + 1) * TILE_SIZE
    x = (screen.get_width() - box_w) // 2
    y = (screen.get_height() - box_h) // 2

    clock = pygame.time.Clock()
    while True:
        if session is not None:
            renderer.draw(session)
        else:
            screen.fill(BLACK)
        overlay = pygame.Surface((box_w, box_h))
        overlay.set_alpha(220)
        overlay.fill(BLACK)
        screen.blit(overlay, (x, y))
        for i, (text, color) in enumerate(lines):
            screen.blit(font.render(text, True, color), (x + TILE_SIZE // 2, y + TILE_SIZE // 2 + i * TILE_SIZE))
        _wait_frame(clock)

        for event in pygame.event.get():
            intent = menu_intent_from_event(event)
            if intent is None:
                continue
            if intent.action is InputAction.EXIT:
                raise MenuClosed()
            if intent.action is InputAction.CANCEL:
                return None
            if intent.action is InputAction.CONFIRM and not options:
                return None
            if intent.action is InputAction.MENU_SELECT:
                if 0 <= intent.index < len(options):
                    return intent.index
                return None


def msgbox(renderer: "Renderer", session: Optional["Session"], text: str, width: int = 50) -> None:
    menu(renderer, session, text, [], width)


def inventory_menu(renderer: "Renderer", session: "Session", header: str) -> Optional[int]:
    inventory = session.game.inventory
    if not inventory:
        msgbox(renderer, session, f"{header}\nInventory is empty.", INVENTORY_WIDTH)
        return None

    options: List[str] = []
    for item in inventory[:INVENTORY_CAPACITY]:
        text = item.name
        equipment = item.equipment
        if equipment is not None and equipment.equipped:
            text = f"{text} (on {equipment.slot.value})"
        if equipment is not None and equipment.is_ranged:
            text = f"{text} [{equipment.charges} shots]"
        options.append(text)
    return menu(renderer, session, header, options, INVENTORY_WIDTH)


def level_up_menu(renderer: "Renderer", session: "Session") -> Optional[LevelUpChoice]:
    options = level_up_options(session.player, session.game)
    index = menu(renderer, session, "Level up! Choose a stat to raise:", options, LEVEL_SCREEN_WIDTH)
    if index is None:
        return None
    return list(LevelUpChoice)[index]


def character_screen(renderer: "Renderer", session: "Session") -> None:
    game = session.game
    player = session.player
    text = "\n".join([
        "Character information",
        "",
        f"Level: {player.level}",
        f"Experience: {player.fighter.xp}",
        f"Experience to level up: {xp_to_next(player.level)}",
        "",
        f"Maximum HP: {player.max_hp(game)}",
        f"Attack: {player.power(game)}",
        f"Defense: {player.defense(game)}",
    ])
    msgbox(renderer, session, text, LEVEL_SCREEN_WIDTH)


class PygameTargetSelector:
    """
    Mouse-driven targeting cursor. Left click picks a visible tile in range,
    right click or ESC cancels.
    """

    def __init__(self, renderer: "Renderer", session: "Session") -> None:
        self.renderer = renderer
        self.session = session

    def select_tile(self, max_range: Optional[float]) -> Optional[Tuple[int, int]]:
        session = self.session
        game_map = session.game.game_map
        clock = pygame.time.Clock()

        while True:
            mx, my = pygame.mouse.get_pos()
            tile = (mx // TILE_SIZE, my // TILE_SIZE)
            self.renderer.draw(session, highlight=tile if game_map.in_bounds(*tile) else None)
            _wait_frame(clock)

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    raise MenuClosed()
                if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    return None
                if event.type != pygame.MOUSEBUTTONDOWN:
                    continue
                if event.button == 3:
                    return None
                if event.button != 1:
                    continue
                x, y = event.pos[0] // TILE_SIZE, event.pos[1] // TILE_SIZE
                if not game_map.is_visible(x, y):
                    continue
                if max_range is not None and session.player.distance(x, y) > max_range:
                    continue
                return x, y

    def select_monster(self, max_range: Optional[float]) -> Optional[int]:
        # keep asking until a living monster is clicked, or the prompt is cancelled
        while True:
            tile = self.select_tile(max_range)
            if tile is None:
                return None
            index = self.session.roster.fighter_at(*tile)
            if index is not None and index != PLAYER:
                return index
