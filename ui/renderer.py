from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Tuple

import pygame

from settings import (
    BLACK,
    COLOR_BG,
    COLOR_DARK_GROUND,
    COLOR_DARK_WALL,
    COLOR_LIGHT_GROUND,
    COLOR_LIGHT_WALL,
    DARK_RED,
    LIGHT_RED,
    PANEL_HEIGHT,
    TILE_SIZE,
    WHITE,
    YELLOW,
)
from systems.progression import xp_to_next
from ui.hud_utils import _calculate_hp_color, _draw_resource_bar_with_label

if TYPE_CHECKING:
    from engine.game import Session
    from world.entities import Entity

BAR_WIDTH = 20  # in tiles
MESSAGE_X = BAR_WIDTH + 2


class Renderer:
    """
    Draws the current level, its entities and the bottom panel.

    Visible tiles use the light palette, explored-but-not-visible tiles the
    dark one; unexplored tiles stay black.
    """

    def __init__(self, screen: pygame.Surface, font: Optional[pygame.font.Font] = None) -> None:
        self.screen = screen
        self.font = font or pygame.font.Font(None, TILE_SIZE + 4)
        self._glyphs: dict[Tuple[str, Tuple[int, int, int]], pygame.Surface] = {}

    def _glyph(self, char: str, color: Tuple[int, int, int]) -> pygame.Surface:
        key = (char, tuple(color))
        surf = self._glyphs.get(key)
        if surf is None:
            surf = self.font.render(char, True, color)
            self._glyphs[key] = surf
        return surf

    def draw_char(self, x: int, y: int, char: str, color: Tuple[int, int, int]) -> None:
        glyph = self._glyph(char, color)
        px = x * TILE_SIZE + (TILE_SIZE - glyph.get_width()) // 2
        py = y * TILE_SIZE + (TILE_SIZE - glyph.get_height()) // 2
        self.screen.blit(glyph, (px, py))

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------

    def draw(self, session: "Session", highlight: Optional[Tuple[int, int]] = None) -> None:
        self.screen.fill(COLOR_BG)
        self.draw_map(session)
        self.draw_entities(session)
        if highlight is not None:
            hx, hy = highlight
            pygame.draw.rect(self.screen, YELLOW, (hx * TILE_SIZE, hy * TILE_SIZE, TILE_SIZE, TILE_SIZE), 1)
        self.draw_panel(session)

    def draw_map(self, session: "Session") -> None:
        game_map = session.game.game_map
        for x, column in enumerate(game_map.tiles):
            for y, tile in enumerate(column):
                wall = tile.block_sight
                if game_map.is_visible(x, y):
                    color = COLOR_LIGHT_WALL if wall else COLOR_LIGHT_GROUND
                elif tile.explored:
                    color = COLOR_DARK_WALL if wall else COLOR_DARK_GROUND
                else:
                    continue
                pygame.draw.rect(self.screen, color, (x * TILE_SIZE, y * TILE_SIZE, TILE_SIZE, TILE_SIZE))

    def draw_entities(self, session: "Session") -> None:
        game_map = session.game.game_map

        def is_drawn(obj: "Entity") -> bool:
            if game_map.is_visible(obj.x, obj.y):
                return True
            return obj.always_visible and game_map.in_bounds(obj.x, obj.y) \
                and game_map.tiles[obj.x][obj.y].explored

        # non-blocking things (items, corpses, stairs) first so fighters draw on top
        ordered: List["Entity"] = sorted(
            (obj for obj in session.roster if is_drawn(obj)),
            key=lambda obj: obj.blocks,
        )
        for obj in ordered:
            self.draw_char(obj.x, obj.y, obj.char, obj.color)

    def draw_panel(self, session: "Session") -> None:
        game = session.game
        player = session.player
        top = game.game_map.height * TILE_SIZE
        width = self.screen.get_width()
        pygame.draw.rect(self.screen, BLACK, (0, top, width, PANEL_HEIGHT * TILE_SIZE))

        hp = max(0, player.fighter.hp) if player.fighter else 0
        max_hp = player.max_hp(game)
        _draw_resource_bar_with_label(
            self.screen, self.font,
            TILE_SIZE, top + TILE_SIZE, BAR_WIDTH * TILE_SIZE, TILE_SIZE,
            "HP", hp, max_hp,
            WHITE, DARK_RED, _calculate_hp_color(hp / max(1, max_hp)) if hp > 0 else LIGHT_RED,
        )

        xp = player.fighter.xp if player.fighter else 0
        lines = [
            f"Dungeon level: {game.dungeon_level}",
            f"Level {player.level}  XP {xp}/{xp_to_next(player.level)}",
        ]
        for i, line in enumerate(lines):
            self.screen.blit(self.font.render(line, True, WHITE), (TILE_SIZE, top + (3 + i) * TILE_SIZE))

        # message window, newest at the bottom
        for i, (text, color) in enumerate(game.messages.recent(PANEL_HEIGHT - 1)):
            self.screen.blit(
                self.font.render(text, True, color),
                (MESSAGE_X * TILE_SIZE, top + (1 + i) * TILE_SIZE),
            )
