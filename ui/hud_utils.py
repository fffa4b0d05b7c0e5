from __future__ import annotations

from typing import Tuple

import pygame

Color = Tuple[int, int, int]


def _calculate_hp_color(hp_fraction: float) -> Color:
    """
    Calculate HP bar color based on HP percentage.

    Args:
        hp_fraction: HP percentage (0.0 to 1.0)

    Returns:
        RGB color tuple
        - Green (100, 255, 100) at 100% HP
        - Yellow (255, 255, 100) at 50% HP
        - Red (255, 100, 100) at 0% HP
    """
    hp_fraction = max(0.0, min(1.0, hp_fraction))

    if hp_fraction > 0.5:
        t = (hp_fraction - 0.5) * 2.0  # Maps 0.5-1.0 to 0.0-1.0
        return (int(100 + 155 * (1 - t)), 255, 100)

    t = hp_fraction * 2.0  # Maps 0.0-0.5 to 0.0-1.0
    return (255, int(255 - 155 * (1 - t)), 100)


def _draw_bar(
    surface: pygame.Surface,
    x: int,
    y: int,
    width: int,
    height: int,
    fraction: float,
    back_color: Color,
    fill_color: Color,
    border_color: Color | None = (255, 255, 255),
) -> None:
    """
    Utility: draw a simple filled bar (HP / XP).
    """
    fraction = max(0.0, min(1.0, float(fraction)))
    pygame.draw.rect(surface, back_color, (x, y, width, height))
    if fraction > 0.0:
        fill_w = int(width * fraction)
        pygame.draw.rect(surface, fill_color, (x, y, fill_w, height))
    if border_color is not None and width > 2 and height > 2:
        pygame.draw.rect(surface, border_color, (x, y, width, height), 1)


def _draw_resource_bar_with_label(
    surface: pygame.Surface,
    font: pygame.font.Font,
    x: int,
    y: int,
    width: int,
    bar_height: int,
    label: str,
    current: int,
    maximum: int,
    text_color: Color,
    back_color: Color,
    fill_color: Color,
) -> None:
    """Bar with a centered "LABEL: cur/max" caption."""
    maximum = max(1, maximum)
    _draw_bar(surface, x, y, width, bar_height, current / maximum, back_color, fill_color)
    text = font.render(f"{label}: {current}/{maximum}", True, text_color)
    surface.blit(
        text,
        (x + (width - text.get_width()) // 2, y + (bar_height - text.get_height()) // 2),
    )
