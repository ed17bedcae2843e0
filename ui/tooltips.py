"""Hover help for the parameter panel."""

import pygame
from typing import Optional

TOOLTIP_BG = (28, 28, 32)
TOOLTIP_BORDER = (60, 60, 68)
TOOLTIP_TEXT = (240, 240, 235)
TOOLTIP_HINT = (150, 150, 148)
TOOLTIP_MAX_WIDTH = 240
TOOLTIP_PADDING = 6
TOOLTIP_OFFSET = (12, 8)
TOOLTIP_GAP = 4

# key -> (description, effect of low/high values). Keys match ParamPanel slider/control keys.
PARAM_TOOLTIPS = {
    "feed_rate": (
        "Rate at which substrate A is replenished toward 1 in every cell. Applied on Restart.",
        "Low = B starves and patterns shrink; high = A floods back and spots split or fill in.",
    ),
    "kill_rate": (
        "Rate at which activator B is removed (on top of the feed rate). Applied on Restart.",
        "Low = B spreads into stripes or fills the grid; high = B dies out.",
    ),
    "diffusion_a": (
        "How fast A spreads to its 8 neighbours, weighted by the Laplacian kernel. Applied on Restart.",
        "A usually diffuses about twice as fast as B for spots and stripes to form.",
    ),
    "diffusion_b": (
        "How fast B spreads to its 8 neighbours. Applied on Restart.",
        "Closer to diffusion A = smoother, less structured fields.",
    ),
    "speed": (
        "Time step multiplier for each generation. Applied on Restart.",
        "Values well above 1 make the explicit update unstable.",
    ),
    "filter_mode": (
        "How the grid is scaled to the window. Point keeps hard cell edges; Bilinear and Trilinear blend neighbours.",
        None,
    ),
    "preset": (
        "Load a built-in world: Simulation is 48×48 with a small seed, Display is 256×256 with a large one. "
        "Reaction sliders keep their values.",
        "Restarts the simulation.",
    ),
}


def wrap_tooltip_text(text: str, font: pygame.font.Font, max_width: int) -> list[str]:
    lines: list[str] = []
    current: list[str] = []
    for word in text.split():
        if current and font.size(" ".join(current + [word]))[0] > max_width:
            lines.append(" ".join(current))
            current = [word]
        else:
            current.append(word)
    if current:
        lines.append(" ".join(current))
    return lines


def draw_tooltip(
    surface: pygame.Surface,
    font: pygame.font.Font,
    small_font: pygame.font.Font,
    tooltip: Optional[tuple[str, Optional[str]]],
    mouse_pos: tuple[int, int],
) -> None:
    if not tooltip or not tooltip[0]:
        return
    desc, hint = tooltip
    blocks = [(wrap_tooltip_text(desc, font, TOOLTIP_MAX_WIDTH), font, TOOLTIP_TEXT)]
    if hint:
        blocks.append((wrap_tooltip_text(hint, small_font, TOOLTIP_MAX_WIDTH), small_font, TOOLTIP_HINT))
    text_w = max(f.size(line)[0] for lines, f, _ in blocks for line in lines)
    text_h = sum(len(lines) * f.get_height() for lines, f, _ in blocks) + TOOLTIP_GAP * (len(blocks) - 1)
    box_w = min(TOOLTIP_MAX_WIDTH, text_w) + 2 * TOOLTIP_PADDING
    box_h = text_h + 2 * TOOLTIP_PADDING

    # Prefer below-right of the cursor; flip when it would leave the window.
    mx, my = mouse_pos
    sw, sh = surface.get_size()
    tx = mx + TOOLTIP_OFFSET[0] if mx + TOOLTIP_OFFSET[0] + box_w <= sw else mx - box_w - TOOLTIP_OFFSET[0]
    ty = my + TOOLTIP_OFFSET[1] if my + TOOLTIP_OFFSET[1] + box_h <= sh else my - box_h - TOOLTIP_OFFSET[1]
    rect = pygame.Rect(max(0, min(tx, sw - box_w)), max(0, min(ty, sh - box_h)), box_w, box_h)
    pygame.draw.rect(surface, TOOLTIP_BG, rect)
    pygame.draw.rect(surface, TOOLTIP_BORDER, rect, 1)

    y = rect.y + TOOLTIP_PADDING
    for lines, f, color in blocks:
        for line in lines:
            surface.blit(f.render(line, True, color), (rect.x + TOOLTIP_PADDING, y))
            y += f.get_height()
        y += TOOLTIP_GAP
