# gui.py

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import pygame

from board import BLOCKED, BOARD_COLS, BOARD_LAYOUT, BOARD_ROWS, FREE, TARGET, Board

CELL_SIZE = 64
TOP_BAR_HEIGHT = 120

WINDOW_WIDTH = BOARD_COLS * CELL_SIZE
WINDOW_HEIGHT = BOARD_ROWS * CELL_SIZE + TOP_BAR_HEIGHT

# Colors – higher contrast, refined dark mode
BG = (15, 15, 17)
CARD_BG = (30, 30, 34)
GRID = (90, 90, 95)
TEXT_MAIN = (245, 245, 250)
TEXT_SECONDARY = (230, 230, 235)
ILLEGAL = (45, 45, 49)

DATE_BORDER = (220, 90, 90)

# Same palette as the printed pieces
PIECE_COLORS: Dict[int, Tuple[int, int, int]] = {
    1: (150, 90, 210),   # purple
    2: (60, 200, 220),   # cyan U
    3: (45, 110, 235),   # blue chunky L
    4: (60, 190, 90),    # green tall
    5: (230, 175, 50),   # big L
    6: (250, 170, 130),  # peach zig L
    7: (130, 200, 250),  # light blue long L
    8: (245, 130, 190),  # pink double bar
}

MENU_BUTTONS: List[Tuple[str, str]] = [
    ("Solve Today", "solve_today"),
    ("Choose Date", "choose_date"),
    ("How it Works", "intro"),
]


def cell_style(value: int, label: Optional[str]) -> Tuple[Tuple[int, int, int], str, bool]:
    """(fill colour, text, outlined) for one board cell."""
    if value == BLOCKED:
        return ILLEGAL, "", False
    if value == TARGET:
        return BG, label or "", True
    if value == FREE:
        return BG, label or "", False
    return PIECE_COLORS[value], str(value), False


def _blit_centered(screen: pygame.Surface, font: pygame.font.Font, text: str, color, x: int, y: int) -> None:
    text_surf = font.render(text, True, color)
    screen.blit(
        text_surf,
        (
            x + (CELL_SIZE - text_surf.get_width()) // 2,
            y + (CELL_SIZE - text_surf.get_height()) // 2,
        ),
    )


def draw_top_bar(
    screen: pygame.Surface,
    title_font: pygame.font.Font,
    label_font: pygame.font.Font,
    current_idx: int,
    total_solutions: int,
    month: str,
    day: int,
    status: str = "",
):
    pygame.draw.rect(screen, BG, (0, 0, WINDOW_WIDTH, TOP_BAR_HEIGHT))

    card_rect = pygame.Rect(16, 16, WINDOW_WIDTH - 32, TOP_BAR_HEIGHT - 32)
    pygame.draw.rect(screen, CARD_BG, card_rect, border_radius=16)

    title_surf = title_font.render("Calendar Puzzle", True, TEXT_MAIN)
    screen.blit(title_surf, (card_rect.x + 20, card_rect.y + 12))

    date_surf = label_font.render(f"{month.title()} {day}", True, TEXT_MAIN)
    date_x = card_rect.right - date_surf.get_width() - 20
    screen.blit(date_surf, (date_x, card_rect.y + 12))

    if total_solutions:
        sol_text = f"Solution {current_idx + 1} of {total_solutions}"
    else:
        sol_text = status
    if total_solutions and status:
        sol_text = f"{sol_text}  ·  {status}"
    sol_surf = label_font.render(sol_text, True, TEXT_SECONDARY)
    screen.blit(sol_surf, (card_rect.x + 20, card_rect.y + 48))


def draw_board(
    screen: pygame.Surface,
    cell_font: pygame.font.Font,
    grid: Board,
    visible_pieces: set[int] | None = None,
    shake_offset: Tuple[int, int] = (0, 0),
    completion_shake: bool = False,
):
    """
    Draws a board or finished assignment.
    visible_pieces: piece ids to draw; others show as empty cells. None draws all.
    shake_offset: (dx, dy) applied to the whole board.
    completion_shake: draw a green glow around the board.
    """
    sx, sy = shake_offset

    for r in range(BOARD_ROWS):
        for c in range(BOARD_COLS):
            x = c * CELL_SIZE + sx
            y = TOP_BAR_HEIGHT + r * CELL_SIZE + sy
            rect = pygame.Rect(x + 2, y + 2, CELL_SIZE - 4, CELL_SIZE - 4)

            value = grid[r][c]
            if value > 0 and visible_pieces is not None and value not in visible_pieces:
                value = FREE
            fill, text, outlined = cell_style(value, BOARD_LAYOUT[r][c])

            pygame.draw.rect(screen, fill, rect, border_radius=12)
            if outlined:
                pygame.draw.rect(screen, DATE_BORDER, rect, width=2, border_radius=12)
            elif value == FREE:
                pygame.draw.rect(screen, GRID, rect, width=1, border_radius=12)
            if text:
                color = (255, 255, 255) if value > 0 else TEXT_MAIN
                _blit_centered(screen, cell_font, text, color, x, y)

    if completion_shake:
        glow_surf = pygame.Surface((WINDOW_WIDTH, WINDOW_HEIGHT), pygame.SRCALPHA)
        glow_color = (50, 255, 80)
        board_rect = pygame.Rect(sx, TOP_BAR_HEIGHT + sy, BOARD_COLS * CELL_SIZE, BOARD_ROWS * CELL_SIZE)

        pygame.draw.rect(glow_surf, (*glow_color, 50), board_rect.inflate(8, 8), border_radius=20, width=4)
        pygame.draw.rect(glow_surf, (*glow_color, 255), board_rect, border_radius=16, width=3)
        pygame.draw.rect(glow_surf, (*glow_color, 120), board_rect.inflate(-6, -6), border_radius=12, width=4)

        screen.blit(glow_surf, (0, 0))


def _menu_rects(screen_size: Tuple[int, int]) -> List[Tuple[pygame.Rect, str, str]]:
    w, h = screen_size
    start_y = h // 2
    button_height = 60
    spacing = 20
    button_width = min(400, w - 80)
    return [
        (
            pygame.Rect((w - button_width) // 2, start_y + i * (button_height + spacing), button_width, button_height),
            text,
            action,
        )
        for i, (text, action) in enumerate(MENU_BUTTONS)
    ]


def draw_menu(screen: pygame.Surface, title_font: pygame.font.Font, button_font: pygame.font.Font):
    screen.fill(BG)
    w, h = screen.get_size()

    title_surf = title_font.render("Calendar Puzzle", True, TEXT_MAIN)
    title_rect = title_surf.get_rect(center=(w // 2, h // 4))
    screen.blit(title_surf, title_rect)

    mouse_pos = pygame.mouse.get_pos()
    for rect, text, _ in _menu_rects((w, h)):
        color = (50, 50, 55) if rect.collidepoint(mouse_pos) else CARD_BG
        pygame.draw.rect(screen, color, rect, border_radius=12)
        pygame.draw.rect(screen, GRID, rect, width=1, border_radius=12)

        label = button_font.render(text, True, TEXT_MAIN)
        screen.blit(label, label.get_rect(center=rect.center))


def get_menu_action(mouse_pos: Tuple[int, int], screen_size: Tuple[int, int] = (WINDOW_WIDTH, WINDOW_HEIGHT)) -> str | None:
    for rect, _, action in _menu_rects(screen_size):
        if rect.collidepoint(mouse_pos):
            return action
    return None
