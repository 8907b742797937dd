import pygame
from gui import BG, TEXT_MAIN, TEXT_SECONDARY, CARD_BG, GRID

INTRO_LINES = [
    "The puzzle is solved by plain backtracking.",
    "",
    "1. The Board:",
    "   The month and day squares are marked as targets and stay empty.",
    "   The six cut-away corners can never be covered.",
    "",
    "2. One Piece at a Time:",
    "   Pieces are placed in order 1..8. Every rotation and mirror image",
    "   of the next piece is tried at every square, row by row.",
    "",
    "3. Undo and Retry:",
    "   After exploring a placement the piece is lifted off again,",
    "   restoring the board exactly, and the next placement is tried.",
    "   A board with all 8 pieces down is a solution.",
]


def _button_rect(w: int, h: int) -> pygame.Rect:
    return pygame.Rect(w - 160, h - 80, 120, 50)


def draw_intro(screen: pygame.Surface, title_font: pygame.font.Font, body_font: pygame.font.Font):
    screen.fill(BG)
    w, h = screen.get_size()

    title = title_font.render("How it Works: Backtracking", True, TEXT_MAIN)
    screen.blit(title, (40, 40))

    y = 100
    for line in INTRO_LINES:
        surf = body_font.render(line, True, TEXT_SECONDARY)
        screen.blit(surf, (40, y))
        y += 30

    button_rect = _button_rect(w, h)
    color = (50, 50, 55) if button_rect.collidepoint(pygame.mouse.get_pos()) else CARD_BG
    pygame.draw.rect(screen, color, button_rect, border_radius=8)
    pygame.draw.rect(screen, GRID, button_rect, width=1, border_radius=8)

    btn_text = body_font.render("< Menu", True, TEXT_MAIN)
    screen.blit(btn_text, btn_text.get_rect(center=button_rect.center))


def get_intro_action(mouse_pos: tuple[int, int], screen_size: tuple[int, int]) -> str | None:
    w, h = screen_size
    if _button_rect(w, h).collidepoint(mouse_pos):
        return "menu"
    return None
