from __future__ import annotations

import argparse
import logging
import random
import sys
from datetime import date
from typing import List, Optional

from board import MONTH_LABELS, format_board, init_board, resolve_query
from cache import ResultCache
from config import CFG, configure_logging
from errors import CalendarPuzzleError
from solver import SearchMode, SolveOptions, solve

log = logging.getLogger("main")

PIECE_DELAY = 0.15
SHAKE_DURATION = 0.1
COMPLETION_SHAKE_DURATION = 0.4


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    today = date.today()
    parser = argparse.ArgumentParser(description="Perpetual calendar puzzle solver")
    parser.add_argument("--month", default=MONTH_LABELS[today.month - 1], help="Month label (JAN..DEC) or number")
    parser.add_argument("--day", default=str(today.day), help="Day number 1..31")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in SearchMode],
        default=CFG.MODE,
        help="exhaustive: every solution; first: stop at one; capped: stop at --max-solutions (default: %(default)s)",
    )
    parser.add_argument("--max-solutions", type=int, default=CFG.MAX_SOLUTIONS)
    parser.add_argument("--no-prune", action="store_true", help="Disable small-region pruning")
    parser.add_argument("--no-cache", action="store_true", help="Neither read nor write the result cache")
    parser.add_argument("--text", action="store_true", help="Print solutions instead of opening the viewer")
    parser.add_argument("--log-level", default=CFG.LOG_LEVEL, choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"])
    return parser.parse_args(argv)


def options_from_args(args: argparse.Namespace) -> SolveOptions:
    return SolveOptions(
        mode=SearchMode(args.mode),
        max_solutions=args.max_solutions,
        prune_regions=not args.no_prune,
    )


def run_text(args: argparse.Namespace) -> int:
    options = options_from_args(args)
    cache = None if args.no_cache else ResultCache()

    result = cache.load(args.month, args.day, options) if cache is not None else None
    if result is None:
        result = solve(args.month, args.day, options)
        if cache is not None:
            cache.store(result, options)

    if not result.solutions:
        print(f"No solution for {result.month} {result.day} (searched {result.elapsed:.2f}s)")
        return 1
    for i, grid in enumerate(result.solutions, start=1):
        print(f"Solution {i} of {result.count}:")
        print(format_board(grid))
        print()
    source = "cache" if result.cached else f"{result.elapsed:.2f}s"
    print(f"{result.count} solution(s) for {result.month} {result.day} ({source})")
    return 0


def run_viewer(args: argparse.Namespace) -> int:
    import pygame

    from gui import (
        WINDOW_WIDTH, WINDOW_HEIGHT, BG,
        draw_menu, get_menu_action,
        draw_top_bar, draw_board,
    )
    from ui_intro import draw_intro, get_intro_action
    from ui_state import AppState, UIState
    from worker import SolveWorker

    options = options_from_args(args)
    worker = SolveWorker(cache_path=None if args.no_cache else CFG.CACHE_FILE)

    pygame.init()
    screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT), pygame.RESIZABLE)
    pygame.display.set_caption("Calendar Puzzle")

    title_font = pygame.font.SysFont("SF Pro Display", 32, bold=True)
    label_font = pygame.font.SysFont("SF Pro Text", 24)
    cell_font = pygame.font.SysFont("SF Pro Text", 22, bold=True)
    button_font = pygame.font.SysFont("SF Pro Text", 20)
    body_font = pygame.font.SysFont("SF Pro Text", 18)

    clock = pygame.time.Clock()
    today = date.today()
    app_state = AppState(year=today.year)

    # Piece-by-piece reveal of the current solution
    visible_pieces: set[int] = set()
    piece_timer = 0.0
    shake_timer = 0.0
    completion_shake_timer = 0.0

    def start_solve() -> None:
        nonlocal visible_pieces, piece_timer
        app_state.solutions = []
        app_state.current_idx = 0
        visible_pieces = set()
        piece_timer = 0.0
        try:
            worker.submit(app_state.month, app_state.day, options)
        except CalendarPuzzleError as exc:
            log.error("Could not start solve: %s", exc)
            app_state.status = str(exc)
            return
        app_state.solving = True
        app_state.status = "Solving..."

    def show_solution(idx: int) -> None:
        nonlocal visible_pieces, piece_timer
        app_state.current_idx = idx
        visible_pieces = set()
        piece_timer = 0.0

    running = True
    try:
        while running:
            dt = clock.tick(60) / 1000.0

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.VIDEORESIZE:
                    screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)

                if app_state.current_state == UIState.MENU:
                    if event.type == pygame.MOUSEBUTTONDOWN:
                        action = get_menu_action(event.pos, screen.get_size())
                        if action == "solve_today":
                            app_state.set_date(MONTH_LABELS[today.month - 1], today.day)
                            app_state.current_state = UIState.SOLVE
                            start_solve()
                        elif action == "choose_date":
                            month_label, day_label = resolve_query(args.month, args.day)
                            app_state.set_date(month_label, int(day_label))
                            app_state.current_state = UIState.SOLVE
                            start_solve()
                        elif action == "intro":
                            app_state.current_state = UIState.INTRO

                elif app_state.current_state == UIState.INTRO:
                    if event.type == pygame.MOUSEBUTTONDOWN and get_intro_action(event.pos, screen.get_size()):
                        app_state.current_state = UIState.MENU
                    elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                        app_state.current_state = UIState.MENU

                elif app_state.current_state == UIState.SOLVE and event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        worker.cancel()
                        app_state.current_state = UIState.MENU
                    elif event.key == pygame.K_RIGHT and app_state.current_idx < len(app_state.solutions) - 1:
                        show_solution(app_state.current_idx + 1)
                    elif event.key == pygame.K_LEFT and app_state.current_idx > 0:
                        show_solution(app_state.current_idx - 1)
                    elif event.key in (pygame.K_UP, pygame.K_DOWN):
                        app_state.shift_day(1 if event.key == pygame.K_UP else -1)
                        start_solve()
                    elif event.key in (pygame.K_PAGEUP, pygame.K_PAGEDOWN):
                        app_state.shift_month(1 if event.key == pygame.K_PAGEUP else -1)
                        start_solve()
                    elif event.key == pygame.K_r and not app_state.solving:
                        start_solve()

            # Update
            if app_state.current_state == UIState.SOLVE:
                for msg in worker.poll():
                    if msg["type"] == "error":
                        log.error("Solver failed (%s): %s", msg.get("kind"), msg.get("message"))
                    app_state.apply_message(msg)

            # Draw
            if app_state.current_state == UIState.MENU:
                draw_menu(screen, title_font, button_font)

            elif app_state.current_state == UIState.INTRO:
                draw_intro(screen, title_font, body_font)

            elif app_state.current_state == UIState.SOLVE:
                screen.fill(BG)
                draw_top_bar(
                    screen, title_font, label_font,
                    app_state.current_idx, len(app_state.solutions),
                    app_state.month, app_state.day, app_state.status,
                )

                shake_offset = (0, 0)
                if app_state.solutions:
                    grid = app_state.solutions[app_state.current_idx]
                    pieces = sorted({v for row in grid for v in row if v > 0})
                    if len(visible_pieces) < len(pieces):
                        piece_timer += dt
                        if piece_timer >= PIECE_DELAY:
                            piece_timer = 0.0
                            visible_pieces.add(pieces[len(visible_pieces)])
                            shake_timer = SHAKE_DURATION
                            if len(visible_pieces) == len(pieces):
                                completion_shake_timer = COMPLETION_SHAKE_DURATION

                    if shake_timer > 0:
                        shake_timer -= dt
                        shake_offset = (random.randint(-1, 1), random.randint(-1, 1))
                    if completion_shake_timer > 0:
                        completion_shake_timer -= dt
                        shake_offset = (random.randint(-2, 2), random.randint(-2, 2))

                    draw_board(
                        screen, cell_font, grid,
                        visible_pieces=visible_pieces,
                        shake_offset=shake_offset,
                        completion_shake=completion_shake_timer > 0,
                    )
                else:
                    draw_board(screen, cell_font, init_board(app_state.month, app_state.day))

            pygame.display.flip()
    finally:
        worker.close()
        pygame.quit()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)
    try:
        if args.text:
            return run_text(args)
        return run_viewer(args)
    except (CalendarPuzzleError, ValueError) as exc:
        log.error("%s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
