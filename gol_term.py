#!/usr/bin/env python3
"""
  Terminal viewer for the toroidal Game of Life.

  Draws the universe's text rendering every frame and advances it one
  generation, until you quit.

  Controls:
    q         quit               SPACE     pause / resume
    n         single step (paused)
    r         reseed             c         clear
    g         drop a glider      +/-       speed
    mouse     toggle cells

  Stats are logged to gol_stats.csv beside this script.
"""

from __future__ import annotations

import curses
import logging
import time
from pathlib import Path

from gol import Universe
from gol_diag import StatsLogger, TimedUniverse, init_log, install_error_hook

STATS_PATH = Path(__file__).resolve().parent / "gol_stats.csv"
LOG_PATH = Path(__file__).resolve().parent / "gol.log"

MIN_DELAY_MS: float = 10.0
MAX_DELAY_MS: float = 500.0
DELAY_STEP_MS: float = 10.0
DEFAULT_DELAY_MS: float = 50.0

log = logging.getLogger("gol.term")


def frame_lines(universe: Universe, max_rows: int, max_cols: int) -> list[str]:
    """The rendered universe, cropped to fit a max_rows x max_cols window."""
    if max_rows <= 0 or max_cols <= 0:
        return []
    lines = universe.render().splitlines()
    return [line[:max_cols] for line in lines[:max_rows]]


def cell_at(
    universe: Universe, term_y: int, term_x: int, max_y: int
) -> tuple[int, int] | None:
    """Cell under a click, or None for the status bar and off-grid clicks."""
    if not 0 <= term_y < min(universe.height, max_y - 1):
        return None
    if not 0 <= term_x < universe.width:
        return None
    return term_y, term_x


def status_line(
    life: TimedUniverse, paused: bool, delay_ms: float, width: int
) -> str:
    u = life.universe
    state = "paused" if paused else f"{delay_ms:.0f}ms"
    text = (
        f" gen {u.generation}  pop {u.population()}  "
        f"{u.width}x{u.height}  tick {life.mean_ms():.2f}ms  {state} "
    )
    return text[:max(width, 0)]


def draw(stdscr: curses.window, life: TimedUniverse, paused: bool, delay_ms: float) -> None:
    max_y, max_x = stdscr.getmaxyx()
    for y, line in enumerate(frame_lines(life.universe, max_y - 1, max_x)):
        try:
            stdscr.addstr(y, 0, line)
        except curses.error:
            # Writing into the bottom-right cell moves the cursor off-screen
            pass
    try:
        stdscr.addstr(max_y - 1, 0, status_line(life, paused, delay_ms, max_x - 1),
                      curses.A_REVERSE)
    except curses.error:
        pass


def main(stdscr: curses.window) -> None:
    curses.curs_set(0)
    stdscr.nodelay(True)
    stdscr.timeout(0)
    curses.mousemask(curses.ALL_MOUSE_EVENTS)

    life = TimedUniverse(Universe())
    paused = False
    delay_ms = DEFAULT_DELAY_MS

    logger = StatsLogger(STATS_PATH)
    logger.open()

    try:
        while True:
            # ── Input ──────────────────────────────────────────────
            try:
                key = stdscr.getch()
            except curses.error:
                key = -1

            event = ""
            step = not paused
            if key in (ord("q"), ord("Q")):
                break
            elif key == ord(" "):
                paused = not paused
            elif key in (ord("n"), ord("N")):
                step = True
            elif key in (ord("r"), ord("R")):
                life = TimedUniverse(Universe())
                event = "reseed"
            elif key in (ord("c"), ord("C")):
                life.clear()
                event = "clear"
            elif key in (ord("g"), ord("G")):
                life.place("glider", life.height // 2, life.width // 2)
                event = "glider"
            elif key in (ord("+"), ord("=")):
                delay_ms = max(MIN_DELAY_MS, delay_ms - DELAY_STEP_MS)
            elif key in (ord("-"), ord("_")):
                delay_ms = min(MAX_DELAY_MS, delay_ms + DELAY_STEP_MS)
            elif key == curses.KEY_MOUSE:
                try:
                    _, mx, my, _, _ = curses.getmouse()
                except curses.error:
                    pass
                else:
                    hit = cell_at(life.universe, my, mx, stdscr.getmaxyx()[0])
                    if hit is not None:
                        life.toggle_cell(*hit)

            if event:
                log.info("%s at generation %d", event, life.generation)

            # ── Simulate ───────────────────────────────────────────
            if step:
                life.tick()

            # ── Log ────────────────────────────────────────────────
            if event or (step and life.generation % 10 == 0):
                logger.log_universe(life, event)

            # ── Render ─────────────────────────────────────────────
            stdscr.erase()
            draw(stdscr, life, paused, delay_ms)
            stdscr.refresh()

            time.sleep(delay_ms / 1000.0)
    finally:
        logger.close()


def run() -> None:
    init_log("term", path=LOG_PATH)
    install_error_hook()
    try:
        curses.wrapper(main)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
