"""Galton board simulation: balls fall through the pins, then a histogram is shown."""

from __future__ import annotations

import argparse
import random
import time
from enum import Enum, auto
from typing import Optional, Protocol, Sequence

from galtonboard.ball import BALL_PER_SIMULATION, Ball, spawn_balls
from galtonboard.board import (
    GAP_WIDTH,
    IS_LAST_LINE_DISLOCATED,
    PIN_STEP,
    TOTAL_GAPS_LAST_LINE,
    draw_map,
    gap_index,
    is_pin,
)
from galtonboard.oled import MAX_CHAR, Oled
from galtonboard.ssd1306 import HEIGHT

TICK_MS = 50
BALL_COUNT_DISPLAY_TICKS = 100


class BitSource(Protocol):
    """Anything that yields random bits, such as ``random.Random``."""

    def getrandbits(self, k: int) -> int: ...


class State(Enum):
    SIMULATION = auto()
    COUNTDOWN = auto()


def count_digits(n: int) -> int:
    """Number of decimal digits of a non-negative integer."""
    if n < 0:
        raise ValueError("count_digits needs a non-negative integer")
    return len(str(n))


def center_text(text: str) -> str:
    """Pad ``text`` on the left so that it sits centred on a display row."""
    spaces = (1 + MAX_CHAR - len(text)) >> 1
    if spaces <= 0:
        return text
    return " " * spaces + text


def int_to_text(n: int) -> str:
    """Decimal digits of a non-negative integer."""
    if n < 0:
        raise ValueError("int_to_text needs a non-negative integer")
    return str(n)


class GaltonBoard:
    """Runs batches of balls through the board and shows where they landed."""

    def __init__(self, oled: Optional[Oled] = None, rng: Optional[BitSource] = None) -> None:
        self.oled = oled if oled is not None else Oled()
        self.rng: BitSource = rng if rng is not None else random.Random()
        self.state = State.SIMULATION
        self.balls: list[Ball] = []
        self.histogram = [0] * TOTAL_GAPS_LAST_LINE
        self.balls_count = 0
        self._countdown_tick = 0

    def start(self, tick: int = 0) -> None:
        """Draw the board and release a fresh batch of balls from ``tick`` on."""
        self.state = State.SIMULATION
        self.histogram = [0] * TOTAL_GAPS_LAST_LINE
        self.balls_count = 0
        self._countdown_tick = 0
        self._new_batch(tick)

    def _new_batch(self, tick: int) -> None:
        self.oled.clear()
        draw_map(self.oled)
        self.balls = spawn_balls(self.oled, tick)

    def _direction(self) -> int:
        """-1 for left, +1 for right, with equal chance."""
        return (self.rng.getrandbits(32) & 1) * 2 - 1

    def update(self, tick: int) -> None:
        """Advance the current state by one tick."""
        if self.state is State.SIMULATION:
            self.update_simulation(tick)
        else:
            self.update_countdown(tick)

    def update_simulation(self, tick: int) -> None:
        """Move every released ball one row down, deflecting it at pins."""
        finished = 0
        for ball in self.balls:
            if ball.tick_to_unlock > tick:
                continue
            if ball.finished:
                finished += 1
                continue
            ball.update()
            ball.move(0, 1)

            if ball.position.y >= HEIGHT:
                ball.finished = True
                self.histogram[gap_index(ball.position.x)] += 1
                ball.undraw(self.oled)
                finished += 1
                continue

            if is_pin(ball.position.x, ball.position.y):
                ball.move(self._direction() * PIN_STEP, 0)
            ball.draw(self.oled)

        if finished == BALL_PER_SIMULATION:
            self.state = State.COUNTDOWN
            self.balls_count += BALL_PER_SIMULATION
            self.oled.clear()

    def update_countdown(self, tick: int) -> None:
        """Show the ball count and histogram for a while, then start a new batch."""
        if self._countdown_tick == tick:
            self.state = State.SIMULATION
            self._new_batch(tick)
            return
        if self._countdown_tick < tick:
            self._countdown_tick = tick + BALL_COUNT_DISPLAY_TICKS + 1
            return

        self.oled.print_lines([f"{self.balls_count:16d}"], 0, 0)

        offset = 0 if IS_LAST_LINE_DISLOCATED else PIN_STEP
        bottom = HEIGHT - 1
        for index, count in enumerate(self.histogram):
            x = index * GAP_WIDTH + offset
            height = count if count < HEIGHT else bottom
            self.oled.draw_line(x, bottom, x, bottom - height, True)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="galtonboard",
        description="Simulate a Galton board and print the screen as text.",
    )
    parser.add_argument("--ticks", type=int, default=800, help="number of ticks to simulate")
    parser.add_argument("--seed", type=int, default=None, help="seed for the random deflections")
    parser.add_argument(
        "--watch", action="store_true", help="print every frame, one tick apart"
    )
    args = parser.parse_args(argv)
    if args.ticks < 0:
        parser.error("--ticks must not be negative")

    board = GaltonBoard(Oled(), random.Random(args.seed))
    board.start(0)
    for tick in range(args.ticks):
        board.update(tick)
        if args.watch:
            print(board.oled.to_text())
            print()
            time.sleep(TICK_MS / 1000)
    if not args.watch:
        print(board.oled.to_text())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())