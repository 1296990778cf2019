"""Balls falling through the board."""

from __future__ import annotations

from dataclasses import dataclass, field

from galtonboard.board import COL_MIDDLE_GAP
from galtonboard.oled import Oled
from galtonboard.vec2 import Vec2

BALL_X0 = COL_MIDDLE_GAP
BALL_Y0 = 0
BALL_PER_SIMULATION = 200
TICKS_BETWEEN_BALLS = 3


@dataclass
class Ball:
    """A ball's current and previous positions and when it starts moving."""

    position: Vec2
    tick_to_unlock: int = 0
    finished: bool = False
    previous: Vec2 = field(init=False)

    def __post_init__(self) -> None:
        self.previous = self.position

    def update(self) -> None:
        """Remember the current position as the previous one."""
        self.previous = self.position

    def set_pos(self, x: int, y: int) -> None:
        self.position = Vec2(x, y)

    def move(self, dx: int, dy: int) -> None:
        self.position = self.position + Vec2(dx, dy)

    def is_at(self, x: int, y: int) -> bool:
        return self.position == Vec2(x, y)

    def draw(self, oled: Oled) -> None:
        """Erase the previous position and light the current one."""
        oled.draw_point(self.previous.x, self.previous.y, False)
        oled.draw_point(self.position.x, self.position.y, True)

    def undraw(self, oled: Oled) -> None:
        oled.draw_point(self.previous.x, self.previous.y, False)


def spawn_balls(oled: Oled, tick_count: int) -> list[Ball]:
    """Create a drawn batch of balls at the start point, released one every few ticks."""
    balls = [
        Ball(Vec2(BALL_X0, BALL_Y0), tick_count + index * TICKS_BETWEEN_BALLS)
        for index in range(BALL_PER_SIMULATION)
    ]
    for ball in balls:
        ball.draw(oled)
    return balls