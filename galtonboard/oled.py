"""Framebuffer-backed OLED screen with bounds-checked drawing helpers."""

from __future__ import annotations

from typing import Optional, Sequence

from galtonboard.ssd1306 import (
    HEIGHT,
    PAGE_HEIGHT,
    WIDTH,
    RenderArea,
    Ssd1306,
    draw_line,
    draw_string,
    new_buffer,
)

MAX_LINES = 8
CHAR_HEIGHT = 8
MAX_CHAR = 16


def _on_screen(x: int, y: int) -> bool:
    return 0 <= x < WIDTH and 0 <= y < HEIGHT


class Oled:
    """A full-screen framebuffer that can be pushed to an SSD1306 panel."""

    def __init__(self, display: Optional[Ssd1306] = None) -> None:
        self.display = display
        self.buffer = new_buffer()
        self.area = RenderArea()

    def _require_display(self) -> Ssd1306:
        if self.display is None:
            raise RuntimeError("no display attached")
        return self.display

    def init(self) -> None:
        """Send the panel its power-up configuration."""
        self._require_display().init()

    def clear(self) -> None:
        self.buffer[:] = bytes(len(self.buffer))

    def draw_point(self, x: int, y: int, on: bool) -> None:
        """Set one pixel; points off the screen are ignored."""
        if not _on_screen(x, y):
            return
        draw_line(self.buffer, x, y, x, y, on)

    def draw_line(self, x0: int, y0: int, x1: int, y1: int, on: bool) -> None:
        """Draw a line; it is ignored unless both ends are on the screen."""
        if not (_on_screen(x0, y0) and _on_screen(x1, y1)):
            return
        draw_line(self.buffer, x0, y0, x1, y1, on)

    def draw_rect(self, x0: int, y0: int, x1: int, y1: int, on: bool) -> None:
        """Fill columns x0..x1 from row y0 down to the bottom edge of the screen.

        Both corners must be on the screen, otherwise nothing is drawn.
        """
        if not (_on_screen(x0, y0) and _on_screen(x1, y1)):
            return
        for offset in range(HEIGHT):
            self.draw_line(x0, y0 + offset, x1, y0 + offset, on)

    def print_lines(self, lines: Sequence[str], x0: int = 0, y0: int = 0) -> None:
        """Draw text lines one character row apart, starting at (x0, y0)."""
        if len(lines) > MAX_LINES or y0 + len(lines) * CHAR_HEIGHT > HEIGHT:
            raise ValueError(f"OLED lines exceeded ({MAX_LINES})")
        for row, text in enumerate(lines):
            draw_string(self.buffer, x0, y0 + row * CHAR_HEIGHT, text)

    def pixel(self, x: int, y: int) -> bool:
        """Whether the pixel at (x, y) is lit."""
        if not _on_screen(x, y):
            raise ValueError(f"pixel ({x}, {y}) is outside the display")
        byte = self.buffer[(y // PAGE_HEIGHT) * WIDTH + x]
        return bool(byte >> (y % PAGE_HEIGHT) & 1)

    def render(self) -> None:
        """Push the framebuffer to the attached panel."""
        self._require_display().render(self.buffer, self.area)

    def to_text(self) -> str:
        """The screen as rows of '#' (lit) and '.' (dark)."""
        return "\n".join(
            "".join("#" if self.pixel(x, y) else "." for x in range(WIDTH))
            for y in range(HEIGHT)
        )