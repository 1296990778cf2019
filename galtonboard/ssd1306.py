"""SSD1306 OLED framebuffer drawing and I2C command protocol."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence

HEIGHT = 64
WIDTH = 128
I2C_ADDRESS = 0x3C
I2C_CLOCK_KHZ = 400

SET_MEMORY_MODE = 0x20
SET_COLUMN_ADDRESS = 0x21
SET_PAGE_ADDRESS = 0x22
SET_HORIZONTAL_SCROLL = 0x26
SET_SCROLL = 0x2E
SET_DISPLAY_START_LINE = 0x40
SET_CONTRAST = 0x81
SET_CHARGE_PUMP = 0x8D
SET_SEGMENT_REMAP = 0xA0
SET_ENTIRE_ON = 0xA4
SET_ALL_ON = 0xA5
SET_NORMAL_DISPLAY = 0xA6
SET_INVERSE_DISPLAY = 0xA7
SET_MUX_RATIO = 0xA8
SET_DISPLAY = 0xAE
SET_COMMON_OUTPUT_DIRECTION = 0xC0
SET_COMMON_OUTPUT_DIRECTION_FLIP = 0xC0
SET_DISPLAY_OFFSET = 0xD3
SET_DISPLAY_CLOCK_DIVIDE_RATIO = 0xD5
SET_PRECHARGE = 0xD9
SET_COMMON_PIN_CONFIGURATION = 0xDA
SET_VCOMH_DESELECT_LEVEL = 0xDB

PAGE_HEIGHT = 8
N_PAGES = HEIGHT // PAGE_HEIGHT
BUFFER_LENGTH = N_PAGES * WIDTH

WRITE_MODE = 0xFE
READ_MODE = 0xFF

COMMAND_CONTROL = 0x80
DATA_CONTROL = 0x40

CHAR_WIDTH = 8

FONT = bytes([
    0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00,  # nothing
    0x78, 0x14, 0x12, 0x11, 0x12, 0x14, 0x78, 0x00,  # A
    0x7f, 0x49, 0x49, 0x49, 0x49, 0x49, 0x7f, 0x00,  # B
    0x7e, 0x41, 0x41, 0x41, 0x41, 0x41, 0x41, 0x00,  # C
    0x7f, 0x41, 0x41, 0x41, 0x41, 0x41, 0x7e, 0x00,  # D
    0x7f, 0x49, 0x49, 0x49, 0x49, 0x49, 0x49, 0x00,  # E
    0x7f, 0x09, 0x09, 0x09, 0x09, 0x01, 0x01, 0x00,  # F
    0x7f, 0x41, 0x41, 0x41, 0x51, 0x51, 0x73, 0x00,  # G
    0x7f, 0x08, 0x08, 0x08, 0x08, 0x08, 0x7f, 0x00,  # H
    0x00, 0x00, 0x00, 0x7f, 0x00, 0x00, 0x00, 0x00,  # I
    0x21, 0x41, 0x41, 0x3f, 0x01, 0x01, 0x01, 0x00,  # J
    0x00, 0x7f, 0x08, 0x08, 0x14, 0x22, 0x41, 0x00,  # K
    0x7f, 0x40, 0x40, 0x40, 0x40, 0x40, 0x40, 0x00,  # L
    0x7f, 0x02, 0x04, 0x08, 0x04, 0x02, 0x7f, 0x00,  # M
    0x7f, 0x02, 0x04, 0x08, 0x10, 0x20, 0x7f, 0x00,  # N
    0x3e, 0x41, 0x41, 0x41, 0x41, 0x41, 0x3e, 0x00,  # O
    0x7f, 0x11, 0x11, 0x11, 0x11, 0x11, 0x0e, 0x00,  # P
    0x3e, 0x41, 0x41, 0x49, 0x51, 0x61, 0x7e, 0x00,  # Q
    0x7f, 0x11, 0x11, 0x11, 0x31, 0x51, 0x0e, 0x00,  # R
    0x46, 0x49, 0x49, 0x49, 0x49, 0x30, 0x00, 0x00,  # S
    0x01, 0x01, 0x01, 0x7f, 0x01, 0x01, 0x01, 0x00,  # T
    0x3f, 0x40, 0x40, 0x40, 0x40, 0x40, 0x3f, 0x00,  # U
    0x0f, 0x10, 0x20, 0x40, 0x20, 0x10, 0x0f, 0x00,  # V
    0x7f, 0x20, 0x10, 0x08, 0x10, 0x20, 0x7f, 0x00,  # W
    0x00, 0x41, 0x22, 0x14, 0x14, 0x22, 0x41, 0x00,  # X
    0x01, 0x02, 0x04, 0x78, 0x04, 0x02, 0x01, 0x00,  # Y
    0x41, 0x61, 0x59, 0x45, 0x43, 0x41, 0x00, 0x00,  # Z
    0x3e, 0x41, 0x41, 0x49, 0x41, 0x41, 0x3e, 0x00,  # 0
    0x00, 0x00, 0x42, 0x7f, 0x40, 0x00, 0x00, 0x00,  # 1
    0x30, 0x49, 0x49, 0x49, 0x49, 0x46, 0x00, 0x00,  # 2
    0x49, 0x49, 0x49, 0x49, 0x49, 0x49, 0x36, 0x00,  # 3
    0x3f, 0x20, 0x20, 0x78, 0x20, 0x20, 0x00, 0x00,  # 4
    0x4f, 0x49, 0x49, 0x49, 0x49, 0x30, 0x00, 0x00,  # 5
    0x3f, 0x48, 0x48, 0x48, 0x48, 0x48, 0x30, 0x00,  # 6
    0x01, 0x01, 0x01, 0x61, 0x31, 0x0d, 0x03, 0x00,  # 7
    0x36, 0x49, 0x49, 0x49, 0x49, 0x49, 0x36, 0x00,  # 8
    0x06, 0x09, 0x09, 0x09, 0x09, 0x09, 0x7f, 0x00,  # 9
])

Writer = Callable[[int, bytes], None]
"""Sends one I2C transaction: ``write(address, payload)``."""


def new_buffer() -> bytearray:
    """Return a blank full-screen framebuffer."""
    return bytearray(BUFFER_LENGTH)


def _char_code(character: str | int) -> int:
    if isinstance(character, str):
        if len(character) != 1:
            raise ValueError("expected a single character")
        return ord(character)
    return character


def font_index(character: str | int) -> int:
    """Glyph index in FONT: 1-26 for A-Z, 27-36 for 0-9, 0 for anything else."""
    code = _char_code(character)
    if ord("A") <= code <= ord("Z"):
        return code - ord("A") + 1
    if ord("0") <= code <= ord("9"):
        return code - ord("0") + 27
    return 0


def set_pixel(buffer: bytearray, x: int, y: int, on: bool) -> None:
    """Set or clear one pixel in a page-organised framebuffer."""
    if not (0 <= x < WIDTH and 0 <= y < HEIGHT):
        raise ValueError(f"pixel ({x}, {y}) is outside the display")
    index = (y // PAGE_HEIGHT) * WIDTH + x
    mask = 1 << (y % PAGE_HEIGHT)
    if on:
        buffer[index] |= mask
    else:
        buffer[index] &= ~mask & 0xFF


def draw_line(buffer: bytearray, x0: int, y0: int, x1: int, y1: int, on: bool) -> None:
    """Draw a line with Bresenham's algorithm, endpoints included."""
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    error = dx + dy
    while True:
        set_pixel(buffer, x0, y0, on)
        if x0 == x1 and y0 == y1:
            break
        error2 = 2 * error
        if error2 >= dy:
            error += dy
            x0 += sx
        if error2 <= dx:
            error += dx
            y0 += sy


def draw_char(buffer: bytearray, x: int, y: int, character: str | int) -> None:
    """Copy one 8x8 glyph into the page containing row ``y``; off-screen glyphs are skipped."""
    if x > WIDTH - CHAR_WIDTH or y > HEIGHT - PAGE_HEIGHT:
        return
    if x < 0 or y < 0:
        raise ValueError(f"character position ({x}, {y}) is outside the display")
    code = _char_code(character)
    if ord("a") <= code <= ord("z"):
        code -= ord("a") - ord("A")
    glyph = font_index(code) * CHAR_WIDTH
    start = (y // PAGE_HEIGHT) * WIDTH + x
    buffer[start:start + CHAR_WIDTH] = FONT[glyph:glyph + CHAR_WIDTH]


def draw_string(buffer: bytearray, x: int, y: int, text: str) -> None:
    """Draw text left to right, one 8-pixel cell per character."""
    if x > WIDTH - CHAR_WIDTH or y > HEIGHT - PAGE_HEIGHT:
        return
    for character in text:
        draw_char(buffer, x, y, character)
        x += CHAR_WIDTH


def init_commands(width: int = WIDTH, height: int = HEIGHT) -> bytes:
    """Command sequence that powers up and configures the panel."""
    pin_configuration = 0x12 if (width, height) == (128, 64) else 0x02
    return bytes([
        SET_DISPLAY, SET_MEMORY_MODE, 0x00,
        SET_DISPLAY_START_LINE, SET_SEGMENT_REMAP | 0x01,
        SET_MUX_RATIO, (height - 1) & 0xFF,
        SET_COMMON_OUTPUT_DIRECTION | 0x08, SET_DISPLAY_OFFSET,
        0x00, SET_COMMON_PIN_CONFIGURATION, pin_configuration,
        SET_DISPLAY_CLOCK_DIVIDE_RATIO, 0x80, SET_PRECHARGE,
        0xF1, SET_VCOMH_DESELECT_LEVEL, 0x30, SET_CONTRAST,
        0xFF, SET_ENTIRE_ON, SET_NORMAL_DISPLAY,
        SET_CHARGE_PUMP, 0x14, SET_SCROLL | 0x00,
        SET_DISPLAY | 0x01,
    ])


def scroll_commands(enabled: bool) -> bytes:
    """Command sequence that configures horizontal scrolling."""
    return bytes([
        SET_HORIZONTAL_SCROLL | 0x00, 0x00, 0x00, 0x00, 0x03,
        0x00, 0xFF, SET_SCROLL | (0x01 if enabled else 0x00),
    ])


@dataclass
class RenderArea:
    """Rectangle of columns and pages to refresh; defaults to the whole screen."""

    start_column: int = 0
    end_column: int = WIDTH - 1
    start_page: int = 0
    end_page: int = N_PAGES - 1

    def buffer_length(self) -> int:
        return (self.end_column - self.start_column + 1) * (self.end_page - self.start_page + 1)


class Ssd1306:
    """Panel driver that sends commands and framebuffers through an I2C writer."""

    def __init__(self, write: Writer, address: int = I2C_ADDRESS) -> None:
        self._write = write
        self.address = address

    def send_command(self, command: int) -> None:
        self._write(self.address, bytes([COMMAND_CONTROL, command & 0xFF]))

    def send_commands(self, commands: Iterable[int]) -> None:
        for command in commands:
            self.send_command(command)

    def send_buffer(self, data: Sequence[int] | bytes | bytearray) -> None:
        self._write(self.address, bytes([DATA_CONTROL]) + bytes(data))

    def init(self) -> None:
        self.send_commands(init_commands(WIDTH, HEIGHT))

    def scroll(self, enabled: bool) -> None:
        self.send_commands(scroll_commands(enabled))

    def render(self, buffer: bytes | bytearray, area: Optional[RenderArea] = None) -> None:
        """Send the address window of ``area`` followed by its share of ``buffer``."""
        if area is None:
            area = RenderArea()
        self.send_commands([
            SET_COLUMN_ADDRESS, area.start_column, area.end_column,
            SET_PAGE_ADDRESS, area.start_page, area.end_page,
        ])
        self.send_buffer(buffer[:area.buffer_length()])


class BitmapDisplay:
    """Panel driver that keeps its own RAM image and pushes whole bitmaps."""

    def __init__(
        self,
        write: Writer,
        width: int = WIDTH,
        height: int = HEIGHT,
        external_vcc: bool = False,
        address: int = I2C_ADDRESS,
    ) -> None:
        self._write = write
        self.width = width
        self.height = height
        self.pages = height // 8
        self.address = address
        self.external_vcc = external_vcc
        self.bufsize = self.pages * self.width + 1
        self.ram_buffer = bytearray(self.bufsize)
        self.ram_buffer[0] = DATA_CONTROL

    def command(self, command: int) -> None:
        self._write(self.address, bytes([COMMAND_CONTROL, command & 0xFF]))

    def config(self) -> None:
        for command in (
            SET_DISPLAY | 0x00,
            SET_MEMORY_MODE, 0x01,
            SET_DISPLAY_START_LINE | 0x00,
            SET_SEGMENT_REMAP | 0x01,
            SET_MUX_RATIO, HEIGHT - 1,
            SET_COMMON_OUTPUT_DIRECTION | 0x08,
            SET_DISPLAY_OFFSET, 0x00,
            SET_COMMON_PIN_CONFIGURATION, 0x12,
            SET_DISPLAY_CLOCK_DIVIDE_RATIO, 0x80,
            SET_PRECHARGE, 0xF1,
            SET_VCOMH_DESELECT_LEVEL, 0x30,
            SET_CONTRAST, 0xFF,
            SET_ENTIRE_ON,
            SET_NORMAL_DISPLAY,
            SET_CHARGE_PUMP, 0x14,
            SET_DISPLAY | 0x01,
        ):
            self.command(command)

    def send_data(self) -> None:
        self.command(SET_COLUMN_ADDRESS)
        self.command(0)
        self.command(self.width - 1)
        self.command(SET_PAGE_ADDRESS)
        self.command(0)
        self.command(self.pages - 1)
        self._write(self.address, bytes(self.ram_buffer))

    def draw_bitmap(self, bitmap: Sequence[int] | bytes) -> None:
        """Copy ``bitmap`` into RAM byte by byte, refreshing the panel after each byte."""
        needed = self.bufsize - 1
        if len(bitmap) < needed:
            raise ValueError(f"bitmap holds {len(bitmap)} bytes, {needed} needed")
        for offset, value in enumerate(bitmap[:needed], start=1):
            self.ram_buffer[offset] = value
            self.send_data()