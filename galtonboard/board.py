"""Pin layout of the Galton board."""

from __future__ import annotations

from galtonboard.oled import Oled
from galtonboard.ssd1306 import HEIGHT, WIDTH

GAP_LINES = 2
GAP_POINTS = 2

LINE_STEP = GAP_LINES + 1
PIN_STEP = GAP_POINTS + 1
GAP_WIDTH = 2 * PIN_STEP

TOTAL_LINES = (HEIGHT - 1) // LINE_STEP + 1
LAST_LINE_INDEX = (TOTAL_LINES - 1) * LINE_STEP
IS_LAST_LINE_DISLOCATED = LAST_LINE_INDEX % (2 * LINE_STEP) == LINE_STEP
TOTAL_GAPS_LAST_LINE = (WIDTH - 1 - (0 if IS_LAST_LINE_DISLOCATED else PIN_STEP)) // GAP_WIDTH + 1
TOTAL_GAPS_PER_LINE = (WIDTH - 1) // GAP_WIDTH + 1
INDEX_MIDDLE_GAP = (TOTAL_GAPS_PER_LINE - 1) // 2
COL_MIDDLE_GAP = INDEX_MIDDLE_GAP * GAP_WIDTH

PINS_REMOVED: tuple[tuple[int, int], ...] = (
    (INDEX_MIDDLE_GAP + 1, 3),
    (INDEX_MIDDLE_GAP + 1, 4),
    (INDEX_MIDDLE_GAP + 1, 5),
    (INDEX_MIDDLE_GAP - 1, 6),
    (INDEX_MIDDLE_GAP - 1, 7),
    (INDEX_MIDDLE_GAP - 1, 8),
    (INDEX_MIDDLE_GAP - 2, 9),
    (INDEX_MIDDLE_GAP + 1, 10),
    (INDEX_MIDDLE_GAP - 2, 11),
    (INDEX_MIDDLE_GAP - 1, 12),
    (INDEX_MIDDLE_GAP + 1, 13),
    (INDEX_MIDDLE_GAP - 1, 14),
    (INDEX_MIDDLE_GAP - 2, 15),
    (INDEX_MIDDLE_GAP - 1, 16),
    (INDEX_MIDDLE_GAP - 3, 17),
)


def _div(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    return -(-a // b) if a < 0 else a // b


def _in_pin_area(x: int, y: int) -> bool:
    # The top rows hold no pins: balls start there.
    return 0 <= x < WIDTH and LINE_STEP <= y < HEIGHT


def _is_dislocated(y: int) -> bool:
    return y % (2 * LINE_STEP) == LINE_STEP


def is_pin(x: int, y: int) -> bool:
    """Whether a pin stands at (x, y)."""
    if not _in_pin_area(x, y):
        return False
    pin_column = PIN_STEP if _is_dislocated(y) else 0
    return y % LINE_STEP == 0 and x % GAP_WIDTH == pin_column and not is_pin_removed(x, y)


def is_between_pin(x: int, y: int) -> bool:
    """Whether (x, y) is the midpoint between two pins of a pin line."""
    if not _in_pin_area(x, y):
        return False
    gap_column = 0 if _is_dislocated(y) else PIN_STEP
    return y % LINE_STEP == 0 and x % GAP_WIDTH == gap_column


def is_pin_removed(x: int, y: int) -> bool:
    """Whether the pin position covering (x, y) is one of the removed pins."""
    offset = PIN_STEP if _is_dislocated(y) else 0
    key = (_div(x - offset, GAP_WIDTH), line_index(y))
    return key in PINS_REMOVED


def gap_index(x: int) -> int:
    return _div(x, GAP_WIDTH)


def line_index(y: int) -> int:
    return _div(y, LINE_STEP)


def draw_map(oled: Oled) -> None:
    """Paint every screen pixel: lit where a pin stands, dark elsewhere."""
    for y in range(HEIGHT):
        for x in range(WIDTH):
            oled.draw_point(x, y, is_pin(x, y))