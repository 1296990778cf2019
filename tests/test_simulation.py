import random

import pytest

from galtonboard.ball import BALL_PER_SIMULATION, BALL_X0
from galtonboard.board import (
    GAP_WIDTH,
    IS_LAST_LINE_DISLOCATED,
    PIN_STEP,
    TOTAL_GAPS_LAST_LINE,
    is_pin,
)
from galtonboard.oled import MAX_CHAR, Oled
from galtonboard.simulation import (
    BALL_COUNT_DISPLAY_TICKS,
    GaltonBoard,
    State,
    center_text,
    count_digits,
    int_to_text,
    main,
)
from galtonboard.ssd1306 import FONT, HEIGHT, WIDTH, font_index
from galtonboard.vec2 import Vec2


class ConstantBits:
    def __init__(self, value):
        self.value = value

    def getrandbits(self, k):
        return self.value


def run_until_countdown(board, start_tick=0, limit=5000):
    for tick in range(start_tick, start_tick + limit):
        board.update(tick)
        if board.state is State.COUNTDOWN:
            return tick
    raise AssertionError("simulation never finished")


def glyph(character):
    index = font_index(character) * 8
    return FONT[index:index + 8]


def test_count_digits_zero():
    assert count_digits(0) == 1


@pytest.mark.parametrize("k", range(0, 9))
def test_count_digits_powers_of_ten(k):
    assert count_digits(10 ** k) == k + 1
    assert count_digits(10 ** k - 1) == max(k, 1)


def test_count_digits_negative_raises():
    with pytest.raises(ValueError):
        count_digits(-1)


@pytest.mark.parametrize("n", [0, 7, 42, 200, 123456])
def test_int_to_text_round_trip(n):
    text = int_to_text(n)
    assert int(text) == n
    assert len(text) == count_digits(n)


def test_int_to_text_negative_raises():
    with pytest.raises(ValueError):
        int_to_text(-5)


@pytest.mark.parametrize("text", ["1", "200", "HELLO"])
def test_center_text_pads_left_only(text):
    result = center_text(text)
    assert result.endswith(text)
    assert result.strip() == text
    assert len(result) > len(text)
    assert len(result) <= MAX_CHAR


@pytest.mark.parametrize("length", [MAX_CHAR, MAX_CHAR + 1, MAX_CHAR + 5])
def test_center_text_long_text_unchanged(length):
    text = "X" * length
    assert center_text(text) == text


def test_start_draws_map_and_balls():
    board = GaltonBoard(Oled(), random.Random(1))
    board.start(0)
    assert len(board.balls) == BALL_PER_SIMULATION
    assert board.histogram == [0] * TOTAL_GAPS_LAST_LINE
    assert board.state is State.SIMULATION
    assert board.oled.pixel(BALL_X0, 0)
    assert all(
        board.oled.pixel(x, y) == is_pin(x, y)
        for y in range(1, HEIGHT)
        for x in range(WIDTH)
    )


def test_first_tick_moves_only_first_ball():
    board = GaltonBoard(Oled(), random.Random(1))
    board.start(0)
    board.update(0)
    assert board.balls[0].position == Vec2(BALL_X0, 1)
    assert board.oled.pixel(BALL_X0, 1)
    assert all(ball.position == Vec2(BALL_X0, 0) for ball in board.balls[1:])


def test_full_batch_fills_histogram_and_clears_screen():
    board = GaltonBoard(Oled(), random.Random(3))
    board.start(0)
    run_until_countdown(board)
    assert sum(board.histogram) == BALL_PER_SIMULATION
    assert board.balls_count == BALL_PER_SIMULATION
    assert all(ball.finished for ball in board.balls)
    assert "#" not in board.oled.to_text()


def test_same_seed_same_histogram():
    first = GaltonBoard(Oled(), random.Random(7))
    second = GaltonBoard(Oled(), random.Random(7))
    first.start(0)
    second.start(0)
    assert run_until_countdown(first) == run_until_countdown(second)
    assert first.histogram == second.histogram


@pytest.mark.parametrize("bits", [0, 0xFFFFFFFF])
def test_constant_direction_lands_in_one_gap(bits):
    board = GaltonBoard(Oled(), ConstantBits(bits))
    board.start(0)
    run_until_countdown(board)
    assert sorted(board.histogram)[-1] == BALL_PER_SIMULATION
    assert sorted(board.histogram)[-2] == 0


def test_left_and_right_land_in_different_gaps():
    left = GaltonBoard(Oled(), ConstantBits(0))
    right = GaltonBoard(Oled(), ConstantBits(1))
    left.start(0)
    right.start(0)
    run_until_countdown(left)
    run_until_countdown(right)
    left_bin = left.histogram.index(BALL_PER_SIMULATION)
    right_bin = right.histogram.index(BALL_PER_SIMULATION)
    assert left_bin < right_bin


def test_countdown_shows_count_and_bars():
    board = GaltonBoard(Oled(), ConstantBits(0))
    board.start(0)
    tick = run_until_countdown(board)
    board.update(tick + 1)
    assert "#" not in board.oled.to_text()
    board.update(tick + 2)

    buffer = board.oled.buffer
    cell = (MAX_CHAR - 3) * 8
    assert bytes(buffer[cell:cell + 24]) == glyph("2") + glyph("0") + glyph("0")

    offset = 0 if IS_LAST_LINE_DISLOCATED else PIN_STEP
    full = board.histogram.index(BALL_PER_SIMULATION)
    full_x = full * GAP_WIDTH + offset
    assert all(board.oled.pixel(full_x, y) for y in range(8, HEIGHT))
    for index in range(TOTAL_GAPS_LAST_LINE):
        if index == full:
            continue
        x = index * GAP_WIDTH + offset
        assert board.oled.pixel(x, HEIGHT - 1)
        assert not board.oled.pixel(x, HEIGHT - 2)


def test_countdown_restarts_and_accumulates():
    board = GaltonBoard(Oled(), random.Random(11))
    board.start(0)
    tick = run_until_countdown(board)
    restart = tick + 1 + BALL_COUNT_DISPLAY_TICKS + 1
    for current in range(tick + 1, restart):
        board.update(current)
        assert board.state is State.COUNTDOWN
    board.update(restart)
    assert board.state is State.SIMULATION
    assert all(ball.tick_to_unlock >= restart for ball in board.balls)
    assert not any(ball.finished for ball in board.balls)

    run_until_countdown(board, restart + 1)
    assert board.balls_count == 2 * BALL_PER_SIMULATION
    assert sum(board.histogram) == 2 * BALL_PER_SIMULATION


def test_update_dispatches_on_state():
    board = GaltonBoard(Oled(), random.Random(2))
    board.start(0)
    board.state = State.COUNTDOWN
    board.update(5)
    assert board.state is State.COUNTDOWN
    board.update(5 + BALL_COUNT_DISPLAY_TICKS + 1)
    assert board.state is State.SIMULATION
    assert len(board.balls) == BALL_PER_SIMULATION


def test_main_rejects_negative_ticks():
    with pytest.raises(SystemExit):
        main(["--ticks", "-1"])