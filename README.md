# galtonboard

A Galton board simulation drawn into a 128x64 monochrome frame buffer. The buffer is laid
out like the memory of an SSD1306 OLED display.

Balls drop from the top of a staggered field of pins, and at each pin a ball goes left or
right at random. A few pins are left out of the field. A batch holds 200 balls, released
one every 3 ticks. When every ball has landed, the screen shows two things: the running
ball count, right-aligned in a 16-character row, and a histogram of the landing gaps. After
about 100 ticks a new batch starts.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Running

```
galtonboard
```

This runs the simulation for 800 ticks and then prints the final screen as text. Each
pixel is shown as `#` when lit and `.` when dark.

Options:

- `--ticks N`: the number of ticks to simulate. The default is 800, and the value must
  not be negative.
- `--seed S`: a seed for the random left/right deflections, which makes a run
  reproducible.
- `--watch`: print every frame instead of only the last one, with a 50 ms pause between
  frames.

## Using it as a library

- `galtonboard.vec2`: `Vec2`, an immutable integer 2-D vector with `+`, `-` and
  element-wise `*`.
- `galtonboard.ssd1306`: the frame buffer and the display protocol.
  - `new_buffer` returns a blank frame buffer.
  - Drawing into a buffer: `set_pixel`, `draw_line` (Bresenham), `draw_char` and
    `draw_string`. The last two use an 8x8 font that covers A–Z and 0–9. Lower-case
    letters are drawn as capitals, and any other character is drawn blank.
  - `font_index` gives the font slot used for a character.
  - `init_commands` and `scroll_commands` return the command bytes.
  - `RenderArea` describes the refresh window. It defaults to the whole screen.
  - `Ssd1306` and `BitmapDisplay` are drivers. Each takes a `write(address, payload)`
    callable and sends every I2C transaction through it.
- `galtonboard.oled`: `Oled`, a clipped drawing surface over a frame buffer.
  - Drawing: `draw_point`, `draw_line`, `draw_rect` and `print_lines`.
  - Reading and clearing: `pixel`, `clear` and `to_text`.
  - Display methods: `init` and `render` push to an attached `Ssd1306`. They raise
    `RuntimeError` when the `Oled` has no display attached.
- `galtonboard.board`: the pin layout.
  - Queries: `is_pin`, `is_between_pin` and `is_pin_removed`.
  - Index helpers: `gap_index` and `line_index`.
  - Drawing: `draw_map` paints the pins onto an `Oled`.
- `galtonboard.ball`: `Ball`, and `spawn_balls`, which creates and draws a batch of balls.
- `galtonboard.simulation`:
  - `GaltonBoard` is the state machine that moves between `State.SIMULATION` and
    `State.COUNTDOWN`. Call `start(tick)` once, then `update(tick)` once per tick.
  - Text helpers: `count_digits`, `center_text` and `int_to_text`.
  - `main` runs the command above.

A minimal headless run:

```python
import random

from galtonboard.oled import Oled
from galtonboard.simulation import GaltonBoard
from galtonboard.ssd1306 import Ssd1306

display = Ssd1306(lambda address, data: None, 0x3C)
oled = Oled(display)
board = GaltonBoard(oled, random.Random(1))
board.start(0)
for tick in range(200):
    board.update(tick)
print(oled.to_text())
```

## What it does not do

The package does not talk to a physical display or an I2C bus. `Ssd1306` and
`BitmapDisplay` only build the bytes a panel expects and hand them to the `write`
callable you supply. Driving real hardware is left to whatever that callable does. The
`galtonboard` command never uses a display driver: it only prints the frame buffer to the
terminal.