"""Galton board simulation on a 128x64 monochrome frame buffer, with SSD1306 display helpers."""

__version__ = "0.1.0"