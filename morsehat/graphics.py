"""Clipped pixel, span and circle drawing on top of an SSD1306 buffer."""

from __future__ import annotations

from morsehat.ssd1306 import SSD1306


def put_pixel(display: SSD1306, x: int, y: int) -> None:
    """Set one pixel in the buffer if it lies on the display."""
    if 0 <= x < display.width and 0 <= y < display.height:
        display.draw_pixel(x, y)


def draw_hspan(display: SSD1306, x1: int, x2: int, y: int) -> None:
    """Draw the row segment from x1 to x2 inclusive, clipped to the display."""
    if y < 0 or y >= display.height:
        return
    if x1 > x2:
        x1, x2 = x2, x1
    if x2 < 0 or x1 >= display.width:
        return
    x1 = max(x1, 0)
    x2 = min(x2, display.width - 1)
    for x in range(x1, x2 + 1):
        display.draw_pixel(x, y)


def draw_circle(display: SSD1306, x0: int, y0: int, r: int, fill: bool) -> None:
    """Draw a circle with the midpoint algorithm and send the buffer."""
    if r < 0:
        return
    if r == 0:
        put_pixel(display, x0, y0)
        display.show()
        return

    f = 1 - r
    ddf_x = 1
    ddf_y = -2 * r
    x = 0
    y = r

    if fill:
        draw_hspan(display, x0 - r, x0 + r, y0)
    else:
        put_pixel(display, x0, y0 + r)
        put_pixel(display, x0, y0 - r)
        put_pixel(display, x0 + r, y0)
        put_pixel(display, x0 - r, y0)

    while x < y:
        if f >= 0:
            y -= 1
            ddf_y += 2
            f += ddf_y
        x += 1
        ddf_x += 2
        f += ddf_x

        if fill:
            draw_hspan(display, x0 - x, x0 + x, y0 + y)
            draw_hspan(display, x0 - x, x0 + x, y0 - y)
            draw_hspan(display, x0 - y, x0 + y, y0 + x)
            draw_hspan(display, x0 - y, x0 + y, y0 - x)
        else:
            for dx, dy in ((x, y), (-x, y), (x, -y), (-x, -y),
                           (y, x), (-y, x), (y, -x), (-y, -x)):
                put_pixel(display, x0 + dx, y0 + dy)

    display.show()