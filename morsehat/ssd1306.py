"""Frame buffer and command stream for SSD1306 monochrome OLED displays."""

from __future__ import annotations

import struct
from collections.abc import Sequence
from typing import Protocol

SET_CONTRAST = 0x81
SET_ENTIRE_ON = 0xA4
SET_NORM_INV = 0xA6
SET_DISP = 0xAE
SET_MEM_ADDR = 0x20
SET_COL_ADDR = 0x21
SET_PAGE_ADDR = 0x22
SET_DISP_START_LINE = 0x40
SET_SEG_REMAP = 0xA0
SET_MUX_RATIO = 0xA8
SET_COM_OUT_DIR = 0xC0
SET_DISP_OFFSET = 0xD3
SET_COM_PIN_CFG = 0xDA
SET_DISP_CLK_DIV = 0xD5
SET_PRECHARGE = 0xD9
SET_VCOM_DESEL = 0xDB
SET_CHARGE_PUMP = 0x8D

_COMMAND_PREFIX = 0x00
_DATA_PREFIX = 0x40
_BMP_HEADER_SIZE = 54


class I2CBus(Protocol):
    """Anything that can send a block of bytes to an I2C address."""

    def write(self, address: int, data: bytes) -> object: ...


class SSD1306:
    """An SSD1306 display driven over I2C with an off-screen frame buffer.

    Drawing calls change only the buffer; :meth:`show` sends it to the panel.
    """

    def __init__(
        self,
        width: int = 128,
        height: int = 64,
        address: int = 0x3C,
        bus: I2CBus | None = None,
        external_vcc: bool = False,
    ) -> None:
        if bus is None:
            raise ValueError("an I2C bus is required")
        if width <= 0 or height <= 0 or height % 8:
            raise ValueError("width must be positive and height a positive multiple of 8")
        self.width = width
        self.height = height
        self.pages = height // 8
        self.address = address
        self.bus = bus
        self.external_vcc = external_vcc
        self._buffer = bytearray(self.pages * self.width)

        commands = [
            SET_DISP,
            SET_DISP_CLK_DIV, 0x80,
            SET_MUX_RATIO, (height - 1) & 0xFF,
            SET_DISP_OFFSET, 0x00,
            SET_DISP_START_LINE,
            SET_CHARGE_PUMP, 0x10 if external_vcc else 0x14,
            SET_SEG_REMAP | 0x01,
            SET_COM_OUT_DIR | 0x08,
            SET_COM_PIN_CFG, 0x02 if width > 2 * height else 0x12,
            SET_CONTRAST, 0xFF,
            SET_PRECHARGE, 0x22 if external_vcc else 0xF1,
            SET_VCOM_DESEL, 0x30,
            SET_ENTIRE_ON,
            SET_NORM_INV,
            SET_DISP | 0x01,
            SET_MEM_ADDR, 0x00,
        ]
        for command in commands:
            self._command(command)

    @property
    def buffer(self) -> bytes:
        """A copy of the frame buffer, one byte per column of each page."""
        return bytes(self._buffer)

    def _command(self, value: int) -> None:
        self.bus.write(self.address, bytes((_COMMAND_PREFIX, value & 0xFF)))

    def power_off(self) -> None:
        self._command(SET_DISP | 0x00)

    def power_on(self) -> None:
        self._command(SET_DISP | 0x01)

    def contrast(self, value: int) -> None:
        self._command(SET_CONTRAST)
        self._command(value)

    def invert(self, inv: int) -> None:
        self._command(SET_NORM_INV | (int(inv) & 1))

    def clear(self) -> None:
        """Blank the frame buffer."""
        self._buffer[:] = bytes(len(self._buffer))

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_pixel(self, x: int, y: int) -> bool:
        """Whether the pixel is lit in the buffer; False outside the display."""
        if not self._in_bounds(x, y):
            return False
        return bool(self._buffer[x + self.width * (y >> 3)] & (1 << (y & 7)))

    def clear_pixel(self, x: int, y: int) -> None:
        if self._in_bounds(x, y):
            self._buffer[x + self.width * (y >> 3)] &= ~(1 << (y & 7)) & 0xFF

    def draw_pixel(self, x: int, y: int) -> None:
        if self._in_bounds(x, y):
            self._buffer[x + self.width * (y >> 3)] |= 1 << (y & 7)

    def draw_line(self, x1: int, y1: int, x2: int, y2: int) -> None:
        if x1 > x2:
            x1, x2 = x2, x1
            y1, y2 = y2, y1

        if x1 == x2:
            for y in range(min(y1, y2), max(y1, y2) + 1):
                self.draw_pixel(x1, y)
            return

        slope = (y2 - y1) / (x2 - x1)
        for x in range(x1, x2 + 1):
            self.draw_pixel(x, int(slope * (x - x1) + y1))

    def clear_square(self, x: int, y: int, width: int, height: int) -> None:
        for i in range(width):
            for j in range(height):
                self.clear_pixel(x + i, y + j)

    def draw_square(self, x: int, y: int, width: int, height: int) -> None:
        for i in range(width):
            for j in range(height):
                self.draw_pixel(x + i, y + j)

    def draw_empty_square(self, x: int, y: int, width: int, height: int) -> None:
        self.draw_line(x, y, x + width, y)
        self.draw_line(x, y + height, x + width, y + height)
        self.draw_line(x, y, x, y + height)
        self.draw_line(x + width, y, x + width, y + height)

    def draw_char_with_font(
        self, x: int, y: int, scale: int, font: Sequence[int], char: str
    ) -> None:
        """Draw one character from a column-major bitmap font.

        The font starts with height, width, spacing, first and last character
        codes, followed by the glyph columns.
        """
        code = ord(char)
        if code > 0x7F:
            code -= 0x100
        first, last = font[3], font[4]
        if code < first or code > last:
            return

        glyph_height, glyph_width = font[0], font[1]
        parts_per_line = (glyph_height >> 3) + (1 if glyph_height & 7 else 0)
        for w in range(glyph_width):
            pp = (code - first) * glyph_width * parts_per_line + w * parts_per_line + 5
            for lp in range(parts_per_line):
                line = font[pp]
                for j in range(8):
                    if line & 1:
                        self.draw_square(
                            x + w * scale, y + ((lp << 3) + j) * scale, scale, scale
                        )
                    line >>= 1
                pp += 1

    def draw_string_with_font(
        self, x: int, y: int, scale: int, font: Sequence[int], text: str
    ) -> None:
        advance = (font[1] + font[2]) * scale
        for index, char in enumerate(text):
            self.draw_char_with_font(x + index * advance, y, scale, font, char)

    def bmp_show_image(self, data: bytes, x_offset: int = 0, y_offset: int = 0) -> None:
        """Draw an uncompressed 1-bit BMP image into the buffer.

        Pixels whose palette entry is black are drawn.
        """
        if len(data) < _BMP_HEADER_SIZE:
            raise ValueError("data is smaller than a BMP header")

        (off_bits,) = struct.unpack_from("<I", data, 10)
        (header_size,) = struct.unpack_from("<I", data, 14)
        (bmp_width,) = struct.unpack_from("<I", data, 18)
        (bmp_height,) = struct.unpack_from("<i", data, 22)
        (bit_count,) = struct.unpack_from("<H", data, 28)
        (compression,) = struct.unpack_from("<I", data, 30)

        if bit_count != 1:
            raise ValueError("image is not monochrome")
        if compression != 0:
            raise ValueError("image is compressed")

        table_start = 14 + header_size
        color_val = 0
        for i in range(2):
            entry = data[table_start + i * 4:table_start + i * 4 + 3]
            if not any(entry):
                color_val = i
                break

        bytes_per_line = (bmp_width + 7) // 8
        bytes_per_line = (bytes_per_line + 3) & ~3

        rows = range(bmp_height - 1, -1, -1) if bmp_height > 0 else range(-bmp_height)
        for row_index, y in enumerate(rows):
            row_start = off_bits + row_index * bytes_per_line
            row = data[row_start:row_start + bytes_per_line]
            for x in range(bmp_width):
                if (row[x >> 3] >> (7 - (x & 7))) & 1 == color_val:
                    self.draw_pixel(x_offset + x, y_offset + y)

    def show(self) -> None:
        """Send the whole frame buffer to the display."""
        payload = [SET_COL_ADDR, 0, self.width - 1, SET_PAGE_ADDR, 0, self.pages - 1]
        if self.width == 64:
            payload[1] += 32
            payload[2] += 32
        for value in payload:
            self._command(value)
        self.bus.write(self.address, bytes((_DATA_PREFIX,)) + bytes(self._buffer))