# morsehat

The logic behind a small Morse-code communicator board, usable on an ordinary
computer. The package is pure Python and has no dependencies.

## Modules

- `morsehat.morse`: the Morse alphabet (`MORSE_TABLE`, `letter_from_morse`)
  and the state machines of the communicator:
  - `ImuGestureDetector`: turns tilt readings into symbols. After `arm()`, a
    reading with `az > 0.9` gives `"."` and one with `ay < -0.9` gives `"-"`.
    It then waits in cooldown until the board is level again.
  - `MorseTransmitter`: turns outgoing symbols into serial text. The third
    space in a row ends a message with a `[Morse Send OK]` notice.
  - `LineReader`: assembles characters into lines. Lines longer than 127
    characters are discarded.
  - `parse_line`: recognises the `.clear`, `.boot` and `.exit` commands.
    Otherwise it extracts `.`, `-` and space symbols, skipping text between
    `__` markers.
  - `PlaybackDecoder`: decodes received symbols into an upper-case message of
    at most 20 characters. Unknown codes decode to `?`.
- `morsehat.app`: `run(lines, output)` passes received lines through the
  receive path. It returns the decoded messages and writes command replies and
  messages to `output`. `main()` is the command-line entry point.
- `morsehat.ssd1306`: `SSD1306`, an in-memory framebuffer for an SSD1306
  OLED. It draws pixels, lines, filled and empty squares, text in a bitmap
  font you supply, and uncompressed 1-bit BMP images. `show()` sends the
  command bytes and the buffer to any bus object that has a
  `write(address, data)` method.
- `morsehat.graphics`: clipped `put_pixel`, `draw_hspan`, and a filled or
  outlined midpoint `draw_circle`.
- `morsehat.pdm_filter`: `PDMFilter`, a PDM-to-PCM decimator. It runs three
  sinc stages and then a high-pass and a low-pass stage (`filter_64`,
  `filter_128`). Also provides `convolve`, `round_div` and `saturate`.
- `morsehat.pdm_microphone`: `PDMMicrophone`, a double-buffered microphone
  model. Raw buffers are handed in with `buffer_complete()`, and `read()`
  returns PCM samples. Bad configurations raise `MicrophoneConfigError`.
- `morsehat.imu`: `accel_config` and `gyro_config` build register values and
  resolutions for the ICM-42670. Unsupported settings raise `ImuConfigError`.
  `decode_imu_sample` turns the 14 data bytes into an `ImuSample`.
- `morsehat.hat`: conversions for the rest of the board:
  - `rgb_duty_cycles` for the common-anode RGB LED
  - `tone_timing` for the buzzer
  - `veml6030_correct_lux` for the light sensor
  - the HDC2021 threshold and reading conversions
- `morsehat.usb_descriptors`: device, configuration and string descriptors
  for a composite device with two CDC-ACM ports.
- `morsehat.usb_serial`: `UsbSerial`, a thread-safe writer with a time limit,
  for any object that provides the `CdcPort` methods.

## Install

```
pip install .
```

## Command line

```
morsehat
```

The command reads lines of Morse code from standard input, for example
`.... ..  .--. ..`. Symbols are separated by single spaces, and a double
space gives a space in the text. Text between `__` markers is ignored. For
each line with a message it writes `RX MSG: <text>`, for example
`RX MSG: HI PI`. A line starting with `.clear` writes the ANSI clear-screen
sequence. A line starting with `.boot` or `.exit` writes a notice and stops
reading.

```
morsehat --send "... --- ...   "
```

`--send` writes the given symbols the way the board transmits them. Only `.`,
`-` and space are accepted.

## Library use

```python
from morsehat.morse import letter_from_morse, PlaybackDecoder

letter_from_morse("...")   # 'S'

decoder = PlaybackDecoder()
for symbol in "... --- ...\n":
    message = decoder.push(symbol)
print(message)             # 'SOS'
```

```python
from morsehat.ssd1306 import SSD1306
from morsehat.graphics import draw_circle


class RecordingBus:
    def __init__(self):
        self.writes = []

    def write(self, address, data):
        self.writes.append((address, data))


display = SSD1306(128, 64, 0x3C, RecordingBus(), False)
draw_circle(display, 64, 32, 10, True)   # draws and calls show()
display.get_pixel(64, 32)                # True
```

## What it does not do

The package does not open any real I2C bus, GPIO pin, USB device or
microphone. Every driver works on objects you pass in, or on buffers you hand
to it. No bitmap font is included: `SSD1306.draw_char_with_font` and
`draw_string_with_font` need a font table from you. The command line works
on text only. It does not play tones, light LEDs or read motion sensors.

## Tests

```
pip install .[test]
pytest
```