"""Morse code decoding, serial line protocol and gesture-to-symbol logic."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

MORSE_TABLE: dict[str, str] = {
    ".-": "a", "-...": "b", "-.-.": "c", "-..": "d", ".": "e",
    "..-.": "f", "--.": "g", "....": "h", "..": "i", ".---": "j",
    "-.-": "k", ".-..": "l", "--": "m", "-.": "n", "---": "o",
    ".--.": "p", "--.-": "q", ".-.": "r", "...": "s", "-": "t",
    "..-": "u", "...-": "v", ".--": "w", "-..-": "x", "-.--": "y",
    "--..": "z", "-----": "0", ".----": "1", "..---": "2",
    "...--": "3", "....-": "4", ".....": "5", "-....": "6",
    "--...": "7", "---..": "8", "----.": "9", ".-.-.-": ".",
    "--..--": ",", "..--..": "?", "-.-.--": "!",
}

SEND_OK_MESSAGE = "\n__[Morse Send OK]__\n"
CLEAR_SCREEN = "\033[2J\033[H"

RX_BUFFER_SIZE = 128
MAX_SYMBOLS_PER_LETTER = 9
MAX_MESSAGE_LETTERS = 20
SPACES_PER_MESSAGE = 3

IMU_DOT_THRESHOLD = 0.9
IMU_DASH_THRESHOLD = -0.9
IMU_NEUTRAL_THRESHOLD = 0.5

DOT_TONE = (880, 150)
DASH_TONE = (660, 400)
SPACE_DELAY_MS = 200
SYMBOL_GAP_MS = 100


class AppState(Enum):
    IDLE = "idle"
    ARMED = "armed"
    COOLDOWN = "cooldown"


class Command(Enum):
    CLEAR = ".clear"
    BOOT = ".boot"
    EXIT = ".exit"


@dataclass(frozen=True)
class ParsedLine:
    """A received line: either a command or Morse symbols to play back."""

    command: Command | None = None
    symbols: str = ""


def letter_from_morse(code: str) -> str:
    """Upper-case character for a Morse code; space for empty, '?' if unknown."""
    if not code:
        return " "
    letter = MORSE_TABLE.get(code)
    return letter.upper() if letter is not None else "?"


def parse_line(line: str) -> ParsedLine:
    """Recognise a command or extract Morse symbols outside ``__`` debug blocks."""
    for command in Command:
        if line.startswith(command.value):
            return ParsedLine(command=command)

    symbols = []
    in_debug = False
    i = 0
    while i < len(line):
        if line.startswith("__", i):
            in_debug = not in_debug
            i += 2
            continue
        if not in_debug and line[i] in ".- ":
            symbols.append(line[i])
        i += 1
    return ParsedLine(symbols="".join(symbols))


@dataclass
class LineReader:
    """Assembles characters into lines; overlong lines are discarded."""

    _chars: list[str] = field(default_factory=list)

    def feed(self, char: str) -> str | None:
        """Add one character; return the completed line at a line ending."""
        if char in ("\n", "\r"):
            if self._chars:
                line = "".join(self._chars)
                self._chars.clear()
                return line
            return None
        if len(self._chars) < RX_BUFFER_SIZE - 1:
            self._chars.append(char)
        else:
            self._chars.clear()
        return None


@dataclass
class MorseTransmitter:
    """Turns outgoing symbols into serial output; three spaces end a message."""

    space_count: int = 0

    def feed(self, symbol: str) -> str:
        """Return the text to write for one symbol."""
        if symbol == " ":
            self.space_count += 1
            if self.space_count == SPACES_PER_MESSAGE:
                self.space_count = 0
                return " \n" + SEND_OK_MESSAGE
            return " "
        self.space_count = 0
        return symbol


@dataclass
class PlaybackDecoder:
    """Decodes received symbols into a short text message."""

    _symbols: list[str] = field(default_factory=list)
    _letters: list[str] = field(default_factory=list)

    def _add_letter(self) -> None:
        if len(self._letters) < MAX_MESSAGE_LETTERS:
            self._letters.append(letter_from_morse("".join(self._symbols)))
        self._symbols.clear()

    def push(self, symbol: str) -> str | None:
        """Take one symbol; at a newline return the decoded message."""
        if symbol in (".", "-"):
            if len(self._symbols) < MAX_SYMBOLS_PER_LETTER:
                self._symbols.append(symbol)
        elif symbol == " ":
            self._add_letter()
        elif symbol == "\n":
            if self._symbols:
                self._add_letter()
            message = "".join(self._letters)
            self._letters.clear()
            self._symbols.clear()
            return message
        return None


@dataclass
class ImuGestureDetector:
    """Tilt gestures to symbols: face up for a dot, tilted for a dash."""

    state: AppState = AppState.IDLE

    @property
    def poll_interval_ms(self) -> int:
        return 50 if self.state is AppState.IDLE else 20

    def arm(self) -> bool:
        """Arm from idle; return whether the state changed."""
        if self.state is AppState.IDLE:
            self.state = AppState.ARMED
            return True
        return False

    def update(self, ax: float, ay: float, az: float) -> str | None:
        """Feed one accelerometer reading; return a symbol if one was made."""
        if self.state is AppState.ARMED:
            if az > IMU_DOT_THRESHOLD:
                self.state = AppState.COOLDOWN
                return "."
            if ay < IMU_DASH_THRESHOLD:
                self.state = AppState.COOLDOWN
                return "-"
        elif self.state is AppState.COOLDOWN:
            if abs(az) < IMU_NEUTRAL_THRESHOLD and abs(ay) < IMU_NEUTRAL_THRESHOLD:
                self.state = AppState.IDLE
        return None