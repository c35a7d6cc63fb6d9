import pytest

from morsehat.morse import (
    AppState,
    Command,
    ImuGestureDetector,
    LineReader,
    MorseTransmitter,
    ParsedLine,
    PlaybackDecoder,
    letter_from_morse,
    parse_line,
)


@pytest.mark.parametrize(
    "code,letter",
    [(".-", "A"), ("--..", "Z"), ("-----", "0"), (".-.-.-", "."),
     ("..--..", "?"), ("-.-.--", "!"), ("", " "), ("......", "?")],
)
def test_letter_from_morse(code, letter):
    assert letter_from_morse(code) == letter


@pytest.mark.parametrize(
    "line,command",
    [(".clear", Command.CLEAR), (".boot now", Command.BOOT), (".exit", Command.EXIT)],
)
def test_parse_commands(line, command):
    assert parse_line(line) == ParsedLine(command=command)


def test_parse_skips_debug_blocks():
    assert parse_line("__dbg .-__.- -x") == ParsedLine(symbols=".- -")


def test_parse_unclosed_debug_block():
    assert parse_line("-. __.-").symbols == "-. "


def test_line_reader():
    reader = LineReader()
    results = [reader.feed(c) for c in "\r.- \n"]
    assert results[-1] == ".- "
    assert all(r is None for r in results[:-1])


def test_line_reader_overflow_discards():
    reader = LineReader()
    for _ in range(128):
        reader.feed("a")
    reader.feed("x")
    assert reader.feed("\n") == "x"


def test_transmitter_three_spaces():
    tx = MorseTransmitter()
    assert tx.feed(".") == "."
    assert tx.feed(" ") == " "
    assert tx.feed(" ") == " "
    assert tx.feed(" ") == " \n\n__[Morse Send OK]__\n"
    assert tx.space_count == 0


def test_transmitter_symbol_resets_count():
    tx = MorseTransmitter()
    tx.feed(" ")
    tx.feed(" ")
    tx.feed("-")
    assert tx.feed(" ") == " "


def test_decoder_roundtrip():
    decoder = PlaybackDecoder()
    outputs = [decoder.push(s) for s in ".- -... --"]
    assert all(o is None for o in outputs)
    assert decoder.push("\n") == "ABM"


def test_decoder_caps_letters():
    decoder = PlaybackDecoder()
    for _ in range(25):
        decoder.push(".")
        decoder.push(" ")
    assert decoder.push("\n") == "E" * 20


def test_decoder_caps_symbols():
    decoder = PlaybackDecoder()
    for _ in range(12):
        decoder.push(".")
    assert decoder.push("\n") == "?"


def test_decoder_double_space_gives_space():
    decoder = PlaybackDecoder()
    for s in ". .":
        decoder.push(s)
    decoder.push(" ")
    decoder.push(" ")
    assert decoder.push("\n") == "EE "


def test_gesture_dot_then_cooldown():
    det = ImuGestureDetector()
    assert det.update(0.0, 0.0, 1.0) is None
    assert det.arm() is True
    assert det.arm() is False
    assert det.update(0.0, 0.0, 1.0) == "."
    assert det.state is AppState.COOLDOWN
    assert det.update(0.0, 0.0, 1.0) is None
    det.update(0.0, 0.0, 0.0)
    assert det.state is AppState.IDLE


def test_gesture_dash():
    det = ImuGestureDetector()
    det.arm()
    assert det.update(0.0, 0.0, 0.0) is None
    assert det.update(0.0, -1.0, 0.0) == "-"
    assert det.poll_interval_ms == 20
    det.update(0.0, 0.0, 0.0)
    assert det.poll_interval_ms == 50