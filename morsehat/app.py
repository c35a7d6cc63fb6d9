"""Serial side of the Morse communicator: decode received lines, send symbols."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable
from typing import TextIO

from morsehat.morse import (
    CLEAR_SCREEN,
    Command,
    LineReader,
    MorseTransmitter,
    PlaybackDecoder,
    parse_line,
)

BOOT_MESSAGE = "__Rebooting to BOOTSEL mode...__\n"
EXIT_MESSAGE = "\n__--- .exit command received. Halting. ---__\n"
DISPLAY_PREFIX = "RX MSG:"


def _lines(chunks: Iterable[str]) -> Iterable[str]:
    reader = LineReader()
    for chunk in chunks:
        for char in chunk + "\n":
            line = reader.feed(char)
            if line is not None:
                yield line


def run(lines: Iterable[str], output: TextIO) -> list[str]:
    """Process received lines and return the decoded messages in order.

    Command replies and each non-empty decoded message are written to
    ``output``. A boot or exit command ends processing.
    """
    messages: list[str] = []
    decoder = PlaybackDecoder()
    for line in _lines(lines):
        parsed = parse_line(line)
        if parsed.command is Command.CLEAR:
            output.write(CLEAR_SCREEN)
            output.flush()
            continue
        if parsed.command is Command.BOOT:
            output.write(BOOT_MESSAGE)
            output.flush()
            break
        if parsed.command is Command.EXIT:
            output.write(EXIT_MESSAGE)
            output.flush()
            break

        message = None
        for symbol in parsed.symbols + "\n":
            message = decoder.push(symbol)
        messages.append(message or "")
        if message:
            output.write(f"{DISPLAY_PREFIX} {message}\n")
            output.flush()
    return messages


def _send(symbols: str, output: TextIO) -> None:
    transmitter = MorseTransmitter()
    for symbol in symbols:
        output.write(transmitter.feed(symbol))
    output.flush()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="morsehat",
        description="Decode Morse lines from standard input, or send symbols.",
    )
    parser.add_argument(
        "--send",
        metavar="SYMBOLS",
        help="symbols to transmit: '.', '-' and ' '; three spaces end a message",
    )
    args = parser.parse_args(argv)

    if args.send is not None:
        invalid = sorted(set(args.send) - set(".- "))
        if invalid:
            parser.error(f"invalid symbols: {''.join(invalid)!r}")
        _send(args.send, sys.stdout)
        return 0

    run(sys.stdin, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())