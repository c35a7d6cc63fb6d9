"""Thread-safe, time-limited logging writer for a USB CDC serial port."""

from __future__ import annotations

import threading
import time
from typing import Protocol

LOCK_WAIT_MS = 5
IO_TIMEOUT_MS = 10
RETRY_DELAY_MS = 1


class CdcPort(Protocol):
    """The CDC interface the writer talks to."""

    def mounted(self) -> bool: ...

    def connected(self) -> bool: ...

    def write_available(self) -> int: ...

    def write(self, data: bytes) -> int: ...

    def flush(self) -> None: ...


class Clock(Protocol):
    """A millisecond tick source that can also wait."""

    def now(self) -> int: ...

    def sleep(self, ms: int) -> None: ...


class SystemClock:
    """Clock based on the monotonic system timer."""

    def now(self) -> int:
        return int(time.monotonic() * 1000)

    def sleep(self, ms: int) -> None:
        time.sleep(ms / 1000)


class UsbSerial:
    """Serialises writes from several threads onto one CDC port.

    Writes never block for long: the lock is waited for briefly and a port
    with no transmit space is given up on after a short timeout.
    """

    def __init__(self, port: CdcPort, clock: Clock | None = None) -> None:
        self.port = port
        self.clock = clock if clock is not None else SystemClock()
        self._lock = threading.Lock()

    def connected(self) -> bool:
        """Whether the device is mounted and the host has opened the port."""
        return bool(self.port.mounted() and self.port.connected())

    def flush(self) -> None:
        """Ask the port to send any buffered data to the host."""
        if not self.connected():
            return
        acquired = self._lock.acquire(blocking=False)
        try:
            self.port.flush()
        finally:
            if acquired:
                self._lock.release()

    def write(self, text: str | bytes) -> int:
        """Write text and return the number of bytes sent.

        Returns 0 when the port is not ready, the lock is busy, or the port
        ran out of transmit space before everything was written.
        """
        if text is None:
            raise TypeError("text must not be None")
        data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
        if not self.connected():
            return 0
        if not self._lock.acquire(timeout=LOCK_WAIT_MS / 1000):
            return 0
        try:
            deadline = self.clock.now() + IO_TIMEOUT_MS
            remaining = memoryview(data)
            while remaining:
                available = self.port.write_available()
                if available > 0:
                    chunk = remaining[:available]
                    self.port.write(bytes(chunk))
                    self.port.flush()
                    remaining = remaining[len(chunk):]
                elif self.clock.now() >= deadline:
                    return 0
                else:
                    self.clock.sleep(RETRY_DELAY_MS)
            return len(data)
        finally:
            self._lock.release()