"""Double-buffered PDM microphone front end feeding the PCM filter."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from morsehat.pdm_filter import PDMFilter

PDM_DECIMATION = 64
PDM_RAW_BUFFER_COUNT = 2


class MicrophoneConfigError(ValueError):
    """Raised when a microphone configuration cannot be used."""


@dataclass(frozen=True)
class MicrophoneConfig:
    """Sample rate in Hz and number of PCM samples per buffer."""

    sample_rate: int = 16000
    sample_buffer_size: int = 256


class PDMMicrophone:
    """Collects raw PDM buffers and converts them to PCM on demand.

    Completed raw buffers are handed in with :meth:`buffer_complete`, which
    plays the part of the transfer-complete interrupt.
    """

    def __init__(self, config: MicrophoneConfig) -> None:
        stride = config.sample_rate // 1000
        if stride <= 0 or config.sample_rate > 0xFFFF:
            raise MicrophoneConfigError("sample rate must be between 1000 and 65535 Hz")
        if config.sample_buffer_size < 0 or config.sample_buffer_size % stride:
            raise MicrophoneConfigError(
                "sample buffer size must be a multiple of sample_rate / 1000"
            )
        self.config = config
        self.raw_buffer_size = config.sample_buffer_size * (PDM_DECIMATION // 8)
        self._buffers = [bytes(self.raw_buffer_size) for _ in range(PDM_RAW_BUFFER_COUNT)]
        self._write_index = 0
        self._read_index = 0
        self._filter = PDMFilter(
            fs=config.sample_rate,
            lp_hz=config.sample_rate // 2,
            hp_hz=10,
            in_channels=1,
            out_channels=1,
            decimation=PDM_DECIMATION,
            max_volume=64,
            gain=16,
        )
        self._volume = self._filter.max_volume
        self._handler: Callable[[], None] | None = None
        self._running = False

    @property
    def filter(self) -> PDMFilter:
        return self._filter

    @property
    def filter_volume(self) -> int:
        return self._volume

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Reset the filter and begin accepting raw buffers."""
        self._filter.reset()
        self._write_index = 0
        self._read_index = 0
        self._running = True

    def stop(self) -> None:
        """Stop accepting raw buffers and drop any unread data."""
        self._running = False
        self._write_index = 0
        self._read_index = 0

    def buffer_complete(self, raw: bytes) -> None:
        """Accept one full raw buffer and notify the samples-ready handler."""
        if len(raw) != self.raw_buffer_size:
            raise ValueError(
                f"raw buffer must be {self.raw_buffer_size} bytes, got {len(raw)}"
            )
        if not self._running:
            return
        self._buffers[self._write_index] = bytes(raw)
        self._read_index = self._write_index
        self._write_index = (self._write_index + 1) % PDM_RAW_BUFFER_COUNT
        if self._handler is not None:
            self._handler()

    def set_samples_ready_handler(self, handler: Callable[[], None] | None) -> None:
        self._handler = handler

    def set_filter_max_volume(self, max_volume: int) -> None:
        if not 0 <= max_volume <= 0xFF:
            raise ValueError("max volume must be between 0 and 255")
        self._filter.max_volume = max_volume

    def set_filter_gain(self, gain: int) -> None:
        if not 1 <= gain <= 0xFF:
            raise ValueError("gain must be between 1 and 255")
        self._filter.gain = gain

    def set_filter_volume(self, volume: int) -> None:
        if not 0 <= volume <= 0xFFFF:
            raise ValueError("volume must be between 0 and 65535")
        self._volume = volume

    def read(self, samples: int) -> list[int]:
        """Return up to ``samples`` PCM samples from the latest unread buffer."""
        if samples < 0:
            raise ValueError("sample count must not be negative")
        stride = self._filter.fs // 1000
        samples = min((samples // stride) * stride, self.config.sample_buffer_size)
        if self._write_index == self._read_index:
            return []
        raw = self._buffers[self._read_index]
        self._read_index = (self._read_index + 1) % PDM_RAW_BUFFER_COUNT
        bytes_per_sample = PDM_DECIMATION // 8
        pcm: list[int] = []
        for first in range(0, samples, stride):
            start = first * bytes_per_sample
            chunk = raw[start:start + stride * bytes_per_sample]
            pcm.extend(self._filter.filter_64(chunk, self._volume))
        return pcm