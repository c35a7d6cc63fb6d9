"""Decimating sinc filter that turns 1-bit PDM microphone data into PCM samples."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

SINCN = 3
DECIMATION_MAX = 128
SAMPLE_MIN = -32700
SAMPLE_MAX = 32700

_UINT32 = 0xFFFFFFFF
_UINT16 = 0xFFFF
_PI = 3.14159


def convolve(signal: Sequence[int], kernel: Sequence[int]) -> list[int]:
    """Full discrete convolution of two unsigned 32-bit sequences."""
    if not signal or not kernel:
        return []
    signal_len, kernel_len = len(signal), len(kernel)
    result = []
    for n in range(signal_len + kernel_len - 1):
        kmin = max(0, n - (kernel_len - 1))
        kmax = min(n, signal_len - 1)
        total = sum(signal[k] * kernel[n - k] for k in range(kmin, kmax + 1))
        result.append(total & _UINT32)
    return result


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b > 0) else -quotient


def round_div(a: int, b: int) -> int:
    """Divide, rounding halves away from zero."""
    half = _trunc_div(b, 2)
    if a > 0:
        return _trunc_div(a + half, b)
    return _trunc_div(a - half, b)


def saturate(value: int, low: int, high: int) -> int:
    """Clamp value into the closed range [low, high]."""
    if value < low:
        return low
    if value > high:
        return high
    return value


@dataclass
class PDMFilter:
    """Three-stage sinc decimator followed by high-pass and low-pass stages.

    Output is one PCM sample per millisecond of input, ``fs // 1000`` samples
    per call.
    """

    fs: int = 16000
    lp_hz: float = 8000
    hp_hz: float = 10
    in_channels: int = 1
    out_channels: int = 1
    decimation: int = 64
    max_volume: int = 64
    gain: int = 16

    lp_alfa: int = field(init=False, default=0)
    hp_alfa: int = field(init=False, default=0)
    filter_len: int = field(init=False, default=0)
    sub_const: int = field(init=False, default=0)
    div_const: int = field(init=False, default=1)

    def __post_init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        """Recompute the coefficients and clear all filter state."""
        dec = self.decimation
        if dec <= 0 or dec % 8 or dec > DECIMATION_MAX:
            raise ValueError(
                f"decimation must be a multiple of 8 between 8 and {DECIMATION_MAX}"
            )
        if self.in_channels < 1:
            raise ValueError("in_channels must be at least 1")
        if self.gain <= 0:
            raise ValueError("gain must be positive")

        self._state = [0] * SINCN
        self._old_out = 0
        self._old_in = 0
        self._old_z = 0

        self.lp_alfa = (
            int(self.lp_hz * 256 / (self.lp_hz + self.fs / (2 * _PI))) & _UINT16
            if self.lp_hz != 0
            else 0
        )
        self.hp_alfa = (
            int(self.fs * 256 / (2 * _PI * self.hp_hz + self.fs)) & _UINT16
            if self.hp_hz != 0
            else 0
        )

        self.filter_len = dec * SINCN
        boxcar = [1] * dec
        sinc = [0, *convolve(convolve(boxcar, boxcar), boxcar), 0]
        coef = [sinc[j * dec:(j + 1) * dec] for j in range(SINCN)]
        total = sum(sinc)

        self.sub_const = total >> 1
        div_const = (self.sub_const * self.max_volume // 32768 // self.gain) & _UINT32
        self.div_const = div_const or 1

        self._lut = [
            [
                tuple(
                    sum(
                        coef[s][d * 8 + bit]
                        for bit in range(8)
                        if (byte >> (7 - bit)) & 1
                    )
                    for s in range(SINCN)
                )
                for byte in range(256)
            ]
            for d in range(dec // 8)
        ]

    def filter_64(self, data: Sequence[int], volume: int) -> list[int]:
        """Filter one millisecond of data using the 64x decimation layout."""
        return self._run(data, volume, table_bytes=DECIMATION_MAX // 16)

    def filter_128(self, data: Sequence[int], volume: int) -> list[int]:
        """Filter one millisecond of data using the 128x decimation layout."""
        return self._run(data, volume, table_bytes=DECIMATION_MAX // 8)

    def _run(self, data: Sequence[int], volume: int, table_bytes: int) -> list[int]:
        if not 0 <= volume <= _UINT16:
            raise ValueError("volume must be between 0 and 65535")
        channels = self.in_channels
        count = self.fs // 1000
        step = table_bytes * channels
        needed = (count - 1) * step + (table_bytes - 1) * channels + 1 if count else 0
        if len(data) < needed:
            raise ValueError(f"need at least {needed} bytes of PDM data, got {len(data)}")

        tables = self._lut[:table_bytes]
        coef0, coef1 = self._state[0], self._state[1]
        old_out, old_in, old_z = self._old_out, self._old_in, self._old_z
        samples = []
        offset = 0
        for _ in range(count):
            z0 = z1 = z2 = 0
            for d, table in enumerate(tables):
                a, b, c = table[data[offset + d * channels]]
                z0 += a
                z1 += b
                z2 += c

            z = coef1 + z2 - self.sub_const
            coef1 = (coef0 + z1) & _UINT32
            coef0 = z0 & _UINT32

            old_out = (self.hp_alfa * (old_out + z - old_in)) >> 8
            old_in = z
            old_z = ((256 - self.lp_alfa) * old_z + self.lp_alfa * old_out) >> 8

            value = round_div(old_z * volume, self.div_const)
            samples.append(saturate(value, SAMPLE_MIN, SAMPLE_MAX))
            offset += step

        self._state[0], self._state[1] = coef0, coef1
        self._old_out, self._old_in, self._old_z = old_out, old_in, old_z
        return samples