"""Conversions used by the add-on board's LED, buzzer and environment sensors."""

from __future__ import annotations

from typing import NamedTuple

_UINT8_MAX = 0xFF
_UINT16_MAX = 0xFFFF

HDC2021_TEMP_MIN = -40.0
HDC2021_TEMP_MAX = 125.0
HDC2021_HUMID_MIN = 0.0
HDC2021_HUMID_MAX = 100.0

VEML6030_CORRECTION_LIMIT = 1000


class ToneTiming(NamedTuple):
    """Square-wave period in microseconds and the number of cycles to play."""

    period_us: int
    cycles: int

    @property
    def half_period_us(self) -> int:
        return self.period_us // 2


def _check_channel(name: str, value: int) -> int:
    if not 0 <= value <= _UINT8_MAX:
        raise ValueError(f"{name} must be between 0 and 255, got {value}")
    return value


def rgb_duty_cycles(r: int, g: int, b: int) -> tuple[int, int, int]:
    """PWM levels for a common-anode RGB LED.

    Each channel is inverted (the LED lights when the pin is low) and then
    squared to spread 0-255 over the 16-bit duty-cycle range.
    """
    levels = []
    for name, value in (("r", r), ("g", g), ("b", b)):
        inverted = _UINT8_MAX - _check_channel(name, value)
        levels.append((inverted * inverted) & _UINT16_MAX)
    return levels[0], levels[1], levels[2]


def tone_timing(frequency: int, duration_ms: int) -> ToneTiming:
    """Period and cycle count of a buzzer tone of the given length."""
    if frequency <= 0:
        raise ValueError("frequency must be positive")
    if duration_ms < 0:
        raise ValueError("duration must not be negative")
    period_us = 1_000_000 // frequency
    cycles = (duration_ms * frequency // 1000) & 0xFFFFFFFF
    return ToneTiming(period_us, cycles)


def veml6030_correct_lux(raw: int) -> int:
    """Apply the sensor's non-linearity correction to readings above 1000 lux."""
    if raw < 0:
        raise ValueError("lux reading must not be negative")
    if raw <= VEML6030_CORRECTION_LIMIT:
        return raw
    corrected = (
        0.00000000000060135 * raw**4
        - 0.0000000093924 * raw**3
        + 0.000081488 * raw**2
        + 1.0023 * raw
    )
    return int(corrected) & 0xFFFFFFFF


def _clamp(value: float, low: float, high: float) -> float:
    return low if value < low else high if value > high else value


def hdc2021_temperature_threshold(temp: float) -> int:
    """Register byte for a temperature alarm threshold in degrees Celsius."""
    temp = _clamp(temp, HDC2021_TEMP_MIN, HDC2021_TEMP_MAX)
    # The top of the range maps to 256, which the 8-bit register cannot hold.
    return min(int((temp + 40.0) * 256.0 / 165.0), _UINT8_MAX)


def hdc2021_humidity_threshold(humid: float) -> int:
    """Register byte for a relative-humidity alarm threshold in percent."""
    humid = _clamp(humid, HDC2021_HUMID_MIN, HDC2021_HUMID_MAX)
    return min(int(humid * 2.56), _UINT8_MAX)


def _check_raw(raw: int) -> int:
    if not 0 <= raw <= _UINT16_MAX:
        raise ValueError(f"raw reading must be a 16-bit value, got {raw}")
    return raw


def hdc2021_temperature(raw: int) -> float:
    """Temperature in degrees Celsius from the sensor's 16-bit reading."""
    return _check_raw(raw) * 165.0 / 65536.0 - 40.0


def hdc2021_humidity(raw: int) -> float:
    """Relative humidity in percent from the sensor's 16-bit reading."""
    return _check_raw(raw) * 100.0 / 65536.0