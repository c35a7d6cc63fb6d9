"""Register settings and sample decoding for the ICM-42670 motion sensor."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import NamedTuple

ACCEL_CONFIG0_REG = 0x20
GYRO_CONFIG0_REG = 0x1F
SENSOR_DATA_START_REG = 0x09
SENSOR_DATA_LENGTH = 14

ACCEL_ODR_DEFAULT = 100
ACCEL_FSR_DEFAULT = 4
GYRO_ODR_DEFAULT = 100
GYRO_FSR_DEFAULT = 250

# Output data rate codes shared by accelerometer and gyroscope.
_ODR_BITS = {
    25: 0x0B,
    50: 0x0A,
    100: 0x09,
    200: 0x08,
    400: 0x07,
    800: 0x06,
    1600: 0x05,
}

# Full-scale range in g -> (register bits, LSB per g).
_ACCEL_FSR = {
    2: (0x03, 16384.0),
    4: (0x02, 8192.0),
    8: (0x01, 4096.0),
    16: (0x00, 2048.0),
}

# Full-scale range in degrees per second -> (register bits, LSB per dps).
_GYRO_FSR = {
    250: (0x03, 131.0),
    500: (0x02, 65.5),
    1000: (0x01, 32.8),
    2000: (0x00, 16.4),
}

_SAMPLE_FORMAT = ">7h"


class ImuConfigError(ValueError):
    """Raised for a full-scale range or output data rate the sensor lacks."""


class SensorConfig(NamedTuple):
    """Configuration register value and the resulting counts per unit."""

    value: int
    resolution: float


@dataclass(frozen=True)
class ImuSample:
    """Acceleration in g, angular rate in dps and temperature in Celsius."""

    ax: float
    ay: float
    az: float
    gx: float
    gy: float
    gz: float
    temperature: float


def _config(
    odr_hz: int, fsr: int, ranges: dict[int, tuple[int, float]], unit: str
) -> SensorConfig:
    try:
        fsr_bits, resolution = ranges[fsr]
    except KeyError:
        raise ImuConfigError(f"unsupported full-scale range: {fsr} {unit}") from None
    try:
        odr_bits = _ODR_BITS[odr_hz]
    except KeyError:
        raise ImuConfigError(f"unsupported output data rate: {odr_hz} Hz") from None
    return SensorConfig((fsr_bits << 5) | (odr_bits & 0x0F), resolution)


def accel_config(odr_hz: int, fsr_g: int) -> SensorConfig:
    """ACCEL_CONFIG0 value and resolution for a rate and range."""
    return _config(odr_hz, fsr_g, _ACCEL_FSR, "g")


def gyro_config(odr_hz: int, fsr_dps: int) -> SensorConfig:
    """GYRO_CONFIG0 value and resolution for a rate and range."""
    return _config(odr_hz, fsr_dps, _GYRO_FSR, "dps")


def decode_imu_sample(raw: bytes, accel_res: float, gyro_res: float) -> ImuSample:
    """Convert the 14 big-endian bytes from TEMP_DATA1 onwards to units."""
    if len(raw) != SENSOR_DATA_LENGTH:
        raise ValueError(
            f"sensor data must be {SENSOR_DATA_LENGTH} bytes, got {len(raw)}"
        )
    if not accel_res or not gyro_res:
        raise ValueError("resolutions must be non-zero")
    t, ax, ay, az, gx, gy, gz = struct.unpack(_SAMPLE_FORMAT, bytes(raw))
    return ImuSample(
        ax=ax / accel_res,
        ay=ay / accel_res,
        az=az / accel_res,
        gx=gx / gyro_res,
        gy=gy / gyro_res,
        gz=gz / gyro_res,
        temperature=t / 128.0 + 25.0,
    )