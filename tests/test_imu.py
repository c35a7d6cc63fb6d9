import struct

import pytest

from morsehat.imu import (
    ImuConfigError,
    ImuSample,
    accel_config,
    decode_imu_sample,
    gyro_config,
)


def test_gyro_config_fields():
    cfg = gyro_config(100, 250)
    assert cfg.value & 0x0F == 0x09
    assert cfg.value >> 5 == 0x03
    assert cfg.resolution == 131


@pytest.mark.parametrize(
    "fsr,res", [(2, 16384), (4, 8192), (8, 4096), (16, 2048)]
)
def test_accel_resolution(fsr, res):
    assert accel_config(100, fsr).resolution == res


def test_accel_odr_bits_match_gyro():
    for odr in (25, 50, 100, 200, 400, 800, 1600):
        assert accel_config(odr, 2).value & 0x0F == gyro_config(odr, 250).value & 0x0F


def test_gyro_resolutions():
    assert gyro_config(25, 500).resolution == 65.5
    assert gyro_config(25, 1000).resolution == 32.8
    assert gyro_config(25, 2000).resolution == 16.4


@pytest.mark.parametrize("odr,fsr", [(100, 3), (33, 4), (33, 3)])
def test_accel_invalid(odr, fsr):
    with pytest.raises(ImuConfigError):
        accel_config(odr, fsr)


def test_gyro_invalid_odr():
    with pytest.raises(ImuConfigError):
        gyro_config(10, 250)


def test_decode_sample():
    raw = struct.pack(">7h", 0, 16384, -16384, 0, 131, 0, -131)
    sample = decode_imu_sample(raw, 16384, 131)
    assert sample == ImuSample(1.0, -1.0, 0.0, 1.0, 0.0, -1.0, 25.0)


def test_decode_temperature_scales_by_128():
    raw = struct.pack(">7h", 128, 0, 0, 0, 0, 0, 0)
    assert decode_imu_sample(raw, 8192, 131).temperature == 26.0


def test_decode_wrong_length():
    with pytest.raises(ValueError):
        decode_imu_sample(bytes(13), 8192, 131)


def test_decode_zero_resolution():
    with pytest.raises(ValueError):
        decode_imu_sample(bytes(14), 0, 131)