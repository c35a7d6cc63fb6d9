import random

import pytest

from morsehat.pdm_filter import PDMFilter
from morsehat.pdm_microphone import (
    MicrophoneConfig,
    MicrophoneConfigError,
    PDMMicrophone,
)


def _raw(mic, seed=1):
    return random.Random(seed).randbytes(mic.raw_buffer_size)


def _started():
    mic = PDMMicrophone(MicrophoneConfig())
    mic.start()
    return mic


def test_raw_buffer_size_is_eight_bytes_per_sample():
    mic = PDMMicrophone(MicrophoneConfig(sample_rate=16000, sample_buffer_size=256))
    assert mic.raw_buffer_size == 256 * 8


def test_buffer_size_must_match_stride():
    with pytest.raises(MicrophoneConfigError):
        PDMMicrophone(MicrophoneConfig(sample_rate=16000, sample_buffer_size=250))


def test_sample_rate_too_low():
    with pytest.raises(MicrophoneConfigError):
        PDMMicrophone(MicrophoneConfig(sample_rate=500, sample_buffer_size=256))


def test_read_without_data_is_empty():
    mic = _started()
    assert mic.read(256) == []


def test_read_returns_full_buffer_once():
    mic = _started()
    mic.buffer_complete(_raw(mic))
    assert len(mic.read(256)) == 256
    assert mic.read(256) == []


def test_read_rounds_down_to_stride():
    mic = _started()
    mic.buffer_complete(_raw(mic))
    assert len(mic.read(20)) == 16


def test_read_capped_at_buffer_size():
    mic = _started()
    mic.buffer_complete(_raw(mic))
    assert len(mic.read(1000)) == 256


def test_negative_read_rejected():
    mic = _started()
    with pytest.raises(ValueError):
        mic.read(-1)


def test_output_matches_filter():
    mic = _started()
    raw = _raw(mic, seed=9)
    mic.buffer_complete(raw)
    got = mic.read(256)
    ref = PDMFilter(fs=16000, lp_hz=8000, hp_hz=10)
    expected = []
    for first in range(0, 256, 16):
        expected.extend(ref.filter_64(raw[first * 8:(first + 16) * 8], 64))
    assert got == expected


def test_handler_called_per_buffer():
    mic = _started()
    calls = []
    mic.set_samples_ready_handler(lambda: calls.append(1))
    mic.buffer_complete(_raw(mic))
    mic.buffer_complete(_raw(mic, seed=2))
    assert len(calls) == 2


def test_second_buffer_readable_after_first():
    mic = _started()
    mic.buffer_complete(_raw(mic))
    mic.read(256)
    mic.buffer_complete(_raw(mic, seed=2))
    assert len(mic.read(256)) == 256
    assert mic.read(256) == []


def test_buffers_ignored_when_not_running():
    mic = PDMMicrophone(MicrophoneConfig())
    calls = []
    mic.set_samples_ready_handler(lambda: calls.append(1))
    mic.buffer_complete(_raw(mic))
    assert calls == []
    assert mic.read(256) == []


def test_stop_discards_and_ignores():
    mic = _started()
    mic.buffer_complete(_raw(mic))
    mic.stop()
    assert mic.running is False
    mic.buffer_complete(_raw(mic))
    assert mic.read(256) == []


def test_wrong_raw_length_rejected():
    mic = _started()
    with pytest.raises(ValueError):
        mic.buffer_complete(bytes(10))


def test_zero_volume_is_silent():
    mic = _started()
    mic.set_filter_volume(0)
    mic.buffer_complete(_raw(mic))
    assert mic.read(64) == [0] * 64


def test_setters_update_filter():
    mic = PDMMicrophone(MicrophoneConfig())
    mic.set_filter_max_volume(32)
    mic.set_filter_gain(8)
    mic.set_filter_volume(100)
    assert mic.filter.max_volume == 32
    assert mic.filter.gain == 8
    assert mic.filter_volume == 100


def test_max_volume_out_of_range_rejected():
    mic = PDMMicrophone(MicrophoneConfig())
    with pytest.raises(ValueError):
        mic.set_filter_max_volume(256)
    assert mic.filter.max_volume == 64


def test_gain_out_of_range_rejected():
    mic = PDMMicrophone(MicrophoneConfig())
    with pytest.raises(ValueError):
        mic.set_filter_gain(0)
    assert mic.filter.gain == 16


def test_volume_out_of_range_rejected():
    mic = PDMMicrophone(MicrophoneConfig())
    with pytest.raises(ValueError):
        mic.set_filter_volume(70000)
    assert mic.filter_volume == 64