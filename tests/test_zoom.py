import numpy as np
import pytest

from spectral_display.config import InvalidParameter, validate_zoom_level, validate_zoom_offset
from spectral_display.dsp.zoom import extract


def test_level_zero_returns_buffer() -> None:
    buffer = np.arange(16, dtype=np.float32)
    assert extract(buffer, 0, 5) is buffer


def test_zoom_lengths_and_offset_clamp() -> None:
    total = 64
    buffer = np.arange(total, dtype=np.float32)
    for level in range(1, 6):
        length = total // (2**level)
        for offset in range(0, 100, 7):
            out = extract(buffer, level, offset)
            assert out.size == length
            start = int(out[0])
            assert start == min(offset, total - length)
            assert start <= total - length


def test_offset_overrun_clamps_to_end() -> None:
    buffer = np.arange(8, dtype=np.float32)
    out = extract(buffer, 1, 6)
    np.testing.assert_array_equal(out, [4.0, 5.0, 6.0, 7.0])


def test_buffer_shorter_than_factor_is_empty() -> None:
    buffer = np.arange(3, dtype=np.float32)
    assert extract(buffer, 2, 0).size == 0
    assert extract(buffer, 5, 10).size == 0


def test_zoomed_range_is_a_copy() -> None:
    buffer = np.arange(8, dtype=np.float32)
    out = extract(buffer, 1, 0)
    out[:] = -1.0
    np.testing.assert_array_equal(buffer, np.arange(8))


def test_zoom_validation() -> None:
    assert validate_zoom_level(5) == 5
    for bad in (-1, 6, 1.5, None):
        with pytest.raises(InvalidParameter):
            validate_zoom_level(bad)
    assert validate_zoom_offset(-4) == 0
    assert validate_zoom_offset(12) == 12
