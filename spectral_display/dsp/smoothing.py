"""Bin smoothing filters for spectrum frames.

Each filter is a weighted moving average across neighbouring bins of a single
frame. This module must not import UI classes; it is purely numerical.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, Sequence, Union

import numpy as np

from spectral_display.config import InvalidParameter, validate_window_size


class SmoothingType(str, Enum):
    NONE = "None"
    RECTANGLE = "Rectangle"
    TRIANGLE = "Triangle"
    GAUSSIAN = "Gaussian"


SMOOTHING_DEFAULT = 3


def _rectangle_kernel(size: int) -> np.ndarray:
    return np.ones(size, dtype=np.float64)


def _triangle_kernel(size: int) -> np.ndarray:
    half = size // 2
    offsets = np.arange(-half, half + 1)
    return (half + 1 - np.abs(offsets)).astype(np.float64)


def _gaussian_kernel(size: int) -> np.ndarray:
    half = size // 2
    # Window edges sit two standard deviations out from the centre bin.
    sigma = max(half, 1) / 2.0
    offsets = np.arange(-half, half + 1, dtype=np.float64)
    kernel = np.exp(-(offsets**2) / (2.0 * sigma**2))
    return kernel / np.sum(kernel)


KERNELS: Dict[SmoothingType, Callable[[int], np.ndarray]] = {
    SmoothingType.RECTANGLE: _rectangle_kernel,
    SmoothingType.TRIANGLE: _triangle_kernel,
    SmoothingType.GAUSSIAN: _gaussian_kernel,
}


def parse_smoothing_type(value: Union[str, SmoothingType]) -> SmoothingType:
    if isinstance(value, SmoothingType):
        return value
    for member in SmoothingType:
        if str(value).lower() in (member.value.lower(), member.name.lower()):
            return member
    raise InvalidParameter(f"Unknown smoothing type: {value!r}")


def make_kernel(smoothing_type: SmoothingType, window_size: int) -> np.ndarray:
    """Return the normalized weights for a smoothing type and window size."""

    window_size = validate_window_size(window_size)
    if smoothing_type is SmoothingType.NONE:
        return np.ones(1, dtype=np.float64)
    kernel = KERNELS[smoothing_type](window_size)
    return kernel / np.sum(kernel)


def apply_smoothing(
    frame: Union[np.ndarray, Sequence[float]],
    smoothing_type: SmoothingType,
    window_size: int,
) -> np.ndarray:
    """
    Smooth one frame across its bins.

    Edge bins use a truncated window whose weights are renormalized over the
    bins that exist, so no padding value leaks into the output.

    Frames are float32 throughout, so float64 input is rounded on the way in;
    NONE returns the input values up to that rounding.
    """

    data = np.asarray(frame, dtype=np.float32)
    if smoothing_type is SmoothingType.NONE or data.size == 0:
        return data.copy()

    kernel = make_kernel(smoothing_type, window_size)
    if kernel.size == 1:
        return data.copy()

    half = kernel.size // 2
    n = data.size
    # Full convolution keeps the centred slice valid when the window exceeds the frame.
    weighted = np.convolve(data.astype(np.float64), kernel, mode="full")[half : half + n]
    norm = np.convolve(np.ones(n, dtype=np.float64), kernel, mode="full")[half : half + n]
    return (weighted / norm).astype(np.float32)
