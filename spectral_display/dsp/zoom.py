"""Zoomed sub-range selection over the display buffer."""

from __future__ import annotations

import numpy as np


def zoom_length(total: int, level: int) -> int:
    return total // (2**level)


def clamp_offset(total: int, level: int, offset: int) -> int:
    length = zoom_length(total, level)
    if offset + length > total:
        offset = total - length
    return max(offset, 0)


def extract(buffer: np.ndarray, level: int, offset: int) -> np.ndarray:
    """
    Return the bins visible at a zoom level.

    Level 0 returns the buffer itself. Higher levels return a copy of
    len(buffer) / 2**level bins starting at the clamped offset; a buffer
    shorter than the zoom factor yields an empty array.
    """

    if level == 0:
        return buffer
    total = int(buffer.size)
    length = zoom_length(total, level)
    start = clamp_offset(total, level, offset)
    return buffer[start : start + length].copy()
