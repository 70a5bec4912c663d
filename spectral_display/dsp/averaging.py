"""Temporal averaging of smoothed spectrum frames."""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence, Union

import numpy as np

from spectral_display.config import validate_averaging

logger = logging.getLogger(__name__)


def sanitize_frame(frame: Union[np.ndarray, Sequence[float]]) -> np.ndarray:
    data = np.asarray(frame, dtype=np.float32)
    if data.size and not math.isfinite(float(data[0])):
        # The first few transforms after start-up can be all NaN.
        logger.debug("Replacing non-finite frame of %d bins with zeros", data.size)
        return np.zeros(data.size, dtype=np.float32)
    return data


class TemporalAverager:
    """
    Exponential blend of successive frames into the display buffer.

    The buffer is reallocated whenever the frame length changes, which drops
    any accumulated averaging state.
    """

    def __init__(self, depth: int = 4):
        self._depth = validate_averaging(depth)
        self.buffer: Optional[np.ndarray] = None

    @property
    def depth(self) -> int:
        return self._depth

    @depth.setter
    def depth(self, value: int) -> None:
        self._depth = validate_averaging(value)

    def reset(self) -> None:
        self.buffer = None

    def update(self, smoothed: np.ndarray) -> np.ndarray:
        smoothed = np.asarray(smoothed, dtype=np.float32)
        depth = self._depth
        if self.buffer is None or self.buffer.size != smoothed.size:
            self.buffer = smoothed.copy()
        elif depth > 1:
            # Rebind rather than mutate; readers may still hold the previous array.
            self.buffer = self.buffer + (smoothed - self.buffer) / np.float32(depth)
        else:
            self.buffer = smoothed.copy()
        return self.buffer
