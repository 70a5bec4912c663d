"""Synthetic dB frames for running the display without a live analyzer."""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np


class NoiseFrameSource:
    """
    Produces noise-floor frames with a few fixed carriers.

    Carrier positions are fractions of the frame width so they stay put when
    n_bins changes.
    """

    def __init__(
        self,
        n_bins: int,
        noise_floor_db: float = -80.0,
        noise_spread_db: float = 4.0,
        carriers: Sequence[tuple[float, float]] = ((0.25, -30.0), (0.6, -45.0)),
        seed: Optional[int] = None,
    ):
        if n_bins <= 0:
            raise ValueError("n_bins must be positive")
        self.n_bins = int(n_bins)
        self.noise_floor_db = float(noise_floor_db)
        self.noise_spread_db = float(noise_spread_db)
        self.carriers = list(carriers)
        self._rng = np.random.default_rng(seed)

    def __call__(self) -> np.ndarray:
        n = self.n_bins
        frame = self.noise_floor_db + self._rng.normal(0.0, self.noise_spread_db, n)
        for position, level_db in self.carriers:
            idx = int(position * (n - 1))
            frame[idx] = max(frame[idx], level_db)
        return np.minimum(frame, 0.0).astype(np.float32)
