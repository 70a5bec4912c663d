"""Outline geometry for the spectrum trace.

Turns a range of dB bins into a closed outline in paint coordinates plus the
colours needed to fill and stroke it. This module must not import UI classes;
the renderer decides how pixels are drawn.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import math
from typing import Optional, Tuple

import numpy as np

RGBA = Tuple[int, int, int, int]

SPECTRUM_BACKGROUND = "spectrum_background"
SPECTRUM_GRADIENT_TOP = "spectrum_gradient_top"
SPECTRUM_GRADIENT_BOTTOM = "spectrum_gradient_bottom"
SPECTRUM_LINE = "spectrum_line"

COLOR_NAMES = (
    SPECTRUM_BACKGROUND,
    SPECTRUM_GRADIENT_TOP,
    SPECTRUM_GRADIENT_BOTTOM,
    SPECTRUM_LINE,
)

_COLOR_FIELDS = {
    SPECTRUM_BACKGROUND: "background",
    SPECTRUM_GRADIENT_TOP: "gradient_top",
    SPECTRUM_GRADIENT_BOTTOM: "gradient_bottom",
    SPECTRUM_LINE: "line",
}


@dataclass(frozen=True)
class SpectrumColors:
    background: RGBA = (0, 0, 0, 255)
    gradient_top: RGBA = (0, 128, 0, 255)
    gradient_bottom: RGBA = (0, 0, 0, 255)
    line: RGBA = (255, 255, 255, 255)

    def with_color(self, name: str, rgba: RGBA) -> "SpectrumColors":
        field = _COLOR_FIELDS.get(name)
        if field is None:
            return self
        return replace(self, **{field: tuple(rgba)})


@dataclass(frozen=True)
class RenderGeometry:
    """One render pass worth of spectrum outline and paint settings."""

    vertices: np.ndarray
    width: float
    height: float
    inset: float
    baseline: Tuple[float, float, float, float]
    gradient_start_y: float
    gradient_end_y: float
    colors: SpectrumColors

    @property
    def bin_count(self) -> int:
        # Two baseline corners plus the closing point surround the trace.
        return int(self.vertices.shape[0]) - 3

    @property
    def is_empty(self) -> bool:
        return self.bin_count <= 0


def db_scale_for_sample_size(bits: float) -> float:
    """dB floor for a source sample size: 20*log10(2**(bits - 1))."""

    return 20.0 * math.log10(2.0 ** (float(bits) - 1.0))


def bin_heights(bins: np.ndarray, inside_height: float, db_scale: float) -> np.ndarray:
    # Heights are measured down from the top; 0 dB sits at the top edge.
    scalor = inside_height / -db_scale
    heights = bins.astype(np.float64) * scalor
    return np.clip(heights, 0.0, max(inside_height, 0.0))


def build_geometry(
    bins: Optional[np.ndarray],
    width: float,
    height: float,
    inset: float,
    db_scale: float,
    colors: SpectrumColors,
) -> RenderGeometry:
    width = float(width)
    height = float(height)
    inset = float(inset)
    baseline_y = height - inset

    trace: Optional[np.ndarray] = None
    if bins is not None and len(bins) > 0:
        bins = np.asarray(bins)
        count = int(bins.size)
        bin_width = width / count
        xs = np.arange(count, dtype=np.float64) * bin_width
        ys = bin_heights(bins, baseline_y, db_scale)
        trace = np.column_stack((xs, ys))

    # Lower right, then lower left along the baseline above the inset.
    head = np.asarray([(width, baseline_y), (0.0, baseline_y)], dtype=np.float64)
    tail = np.asarray([(width, baseline_y)], dtype=np.float64)
    if trace is None:
        vertices = np.vstack((head, tail))
    else:
        vertices = np.vstack((head, trace, tail))

    return RenderGeometry(
        vertices=vertices,
        width=width,
        height=height,
        inset=inset,
        baseline=(0.0, baseline_y, width, baseline_y),
        gradient_start_y=height / 4.0,
        gradient_end_y=height,
        colors=colors,
    )
