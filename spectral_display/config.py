"""Display configuration defaults and parameter validation.

Defines the DisplayConfig dataclass, default values and the InvalidParameter
error raised by every setter. This module should not import UI, server or DSP
classes, and it should stay focused on configuration data only.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Optional


# Zoom levels 0..5 map to 1x..32x.
MAX_ZOOM = 5

# Source sample size domain in bits.
MIN_SAMPLE_SIZE = 2.0
MAX_SAMPLE_SIZE = 32.0


class InvalidParameter(ValueError):
    """A setter rejected its input; display state is unchanged."""


@dataclass
class DisplayConfig:
    """
    Configuration for the spectral display.

    Notes
    Smoothing works across bins of one frame.
    Averaging works across successive frames.
    """

    # Smoothing filter and its window (odd bin count).
    smoothing_type: str = "Gaussian"
    smoothing: int = 3

    # Number of frames to average across; 1 disables averaging.
    averaging: int = 4

    # Source sample size sets the dB floor of the display.
    sample_size_bits: float = 16.0

    # Inset along the bottom reserved for the frequency axis.
    spectrum_inset: float = 20.0

    # Zoom level (0..5) and first displayed bin.
    zoom: int = 0
    zoom_offset: int = 0

    # Default viewport used when the renderer does not pass a size.
    width: int = 800
    height: int = 300

    # Demo producer settings.
    n_bins: int = 4096
    update_ms: int = 100

    # Render loop cadence.
    refresh_ms: int = 50

    color_settings_path: Optional[str] = None


def _require_int(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidParameter(f"{name} must be an integer, got {value!r}")
    return value


def validate_window_size(size: object) -> int:
    size = _require_int("smoothing window", size)
    if size <= 0 or size % 2 == 0:
        raise InvalidParameter(f"smoothing window must be odd and positive, got {size}")
    return size


def validate_averaging(depth: object) -> int:
    depth = _require_int("averaging", depth)
    if depth < 1:
        raise InvalidParameter(f"averaging must be at least 1, got {depth}")
    return depth


def validate_zoom_level(level: object) -> int:
    level = _require_int("zoom", level)
    if not 0 <= level <= MAX_ZOOM:
        raise InvalidParameter(f"zoom must be between 0 and {MAX_ZOOM}, got {level}")
    return level


def validate_zoom_offset(offset: object) -> int:
    # Offsets clamp rather than fail; overruns are clamped again at read time.
    return max(_require_int("zoom offset", offset), 0)


def validate_sample_size(bits: object) -> float:
    if isinstance(bits, bool) or not isinstance(bits, (int, float)):
        raise InvalidParameter(f"sample size must be a number, got {bits!r}")
    bits = float(bits)
    if not MIN_SAMPLE_SIZE <= bits <= MAX_SAMPLE_SIZE:
        raise InvalidParameter(
            f"sample size must be between {MIN_SAMPLE_SIZE:g} and {MAX_SAMPLE_SIZE:g} bits, got {bits:g}"
        )
    return bits


def validate_dimension(name: str, value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidParameter(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise InvalidParameter(f"{name} must be finite, got {value}")
    if value < 0:
        raise InvalidParameter(f"{name} must not be negative, got {value}")
    return float(value)
