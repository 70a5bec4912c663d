"""Spectral display controller.

Owns the smoothing, averaging and zoom state for one display and hands out
render geometry. Frames arrive on a producer thread while geometry is pulled
from the render thread; both paths share a single lock around the display
buffer. This module must not import UI classes.
"""

from __future__ import annotations

from enum import Enum
import logging
import threading
from typing import Callable, Dict, Optional, Sequence, Union

import numpy as np

from spectral_display.config import (
    DisplayConfig,
    validate_dimension,
    validate_sample_size,
    validate_window_size,
    validate_zoom_level,
    validate_zoom_offset,
)
from spectral_display.dsp.averaging import TemporalAverager, sanitize_frame
from spectral_display.dsp.smoothing import (
    SMOOTHING_DEFAULT,
    SmoothingType,
    apply_smoothing,
    parse_smoothing_type,
)
from spectral_display.dsp.zoom import clamp_offset, extract, zoom_length
from spectral_display.geometry import (
    RGBA,
    RenderGeometry,
    SpectrumColors,
    build_geometry,
    db_scale_for_sample_size,
)
from spectral_display.settings import ColorSettings

logger = logging.getLogger(__name__)

RenderRequest = Callable[[], None]


class DisplayState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LIVE = "live"
    DISPOSED = "disposed"


class SpectrumDisplayController:
    """
    Turns incoming dB frames into a smoothed, averaged, zoomable trace.

    Producer side calls on_frame(); the render loop calls current_geometry().
    Setters validate and raise InvalidParameter, leaving state unchanged.
    """

    def __init__(
        self,
        color_settings: Optional[ColorSettings] = None,
        on_render_request: Optional[RenderRequest] = None,
        smoothing_type: Union[str, SmoothingType] = SmoothingType.GAUSSIAN,
        smoothing: int = SMOOTHING_DEFAULT,
        averaging: int = 4,
        sample_size: float = 16.0,
        spectrum_inset: float = 20.0,
        width: float = 800.0,
        height: float = 300.0,
    ):
        self._lock = threading.Lock()
        self._state = DisplayState.UNINITIALIZED
        self._on_render_request = on_render_request

        self._smoothing_type = parse_smoothing_type(smoothing_type)
        self._smoothing = validate_window_size(smoothing)
        self._averager = TemporalAverager(averaging)
        self._zoom = 0
        self._zoom_offset = 0

        self._sample_size = validate_sample_size(sample_size)
        self._db_scale = db_scale_for_sample_size(self._sample_size)
        self._inset = validate_dimension("spectrum inset", spectrum_inset)
        self._width = validate_dimension("width", width)
        self._height = validate_dimension("height", height)

        self._color_settings = color_settings
        if color_settings is not None:
            self._colors = color_settings.spectrum_colors()
            color_settings.subscribe(self.on_color_changed)
        else:
            self._colors = SpectrumColors()

    @classmethod
    def from_config(
        cls,
        cfg: DisplayConfig,
        color_settings: Optional[ColorSettings] = None,
        on_render_request: Optional[RenderRequest] = None,
    ) -> "SpectrumDisplayController":
        controller = cls(
            color_settings=color_settings,
            on_render_request=on_render_request,
            smoothing_type=cfg.smoothing_type,
            smoothing=cfg.smoothing,
            averaging=cfg.averaging,
            sample_size=cfg.sample_size_bits,
            spectrum_inset=cfg.spectrum_inset,
            width=cfg.width,
            height=cfg.height,
        )
        controller.set_zoom(cfg.zoom, cfg.zoom_offset)
        return controller

    # Producer side

    def on_frame(self, frame: Union[np.ndarray, Sequence[float]]) -> None:
        if self._state is DisplayState.DISPOSED:
            return
        data = sanitize_frame(frame)
        with self._lock:
            # dispose() may have landed while the frame was being sanitized.
            if self._state is DisplayState.DISPOSED:
                return
            smoothed = apply_smoothing(data, self._smoothing_type, self._smoothing)
            self._averager.update(smoothed)
            self._state = DisplayState.LIVE
        self._request_render()

    def set_render_request(self, callback: Optional[RenderRequest]) -> None:
        if self._state is not DisplayState.DISPOSED:
            self._on_render_request = callback

    def _request_render(self) -> None:
        callback = self._on_render_request
        if callback is None:
            return
        try:
            callback()
        except Exception:
            logger.exception("Render request callback failed")

    # Render side

    def current_geometry(
        self,
        width: Optional[float] = None,
        height: Optional[float] = None,
    ) -> RenderGeometry:
        width = self._width if width is None else validate_dimension("width", width)
        height = self._height if height is None else validate_dimension("height", height)
        with self._lock:
            buffer = self._averager.buffer
            bins = None if buffer is None else extract(buffer, self._zoom, self._zoom_offset)
        return build_geometry(bins, width, height, self._inset, self._db_scale, self._colors)

    def buffer_snapshot(self) -> Optional[np.ndarray]:
        with self._lock:
            buffer = self._averager.buffer
            return None if buffer is None else buffer.copy()

    def visible_range(self) -> tuple[int, int]:
        """First visible bin and bin count after zoom clamping."""

        with self._lock:
            buffer = self._averager.buffer
            total = 0 if buffer is None else int(buffer.size)
            if self._zoom == 0:
                return 0, total
            return (
                clamp_offset(total, self._zoom, self._zoom_offset),
                zoom_length(total, self._zoom),
            )

    # Parameters

    def parameters(self) -> Dict[str, object]:
        with self._lock:
            buffer = self._averager.buffer
            n_bins = 0 if buffer is None else int(buffer.size)
        return {
            "state": self._state.value,
            "smoothing_type": self._smoothing_type.value,
            "smoothing": self._smoothing,
            "averaging": self.averaging,
            "zoom": self._zoom,
            "zoom_offset": self._zoom_offset,
            "sample_size": self._sample_size,
            "db_scale": self._db_scale,
            "spectrum_inset": self._inset,
            "n_bins": n_bins,
        }

    @property
    def state(self) -> DisplayState:
        return self._state

    @property
    def smoothing_type(self) -> SmoothingType:
        return self._smoothing_type

    @property
    def smoothing(self) -> int:
        return self._smoothing

    @property
    def averaging(self) -> int:
        return self._averager.depth

    @property
    def zoom(self) -> int:
        return self._zoom

    @property
    def zoom_offset(self) -> int:
        return self._zoom_offset

    @property
    def sample_size(self) -> float:
        return self._sample_size

    @property
    def db_scale(self) -> float:
        return self._db_scale

    @property
    def spectrum_inset(self) -> float:
        return self._inset

    @property
    def viewport(self) -> tuple[float, float]:
        return self._width, self._height

    @property
    def colors(self) -> SpectrumColors:
        return self._colors

    def set_smoothing_type(self, smoothing_type: Union[str, SmoothingType]) -> None:
        smoothing_type = parse_smoothing_type(smoothing_type)
        if smoothing_type is self._smoothing_type:
            return
        # Swap under the frame lock; the window size carries over unchanged.
        with self._lock:
            self._smoothing_type = smoothing_type
        logger.debug("Smoothing type set to %s (window %d)", smoothing_type.value, self._smoothing)

    def set_smoothing(self, window_size: int) -> None:
        window_size = validate_window_size(window_size)
        with self._lock:
            self._smoothing = window_size

    def set_averaging(self, depth: int) -> None:
        self._averager.depth = depth

    def set_zoom(self, level: int, offset: int = 0) -> None:
        level = validate_zoom_level(level)
        offset = validate_zoom_offset(offset)
        with self._lock:
            self._zoom = level
            self._zoom_offset = offset

    def set_zoom_offset(self, offset: int) -> None:
        offset = validate_zoom_offset(offset)
        with self._lock:
            self._zoom_offset = offset

    def set_sample_size(self, bits: float) -> None:
        bits = validate_sample_size(bits)
        self._sample_size = bits
        self._db_scale = db_scale_for_sample_size(bits)

    def set_spectrum_inset(self, inset: float) -> None:
        self._inset = validate_dimension("spectrum inset", inset)

    def set_viewport(self, width: float, height: float) -> None:
        width = validate_dimension("width", width)
        height = validate_dimension("height", height)
        self._width = width
        self._height = height

    def on_color_changed(self, name: str, rgba: RGBA) -> None:
        self._colors = self._colors.with_color(name, rgba)

    # Lifecycle

    def clear_spectrum(self) -> None:
        with self._lock:
            if self._state is DisplayState.DISPOSED:
                return
            self._averager.reset()
            self._state = DisplayState.UNINITIALIZED
        self._request_render()

    def dispose(self) -> None:
        with self._lock:
            if self._state is DisplayState.DISPOSED:
                return
            self._state = DisplayState.DISPOSED
        if self._color_settings is not None:
            self._color_settings.unsubscribe(self.on_color_changed)
            self._color_settings = None
        self._on_render_request = None
        logger.debug("Spectrum display disposed")
