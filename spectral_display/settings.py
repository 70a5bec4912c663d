"""Colour settings store for the spectral display.

Holds named RGBA colours, notifies listeners on change and reads/writes the
colours as JSON. This module must not import UI classes.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from typing import Callable, Dict, Iterable, Optional

from spectral_display.config import InvalidParameter
from spectral_display.geometry import (
    COLOR_NAMES,
    RGBA,
    SPECTRUM_BACKGROUND,
    SPECTRUM_GRADIENT_BOTTOM,
    SPECTRUM_GRADIENT_TOP,
    SPECTRUM_LINE,
    SpectrumColors,
)

logger = logging.getLogger(__name__)

ColorListener = Callable[[str, RGBA], None]

DEFAULT_COLORS: Dict[str, RGBA] = {
    SPECTRUM_BACKGROUND: (0, 0, 0, 255),
    SPECTRUM_GRADIENT_TOP: (0, 128, 0, 255),
    SPECTRUM_GRADIENT_BOTTOM: (0, 0, 0, 255),
    SPECTRUM_LINE: (255, 255, 255, 255),
}


def validate_rgba(value: Iterable[int]) -> RGBA:
    try:
        channels = tuple(value)
    except TypeError as exc:
        raise InvalidParameter(f"Colour must be an RGBA sequence, got {value!r}") from exc
    if len(channels) != 4:
        raise InvalidParameter(f"Colour must have 4 channels, got {len(channels)}")
    for channel in channels:
        if isinstance(channel, bool) or not isinstance(channel, int) or not 0 <= channel <= 255:
            raise InvalidParameter(f"Colour channels must be integers 0..255, got {channels!r}")
    return channels  # type: ignore[return-value]


class ColorSettings:
    """Named colours with change notification."""

    def __init__(self, colors: Optional[Dict[str, RGBA]] = None):
        self._colors: Dict[str, RGBA] = dict(DEFAULT_COLORS)
        if colors:
            for name, rgba in colors.items():
                self._colors[self._check_name(name)] = validate_rgba(rgba)
        self._listeners: list[ColorListener] = []
        self._lock = threading.Lock()

    @staticmethod
    def _check_name(name: str) -> str:
        if name not in COLOR_NAMES:
            raise InvalidParameter(f"Unknown colour setting: {name!r}")
        return name

    def get_color(self, name: str) -> RGBA:
        return self._colors[self._check_name(name)]

    def spectrum_colors(self) -> SpectrumColors:
        return SpectrumColors(
            background=self._colors[SPECTRUM_BACKGROUND],
            gradient_top=self._colors[SPECTRUM_GRADIENT_TOP],
            gradient_bottom=self._colors[SPECTRUM_GRADIENT_BOTTOM],
            line=self._colors[SPECTRUM_LINE],
        )

    def set_color(self, name: str, rgba: Iterable[int]) -> None:
        name = self._check_name(name)
        value = validate_rgba(rgba)
        self._colors[name] = value
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(name, value)
            except Exception:
                logger.exception("Colour listener failed for %s", name)

    def subscribe(self, listener: ColorListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def unsubscribe(self, listener: ColorListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    @classmethod
    def load(cls, path: str) -> "ColorSettings":
        # Missing or unreadable files fall back to the defaults.
        if not os.path.exists(path):
            return cls()
        try:
            with open(path, "r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, json.JSONDecodeError):
            logger.warning("Could not read colour settings from %s; using defaults", path)
            return cls()
        colors: Dict[str, RGBA] = {}
        if isinstance(data, dict):
            for name, rgba in data.items():
                if name not in COLOR_NAMES:
                    continue
                try:
                    colors[name] = validate_rgba(rgba)
                except InvalidParameter:
                    logger.warning("Ignoring malformed colour %s=%r", name, rgba)
        return cls(colors)

    def save(self, path: str) -> None:
        data = {name: list(rgba) for name, rgba in self._colors.items()}
        with open(path, "w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2)
