"""Producer thread feeding frames into the display.

Pulls dB frames from a source callable off the UI thread and pushes them into
a frame callback. This module must not import UI classes.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

import numpy as np

logger = logging.getLogger(__name__)

FrameSource = Callable[[], np.ndarray]
FrameCallback = Callable[[np.ndarray], None]
ErrorCallback = Callable[[str], None]


class FrameWorker(threading.Thread):
    def __init__(
        self,
        source: FrameSource,
        frame_cb: FrameCallback,
        error_cb: Optional[ErrorCallback] = None,
        update_ms: int = 100,
    ):
        super().__init__(daemon=True)
        self.source = source
        self._running = threading.Event()
        self._running.set()
        self._frame_cb = frame_cb
        self._error_cb = error_cb
        self._update_ms = max(1, int(update_ms))
        self.frames_emitted = 0

    def stop(self) -> None:
        self._running.clear()

    @property
    def running(self) -> bool:
        return self._running.is_set()

    def run(self) -> None:
        logger.debug("Frame worker started (%d ms cadence)", self._update_ms)
        while self._running.is_set():
            try:
                frame = self.source()
                self._frame_cb(frame)
                self.frames_emitted += 1

                # Pace frames at the configured update interval.
                time.sleep(self._update_ms / 1000.0)
            except Exception as exc:
                self._running.clear()
                logger.exception("Frame worker stopped")
                if self._error_cb is not None:
                    self._error_cb(str(exc))
                return
        logger.debug("Frame worker stopped after %d frames", self.frames_emitted)
