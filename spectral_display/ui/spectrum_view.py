"""Qt widget that paints the spectrum outline.

Pulls RenderGeometry from the controller on a refresh timer and paints it.
This module must not implement DSP; it only turns geometry into pixels.
"""

from __future__ import annotations

import threading
from typing import Optional

import pyqtgraph as pg
from pyqtgraph.Qt import QtCore, QtGui, QtWidgets

from spectral_display.controller import SpectrumDisplayController
from spectral_display.geometry import RenderGeometry


def geometry_path(geometry: RenderGeometry) -> QtGui.QPainterPath:
    path = QtGui.QPainterPath()
    vertices = geometry.vertices
    path.moveTo(float(vertices[0, 0]), float(vertices[0, 1]))
    for x, y in vertices[1:]:
        path.lineTo(float(x), float(y))
    return path


def paint_geometry(painter: QtGui.QPainter, geometry: RenderGeometry) -> None:
    colors = geometry.colors
    painter.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing, True)
    painter.fillRect(
        QtCore.QRectF(0.0, 0.0, geometry.width, geometry.height),
        pg.mkColor(colors.background),
    )

    gradient = QtGui.QLinearGradient(0.0, geometry.gradient_start_y, 0.0, geometry.gradient_end_y)
    gradient.setColorAt(0.0, pg.mkColor(colors.gradient_top))
    gradient.setColorAt(1.0, pg.mkColor(colors.gradient_bottom))

    path = geometry_path(geometry)
    painter.fillPath(path, QtGui.QBrush(gradient))
    painter.strokePath(path, pg.mkPen(colors.line, width=1))

    x0, y0, x1, y1 = geometry.baseline
    painter.setPen(pg.mkPen(colors.line, width=1))
    painter.drawLine(QtCore.QLineF(x0, y0, x1, y1))


class SpectrumView(QtWidgets.QWidget):
    """
    Spectrum panel.

    Render requests may arrive from the producer thread; they only mark the
    view dirty and the refresh timer coalesces them into one repaint.
    """

    def __init__(
        self,
        controller: SpectrumDisplayController,
        refresh_ms: int = 50,
        parent: Optional[QtWidgets.QWidget] = None,
    ):
        super().__init__(parent)
        self.controller = controller
        self._dirty = threading.Event()
        self.setMinimumSize(200, 100)
        controller.set_render_request(self.request_render)

        self.timer = QtCore.QTimer(self)
        self.timer.timeout.connect(self._on_refresh)
        self.timer.start(int(refresh_ms))

    def request_render(self) -> None:
        self._dirty.set()

    def _on_refresh(self) -> None:
        if self._dirty.is_set():
            self._dirty.clear()
            self.update()

    def resizeEvent(self, event):
        self.controller.set_viewport(self.width(), self.height())
        super().resizeEvent(event)

    def paintEvent(self, event):
        geometry = self.controller.current_geometry(self.width(), self.height())
        painter = QtGui.QPainter(self)
        try:
            paint_geometry(painter, geometry)
        finally:
            painter.end()

    def closeEvent(self, event):
        self.timer.stop()
        self.controller.set_render_request(None)
        super().closeEvent(event)
