"""Application entrypoint wiring for the spectral display.

Creates the Qt application, config, producer worker and spectrum view. This
module must not contain DSP or UI logic beyond orchestration.
"""

import sys

from pyqtgraph.Qt import QtWidgets

from spectral_display.config import DisplayConfig
from spectral_display.controller import SpectrumDisplayController
from spectral_display.dsp.synthetic import NoiseFrameSource
from spectral_display.log import setup_logging
from spectral_display.settings import ColorSettings
from spectral_display.ui.spectrum_view import SpectrumView
from spectral_display.worker import FrameWorker


def main() -> int:
    logger = setup_logging()
    cfg = DisplayConfig()
    if cfg.color_settings_path:
        color_settings = ColorSettings.load(cfg.color_settings_path)
    else:
        color_settings = ColorSettings()

    app = QtWidgets.QApplication(sys.argv)
    controller = SpectrumDisplayController.from_config(cfg, color_settings)
    view = SpectrumView(controller, refresh_ms=cfg.refresh_ms)
    view.setWindowTitle("Spectral Display")
    view.resize(cfg.width, cfg.height)

    worker = FrameWorker(
        NoiseFrameSource(cfg.n_bins),
        frame_cb=controller.on_frame,
        error_cb=lambda message: logger.error("Producer stopped: %s", message),
        update_ms=cfg.update_ms,
    )
    worker.start()
    view.show()
    try:
        return app.exec()
    finally:
        worker.stop()
        worker.join(timeout=1.0)
        controller.dispose()
        logger.info("Spectral display closed")


if __name__ == "__main__":
    raise SystemExit(main())
