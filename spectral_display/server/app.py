"""FastAPI application factory for the spectral display server."""

from __future__ import annotations

import itertools
import uuid

from fastapi import FastAPI

from spectral_display.config import DisplayConfig
from spectral_display.controller import SpectrumDisplayController
from spectral_display.server.routes import router
from spectral_display.settings import ColorSettings


def create_app(
    controller: SpectrumDisplayController | None = None,
    color_settings: ColorSettings | None = None,
) -> FastAPI:
    cfg = DisplayConfig()
    if color_settings is None:
        color_settings = ColorSettings()
    app = FastAPI(title="Spectral Display")
    app.state.color_settings = color_settings
    app.state.controller = controller or SpectrumDisplayController.from_config(cfg, color_settings)
    app.state.session_id = uuid.uuid4()
    app.state.seq = itertools.count(1)
    app.include_router(router)
    return app


# Provide a default app instance for non-factory uvicorn usage.
app = create_app()
