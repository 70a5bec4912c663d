"""REST endpoints for the spectral display server."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, HTTPException, Query, Request, Response

from spectral_display.config import (
    InvalidParameter,
    validate_averaging,
    validate_dimension,
    validate_sample_size,
    validate_window_size,
    validate_zoom_level,
    validate_zoom_offset,
)
from spectral_display.controller import SpectrumDisplayController
from spectral_display.dsp.smoothing import parse_smoothing_type
from spectral_display.protocol import (
    display_state_to_wire,
    encode_bins,
    encode_vertices,
    error_to_wire,
    geometry_to_wire,
)
from spectral_display.settings import ColorSettings


router = APIRouter()

DISPLAY_KEYS = (
    "smoothing_type",
    "smoothing",
    "averaging",
    "zoom",
    "zoom_offset",
    "sample_size",
    "spectrum_inset",
)


def _controller(request: Request) -> SpectrumDisplayController:
    return request.app.state.controller


def _color_settings(request: Request) -> ColorSettings:
    return request.app.state.color_settings


def _wire_kwargs(request: Request) -> dict[str, Any]:
    return {"seq": next(request.app.state.seq), "session_id": request.app.state.session_id}


def _serialize_display(request: Request) -> dict[str, Any]:
    return display_state_to_wire(_controller(request).parameters(), **_wire_kwargs(request))


def _bad_request(request: Request, error_code: str, message: str, **details: Any) -> HTTPException:
    frame = error_to_wire(error_code, message, details=details or None, **_wire_kwargs(request))
    return HTTPException(status_code=400, detail=frame)


def _validate_display(payload: dict[str, Any]) -> dict[str, Any]:
    """Validate every display key up front so a rejected update changes nothing."""

    checked: dict[str, Any] = {}
    if "smoothing_type" in payload:
        checked["smoothing_type"] = parse_smoothing_type(payload["smoothing_type"])
    if "smoothing" in payload:
        checked["smoothing"] = validate_window_size(payload["smoothing"])
    if "averaging" in payload:
        checked["averaging"] = validate_averaging(payload["averaging"])
    if "zoom" in payload:
        checked["zoom"] = validate_zoom_level(payload["zoom"])
    if "zoom_offset" in payload:
        checked["zoom_offset"] = validate_zoom_offset(payload["zoom_offset"])
    if "sample_size" in payload:
        checked["sample_size"] = validate_sample_size(payload["sample_size"])
    if "spectrum_inset" in payload:
        checked["spectrum_inset"] = validate_dimension("spectrum inset", payload["spectrum_inset"])
    return checked


def _apply_display(controller: SpectrumDisplayController, checked: dict[str, Any]) -> None:
    # Smoothing type before window so a combined update keeps its window size.
    if "smoothing_type" in checked:
        controller.set_smoothing_type(checked["smoothing_type"])
    if "smoothing" in checked:
        controller.set_smoothing(checked["smoothing"])
    if "averaging" in checked:
        controller.set_averaging(checked["averaging"])
    if "zoom" in checked:
        controller.set_zoom(checked["zoom"], checked.get("zoom_offset", controller.zoom_offset))
    elif "zoom_offset" in checked:
        controller.set_zoom_offset(checked["zoom_offset"])
    if "sample_size" in checked:
        controller.set_sample_size(checked["sample_size"])
    if "spectrum_inset" in checked:
        controller.set_spectrum_inset(checked["spectrum_inset"])


@router.get("/api/display")
def get_display(request: Request) -> dict[str, Any]:
    return _serialize_display(request)


@router.post("/api/display")
def update_display(request: Request, payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise _bad_request(request, "invalid_payload", "Display payload must be a JSON object")
    unknown = sorted(set(payload) - set(DISPLAY_KEYS))
    if unknown:
        raise _bad_request(
            request, "unknown_setting", f"Unknown display settings: {', '.join(unknown)}", keys=unknown
        )
    try:
        checked = _validate_display(payload)
    except InvalidParameter as exc:
        raise _bad_request(request, "invalid_parameter", str(exc)) from exc
    _apply_display(_controller(request), checked)
    return _serialize_display(request)


@router.get("/api/geometry")
def get_geometry(
    request: Request,
    width: float | None = Query(default=None, ge=0),
    height: float | None = Query(default=None, ge=0),
) -> dict[str, Any]:
    try:
        geometry = _controller(request).current_geometry(width, height)
    except InvalidParameter as exc:
        raise _bad_request(request, "invalid_parameter", str(exc)) from exc
    return geometry_to_wire(geometry, **_wire_kwargs(request))


@router.get("/api/geometry.bin")
def get_geometry_binary(
    request: Request,
    width: float | None = Query(default=None, ge=0),
    height: float | None = Query(default=None, ge=0),
) -> Response:
    try:
        geometry = _controller(request).current_geometry(width, height)
    except InvalidParameter as exc:
        raise _bad_request(request, "invalid_parameter", str(exc)) from exc
    return Response(content=encode_vertices(geometry), media_type="application/octet-stream")


@router.get("/api/bins.bin")
def get_bins_binary(request: Request) -> Response:
    bins = _controller(request).buffer_snapshot()
    return Response(content=encode_bins(bins), media_type="application/octet-stream")


@router.post("/api/frame")
def push_frame(request: Request, payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    bins = payload.get("bins") if isinstance(payload, dict) else None
    if not isinstance(bins, list) or not bins:
        raise _bad_request(request, "invalid_frame", "Frame payload needs a non-empty 'bins' list")
    try:
        values = [float(value) for value in bins]
    except (TypeError, ValueError) as exc:
        raise _bad_request(request, "invalid_frame", "Frame bins must be numbers") from exc
    _controller(request).on_frame(values)
    return _serialize_display(request)


@router.post("/api/colors")
def set_color(request: Request, payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    name = payload.get("name") if isinstance(payload, dict) else None
    rgba = payload.get("rgba") if isinstance(payload, dict) else None
    if not name or rgba is None:
        raise _bad_request(request, "invalid_payload", "Colour payload needs 'name' and 'rgba'")
    settings = _color_settings(request)
    try:
        settings.set_color(str(name), rgba)
    except InvalidParameter as exc:
        raise _bad_request(request, "invalid_parameter", str(exc)) from exc
    return {"ok": True, "name": name, "rgba": list(settings.get_color(str(name)))}


@router.post("/api/clear")
def clear_spectrum(request: Request) -> dict[str, Any]:
    _controller(request).clear_spectrum()
    return _serialize_display(request)
