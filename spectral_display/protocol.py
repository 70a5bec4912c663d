"""Wire frames and transport helpers for the spectral display.

Wire frames are dict objects built via helpers and validated against the
protocol JSON schema. Vertex and bin arrays can also be shipped as a binary
payload: a fixed 32-byte SPAY header followed by little-endian float32 values.
"""

from __future__ import annotations

import struct
import uuid
from typing import Any, Mapping, Optional

import numpy as np

from spectral_display.geometry import RenderGeometry, SpectrumColors

PROTO_VERSION = "1.0"
FRAME_TYPES = {
    "display_state",
    "geometry",
    "error",
}

BINARY_MAGIC = b"SPAY"
BINARY_HEADER_VERSION = 1
BINARY_KIND_VERTICES = 1
BINARY_KIND_BINS = 2
BINARY_HEADER_STRUCT = struct.Struct("<4sHH16sII")


def protocol_json_schema() -> dict[str, Any]:
    """Return the JSON schema for display wire frames."""

    base_fields = {
        "proto_version": {"const": PROTO_VERSION},
        "type": {"enum": sorted(FRAME_TYPES)},
        "seq": {"type": "integer", "minimum": 0},
        "session_id": {"type": "string", "format": "uuid"},
    }
    base_required = ["proto_version", "type", "seq", "session_id"]

    rgba = {
        "type": "array",
        "items": {"type": "integer", "minimum": 0, "maximum": 255},
        "minItems": 4,
        "maxItems": 4,
    }
    point = {
        "type": "array",
        "items": {"type": "number"},
        "minItems": 2,
        "maxItems": 2,
    }

    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "title": "Spectral Display v1.0 Wire Frames",
        "type": "object",
        "oneOf": [
            {
                "title": "Display State Frame",
                "type": "object",
                "properties": {
                    **base_fields,
                    "type": {"const": "display_state"},
                    "state": {"enum": ["uninitialized", "live", "disposed"]},
                    "smoothing_type": {"enum": ["None", "Rectangle", "Triangle", "Gaussian"]},
                    "smoothing": {"type": "integer", "minimum": 1},
                    "averaging": {"type": "integer", "minimum": 1},
                    "zoom": {"type": "integer", "minimum": 0, "maximum": 5},
                    "zoom_offset": {"type": "integer", "minimum": 0},
                    "sample_size": {"type": "number", "minimum": 2, "maximum": 32},
                    "db_scale": {"type": "number"},
                    "spectrum_inset": {"type": "number", "minimum": 0},
                    "n_bins": {"type": "integer", "minimum": 0},
                },
                "required": [
                    *base_required,
                    "state",
                    "smoothing_type",
                    "smoothing",
                    "averaging",
                    "zoom",
                    "zoom_offset",
                    "sample_size",
                    "db_scale",
                    "spectrum_inset",
                    "n_bins",
                ],
                "additionalProperties": False,
            },
            {
                "title": "Geometry Frame",
                "type": "object",
                "properties": {
                    **base_fields,
                    "type": {"const": "geometry"},
                    "width": {"type": "number", "minimum": 0},
                    "height": {"type": "number", "minimum": 0},
                    "inset": {"type": "number", "minimum": 0},
                    "bin_count": {"type": "integer", "minimum": 0},
                    "vertices": {"type": "array", "items": point, "minItems": 3},
                    "baseline": {
                        "type": "array",
                        "items": {"type": "number"},
                        "minItems": 4,
                        "maxItems": 4,
                    },
                    "gradient": {
                        "type": "object",
                        "properties": {
                            "start_y": {"type": "number"},
                            "end_y": {"type": "number"},
                            "top": rgba,
                            "bottom": rgba,
                        },
                        "required": ["start_y", "end_y", "top", "bottom"],
                        "additionalProperties": False,
                    },
                    "line_color": rgba,
                    "background_color": rgba,
                },
                "required": [
                    *base_required,
                    "width",
                    "height",
                    "inset",
                    "bin_count",
                    "vertices",
                    "baseline",
                    "gradient",
                    "line_color",
                    "background_color",
                ],
                "additionalProperties": False,
            },
            {
                "title": "Error Frame",
                "type": "object",
                "properties": {
                    **base_fields,
                    "type": {"const": "error"},
                    "error_code": {"type": "string"},
                    "message": {"type": "string"},
                    "details": {"type": ["object", "null"]},
                },
                "required": [*base_required, "error_code", "message"],
                "additionalProperties": False,
            },
        ],
    }


def make_payload_header(kind: int, payload_id: uuid.UUID, element_count: int) -> bytes:
    """Create the 32-byte SPAY header for binary payloads."""

    payload_bytes = payload_id.bytes
    return BINARY_HEADER_STRUCT.pack(
        BINARY_MAGIC,
        BINARY_HEADER_VERSION,
        int(kind),
        payload_bytes,
        int(element_count),
        0,
    )


def parse_payload_header(raw: bytes) -> dict[str, Any]:
    """Parse a 32-byte SPAY header into a dict."""

    if len(raw) != BINARY_HEADER_STRUCT.size:
        raise ValueError("Invalid SPAY header length")
    magic, version, kind, payload_bytes, count, reserved = BINARY_HEADER_STRUCT.unpack(raw)
    if magic != BINARY_MAGIC:
        raise ValueError("Invalid SPAY magic")
    if version != BINARY_HEADER_VERSION:
        raise ValueError("Invalid SPAY version")
    if kind not in {BINARY_KIND_VERTICES, BINARY_KIND_BINS}:
        raise ValueError("Invalid SPAY kind")
    if reserved != 0:
        raise ValueError("Invalid SPAY reserved field")
    return {
        "magic": magic,
        "version": int(version),
        "kind": int(kind),
        "payload_id": str(uuid.UUID(bytes=payload_bytes)),
        "element_count": int(count),
        "reserved": int(reserved),
    }


def encode_vertices(geometry: RenderGeometry, payload_id: Optional[uuid.UUID] = None) -> bytes:
    """Header plus x/y pairs as little-endian float32; element_count is the vertex count."""

    payload_id = payload_id or uuid.uuid4()
    vertices = np.ascontiguousarray(geometry.vertices, dtype="<f4")
    header = make_payload_header(BINARY_KIND_VERTICES, payload_id, vertices.shape[0])
    return header + vertices.tobytes()


def decode_vertices(raw: bytes) -> np.ndarray:
    header = parse_payload_header(raw[: BINARY_HEADER_STRUCT.size])
    if header["kind"] != BINARY_KIND_VERTICES:
        raise ValueError("SPAY payload does not hold vertices")
    count = header["element_count"]
    body = raw[BINARY_HEADER_STRUCT.size :]
    if len(body) != count * 2 * 4:
        raise ValueError("SPAY vertex payload length mismatch")
    return np.frombuffer(body, dtype="<f4").reshape(count, 2)


def encode_bins(bins: Optional[np.ndarray], payload_id: Optional[uuid.UUID] = None) -> bytes:
    """Header plus dB bins as little-endian float32; element_count is the bin count."""

    payload_id = payload_id or uuid.uuid4()
    if bins is None:
        values = np.zeros(0, dtype="<f4")
    else:
        values = np.ascontiguousarray(bins, dtype="<f4").ravel()
    header = make_payload_header(BINARY_KIND_BINS, payload_id, values.size)
    return header + values.tobytes()


def decode_bins(raw: bytes) -> np.ndarray:
    header = parse_payload_header(raw[: BINARY_HEADER_STRUCT.size])
    if header["kind"] != BINARY_KIND_BINS:
        raise ValueError("SPAY payload does not hold bins")
    count = header["element_count"]
    body = raw[BINARY_HEADER_STRUCT.size :]
    if len(body) != count * 4:
        raise ValueError("SPAY bin payload length mismatch")
    return np.frombuffer(body, dtype="<f4")


def make_frame_base(
    *,
    frame_type: str,
    seq: int,
    session_id: uuid.UUID,
) -> dict[str, Any]:
    """Build shared metadata fields for wire frames."""

    if frame_type not in FRAME_TYPES:
        raise ValueError(f"Unsupported frame type: {frame_type}")
    return {
        "proto_version": PROTO_VERSION,
        "type": frame_type,
        "seq": int(seq),
        "session_id": str(session_id),
    }


def _rgba(value: tuple[int, int, int, int]) -> list[int]:
    return [int(channel) for channel in value]


def geometry_to_wire(
    geometry: RenderGeometry,
    *,
    seq: int,
    session_id: uuid.UUID,
) -> dict[str, Any]:
    base = make_frame_base(frame_type="geometry", seq=seq, session_id=session_id)
    colors: SpectrumColors = geometry.colors
    base.update(
        {
            "width": geometry.width,
            "height": geometry.height,
            "inset": geometry.inset,
            "bin_count": max(geometry.bin_count, 0),
            "vertices": geometry.vertices.astype(float).tolist(),
            "baseline": [float(value) for value in geometry.baseline],
            "gradient": {
                "start_y": geometry.gradient_start_y,
                "end_y": geometry.gradient_end_y,
                "top": _rgba(colors.gradient_top),
                "bottom": _rgba(colors.gradient_bottom),
            },
            "line_color": _rgba(colors.line),
            "background_color": _rgba(colors.background),
        }
    )
    return base


def display_state_to_wire(
    params: Mapping[str, Any],
    *,
    seq: int,
    session_id: uuid.UUID,
) -> dict[str, Any]:
    base = make_frame_base(frame_type="display_state", seq=seq, session_id=session_id)
    base.update(
        {
            "state": str(params["state"]),
            "smoothing_type": str(params["smoothing_type"]),
            "smoothing": int(params["smoothing"]),
            "averaging": int(params["averaging"]),
            "zoom": int(params["zoom"]),
            "zoom_offset": int(params["zoom_offset"]),
            "sample_size": float(params["sample_size"]),
            "db_scale": float(params["db_scale"]),
            "spectrum_inset": float(params["spectrum_inset"]),
            "n_bins": int(params["n_bins"]),
        }
    )
    return base


def error_to_wire(
    error_code: str,
    message: str,
    *,
    seq: int,
    session_id: uuid.UUID,
    details: Optional[Mapping[str, Any]] = None,
) -> dict[str, Any]:
    base = make_frame_base(frame_type="error", seq=seq, session_id=session_id)
    base.update(
        {
            "error_code": error_code,
            "message": message,
            "details": dict(details) if details is not None else None,
        }
    )
    return base
