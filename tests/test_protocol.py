import uuid

import jsonschema
import numpy as np
import pytest

from spectral_display import protocol
from spectral_display.controller import SpectrumDisplayController
from spectral_display.geometry import SpectrumColors, build_geometry


def test_payload_header_vectors() -> None:
    vectors = [
        (
            protocol.BINARY_KIND_VERTICES,
            uuid.UUID("00112233-4455-6677-8899-aabbccddeeff"),
            1024,
            "535041590100010000112233445566778899aabbccddeeff0004000000000000",
        ),
        (
            protocol.BINARY_KIND_BINS,
            uuid.UUID("12345678-1234-5678-1234-567812345678"),
            4096,
            "5350415901000200123456781234567812345678123456780010000000000000",
        ),
    ]
    for kind, payload_id, count, expected_hex in vectors:
        raw = protocol.make_payload_header(kind, payload_id, count)
        assert raw.hex() == expected_hex
        parsed = protocol.parse_payload_header(raw)
        assert parsed["kind"] == kind
        assert parsed["payload_id"] == str(payload_id)
        assert parsed["element_count"] == count


def test_parse_rejects_bad_headers() -> None:
    good = protocol.make_payload_header(protocol.BINARY_KIND_VERTICES, uuid.uuid4(), 3)
    for raw in (good[:-1], b"XPAY" + good[4:], good[:6] + b"\x09\x00" + good[8:]):
        with pytest.raises(ValueError):
            protocol.parse_payload_header(raw)


def test_vertices_payload_decodes_back() -> None:
    geometry = build_geometry(np.array([-10.0, -50.0]), 200, 100, 20, 90.3, SpectrumColors())
    raw = protocol.encode_vertices(geometry)
    decoded = protocol.decode_vertices(raw)
    np.testing.assert_allclose(decoded, geometry.vertices, rtol=1e-6)


def test_schema_accepts_valid_frames() -> None:
    schema = protocol.protocol_json_schema()
    session_id = uuid.uuid4()

    controller = SpectrumDisplayController()
    controller.on_frame([-10.0, -30.0, -60.0, -90.0])
    geometry_frame = protocol.geometry_to_wire(controller.current_geometry(320, 120), seq=1, session_id=session_id)
    empty_frame = protocol.geometry_to_wire(
        SpectrumDisplayController().current_geometry(320, 120), seq=2, session_id=session_id
    )
    state_frame = protocol.display_state_to_wire(controller.parameters(), seq=3, session_id=session_id)
    error_frame = protocol.error_to_wire("invalid_parameter", "bad zoom", seq=4, session_id=session_id)

    for frame in (geometry_frame, empty_frame, state_frame, error_frame):
        jsonschema.validate(frame, schema)
    assert geometry_frame["bin_count"] == 4
    assert empty_frame["bin_count"] == 0
    assert state_frame["state"] == "live"


def test_schema_rejects_invalid_frames() -> None:
    schema = protocol.protocol_json_schema()
    session_id = uuid.uuid4()
    controller = SpectrumDisplayController()

    too_few_vertices = protocol.geometry_to_wire(controller.current_geometry(10, 10), seq=1, session_id=session_id)
    too_few_vertices["vertices"] = too_few_vertices["vertices"][:2]

    bad_zoom = protocol.display_state_to_wire(controller.parameters(), seq=2, session_id=session_id)
    bad_zoom["zoom"] = 6

    extra_field = protocol.error_to_wire("oops", "message", seq=3, session_id=session_id)
    extra_field["recoverable"] = True

    missing_message = protocol.make_frame_base(frame_type="error", seq=4, session_id=session_id)
    missing_message["error_code"] = "oops"

    for payload in (too_few_vertices, bad_zoom, extra_field, missing_message):
        with pytest.raises(jsonschema.ValidationError):
            jsonschema.validate(payload, schema)


def test_unknown_frame_type_is_rejected() -> None:
    with pytest.raises(ValueError):
        protocol.make_frame_base(frame_type="spectrum_meta", seq=0, session_id=uuid.uuid4())


def test_bins_payload_decodes_back() -> None:
    bins = np.array([-12.5, -40.0, -96.25], dtype=np.float32)
    payload_id = uuid.UUID("12345678-1234-5678-1234-567812345678")
    raw = protocol.encode_bins(bins, payload_id)
    header = protocol.parse_payload_header(raw[: protocol.BINARY_HEADER_STRUCT.size])
    assert header["kind"] == protocol.BINARY_KIND_BINS
    assert header["element_count"] == 3
    np.testing.assert_array_equal(protocol.decode_bins(raw), bins)

    assert protocol.decode_bins(protocol.encode_bins(None)).size == 0
    with pytest.raises(ValueError):
        protocol.decode_vertices(raw)
    with pytest.raises(ValueError):
        protocol.decode_bins(raw[:-4])
