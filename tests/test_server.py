import uuid

from fastapi.testclient import TestClient
import jsonschema
import numpy as np

from spectral_display import protocol
from spectral_display.server.app import create_app


def _client() -> TestClient:
    return TestClient(create_app())


def test_display_defaults() -> None:
    client = _client()
    response = client.get("/api/display")
    assert response.status_code == 200
    body = response.json()
    assert body["type"] == "display_state"
    assert body["state"] == "uninitialized"
    assert body["smoothing_type"] == "Gaussian"
    assert body["smoothing"] == 3
    assert body["averaging"] == 4
    uuid.UUID(body["session_id"])


def test_display_update_and_validation() -> None:
    client = _client()
    response = client.post(
        "/api/display",
        json={"smoothing_type": "Rectangle", "smoothing": 5, "averaging": 1, "zoom": 1, "zoom_offset": 2},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["smoothing_type"] == "Rectangle"
    assert body["smoothing"] == 5
    assert body["zoom"] == 1
    assert body["zoom_offset"] == 2

    assert client.post("/api/display", json={"smoothing": 4}).status_code == 400
    assert client.post("/api/display", json={"sample_size": 40}).status_code == 400
    assert client.post("/api/display", json={"brightness": 1}).status_code == 400
    assert client.get("/api/display").json()["smoothing"] == 5


def test_frame_then_geometry() -> None:
    client = _client()
    response = client.post("/api/frame", json={"bins": [-10.0, -20.0, -30.0, -40.0]})
    assert response.status_code == 200
    assert response.json()["state"] == "live"
    assert response.json()["n_bins"] == 4

    geometry = client.get("/api/geometry", params={"width": 400, "height": 100}).json()
    assert geometry["type"] == "geometry"
    assert geometry["bin_count"] == 4
    assert len(geometry["vertices"]) == 7
    assert geometry["vertices"][0] == [400.0, 80.0]

    raw = client.get("/api/geometry.bin", params={"width": 400, "height": 100}).content
    vertices = protocol.decode_vertices(raw)
    assert vertices.shape == (7, 2)


def test_bad_frame_payloads() -> None:
    client = _client()
    assert client.post("/api/frame", json={"bins": []}).status_code == 400
    assert client.post("/api/frame", json={"bins": ["loud"]}).status_code == 400
    assert client.post("/api/frame", json={"values": [1.0]}).status_code == 400


def test_colors_reach_geometry() -> None:
    client = _client()
    response = client.post("/api/colors", json={"name": "spectrum_line", "rgba": [1, 2, 3, 4]})
    assert response.status_code == 200
    assert response.json()["rgba"] == [1, 2, 3, 4]
    geometry = client.get("/api/geometry").json()
    assert geometry["line_color"] == [1, 2, 3, 4]

    assert client.post("/api/colors", json={"name": "spectrum_line", "rgba": [1, 2, 3]}).status_code == 400
    assert client.post("/api/colors", json={"name": "nope", "rgba": [1, 2, 3, 4]}).status_code == 400


def test_clear_spectrum() -> None:
    client = _client()
    client.post("/api/frame", json={"bins": [-10.0, -20.0]})
    body = client.post("/api/clear").json()
    assert body["state"] == "uninitialized"
    assert client.get("/api/geometry").json()["bin_count"] == 0


def test_rejected_update_changes_nothing() -> None:
    client = _client()
    before = client.get("/api/display").json()
    response = client.post(
        "/api/display",
        json={"smoothing_type": "Rectangle", "zoom": 2, "zoom_offset": 7, "smoothing": 4},
    )
    assert response.status_code == 400
    after = client.get("/api/display").json()
    for key in ("smoothing_type", "smoothing", "zoom", "zoom_offset"):
        assert after[key] == before[key]
    assert after["smoothing_type"] == "Gaussian"


def test_bad_requests_carry_error_frames() -> None:
    schema = protocol.protocol_json_schema()
    client = _client()

    invalid = client.post("/api/display", json={"averaging": 0}).json()["detail"]
    jsonschema.validate(invalid, schema)
    assert invalid["type"] == "error"
    assert invalid["error_code"] == "invalid_parameter"

    unknown = client.post("/api/display", json={"brightness": 1}).json()["detail"]
    jsonschema.validate(unknown, schema)
    assert unknown["error_code"] == "unknown_setting"
    assert unknown["details"] == {"keys": ["brightness"]}

    bad_frame = client.post("/api/frame", json={"bins": []}).json()["detail"]
    jsonschema.validate(bad_frame, schema)
    assert bad_frame["error_code"] == "invalid_frame"


def test_bins_payload() -> None:
    client = _client()
    empty = protocol.decode_bins(client.get("/api/bins.bin").content)
    assert empty.size == 0

    client.post("/api/display", json={"smoothing_type": "None", "averaging": 1})
    client.post("/api/frame", json={"bins": [-10.0, -20.0, -30.0]})
    bins = protocol.decode_bins(client.get("/api/bins.bin").content)
    np.testing.assert_allclose(bins, [-10.0, -20.0, -30.0])
