"""Tests for API endpoints — pipeline integration over HTTP."""

from __future__ import annotations

import base64

from fastapi.testclient import TestClient

import shapesense.api.detect as detect_module
from shapesense.engine.pipeline import Pipeline
from shapesense.engine.registry import Layer, TransformRegistry, TransformSpec
from shapesense.main import app
from tests.conftest import blank_canvas, draw_disk, draw_rect


client = TestClient(app)


def _payload(canvas) -> dict:
    height, width = canvas.shape[:2]
    return {
        "width": width,
        "height": height,
        "pixels": base64.b64encode(canvas.tobytes()).decode("ascii"),
    }


def test_health():
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["transforms_registered"] == 7


def test_detect_disk():
    canvas = draw_disk(blank_canvas(120, 120), 60, 60, 30)
    response = client.post("/api/detect", json=_payload(canvas))
    assert response.status_code == 200
    data = response.json()
    assert data["components_found"] == 1
    assert data["errors"] == {}
    shapes = data["result"]["shapes"]
    assert [s["type"] for s in shapes] == ["circle"]
    assert data["result"]["image_width"] == 120


def test_detect_reports_rejections():
    canvas = draw_rect(blank_canvas(50, 50), 5, 5, 4, 4)
    response = client.post("/api/detect", json=_payload(canvas))
    assert response.status_code == 200
    data = response.json()
    assert data["result"]["shapes"] == []
    assert data["rejections"] == {"C0": "noise"}


def test_detect_invalid_base64():
    response = client.post("/api/detect", json={"width": 2, "height": 2, "pixels": "not base64!"})
    assert response.status_code == 422


def test_detect_wrong_buffer_size():
    payload = _payload(blank_canvas(10, 10))
    payload["width"] = 11
    response = client.post("/api/detect", json=payload)
    assert response.status_code == 422


def test_detect_rejects_zero_dimensions():
    response = client.post("/api/detect", json={"width": 0, "height": 5, "pixels": ""})
    assert response.status_code == 422


def test_detect_stream():
    canvas = draw_rect(blank_canvas(80, 80), 10, 10, 50, 40)
    with client.stream("POST", "/api/detect/stream", json=_payload(canvas)) as response:
        assert response.status_code == 200
        body = "".join(response.iter_text())

    assert body.count("event: progress") == 14
    assert "event: result" in body
    assert '"rectangle"' in body
    assert body.rstrip().endswith('data: {"type": "done"}')


def test_detect_stream_reports_pipeline_failure(monkeypatch):
    reg = TransformRegistry()
    reg.register(TransformSpec(id="T0.01", layer=Layer.SEGMENTATION, fn=lambda ctx: None, dependencies=["T0.02"]))
    reg.register(TransformSpec(id="T0.02", layer=Layer.SEGMENTATION, fn=lambda ctx: None, dependencies=["T0.01"]))
    monkeypatch.setattr(detect_module, "create_pipeline", lambda: Pipeline(registry=reg))

    canvas = draw_rect(blank_canvas(20, 20), 2, 2, 12, 12)
    with client.stream("POST", "/api/detect/stream", json=_payload(canvas)) as response:
        body = "".join(response.iter_text())

    assert "event: error" in body
    assert "Circular dependency" in body
    assert "event: result" not in body
