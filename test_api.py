"""
HTTP tests for the sizing API.
"""

import sys
import os
import importlib

from fastapi.testclient import TestClient

# Add the project root to the Python path
sys.path.append(os.path.abspath('.'))

from app.main import app

client = TestClient(app)

EXAMPLE_REQUEST = {
    "system": {
        "inlet_pressure": 130,
        "available_flow": 500,
        "min_outlet_pressure": 90,
        "demand_safety_factor": 1.2,
        "tank_volume": 0,
        "gas_kind": "air",
    },
    "geometry": {
        "header_length": 1000,
        "max_line_velocity": 50,
        "pipe_roughness": 0.00015,
        "temperature": 70,
    },
    "drops": [
        {"id": "drop-1", "name": "Drop 1", "length": 100, "req_pressure": 95, "req_flow": 100}
    ],
}


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}

    response = client.get("/core/health")
    assert response.status_code == 200
    assert response.json()["engine_version"] == "1.0.0"


def test_pipe_sizes():
    response = client.get("/network/pipe-sizes")
    assert response.status_code == 200
    sizes = response.json()
    assert len(sizes) == 12
    assert sizes[0] == {"nominal": '1/4"', "id_in": 0.364, "selected": True}
    assert sizes[-1]["nominal"] == '6"'


def test_gas_properties():
    response = client.get("/network/gas-properties")
    assert response.status_code == 200
    body = response.json()
    assert body["air"]["R"] == 53.35
    assert body["fuel_gas"]["nu"] == 1.72e-4


def test_example_round_trip():
    example = client.get("/network/example")
    assert example.status_code == 200

    response = client.post("/network/calculate", json=example.json())
    assert response.status_code == 200
    body = response.json()
    assert len(body["drops"]) == 2
    assert body["flow_unit"] == "SCFM"


def test_calculate_network():
    response = client.post("/network/calculate", json=EXAMPLE_REQUEST)
    assert response.status_code == 200
    body = response.json()
    assert body["capacity_status"] == "OK"
    assert abs(body["capacity_margin_or_deficit_scfm"] - 380.0) < 1e-9
    assert body["drops"][0]["recommended_size"] == '1"'
    assert body["header"]["status"] == "OK"
    assert body["tank_metrics"] is None
    assert body["details"]["sample_drop"]["name"] == "Drop 1"


def test_unbounded_tank_serializes_as_null():
    request = {**EXAMPLE_REQUEST, "system": {**EXAMPLE_REQUEST["system"], "tank_volume": 200}, "drops": []}
    response = client.post("/network/calculate", json=request)
    assert response.status_code == 200
    tank = response.json()["tank_metrics"]
    assert tank["coverage_time_minutes"] is None
    assert tank["coverage_unbounded"] is True
    assert tank["is_covering_deficit"] is False


def test_size_segment():
    response = client.post("/network/segment", json={
        "flow_scfm": 120,
        "length": 100,
        "upstream_pressure": 130,
        "downstream_pressure": 95,
        "max_velocity": 50,
    })
    assert response.status_code == 200
    body = response.json()
    assert body["recommended"] == '1"'
    assert body["status"] == "OK"
    assert body["details"]["formula"] == "Darcy-Weisbach (Iterative)"


def test_invalid_request():
    response = client.post("/network/calculate", json={"system": {"inlet_pressure": 130}})
    assert response.status_code == 422


def test_blank_candidate_row_does_not_fail_the_network():
    request = {
        **EXAMPLE_REQUEST,
        "candidate_pipes": [
            {"nominal": "blank", "id_in": 0},
            {"nominal": '1"', "id_in": 1.049},
            {"nominal": '2"', "id_in": 2.067},
        ],
    }
    response = client.post("/network/calculate", json=request)
    assert response.status_code == 200
    drop = response.json()["drops"][0]
    blank = drop["comparison_table"][0]
    assert blank["velocity"] is None
    assert blank["severity"] == "bad"
    assert drop["recommended_size"] == '1"'


def test_calculation_failure_uses_error_envelope(monkeypatch):
    service_module = importlib.import_module("app.services.sizing.sizing_service")

    def failing_engine(data):
        raise ZeroDivisionError("float division by zero")

    monkeypatch.setattr(service_module, "engine_calculate_network", failing_engine)

    response = client.post("/network/calculate", json=EXAMPLE_REQUEST)
    assert response.status_code == 500
    body = response.json()
    assert body["status"] == "error"
    assert body["error"]["code"] == "calculation_error"
    assert body["error"]["message"] == "Network sizing failed"
    assert body["error"]["details"]["error_type"] == "ZeroDivisionError"


def test_unexpected_failure_uses_error_envelope(monkeypatch):
    service_module = importlib.import_module("app.services.sizing.sizing_service")

    def failing_example():
        raise RuntimeError("example unavailable")

    monkeypatch.setattr(service_module, "engine_get_example_input", failing_example)

    response = client.get("/network/example")
    assert response.status_code == 500
    body = response.json()
    assert body["error"]["code"] == "internal_error"
    assert body["error"]["details"] == {"error_type": "RuntimeError"}
