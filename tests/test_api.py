"""
HTTP API tests.

Tests:
1.    Health check
2-5.  Shape listing and lookup
6-11. Shape calculation endpoint
12-15. Formula editor endpoints
16-17. Materials
"""

from shape_engine.catalog import SHAPE_CATALOG


def _plate_request(**overrides):
    body = {
        "material_id": "cs-is2062-e250",
        "parameter_values": {"L": 1000, "W": 1000, "t": 10, "allowance": 0},
    }
    body.update(overrides)
    return body


# ============================================================
# Health
# ============================================================

def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["shapes"] == len(SHAPE_CATALOG)


# ============================================================
# Shapes
# ============================================================

def test_list_shapes(client):
    resp = client.get("/api/shapes/")
    assert resp.status_code == 200
    shapes = resp.json()
    assert len(shapes) == len(SHAPE_CATALOG)
    assert shapes[0]["id"] == "rectangular-plate"
    assert shapes[0]["formulas"]["volume"]["kind"] == "formula"
    assert shapes[0]["formulas"]["blankDimensions"]["kind"] == "blank"


def test_list_shapes_by_group(client):
    resp = client.get("/api/shapes/", params={"group": "tubes"})
    assert resp.status_code == 200
    assert [s["name"] for s in resp.json()] == ["Straight Tube"]


def test_unknown_group_is_a_bad_request(client):
    resp = client.get("/api/shapes/", params={"group": "valves"})
    assert resp.status_code == 400
    assert "Available" in resp.json()["detail"]


def test_get_shape(client):
    assert client.get("/api/shapes/SHP-0001").json()["name"] == "Rectangular Plate"
    assert client.get("/api/shapes/no-such-shape").status_code == 404


# ============================================================
# Calculation
# ============================================================

def test_calculate_plate(client):
    resp = client.post("/api/shapes/rectangular-plate/calculate", json=_plate_request())
    assert resp.status_code == 200
    data = resp.json()

    assert data["calculated_values"]["weight"] == 78.5
    assert data["cost_estimate"]["material_cost"] == 78.5 * 65
    assert data["cost_estimate"]["currency"] == "INR"
    assert data["material_id"] == "cs-is2062-e250"
    # values the plate does not produce are left out
    assert "weld_length" not in data["calculated_values"]


def test_calculate_applies_defaults(client):
    body = _plate_request(parameter_values={"L": 1000, "W": 1000, "t": 10}, quantity=2)
    data = client.post("/api/shapes/rectangular-plate/calculate", json=body).json()

    echo = {p["name"]: p["value"] for p in data["parameter_values"]}
    assert echo["allowance"] == 5
    assert data["calculated_values"]["blank_dimensions"]["length"] == 1010
    assert data["total_weight"] == 157


def test_calculate_with_inline_material(client):
    body = {
        "material": {
            "id": "custom-ss",
            "name": "Customer Supplied SS",
            "category": "PLATES_STAINLESS_STEEL",
            "density": 8000,
            "current_price": {"amount": 300, "currency": "INR"},
        },
        "parameter_values": {"L": 1000, "W": 1000, "t": 10},
    }
    data = client.post("/api/shapes/rectangular-plate/calculate", json=body).json()
    assert data["material_id"] == "custom-ss"
    assert data["calculated_values"]["weight"] == 80


def test_calculate_reports_advisory_warnings(client):
    body = _plate_request(parameter_values={"L": 500, "W": 1000, "t": 10})
    resp = client.post("/api/shapes/rectangular-plate/calculate", json=body)
    assert resp.status_code == 200
    assert any("length should be greater" in w for w in resp.json()["warnings"])


def test_calculate_rejects_invalid_parameters(client):
    body = _plate_request(parameter_values={"L": 1000, "W": 1000})
    resp = client.post("/api/shapes/rectangular-plate/calculate", json=body)
    assert resp.status_code == 422
    assert "Required parameter 'Thickness' (t) is missing" in resp.json()["detail"]["errors"]


def test_calculate_material_errors(client):
    missing = client.post(
        "/api/shapes/rectangular-plate/calculate",
        json={"parameter_values": {"L": 1000, "W": 1000, "t": 10}},
    )
    assert missing.status_code == 422

    unknown = client.post(
        "/api/shapes/rectangular-plate/calculate", json=_plate_request(material_id="unobtainium")
    )
    assert unknown.status_code == 404

    no_shape = client.post("/api/shapes/no-such-shape/calculate", json=_plate_request())
    assert no_shape.status_code == 404


# ============================================================
# Formula editor
# ============================================================

def test_validate_formula(client):
    resp = client.post("/api/formulas/validate", json={"expression": "pi * (D/2)^2 * t"})
    assert resp.status_code == 200
    assert resp.json() == {"valid": True, "variables": ["D", "t"]}


def test_validate_bad_formula(client):
    resp = client.post("/api/formulas/validate", json={"expression": "pi * (D/2"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["valid"] is False
    assert data["error"].startswith("Invalid formula syntax")
    assert data["position"] == 9


def test_evaluate_formula(client):
    body = {
        "formula": {
            "expression": "L * W * t * density / 1e9",
            "variables": ["L", "W", "t"],
            "unit": "kg",
            "requires_density": True,
        },
        "context": {"L": 1000, "W": 1000, "t": 10},
        "density": 7850,
    }
    resp = client.post("/api/formulas/evaluate", json=body)
    assert resp.status_code == 200
    assert resp.json()["result"] == 78.5
    assert "range_warning" not in resp.json()


def test_evaluate_formula_missing_variable(client):
    body = {"formula": {"expression": "a + b", "variables": ["a", "b"]}, "context": {"a": 1}}
    resp = client.post("/api/formulas/evaluate", json=body)
    assert resp.status_code == 422
    assert resp.json()["detail"] == "Missing required variables: b"


# ============================================================
# Materials
# ============================================================

def test_list_materials(client):
    resp = client.get("/api/materials/")
    assert resp.status_code == 200
    assert "ss304" in [m["id"] for m in resp.json()]


def test_get_material(client):
    assert client.get("/api/materials/ss316l").json()["density"] == 8000
    assert client.get("/api/materials/unobtainium").status_code == 404
