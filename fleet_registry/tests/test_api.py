"""Tests for the HTTP endpoints."""

import pytest
from fastapi.testclient import TestClient

from fleet_registry.config import Config
from fleet_registry.errors import StorageWriteError
from fleet_registry.main import app
from fleet_registry.services.registry_service import RegistryService
from fleet_registry.services.singleton import get_registry


@pytest.fixture
def registry(tmp_path):
    service = RegistryService(Config(DATA_DIR=str(tmp_path)))
    yield service
    service.close()


@pytest.fixture
def client(registry):
    """Create a test client bound to a temporary registry."""
    app.dependency_overrides[get_registry] = lambda: registry
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def a320(client):
    """Post the sample A320 and a company flying it."""
    response = client.post(
        "/avions",
        json={"ICAO": "A320", "constructor": "Airbus", "range": 6000, "maxCapacity": 180},
    )
    assert response.status_code == 201
    response = client.post(
        "/company",
        json={
            "companyICAO": "SWR",
            "name": "Swiss",
            "country": "Switzerland",
            "fleet": [{"aircraftICAO": "A320", "quantity": 4}],
        },
    )
    assert response.status_code == 201
    return response.json()


def test_root(client):
    """Test root endpoint."""
    assert client.get("/").json()["status"] == "running"


def test_scenario(client, a320):
    """Test the A320 walkthrough end to end."""
    duplicate = client.post(
        "/avions",
        json={"ICAO": "a320", "constructor": "Airbus", "range": 6000, "maxCapacity": 180},
    )
    assert duplicate.status_code == 409
    assert duplicate.json()["error"] == "Conflict"

    by_constructor = client.get("/avions", params={"constructor": "airbus"}).json()
    assert [a["ICAO"] for a in by_constructor] == ["A320"]

    assert client.get("/avions", params={"capacity": "-100"}).json() == []

    renamed = client.put("/avions", params={"icao": "A320"}, json={"ICAO": "A321"})
    assert renamed.status_code == 202
    assert renamed.json() == {"ICAO": "A321", "constructor": "Airbus", "range": 6000, "maxCapacity": 180}
    assert "Warning" not in renamed.headers

    companies = client.get("/company").json()
    assert companies[0]["fleet"] == [{"aircraftICAO": "A321", "quantity": 4}]

    unknown = client.put("/company/SWR/buy", params={"aircraftICAO": "B999"})
    assert unknown.status_code == 400


def test_get_avions_repeated_params(client):
    """Test repeated threshold and sort parameters."""
    for icao, constructor, range_, capacity in [
        ("A320", "Airbus", 6000, 180),
        ("B738", "Boeing", 5400, 189),
        ("E190", "Embraer", 4500, 100),
    ]:
        client.post(
            "/avions",
            json={"ICAO": icao, "constructor": constructor, "range": range_, "maxCapacity": capacity},
        )

    response = client.get("/avions", params=[("capacity", "150"), ("capacity", "-185"), ("sort", "-range")])
    assert [a["ICAO"] for a in response.json()] == ["A320"]

    response = client.get("/avions", params=[("range", "5000"), ("sort", "-icao")])
    assert [a["ICAO"] for a in response.json()] == ["B738", "A320"]


def test_get_avions_bad_sort(client):
    """Test that an unknown sort key is a 400."""
    response = client.get("/avions", params={"sort": "weight"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Sort parameters incorrect"


def test_post_avion_invalid(client):
    """Test that invalid and malformed bodies are 400s."""
    assert client.post("/avions", json={"ICAO": "A320", "constructor": "Airbus", "range": 0, "maxCapacity": 1}).status_code == 400
    assert client.post("/avions", json={"ICAO": "A320", "range": "far"}).status_code == 400


def test_delete_avions(client, a320):
    """Test bulk delete by constructor."""
    response = client.delete("/avions", params={"constructor": "AIRBUS"})
    assert response.status_code == 200
    assert [a["ICAO"] for a in response.json()] == ["A320"]
    assert client.get("/avions").json() == []

    assert client.delete("/avions").status_code == 400


def test_put_avion_errors(client, a320):
    """Test update failure statuses."""
    assert client.put("/avions", json={"range": 1}).status_code == 400
    assert client.put("/avions", params={"icao": "ZZZZ"}, json={"range": 1}).status_code == 404
    assert client.put("/avions", params={"icao": "A320"}, json={"maxCapacity": 0}).status_code == 400


def test_put_avion_cascade_warning(client, registry, monkeypatch):
    """Test that a failed cascade keeps 202 and adds a Warning header."""
    client.post(
        "/avions",
        json={"ICAO": "A320", "constructor": "Airbus", "range": 6000, "maxCapacity": 180},
    )
    client.post(
        "/company",
        json={"companyICAO": "SWR", "name": "Swiss", "country": "CH", "fleet": [{"aircraftICAO": "A320", "quantity": 1}]},
    )

    def failing_persist(records):
        raise StorageWriteError("disk full")

    monkeypatch.setattr(registry.companies.record_file, "persist", failing_persist)

    response = client.put("/avions", params={"icao": "A320"}, json={"ICAO": "A321"})

    assert response.status_code == 202
    assert response.json()["ICAO"] == "A321"
    assert "Companies can't be updated" in response.headers["Warning"]


def test_company_query(client, a320):
    """Test company filters and sort."""
    client.post("/company", json={"companyICAO": "EZY", "name": "easyJet", "country": "UK", "fleet": []})

    response = client.get("/company", params={"fleetSize": "1"})
    assert [c["companyICAO"] for c in response.json()] == ["SWR"]

    response = client.get("/company", params={"country": "uk"})
    assert [c["companyICAO"] for c in response.json()] == ["EZY"]

    response = client.get("/company", params={"sort": "name"})
    assert [c["companyICAO"] for c in response.json()] == ["EZY", "SWR"]

    assert client.get("/company", params={"fleetSize": "big"}).status_code == 400


def test_post_company_errors(client, a320):
    """Test company insert failure statuses."""
    body = {"companyICAO": "SWR", "name": "Swiss", "country": "CH", "fleet": []}
    assert client.post("/company", json=body).status_code == 409

    body = {"companyICAO": "AFR", "name": "Air France", "country": "FR", "fleet": [{"aircraftICAO": "B999", "quantity": 1}]}
    assert client.post("/company", json=body).status_code == 409

    body = {"companyICAO": "AFR", "name": "Air France", "country": "FR"}
    assert client.post("/company", json=body).status_code == 400


def test_delete_company(client, a320):
    """Test company delete statuses."""
    assert client.delete("/company", params={"companyICAO": "swr"}).json()["companyICAO"] == "SWR"
    assert client.delete("/company", params={"companyICAO": "SWR"}).status_code == 404
    assert client.delete("/company").status_code == 400


def test_buy_and_sell(client, a320):
    """Test the fleet ledger endpoints."""
    bought = client.put("/company/SWR/buy", params={"aircraftICAO": "A320", "quantity": "5"})
    assert bought.status_code == 202
    assert bought.json()["fleet"] == [{"aircraftICAO": "A320", "quantity": 9}]

    oversold = client.put("/company/SWR/sell", params={"aircraftICAO": "A320", "quantity": "10"})
    assert oversold.status_code == 409

    sold = client.put("/company/SWR/sell", params={"aircraftICAO": "A320", "quantity": "9"})
    assert sold.status_code == 202
    assert sold.json() == 0

    not_owned = client.put("/company/SWR/sell", params={"aircraftICAO": "A320"})
    assert not_owned.status_code == 424

    assert client.put("/company/XXX/buy", params={"aircraftICAO": "A320"}).status_code == 404
    assert client.put("/company/SWR/buy", params={"aircraftICAO": "A320", "quantity": "-1"}).status_code == 400
    assert client.put("/company/SWR/sell", params={"aircraftICAO": "A320", "quantity": "²"}).status_code == 400


def test_health(client, a320):
    """Test health endpoint."""
    assert client.get("/health").json() == {"status": "ok", "aircraft": 1, "companies": 1}


def test_storage_unavailable_is_503(client, registry):
    """Test that an unreadable record file maps to 503."""
    registry.aircraft.record_file.path.write_text("{broken")

    response = client.get("/avions")

    assert response.status_code == 503
    assert response.json()["error"] == "StorageUnavailable"
