"""Tests for the registry service: gate, seeding, health, audit journal."""

import threading

import pytest
from fleet_registry.config import Config
from fleet_registry.logger import read_journal
from fleet_registry.models.aircraft import AircraftPayload
from fleet_registry.models.company import CompanyPayload
from fleet_registry.services.registry_service import RegistryService


@pytest.fixture
def config(tmp_path):
    """Create configuration pointing at a temporary data directory."""
    return Config(
        DATA_DIR=str(tmp_path / "data"),
        AUDIT_LOG_FILE=str(tmp_path / "audit.jsonl"),
    )


@pytest.fixture
def registry(config):
    service = RegistryService(config)
    yield service
    service.close()


def test_stores_share_one_gate(registry):
    """Test that both stores are guarded by the same lock."""
    assert registry.aircraft.gate is registry.gate
    assert registry.companies.gate is registry.gate


def test_concurrent_inserts_are_not_lost(registry):
    """Test that parallel inserts all end up in the record file."""
    errors = []

    def insert(n):
        try:
            registry.aircraft.insert(
                AircraftPayload(icao=f"T{n:03d}", constructor="Test", range=1000 + n, max_capacity=50)
            )
        except Exception as e:  # collected for the assertion below
            errors.append(e)

    threads = [threading.Thread(target=insert, args=(n,)) for n in range(25)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert len(registry.aircraft.load()) == 25


def test_concurrent_buys_are_not_lost(registry):
    """Test that parallel buys on one company all count."""
    registry.aircraft.insert(
        AircraftPayload(icao="A320", constructor="Airbus", range=6000, max_capacity=180)
    )
    registry.companies.insert(
        CompanyPayload(company_icao="SWR", name="Swiss", country="Switzerland", fleet=[])
    )

    threads = [
        threading.Thread(target=registry.companies.buy, args=("SWR", "A320", 2)) for _ in range(20)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert registry.companies.get("SWR").fleet_size == 40


def test_gate_released_after_failure(registry):
    """Test that a failing operation does not keep the lock."""
    with pytest.raises(Exception):
        registry.aircraft.insert(AircraftPayload(icao="X"))

    # The gate is re-entrant, so probe it from another thread
    acquired = []

    def probe():
        if registry.gate.acquire(blocking=False):
            acquired.append(True)
            registry.gate.release()

    t = threading.Thread(target=probe)
    t.start()
    t.join()

    assert acquired == [True]


def test_seed_aircraft_skips_duplicates_and_invalid(registry):
    """Test seeding counts only inserted aircraft."""
    inserted = registry.seed_aircraft(
        [
            AircraftPayload(icao="A320", constructor="Airbus", range=6000, max_capacity=180),
            AircraftPayload(icao="a320", constructor="Airbus", range=6000, max_capacity=180),
            AircraftPayload(icao="B738", constructor="Boeing", range=None, max_capacity=189),
            AircraftPayload(icao="E190", constructor="Embraer", range=4500, max_capacity=100),
        ]
    )

    assert inserted == 2
    assert [a.icao for a in registry.aircraft.load()] == ["A320", "E190"]


def test_seed_from_config(tmp_path):
    """Test seeding from the configured CSV file."""
    csv_path = tmp_path / "aircraft.csv"
    csv_path.write_text(
        "ICAO;constructor;range;maxCapacity\n"
        "A320;Airbus;6000;180\n"
        "B738;Boeing;5400;189\n"
    )
    service = RegistryService(
        Config(DATA_DIR=str(tmp_path / "data"), SEED_AIRCRAFT_CSV=str(csv_path))
    )

    assert service.seed_from_config() == 2
    assert service.seed_from_config() == 0


def test_seed_from_config_disabled(registry):
    """Test that no seed file means no seeding."""
    assert registry.seed_from_config() == 0


def test_health(registry):
    """Test health with readable and unreadable files."""
    registry.aircraft.insert(
        AircraftPayload(icao="A320", constructor="Airbus", range=6000, max_capacity=180)
    )
    assert registry.health() == {"status": "ok", "aircraft": 1, "companies": 0}

    registry.companies.record_file.path.write_text("not json")
    assert registry.health() == {"status": "degraded", "aircraft": 1, "companies": None}


def test_lenient_reads(tmp_path):
    """Test that non-strict reads treat a broken file as empty."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "avion.json").write_text("not json")
    service = RegistryService(Config(DATA_DIR=str(data_dir), STRICT_STORAGE_READS=False))

    assert service.aircraft.query() == []
    assert service.health()["status"] == "ok"


def test_audit_journal(registry, config):
    """Test that successful mutations are journaled, failures are not."""
    registry.aircraft.insert(
        AircraftPayload(icao="A320", constructor="Airbus", range=6000, max_capacity=180)
    )
    with pytest.raises(Exception):
        registry.aircraft.insert(
            AircraftPayload(icao="A320", constructor="Airbus", range=6000, max_capacity=180)
        )
    registry.companies.insert(
        CompanyPayload(company_icao="SWR", name="Swiss", country="Switzerland", fleet=[])
    )
    registry.companies.buy("SWR", "A320", 3)
    registry.aircraft.update("A320", AircraftPayload(icao="A321"))

    entries = read_journal(config.AUDIT_LOG_FILE)

    assert [(e["collection"], e["operation"]) for e in entries] == [
        ("aircraft", "insert"),
        ("company", "insert"),
        ("company", "buy"),
        ("company", "rename-aircraft"),
        ("aircraft", "update"),
    ]
    assert entries[2]["details"] == {"aircraftICAO": "A320", "quantity": 3}
