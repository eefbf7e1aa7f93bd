import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from broodbot.exceptions import PersistenceCorruptError
from broodbot.models.domain import Coordinate, StockState, VendingMachine
from broodbot.persistence.serializers import (
    UNKNOWN_REPORT_TIME,
    dump_machines,
    load_coordinate,
    load_machines,
    machine_to_dict,
)
from broodbot.persistence.storage import JsonFileStore


def _machine(mid: str, distance: float | None = None) -> VendingMachine:
    return VendingMachine(
        id=mid,
        name=f"Machine {mid}",
        address="Dorpstraat 12, Utrecht",
        city="Utrecht",
        coordinate=Coordinate(52.0907, 5.1214),
        stock_state=StockState.LOW,
        last_reported_at=datetime(2026, 3, 1, 12, 30, 15, tzinfo=timezone.utc),
        comment="Alleen nog bruin brood",
        distance_km=distance,
    )


def test_json_file_store_writes_single_document(tmp_path: Path) -> None:
    path = tmp_path / "state" / "broodbot.json"
    store = JsonFileStore(path)

    store.set("user-location", '{"lat": 1.0, "lng": 2.0}')
    store.set("other", "value")

    assert json.loads(path.read_text(encoding="utf-8")) == {
        "user-location": '{"lat": 1.0, "lng": 2.0}',
        "other": "value",
    }
    assert JsonFileStore(path).get("other") == "value"


def test_json_file_store_delete_and_missing_keys(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path / "broodbot.json")

    assert store.get("missing") is None
    store.set("key", "value")
    store.delete("key")
    store.delete("key")

    assert store.get("key") is None


def test_json_file_store_treats_unreadable_file_as_empty(tmp_path: Path) -> None:
    path = tmp_path / "broodbot.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonFileStore(path)

    assert store.get("anything") is None
    store.set("key", "value")
    assert store.get("key") == "value"


def test_distance_is_never_serialized() -> None:
    record = machine_to_dict(_machine("vm-1", distance=3.2))

    assert "distance" not in record
    assert "distance_km" not in record
    assert record["stockState"] == "low"
    assert record["location"] == {"lat": 52.0907, "lng": 5.1214}


def test_machine_list_round_trip_preserves_order_and_fields() -> None:
    machines = [_machine("vm-2"), _machine("vm-1"), _machine("vm-3")]

    restored = load_machines(dump_machines(machines))

    assert restored == machines


def test_legacy_is_stocked_flag_maps_to_stock_state() -> None:
    payload = json.dumps(
        [
            {
                "id": "vm-001",
                "name": "Bakkerij",
                "address": "Dorpstraat 12, Utrecht",
                "location": {"lat": 52.0907, "lng": 5.1214},
                "isStocked": False,
                "lastReported": "2026-03-01T12:00:00.000Z",
            }
        ]
    )

    (machine,) = load_machines(payload)

    assert machine.stock_state is StockState.EMPTY
    assert not machine.is_stocked
    assert machine.city == ""
    assert machine.last_reported_at == datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "fields, expected",
    [
        ({"isStocked": True, "stockLevel": "low"}, StockState.LOW),
        ({"isStocked": True, "stockLevel": "full"}, StockState.FULL),
        ({"isStocked": True}, StockState.FULL),
        ({"isStocked": False, "stockLevel": "low"}, StockState.EMPTY),
        ({"stockLevel": "low"}, StockState.LOW),
        ({"stockState": "empty", "isStocked": True, "stockLevel": "full"}, StockState.EMPTY),
    ],
)
def test_legacy_stock_level_refines_is_stocked(fields, expected) -> None:
    record = {
        "id": "vm-001",
        "name": "Bakkerij",
        "location": {"lat": 52.0907, "lng": 5.1214},
        "lastReported": "2026-03-01T12:00:00+00:00",
        **fields,
    }

    (machine,) = load_machines(json.dumps([record]))

    assert machine.stock_state is expected


def test_missing_last_reported_loads_as_epoch() -> None:
    record = {
        "id": "vm-001",
        "name": "Bakkerij",
        "location": {"lat": 52.0907, "lng": 5.1214},
        "isStocked": True,
    }

    (machine,) = load_machines(json.dumps([record]))

    assert machine.last_reported_at == UNKNOWN_REPORT_TIME
    assert machine.last_reported_at == datetime(1970, 1, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "payload",
    [
        "not json",
        '{"id": "vm-1"}',
        '[{"id": "vm-1"}]',
        '[{"id": "vm-1", "name": "x", "location": {"lat": 95, "lng": 0}, "stockState": "full", "lastReported": "2026-03-01T12:00:00+00:00"}]',
    ],
)
def test_corrupt_machine_payload_raises(payload: str) -> None:
    with pytest.raises(PersistenceCorruptError):
        load_machines(payload)


def test_duplicate_ids_are_rejected() -> None:
    with pytest.raises(PersistenceCorruptError):
        load_machines(dump_machines([_machine("vm-1"), _machine("vm-1")]))


def test_load_coordinate_rejects_garbage() -> None:
    assert load_coordinate('{"lat": 52.1, "lng": 5.1}') == Coordinate(52.1, 5.1)
    with pytest.raises(PersistenceCorruptError):
        load_coordinate('{"lat": "north"}')
