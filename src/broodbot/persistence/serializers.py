"""Conversion between domain records and their stored JSON representation."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from ..exceptions import PersistenceCorruptError
from ..models.domain import Coordinate, StockState, VendingMachine


UNKNOWN_REPORT_TIME = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _stock_state_from_dict(data: dict[str, Any]) -> StockState:
    if data.get("stockState") is not None:
        return StockState(data["stockState"])
    level = data.get("stockLevel")
    if "isStocked" in data:
        stocked = bool(data["isStocked"])
        if stocked and level is not None:
            return StockState(level)
        return StockState.from_legacy_flag(stocked)
    if level is not None:
        return StockState(level)
    raise ValueError(f"Machine '{data.get('id')}' has no stock state")


def _parse_timestamp(value: Any) -> datetime:
    if not isinstance(value, str) or not value:
        raise ValueError(f"Invalid timestamp value {value!r}")
    moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def coordinate_to_dict(coordinate: Coordinate) -> dict[str, float]:
    return {"lat": coordinate.latitude, "lng": coordinate.longitude}


def coordinate_from_dict(data: Any) -> Coordinate:
    if not isinstance(data, dict):
        raise ValueError(f"Expected a location object, got {type(data).__name__}")
    return Coordinate(float(data["lat"]), float(data["lng"]))


def machine_to_dict(machine: VendingMachine) -> dict[str, Any]:
    """Serialize a machine for storage. ``distance_km`` is intentionally not written."""

    return {
        "id": machine.id,
        "name": machine.name,
        "address": machine.address,
        "city": machine.city,
        "location": coordinate_to_dict(machine.coordinate),
        "stockState": machine.stock_state.value,
        "lastReported": machine.last_reported_at.isoformat(),
        "comment": machine.comment,
        "photoUrl": machine.photo_url,
        "reportedBy": machine.reported_by,
    }


def machine_from_dict(data: Any) -> VendingMachine:
    """Build a machine from a stored record.

    Records written before the tri-state stock status carry the boolean
    ``isStocked`` flag, optionally refined by ``stockLevel``. A record without
    ``lastReported`` is treated as last reported at the Unix epoch.
    """

    if not isinstance(data, dict):
        raise ValueError(f"Expected a machine object, got {type(data).__name__}")

    return VendingMachine(
        id=str(data["id"]),
        name=str(data["name"]),
        address=str(data.get("address") or ""),
        city=str(data.get("city") or ""),
        coordinate=coordinate_from_dict(data["location"]),
        stock_state=_stock_state_from_dict(data),
        last_reported_at=_parse_timestamp(data["lastReported"]) if data.get("lastReported") else UNKNOWN_REPORT_TIME,
        comment=_optional_text(data.get("comment")),
        photo_url=_optional_text(data.get("photoUrl") or data.get("image")),
        reported_by=_optional_text(data.get("reportedBy")),
    )


def dump_machines(machines: Iterable[VendingMachine]) -> str:
    return json.dumps([machine_to_dict(machine) for machine in machines], ensure_ascii=False)


def load_machines(payload: str) -> list[VendingMachine]:
    """Decode a stored machine list, raising ``PersistenceCorruptError`` on any defect."""

    try:
        records = json.loads(payload)
        if not isinstance(records, list):
            raise ValueError("Stored machines must be a JSON array")
        machines = [machine_from_dict(record) for record in records]
    except (ValueError, KeyError, TypeError) as exc:
        raise PersistenceCorruptError(f"Stored machine list is unreadable: {exc}") from exc

    seen: set[str] = set()
    for machine in machines:
        if machine.id in seen:
            raise PersistenceCorruptError(f"Duplicate machine id '{machine.id}' in stored data")
        seen.add(machine.id)
    return machines


def dump_coordinate(coordinate: Coordinate) -> str:
    return json.dumps(coordinate_to_dict(coordinate))


def load_coordinate(payload: str) -> Coordinate:
    try:
        return coordinate_from_dict(json.loads(payload))
    except (ValueError, KeyError, TypeError) as exc:
        raise PersistenceCorruptError(f"Stored location is unreadable: {exc}") from exc
