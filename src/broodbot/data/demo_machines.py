"""Built-in machine dataset used when no stored data exists."""

from __future__ import annotations

from datetime import datetime, timedelta

from ..models.domain import Coordinate, StockState, VendingMachine

# (id, name, address, lat, lng, stock state, minutes since last report)
_DEMO_ROWS: tuple[tuple[str, str, str, float, float, StockState, int], ...] = (
    ("vm-001", "Bakkerij De Verse Knip", "Dorpstraat 12", 52.0907, 5.1214, StockState.FULL, 30),
    ("vm-002", "Brood Express", "Stationsplein 5", 52.0894, 5.1095, StockState.FULL, 120),
    ("vm-003", "Vers Brood Automaat", "Biltstraat 45", 52.0977, 5.1326, StockState.EMPTY, 20),
    ("vm-004", "Buurtkruideniers", "Wittevrouwenstraat 12", 52.0943, 5.1280, StockState.LOW, 180),
    ("vm-005", "De Broodkas", "Amsterdamsestraatweg 124", 52.1008, 5.1155, StockState.FULL, 0),
    ("vm-006", "Bakkershoek", "Kanaalstraat 78", 52.0874, 5.0989, StockState.FULL, 15),
    ("vm-007", "Brood & Co", "Twijnstraat 67", 52.0809, 5.1229, StockState.EMPTY, 45),
)


def demo_machines(now: datetime) -> list[VendingMachine]:
    """Return the demo machines with report times relative to ``now``."""

    return [
        VendingMachine(
            id=machine_id,
            name=name,
            address=f"{street}, Utrecht",
            city="Utrecht",
            coordinate=Coordinate(lat, lng),
            stock_state=state,
            last_reported_at=now - timedelta(minutes=minutes_ago),
        )
        for machine_id, name, street, lat, lng, state, minutes_ago in _DEMO_ROWS
    ]
