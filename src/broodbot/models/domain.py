"""Domain models for vending machine records and coordinates."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A WGS84 position in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise ValueError(f"Coordinate values must be finite, got ({self.latitude}, {self.longitude})")
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude {self.latitude} is outside [-90, 90]")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude {self.longitude} is outside [-180, 180]")


class StockState(str, Enum):
    """Freshness indicator reported by users for a machine's inventory."""

    FULL = "full"
    LOW = "low"
    EMPTY = "empty"

    @classmethod
    def from_legacy_flag(cls, is_stocked: bool) -> "StockState":
        return cls.FULL if is_stocked else cls.EMPTY


@dataclass(frozen=True, slots=True)
class VendingMachine:
    """A bread vending machine with its last reported stock state.

    ``distance_km`` is only filled in on copies returned by ranking queries;
    the repository never stores it.
    """

    id: str
    name: str
    address: str
    city: str
    coordinate: Coordinate
    stock_state: StockState
    last_reported_at: datetime
    comment: Optional[str] = None
    photo_url: Optional[str] = None
    reported_by: Optional[str] = None
    distance_km: Optional[float] = None

    @property
    def is_stocked(self) -> bool:
        return self.stock_state is not StockState.EMPTY
