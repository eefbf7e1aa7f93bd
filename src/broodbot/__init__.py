"""Bread vending machine locator core."""

from .exceptions import (
    BroodbotError,
    GeolocationUnavailableError,
    MachineNotFoundError,
    PersistenceCorruptError,
)
from .locator import Locator, create_locator
from .models.domain import Coordinate, StockState, VendingMachine
from .schemas.machines import NewMachineInput

__all__ = [
    "BroodbotError",
    "Coordinate",
    "GeolocationUnavailableError",
    "Locator",
    "MachineNotFoundError",
    "NewMachineInput",
    "PersistenceCorruptError",
    "StockState",
    "VendingMachine",
    "create_locator",
]
