"""Error types raised by the machine locator core."""

from __future__ import annotations


class BroodbotError(Exception):
    """Base class for all locator errors."""


class MachineNotFoundError(BroodbotError, LookupError):
    """Raised when an operation targets an unknown machine id."""

    def __init__(self, machine_id: str) -> None:
        super().__init__(f"Vending machine '{machine_id}' not found.")
        self.machine_id = machine_id


class GeolocationUnavailableError(BroodbotError):
    """Raised by geolocation providers when no position can be obtained.

    The location resolver catches this and substitutes the fallback coordinate.
    """


class PersistenceCorruptError(BroodbotError):
    """Raised when stored state cannot be decoded."""
