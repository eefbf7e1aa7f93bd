"""Machine data access."""

from .machine_repository import MACHINES_KEY, MachineRepository

__all__ = ["MACHINES_KEY", "MachineRepository"]
