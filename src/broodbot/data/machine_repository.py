"""Machine repository backed by a key-value store."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Optional

from .demo_machines import demo_machines
from ..exceptions import MachineNotFoundError, PersistenceCorruptError
from ..models.domain import StockState, VendingMachine
from ..persistence.serializers import dump_machines, load_machines
from ..persistence.storage import KeyValueStore
from ..schemas.machines import NewMachineInput

MACHINES_KEY = "bread-vending-machines"

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


class MachineRepository:
    """Owns the canonical, insertion-ordered list of vending machines.

    The list is loaded lazily from the store on first access. Every mutation
    writes the whole list back under ``MACHINES_KEY``.
    """

    def __init__(self, store: KeyValueStore, clock: Callable[[], datetime] | None = None) -> None:
        self._store = store
        self._clock = clock or _utc_now
        self._machines: Optional[list[VendingMachine]] = None

    def _load(self) -> list[VendingMachine]:
        if self._machines is not None:
            return self._machines

        payload = self._store.get(MACHINES_KEY)
        if payload is None:
            logger.info("No stored machines found, seeding demo dataset")
            self._machines = demo_machines(self._clock())
            self._persist()
            return self._machines

        try:
            self._machines = load_machines(payload)
        except PersistenceCorruptError as exc:
            logger.error(f"{exc}. Reseeding demo dataset")
            self._machines = demo_machines(self._clock())
            self._persist()
        return self._machines

    def _persist(self) -> None:
        try:
            self._store.set(MACHINES_KEY, dump_machines(self._machines or []))
        except OSError as exc:
            # the in-memory list stays authoritative for this process
            logger.error(f"Failed to persist vending machines: {exc}")

    def _index_of(self, machine_id: str) -> int:
        for index, machine in enumerate(self._load()):
            if machine.id == machine_id:
                return index
        raise MachineNotFoundError(machine_id)

    def _replace_at(self, index: int, machine: VendingMachine) -> VendingMachine:
        machines = self._load()
        machines[index] = machine
        self._persist()
        return machine

    def _next_id(self) -> str:
        existing = {machine.id for machine in self._load()}
        stamp = int(self._clock().timestamp() * 1000)
        candidate = f"vm-{_to_base36(stamp)}"
        while candidate in existing:
            stamp += 1
            candidate = f"vm-{_to_base36(stamp)}"
        return candidate

    def list(self) -> list[VendingMachine]:
        return list(self._load())

    def get(self, machine_id: str) -> VendingMachine:
        return self._load()[self._index_of(machine_id)]

    def search(self, query: str) -> list[VendingMachine]:
        """Case-insensitive match on name, address or city."""

        needle = query.strip().lower()
        if not needle:
            return self.list()
        return [
            machine
            for machine in self._load()
            if needle in machine.name.lower() or needle in machine.address.lower() or needle in machine.city.lower()
        ]

    def add(self, payload: NewMachineInput) -> VendingMachine:
        machine = VendingMachine(
            id=self._next_id(),
            name=payload.name,
            address=payload.address,
            city=payload.city,
            coordinate=payload.coordinate,
            stock_state=payload.stock_state,
            last_reported_at=self._clock(),
            comment=payload.comment or None,
            photo_url=payload.photo_url or None,
            reported_by=payload.reported_by or None,
        )
        self._load().append(machine)
        self._persist()
        logger.info(f"Added vending machine {machine.id} ({machine.name})")
        return machine

    def update_status(
        self,
        machine_id: str,
        stock_state: StockState | str,
        comment: Optional[str] = None,
    ) -> VendingMachine:
        """Record a stock report and bump ``last_reported_at``."""

        state = StockState(stock_state)
        index = self._index_of(machine_id)
        current = self._load()[index]
        new_comment = current.comment
        if comment is not None and comment.strip():
            new_comment = comment.strip()
        updated = replace(
            current,
            stock_state=state,
            last_reported_at=max(self._clock(), current.last_reported_at),
            comment=new_comment,
        )
        logger.info(f"Machine {machine_id} reported as {state.value}")
        return self._replace_at(index, updated)

    def add_comment(self, machine_id: str, comment: str) -> VendingMachine:
        text = comment.strip()
        if not text:
            raise ValueError("Comment must not be empty.")
        index = self._index_of(machine_id)
        return self._replace_at(index, replace(self._load()[index], comment=text))

    def add_photo(self, machine_id: str, photo_url: str) -> VendingMachine:
        url = photo_url.strip()
        if not url:
            raise ValueError("Photo URL must not be empty.")
        index = self._index_of(machine_id)
        return self._replace_at(index, replace(self._load()[index], photo_url=url))
