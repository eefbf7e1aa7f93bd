"""Nearest-K and radius queries over the machine repository."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional

from .geospatial import distance_km
from .location import LocationResolver
from ..config import settings
from ..data.machine_repository import MachineRepository
from ..models.domain import Coordinate, VendingMachine


def rank_by_distance(machines: Iterable[VendingMachine], reference: Coordinate) -> list[VendingMachine]:
    """Return copies annotated with ``distance_km``, closest first.

    The sort is stable, so equidistant machines keep their input order.
    """

    annotated = [replace(machine, distance_km=distance_km(reference, machine.coordinate)) for machine in machines]
    annotated.sort(key=lambda machine: machine.distance_km)
    return annotated


def filter_within_radius(
    machines: Iterable[VendingMachine],
    reference: Coordinate,
    radius_km: float,
) -> list[VendingMachine]:
    """Ranked machines whose distance is at most ``radius_km`` (inclusive)."""

    if radius_km < 0:
        return []
    return [machine for machine in rank_by_distance(machines, reference) if machine.distance_km <= radius_km]


class RankingEngine:
    """Read-only queries combining the repository with the user's location."""

    def __init__(self, repository: MachineRepository, resolver: LocationResolver) -> None:
        self.repository = repository
        self.resolver = resolver

    async def nearest(self, k: Optional[int] = None) -> list[VendingMachine]:
        limit = settings.default_nearest_limit if k is None else k
        if limit < 0:
            raise ValueError(f"k must be non-negative, got {limit}")
        if limit == 0:
            return []
        reference = await self.resolver.resolve()
        return rank_by_distance(self.repository.list(), reference)[:limit]

    async def within_radius(
        self,
        radius_km: Optional[float] = None,
        reference: Optional[Coordinate] = None,
    ) -> list[VendingMachine]:
        radius = settings.default_radius_km if radius_km is None else radius_km
        if reference is None:
            reference = await self.resolver.resolve()
        return filter_within_radius(self.repository.list(), reference, radius)
