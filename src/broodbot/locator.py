"""Wiring of the repository, location resolver and ranking engine."""

from __future__ import annotations

from dataclasses import dataclass

from .data.machine_repository import MachineRepository
from .persistence.storage import JsonFileStore, KeyValueStore
from .services.location import GeolocationProvider, LocationResolver, build_default_provider
from .services.ranking import RankingEngine


@dataclass(slots=True)
class Locator:
    """One instance per process, passed to whatever presents the results."""

    store: KeyValueStore
    repository: MachineRepository
    resolver: LocationResolver
    ranking: RankingEngine


def create_locator(
    store: KeyValueStore | None = None,
    provider: GeolocationProvider | None = None,
) -> Locator:
    store = store if store is not None else JsonFileStore()
    repository = MachineRepository(store)
    resolver = LocationResolver(store, provider if provider is not None else build_default_provider())
    return Locator(
        store=store,
        repository=repository,
        resolver=resolver,
        ranking=RankingEngine(repository, resolver),
    )
