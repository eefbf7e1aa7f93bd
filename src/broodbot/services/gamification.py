"""Contribution points, levels, badges and the leaderboard."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Iterable, Optional

POINTS_PER_LEVEL = 100


class Contribution(str, Enum):
    ADD_MACHINE = "add_machine"
    STATUS_UPDATE = "status_update"
    PHOTO = "photo"


CONTRIBUTION_POINTS: dict[Contribution, int] = {
    Contribution.ADD_MACHINE: 50,
    Contribution.STATUS_UPDATE: 10,
    Contribution.PHOTO: 10,
}


@dataclass(frozen=True, slots=True)
class ContributorProfile:
    username: str
    points: int = 0
    contributions: int = 0
    status_updates: int = 0
    full_reports: int = 0
    photos: int = 0
    badges: dict[str, datetime] = field(default_factory=dict)

    @property
    def level(self) -> int:
        return level_for(self.points)


@dataclass(frozen=True, slots=True)
class Badge:
    id: str
    name: str
    description: str
    icon: str
    earned_when: Callable[[ContributorProfile], bool]


BADGES: tuple[Badge, ...] = (
    Badge("first-update", "Eerste Update", "Je eerste status update van een broodautomaat", "trophy",
          lambda p: p.status_updates >= 1),
    Badge("fresh-eyes", "Verse Ogen", "Eerste persoon die een verse voorraad meldt", "star",
          lambda p: p.full_reports >= 1),
    Badge("five-updates", "Vijf Updates", "5 broodautomaten bijgewerkt", "award",
          lambda p: p.status_updates >= 5),
    Badge("ten-updates", "Tien Updates", "10 broodautomaten bijgewerkt", "award",
          lambda p: p.status_updates >= 10),
    Badge("bread-expert", "Broodexpert", "25 broodautomaten bijgewerkt", "trophy",
          lambda p: p.status_updates >= 25),
    Badge("photographer", "Fotograaf", "Eerste foto van een broodautomaat", "star",
          lambda p: p.photos >= 1),
)


def level_for(points: int) -> int:
    return max(points, 0) // POINTS_PER_LEVEL + 1


def level_progress(points: int) -> tuple[int, int]:
    """Points earned inside the current level and the size of a level."""

    return max(points, 0) % POINTS_PER_LEVEL, POINTS_PER_LEVEL


def record(
    profile: ContributorProfile,
    kind: Contribution,
    *,
    reported_full: bool = False,
    at: Optional[datetime] = None,
) -> ContributorProfile:
    """Apply one contribution and stamp any badges it unlocks.

    ``reported_full`` marks a status update that reported a FULL machine.
    """

    moment = at or datetime.now(timezone.utc)
    updated = replace(
        profile,
        points=profile.points + CONTRIBUTION_POINTS[kind],
        contributions=profile.contributions + 1,
        status_updates=profile.status_updates + (1 if kind is Contribution.STATUS_UPDATE else 0),
        full_reports=profile.full_reports + (1 if kind is Contribution.STATUS_UPDATE and reported_full else 0),
        photos=profile.photos + (1 if kind is Contribution.PHOTO else 0),
    )
    badges = dict(profile.badges)
    for badge in BADGES:
        if badge.id not in badges and badge.earned_when(updated):
            badges[badge.id] = moment
    return replace(updated, badges=badges)


@dataclass(frozen=True, slots=True)
class LeaderboardEntry:
    rank: int
    username: str
    points: int
    updates: int


def leaderboard(profiles: Iterable[ContributorProfile], limit: Optional[int] = None) -> list[LeaderboardEntry]:
    """Rank contributors by points, most first.

    Equal points share a rank and the next rank skips accordingly (1, 1, 3).
    Ties keep their input order.
    """

    ordered = sorted(profiles, key=lambda profile: profile.points, reverse=True)
    entries: list[LeaderboardEntry] = []
    for position, profile in enumerate(ordered, start=1):
        rank = entries[-1].rank if entries and entries[-1].points == profile.points else position
        entries.append(LeaderboardEntry(rank, profile.username, profile.points, profile.contributions))
    return entries if limit is None else entries[:limit]
