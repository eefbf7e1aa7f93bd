"""Display helpers for report times and distances."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def _plural(count: int, singular: str, plural: str) -> str:
    return f"{count} {singular if count == 1 else plural} geleden"


def format_relative_time(moment: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Dutch label such as ``"5 minuten geleden"`` for a report time."""

    if moment is None:
        return "Onbekend"
    current = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)

    seconds = int((current - moment).total_seconds())
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if seconds < 60:
        return "zojuist"
    if minutes < 60:
        return _plural(minutes, "minuut", "minuten")
    if hours < 24:
        return _plural(hours, "uur", "uren")
    if days < 30:
        return _plural(days, "dag", "dagen")
    return moment.strftime("%d-%m-%Y")


def format_distance(distance_km: float) -> str:
    metres = round(distance_km * 1000)
    if metres < 1000:
        return f"{metres} m"
    return f"{distance_km:.1f} km"
