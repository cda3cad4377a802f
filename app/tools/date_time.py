"""Helpers for the free-form times users give when planning an outing."""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, Dict

_ISO_MINUTES = "%Y-%m-%dT%H:%M"


def _at(day: datetime, hour: int, minute: int = 0) -> datetime:
    return day.replace(hour=hour, minute=minute, second=0, microsecond=0)


def _this_weekend(now: datetime) -> datetime:
    days_ahead = (5 - now.weekday()) % 7  # Saturday
    return _at(now + timedelta(days=days_ahead), 14)


TIME_SHORTCUTS: Dict[str, Callable[[datetime], datetime]] = {
    "Right Now": lambda now: now.replace(second=0, microsecond=0),
    "Tonight": lambda now: _at(now, 19),
    "Tomorrow Evening": lambda now: _at(now + timedelta(days=1), 18),
    "This Weekend": _this_weekend,
}


def normalize_time_input(value: str, now: datetime | None = None) -> str:
    """Map shortcut labels onto ``YYYY-MM-DDTHH:MM``; other input passes through."""
    cleaned = (value or "").strip()
    now = now or datetime.now()
    for label, resolve in TIME_SHORTCUTS.items():
        if cleaned.lower() == label.lower():
            return resolve(now).strftime(_ISO_MINUTES)
    return cleaned


def parse_specific_datetime(value: str | None, now: datetime | None = None) -> datetime:
    """Resolve an ISO datetime or a bare ``HH:MM`` (today) into a datetime.

    Anything unparseable falls back to ``now``.
    """
    now = now or datetime.now()
    if not value:
        return now
    try:
        if "T" in value:
            return datetime.fromisoformat(value)
        if ":" in value:
            hours, minutes = (int(part) for part in value.split(":")[:2])
            return _at(now, hours, minutes)
    except ValueError:
        return now
    return now


def get_duration_hours(time_window: str | None) -> int:
    if not time_window:
        return 2
    if "1-2" in time_window:
        return 2
    if "3-4" in time_window:
        return 4
    if "5+" in time_window:
        return 5
    if "8+" in time_window:
        return 8
    return 2
