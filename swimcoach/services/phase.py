"""Event-countdown phase classification."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

TAPER_MAX_DAYS = 3
SHARPEN_MAX_DAYS = 10


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def days_to_event(event_date: Optional[date], today: Optional[date] = None) -> Optional[int]:
    """Whole calendar days from today to the event. Negative once it has passed."""
    if event_date is None:
        return None
    today = _as_date(today or date.today())
    return (_as_date(event_date) - today).days


def phase_for_days(days: Optional[int]) -> str:
    if days is None:
        return "BUILD"
    if days <= TAPER_MAX_DAYS:
        return "TAPER"
    if days <= SHARPEN_MAX_DAYS:
        return "SHARPEN"
    return "BUILD"


def determine_phase(event_date: Optional[date], today: Optional[date] = None) -> str:
    """TAPER within 3 days (or past), SHARPEN within 10, BUILD otherwise."""
    return phase_for_days(days_to_event(event_date, today))
