"""Tests for event-countdown phase classification."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from swimcoach.services.phase import days_to_event, determine_phase, phase_for_days

TODAY = date(2026, 10, 19)


def _in(days: int) -> date:
    return TODAY + timedelta(days=days)


def test_phase_boundaries():
    assert determine_phase(_in(3), TODAY) == "TAPER"
    assert determine_phase(_in(4), TODAY) == "SHARPEN"
    assert determine_phase(_in(10), TODAY) == "SHARPEN"
    assert determine_phase(_in(11), TODAY) == "BUILD"


def test_event_day_is_taper():
    assert determine_phase(TODAY, TODAY) == "TAPER"


def test_past_event_is_taper_and_negative():
    assert days_to_event(_in(-5), TODAY) == -5
    assert determine_phase(_in(-5), TODAY) == "TAPER"


def test_days_to_event_ignores_time_of_day():
    assert days_to_event(_in(2), datetime(2026, 10, 19, 23, 59)) == 2


def test_missing_event_date_is_build():
    assert days_to_event(None, TODAY) is None
    assert determine_phase(None, TODAY) == "BUILD"
    assert phase_for_days(None) == "BUILD"


def test_far_event_is_build():
    assert phase_for_days(60) == "BUILD"
