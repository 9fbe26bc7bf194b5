"""Tests for readiness assessment."""

from __future__ import annotations

from datetime import date, timedelta

from swimcoach.models import TrainingSession
from swimcoach.services.readiness import assess_readiness, fatigue_keywords_in, latest_session

TODAY = date(2026, 10, 19)


def _session(days_ago: int, **kw) -> TrainingSession:
    data = {"date": TODAY - timedelta(days=days_ago), "distance_m": 1500, "time_min": 35, "effort": "easy"}
    data.update(kw)
    return TrainingSession(**data)


def test_no_sessions_starts_fresh():
    r = assess_readiness([], TODAY)
    assert r.status == "READY"
    assert r.reasons == ["No recent sessions - starting fresh"]


def test_balanced_load():
    r = assess_readiness([_session(5)], TODAY)
    assert r.status == "READY"
    assert r.reasons == ["Training load looks balanced"]


def test_high_rpe_last_session_fatigued():
    r = assess_readiness([_session(2, rpe=8, effort=None)], TODAY)
    assert r.status == "FATIGUED"
    assert r.reasons == ["Last session RPE was 8/10 (high)"]


def test_hard_effort_last_session_fatigued():
    r = assess_readiness([_session(2, effort="hard")], TODAY)
    assert r.status == "FATIGUED"
    assert "Last session effort was hard (high)" in r.reasons


def test_fatigue_keywords_need_rest():
    r = assess_readiness([_session(4, notes="Felt TIRED and a bit sore")], TODAY)
    assert r.status == "NEEDS_REST"
    assert r.reasons == ["Notes mention: tired, sore"]


def test_two_hard_sessions_in_three_days():
    r = assess_readiness([_session(2, rpe=7), _session(0, rpe=7)], TODAY)
    assert r.status == "FATIGUED"
    assert r.reasons == ["2 hard sessions in last 3 days"]


def test_too_many_hard_sessions_in_week():
    sessions = [_session(6, rpe=7), _session(5, rpe=7), _session(4, rpe=7)]
    r = assess_readiness(sessions, TODAY)
    assert r.status == "FATIGUED"
    assert r.reasons == ["3 hard sessions in last 7 days (max recommended: 2)"]


def test_hard_session_yesterday():
    r = assess_readiness([_session(1, rpe=7)], TODAY)
    assert r.status == "FATIGUED"
    assert r.reasons == ["Hard session yesterday"]


def test_escalation_never_downgrades():
    r = assess_readiness([_session(1, effort="hard", notes="my shoulder hurts")], TODAY)
    assert r.status == "NEEDS_REST"
    assert "Notes mention: hurt" in r.reasons
    assert "Hard session yesterday" in r.reasons


def test_latest_date_tie_uses_last_listed():
    sore = _session(1, notes="sore legs")
    fine = _session(1, notes="felt smooth")
    assert latest_session([sore, fine]) is fine
    assert assess_readiness([sore, fine], TODAY).status == "READY"
    assert assess_readiness([fine, sore], TODAY).status == "NEEDS_REST"


def test_latest_session_ignores_input_order():
    newest = _session(1)
    assert latest_session([newest, _session(6), _session(3)]) is newest


def test_keyword_matching_is_substring():
    assert fatigue_keywords_in("Cramping in the last 200") == ["cramp", "cramping"]
    assert fatigue_keywords_in("") == []


def test_three_day_window_excludes_day_three():
    r = assess_readiness([_session(3, rpe=7), _session(2, rpe=7)], TODAY)
    assert r.status == "READY"
    assert r.reasons == ["Training load looks balanced"]


def test_seven_day_window_excludes_day_seven():
    sessions = [_session(7, rpe=7), _session(4, rpe=7), _session(3, rpe=7)]
    r = assess_readiness(sessions, TODAY)
    assert r.status == "READY"
    assert r.reasons == ["Training load looks balanced"]
