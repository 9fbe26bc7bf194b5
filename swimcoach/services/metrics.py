"""Aggregate training metrics over the session history."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional, Sequence

from swimcoach.models import Metrics, TrainingSession

NEUTRAL_EFFORT = 5
MIN_CEILING_M = 1400
CEILING_GROWTH = 1.15


def _within(sessions: Sequence[TrainingSession], today: date, days: int) -> list[TrainingSession]:
    # the last N calendar days including today; day -N is outside
    cutoff = today - timedelta(days=days)
    return [s for s in sessions if s.date > cutoff]


def calculate_recent_metrics(sessions: Sequence[TrainingSession], today: Optional[date] = None) -> Metrics:
    """Metrics over the full history.

    max distance is all-time; weekly volume is the 14-day sum halved; effort
    is averaged over 7 days; pace is an unweighted per-session mean.
    """
    if not sessions:
        return Metrics()

    today = today or date.today()
    last_7 = _within(sessions, today, 7)
    last_14 = _within(sessions, today, 14)

    if last_7:
        avg_effort = sum(s.effort_score for s in last_7) / len(last_7)
    else:
        avg_effort = NEUTRAL_EFFORT

    paces = [
        s.time_min / (s.distance_m / 1000)
        for s in sessions
        if s.distance_m > 0 and s.time_min > 0
    ]

    return Metrics(
        max_recent_distance_m=max(s.distance_m for s in sessions),
        avg_weekly_volume_m=sum(s.distance_m for s in last_14) / 2,
        avg_effort=avg_effort,
        avg_pace_min_per_km=sum(paces) / len(paces) if paces else None,
        session_count_7d=len(last_7),
        session_count_14d=len(last_14),
    )


def safe_progression_ceiling(metrics: Metrics) -> float:
    """Volume jump limit: max(1.15 x all-time max distance, 1400 m)."""
    return max(metrics.max_recent_distance_m * CEILING_GROWTH, MIN_CEILING_M)
