"""Rule-based readiness assessment from recent training.

Rules are independent and escalate-only: once a rule raises the status to
FATIGUED or NEEDS_REST, later rules may raise it further but never lower it.
Every rule that fires contributes a human-readable reason.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional, Sequence

from swimcoach.models import READINESS_LEVELS, Readiness, TrainingSession

HIGH_EFFORT_SCORE = 8
MAX_HARD_SESSIONS_7D = 2

FATIGUE_KEYWORDS = (
    "tired", "fatigue", "fatigued", "exhausted",
    "sore", "pain", "painful", "hurt", "injury", "injured",
    "sick", "illness", "ill", "unwell",
    "struggled", "heavy", "sluggish", "weak", "drained", "burned out",
    "stiff", "ache", "aching", "cramp", "cramping",
)


def _escalate(current: str, candidate: str) -> str:
    return max(current, candidate, key=READINESS_LEVELS.index)


def latest_session(sessions: Sequence[TrainingSession]) -> Optional[TrainingSession]:
    """Most recent session; among several on the latest date, the last one listed."""
    latest: Optional[TrainingSession] = None
    for session in sessions:
        if latest is None or session.date >= latest.date:
            latest = session
    return latest


def fatigue_keywords_in(notes: str) -> list[str]:
    lowered = (notes or "").lower()
    return [kw for kw in FATIGUE_KEYWORDS if kw in lowered]


def _hard_since(sessions: Sequence[TrainingSession], cutoff: date) -> int:
    return sum(1 for s in sessions if s.date > cutoff and s.is_hard)


def assess_readiness(sessions: Sequence[TrainingSession], today: Optional[date] = None) -> Readiness:
    """Classify READY / FATIGUED / NEEDS_REST with the reasons that fired."""
    if not sessions:
        return Readiness(status="READY", reasons=["No recent sessions - starting fresh"])

    today = today or date.today()
    status = "READY"
    reasons: list[str] = []

    last = latest_session(sessions)
    if last.effort_score >= HIGH_EFFORT_SCORE:
        status = _escalate(status, "FATIGUED")
        if last.rpe is not None:
            reasons.append(f"Last session RPE was {last.rpe}/10 (high)")
        else:
            reasons.append(f"Last session effort was {last.effort} (high)")

    matches = fatigue_keywords_in(last.notes)
    if matches:
        status = _escalate(status, "NEEDS_REST")
        reasons.append(f"Notes mention: {', '.join(matches)}")

    hard_3d = _hard_since(sessions, today - timedelta(days=3))
    if hard_3d >= 2:
        status = _escalate(status, "FATIGUED")
        reasons.append(f"{hard_3d} hard sessions in last 3 days")

    hard_7d = _hard_since(sessions, today - timedelta(days=7))
    if hard_7d > MAX_HARD_SESSIONS_7D:
        status = _escalate(status, "FATIGUED")
        reasons.append(f"{hard_7d} hard sessions in last 7 days (max recommended: {MAX_HARD_SESSIONS_7D})")

    yesterday = today - timedelta(days=1)
    if any(s.date == yesterday and s.is_hard for s in sessions):
        status = _escalate(status, "FATIGUED")
        reasons.append("Hard session yesterday")

    if not reasons:
        reasons.append("Training load looks balanced")

    return Readiness(status=status, reasons=reasons)
