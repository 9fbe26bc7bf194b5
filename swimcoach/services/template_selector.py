"""Pick one workout template for the day.

Selection narrows the phase's templates by readiness, safe progression and
phase emphasis, then rotates through what is left using a hash of today's
date so consecutive days get different sessions.
"""

from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from swimcoach.models import AthleteProfile, Metrics, Readiness
from swimcoach.services.metrics import MIN_CEILING_M, safe_progression_ceiling
from swimcoach.services.template_catalog import TemplateCatalog, WorkoutTemplate

TAPER_MAX_BASE_M = 1200


def date_variety_index(today: date, count: int) -> int:
    """Sum of the ISO date string's character codes, modulo `count`."""
    return sum(ord(ch) for ch in today.isoformat()) % count


def _narrow(candidates: list[WorkoutTemplate], keep) -> list[WorkoutTemplate]:
    narrowed = [t for t in candidates if keep(t)]
    return narrowed or candidates


def select_by_variety(candidates: Sequence[WorkoutTemplate], today: Optional[date] = None) -> Optional[WorkoutTemplate]:
    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]
    return candidates[date_variety_index(today or date.today(), len(candidates))]


def select_template(
    catalog: TemplateCatalog,
    phase: str,
    readiness: Readiness,
    profile: AthleteProfile,
    metrics: Metrics,
    preferred_type: Optional[str] = None,
    today: Optional[date] = None,
) -> Optional[WorkoutTemplate]:
    """Return the template for today, or None when the phase has no candidates.

    `profile` and `preferred_type` are accepted for callers that route on
    them; template choice itself is type-agnostic (the environment adapter
    handles open water).
    """
    if readiness.status == "NEEDS_REST":
        return catalog.rest_template

    phase_templates = catalog.by_phase(phase)

    if readiness.status == "FATIGUED":
        recovery = [t for t in phase_templates if t.has_tag("recovery") or t.intensity == "easy"]
        return select_by_variety(recovery, today) or catalog.recovery_template

    ceiling = safe_progression_ceiling(metrics)
    candidates = [t for t in phase_templates if 0 < t.base_distance_m <= ceiling]
    if not candidates:
        candidates = [t for t in phase_templates if 0 < t.base_distance_m <= MIN_CEILING_M]

    if phase == "SHARPEN":
        candidates = _narrow(candidates, lambda t: t.has_tag("race_specific"))
    elif phase == "TAPER":
        candidates = _narrow(candidates, lambda t: t.has_tag("taper") or t.base_distance_m <= TAPER_MAX_BASE_M)

    if any("yesterday" in reason.lower() for reason in readiness.reasons):
        candidates = [t for t in candidates if t.intensity != "hard"]

    return select_by_variety(candidates, today)
