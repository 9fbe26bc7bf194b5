"""Advisory checks on a composed plan. Never rejects a plan."""

from __future__ import annotations

import logging

from swimcoach.logging_config import plan_context
from swimcoach.models import AthleteProfile, Metrics, SessionPlan, Validation, structure_distance
from swimcoach.services.metrics import safe_progression_ceiling
from swimcoach.services.scaler import round_half_up

logger = logging.getLogger(__name__)

# Heuristic: per-item rounding (50 m plain, 25 m per rep) can legitimately
# accumulate more drift than this on long structures.
DISTANCE_TOLERANCE_M = 50
WEEKLY_HEADROOM = 1.2


def validate_plan(plan: SessionPlan, profile: AthleteProfile, metrics: Metrics) -> Validation:
    if plan.is_rest:
        return Validation()

    warnings: list[str] = []
    distance_ok = True
    guardrails_ok = True
    stated = plan.session.total_distance_m

    if stated is not None:
        summed = structure_distance(plan.session.structure)
        if abs(summed - stated) > DISTANCE_TOLERANCE_M:
            warnings.append(f"Distance mismatch: structure sums to {summed}m, expected {stated}m")
            distance_ok = False

    ceiling = safe_progression_ceiling(metrics)
    if (stated or 0) > ceiling:
        warnings.append(f"Session distance ({stated}m) exceeds safe progression ({round_half_up(ceiling)}m)")
        guardrails_ok = False

    projected_weekly = (stated or 0) * profile.sessions_per_week_target
    if projected_weekly > profile.weekly_target_m * WEEKLY_HEADROOM:
        warnings.append("Projected weekly volume high. Consider reducing if accumulated fatigue.")

    for warning in warnings:
        logger.info("plan_validation_warning", extra=plan_context(plan, warning=warning))

    return Validation(
        distance_check_passed=distance_ok,
        guardrails_check_passed=guardrails_ok,
        warnings=warnings,
    )
