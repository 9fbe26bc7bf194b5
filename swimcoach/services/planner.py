"""Deterministic session planner.

Composes phase, readiness, metrics, template selection, scaling, environment
adaptation and validation into a single SessionPlan. Adapt and scale
operations branch from an existing plan and record the step in its lineage.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional, Sequence

from swimcoach.logging_config import log_plan_event
from swimcoach.models import (
    SWIM_TYPES,
    AthleteProfile,
    Metrics,
    Provenance,
    Readiness,
    Session,
    SessionPlan,
    StructureBlock,
    StructureItem,
    TrainingSession,
    structure_distance,
)
from swimcoach.services.environment import adapt_open_water_to_pool, adapt_pool_to_open_water, effort_minutes
from swimcoach.services.metrics import calculate_recent_metrics
from swimcoach.services.phase import days_to_event, phase_for_days
from swimcoach.services.plan_validator import validate_plan
from swimcoach.services.readiness import assess_readiness
from swimcoach.services.scaler import round_half_up, round_to_nearest, scale_template
from swimcoach.services.template_catalog import TemplateCatalog, default_catalog
from swimcoach.services.template_selector import select_template

__all__ = [
    "adapt_plan_to_type",
    "calculate_recent_metrics",
    "generate_rest_plan",
    "generate_session_plan",
    "recent_sessions",
    "scale_plan_to_distance",
    "validate_plan",
]

logger = logging.getLogger(__name__)

READINESS_WINDOW_DAYS = 14
MIN_SCALED_PER_REP_M = 50
REST_NOTE = "Rest day recommended based on training load"


def recent_sessions(sessions: Sequence[TrainingSession], today: date, days: int = READINESS_WINDOW_DAYS) -> list[TrainingSession]:
    cutoff = today - timedelta(days=days)
    return [s for s in sessions if s.date > cutoff]


def default_preferred_type(profile: AthleteProfile) -> str:
    return "open_water" if profile.access.open_water else "pool"


def generate_rest_plan(
    phase: str,
    readiness: Readiness,
    days_to_event: Optional[int],
    catalog: Optional[TemplateCatalog] = None,
) -> SessionPlan:
    template = (catalog or default_catalog()).rest_template
    return SessionPlan(
        session=Session(type="rest", total_distance_m=0, estimated_duration_min=0, intensity="rest"),
        derived_from_template=Provenance(
            source=template.source,
            template_id=template.id,
            template_name=template.name,
            scaling_notes=REST_NOTE,
        ),
        phase=phase,
        days_to_event=days_to_event,
        readiness=readiness,
    )


def generate_session_plan(
    profile: AthleteProfile,
    sessions: Sequence[TrainingSession],
    preferred_type: Optional[str] = None,
    *,
    today: Optional[date] = None,
    catalog: Optional[TemplateCatalog] = None,
) -> SessionPlan:
    """Build today's plan from the profile and the full session history."""
    today = today or date.today()
    catalog = catalog or default_catalog()

    days = days_to_event(profile.event_date, today)
    phase = phase_for_days(days)
    readiness = assess_readiness(recent_sessions(sessions, today), today)
    metrics = calculate_recent_metrics(sessions, today)
    preferred = preferred_type or default_preferred_type(profile)
    logger.debug(
        "plan_inputs",
        extra={"ctx_phase": phase, "ctx_days_to_event": days, "ctx_readiness": readiness.status},
    )

    template = select_template(catalog, phase, readiness, profile, metrics, preferred, today)
    if template is None:
        logger.debug("no_template_candidates", extra={"ctx_phase": phase})
        return generate_rest_plan(phase, readiness, days, catalog)

    scaled = scale_template(template, profile, metrics)
    structure = scaled.scaled_structure
    addons: list[str] = []
    safety_note = None
    if preferred == "open_water" and not template.is_rest:
        adaptation = adapt_pool_to_open_water(structure, metrics)
        structure = adaptation.adapted_structure
        addons = adaptation.open_water_addons
        safety_note = adaptation.safety_note

    plan = SessionPlan(
        session=Session(
            type="rest" if template.is_rest else preferred,
            total_distance_m=scaled.total_distance_m,
            estimated_duration_min=scaled.estimated_duration_min,
            intensity=template.intensity,
            structure=structure,
            open_water_addons=addons,
            safety_note=safety_note,
        ),
        derived_from_template=Provenance(
            source=template.source,
            template_id=template.id,
            template_name=template.name,
            scaling_notes=scaled.scaling_notes,
        ),
        phase=phase,
        days_to_event=days,
        readiness=readiness,
    )
    log_plan_event(logger, "plan_generated", plan, scaling_notes=scaled.scaling_notes)
    return plan.model_copy(update={"validation": validate_plan(plan, profile, metrics)})


def adapt_plan_to_type(
    plan: SessionPlan,
    new_type: str,
    metrics: Metrics,
    *,
    profile: Optional[AthleteProfile] = None,
    catalog: Optional[TemplateCatalog] = None,
) -> SessionPlan:
    """Re-derive the plan for another water type from its original template.

    The template is re-scaled fresh so repeated adaptation never compounds.
    Rest plans and plans whose template is unknown come back unchanged.
    """
    if new_type not in SWIM_TYPES:
        raise ValueError(f"new_type must be one of {sorted(SWIM_TYPES)}")
    if plan.is_rest:
        return plan

    template = (catalog or default_catalog()).get(plan.derived_from_template.template_id)
    if template is None:
        logger.debug("adapt_unknown_template", extra={"ctx_template_id": plan.derived_from_template.template_id})
        return plan

    profile = profile or AthleteProfile()
    scaled = scale_template(template, profile, metrics)
    if new_type == "open_water":
        adaptation = adapt_pool_to_open_water(scaled.scaled_structure, metrics)
    else:
        adaptation = adapt_open_water_to_pool(scaled.scaled_structure)

    provenance = plan.derived_from_template
    adapted = plan.model_copy(update={
        "session": plan.session.model_copy(update={
            "type": new_type,
            "total_distance_m": scaled.total_distance_m,
            "estimated_duration_min": scaled.estimated_duration_min,
            "structure": adaptation.adapted_structure,
            "open_water_addons": adaptation.open_water_addons,
            "safety_note": adaptation.safety_note,
        }),
        "derived_from_template": provenance.model_copy(update={
            "scaling_notes": f"{provenance.scaling_notes} (adapted to {new_type.replace('_', ' ')})",
        }),
        "lineage": plan.lineage.branch(f"adapt:{new_type}"),
    })
    log_plan_event(logger, "plan_adapted", adapted)
    return adapted.model_copy(update={"validation": validate_plan(adapted, profile, metrics)})


def _scale_item_to_ratio(item: StructureItem, ratio: float, metrics: Metrics) -> StructureItem:
    if item.reps and item.per_rep_m:
        per_rep = round_to_nearest(item.per_rep_m * ratio, 25)
        reps = item.reps
        if per_rep < MIN_SCALED_PER_REP_M:
            reps = max(round_half_up(item.reps * ratio), 2)
            per_rep = item.per_rep_m
        update = {"reps": reps, "per_rep_m": per_rep, "distance_m": reps * per_rep}
        if item.time_based:
            update["effort_min"] = effort_minutes(per_rep, metrics)
        return item.model_copy(update=update)
    if item.distance_m:
        return item.model_copy(update={"distance_m": round_to_nearest(item.distance_m * ratio, 50)})
    return item


def scale_plan_to_distance(
    plan: SessionPlan,
    new_distance_m: int,
    metrics: Metrics,
    *,
    profile: Optional[AthleteProfile] = None,
) -> SessionPlan:
    """Resize the plan's current structure (including any adaptation) by ratio.

    Duration follows the requested ratio; the total is re-summed from items.
    Rest plans, plans without a distance and non-positive targets come back
    unchanged.
    """
    original = plan.session.total_distance_m
    if plan.is_rest or not original or new_distance_m <= 0:
        return plan

    ratio = new_distance_m / original
    structure = [
        StructureBlock(label=block.label, items=[_scale_item_to_ratio(item, ratio, metrics) for item in block.items])
        for block in plan.session.structure
    ]
    total = structure_distance(structure)

    provenance = plan.derived_from_template
    scaled = plan.model_copy(update={
        "session": plan.session.model_copy(update={
            "structure": structure,
            "total_distance_m": total,
            "estimated_duration_min": round_half_up(plan.session.estimated_duration_min * ratio),
        }),
        "derived_from_template": provenance.model_copy(update={
            "scaling_notes": f"{provenance.scaling_notes} (scaled to {total}m)",
        }),
        "lineage": plan.lineage.branch(f"scale:{new_distance_m}m"),
    })
    log_plan_event(logger, "plan_rescaled", scaled, requested_m=new_distance_m)
    return scaled.model_copy(update={"validation": validate_plan(scaled, profile or AthleteProfile(), metrics)})