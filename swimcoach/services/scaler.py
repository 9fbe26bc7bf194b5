"""Fit a template to the athlete's volume and safe-progression limits."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from swimcoach.models import AthleteProfile, Metrics, StructureBlock, StructureItem, structure_distance
from swimcoach.services.metrics import safe_progression_ceiling
from swimcoach.services.template_catalog import WorkoutTemplate

logger = logging.getLogger(__name__)

# Weekly equivalent of a template assumes this many sessions regardless of
# the athlete's declared availability.
ASSUMED_SESSIONS_PER_WEEK = 3
WEEKLY_HEADROOM = 1.2
VOLUME_FIT_MARGIN = 0.9
MIN_SCALE = 0.7
REP_SHRINK_LIMIT = 0.75
DURATION_REST_BUFFER = 1.1


@dataclass(frozen=True)
class ScaledTemplate:
    template: WorkoutTemplate
    scaled_structure: list[StructureBlock]
    total_distance_m: int
    estimated_duration_min: int
    scaling_notes: str


def round_to_nearest(value: float, increment: int) -> int:
    """Round half up to the nearest multiple of `increment`."""
    return int(math.floor(value / increment + 0.5)) * increment


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def scale_factor_for(template: WorkoutTemplate, profile: AthleteProfile, metrics: Metrics) -> tuple[float, list[str]]:
    notes: list[str] = []
    factor = 1.0

    weekly_target = profile.weekly_target_m
    weekly_equivalent = template.base_distance_m * ASSUMED_SESSIONS_PER_WEEK
    if weekly_equivalent > weekly_target * WEEKLY_HEADROOM:
        factor = weekly_target / weekly_equivalent * VOLUME_FIT_MARGIN
        notes.append("Scaled down to match weekly volume target")

    ceiling = safe_progression_ceiling(metrics)
    if template.base_distance_m * factor > ceiling:
        factor = ceiling / template.base_distance_m
        notes.append(f"Capped to avoid volume jump (max: {round_half_up(ceiling)}m)")

    if factor < MIN_SCALE:
        factor = MIN_SCALE
        notes.append("Minimum scale applied (70%)")

    return factor, notes


def scale_item(item: StructureItem, factor: float) -> StructureItem:
    """Scale one item. Repeats keep their count unless the per-rep distance
    would shrink by more than a quarter, in which case the count shrinks instead.
    """
    if item.reps and item.per_rep_m:
        per_rep = round_to_nearest(item.per_rep_m * factor, 25)
        if per_rep < item.per_rep_m * REP_SHRINK_LIMIT:
            reps = max(round_half_up(item.reps * factor), 2)
            per_rep = item.per_rep_m
        else:
            reps = item.reps
        return item.model_copy(update={"reps": reps, "per_rep_m": per_rep, "distance_m": reps * per_rep})
    if item.distance_m:
        return item.model_copy(update={"distance_m": round_to_nearest(item.distance_m * factor, 50)})
    return item


def scale_structure(structure, factor: float) -> list[StructureBlock]:
    return [
        StructureBlock(label=block.label, items=[scale_item(item, factor) for item in block.items])
        for block in structure
    ]


def scale_template(template: WorkoutTemplate, profile: AthleteProfile, metrics: Metrics) -> ScaledTemplate:
    if template.is_rest:
        return ScaledTemplate(
            template=template,
            scaled_structure=[],
            total_distance_m=0,
            estimated_duration_min=0,
            scaling_notes="Rest day - no scaling needed",
        )

    factor, notes = scale_factor_for(template, profile, metrics)
    structure = scale_structure(template.structure, factor)
    total = structure_distance(structure)

    if metrics.avg_pace_min_per_km:
        duration = round_half_up(total / 1000 * metrics.avg_pace_min_per_km * DURATION_REST_BUFFER)
    else:
        duration = round_half_up(total / template.base_distance_m * template.base_duration_min_est)

    scaling_notes = "; ".join(notes) if notes else "No scaling needed - template fits well"
    logger.debug(
        "template_scaled",
        extra={"ctx_template_id": template.id, "ctx_factor": round(factor, 3), "ctx_total_m": total},
    )
    return ScaledTemplate(
        template=template,
        scaled_structure=structure,
        total_distance_m=total,
        estimated_duration_min=duration,
        scaling_notes=scaling_notes,
    )
