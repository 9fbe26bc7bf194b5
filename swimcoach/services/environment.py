"""Convert workout structure between pool and open-water forms.

The conversion is lossy in both directions: pool to open water turns rested
repeats into timed efforts, open water to pool breaks long continuous swims
into segments. Applying one after the other does not restore the input.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Optional, Sequence

from swimcoach.models import Metrics, StructureBlock, StructureItem

OPEN_WATER_ADDONS = (
    "Sight every 6-10 strokes on moderate/hard efforts",
    "Practice 3 buoy turns if markers available",
)
OPEN_WATER_SAFETY_NOTE = (
    "Always swim with a buddy or in supervised areas. Be aware of water temperature and currents."
)
SIGHTING_CUE = "sight every 8-10 strokes"

DEFAULT_PACE_PER_100M = 2.0
LONG_SWIM_M = 400
BREAK_UP_M = 800
SEGMENT_M = 400
SEGMENT_REST_SEC = 15
BROKEN_DESCRIPTION = "steady, 15s rest (broken continuous)"

_SIGHTING_PHRASE = re.compile(r",?\s*sight(?:ing)?\s*(?:every\s*\d+-?\d*\s*strokes)?", re.IGNORECASE)


@dataclass(frozen=True)
class Adaptation:
    adapted_structure: list[StructureBlock]
    open_water_addons: list[str] = field(default_factory=list)
    safety_note: Optional[str] = None


def pace_per_100m(metrics: Metrics) -> float:
    if metrics.avg_pace_min_per_km:
        return metrics.avg_pace_min_per_km / 10
    return DEFAULT_PACE_PER_100M


def effort_minutes(per_rep_m: int, metrics: Metrics) -> int:
    return int(math.floor(per_rep_m / 100 * pace_per_100m(metrics) + 0.5))


def float_rest_note(rest_sec: int) -> str:
    if rest_sec >= 30:
        return f"{int(math.floor(rest_sec / 10 + 0.5)) * 10}s easy float"
    return "20s easy float"


def _is_sighting_cue(cue: str) -> bool:
    return "sight" in cue.lower()


def strip_sighting(text: str) -> str:
    """Remove sighting phrases such as ", sight every 8-10 strokes" from pool text."""
    stripped, count = _SIGHTING_PHRASE.subn("", text or "")
    return " ".join(stripped.split()) if count else text


def _to_open_water(item: StructureItem, metrics: Metrics) -> StructureItem:
    if item.reps and item.per_rep_m and item.rest_sec:
        return item.model_copy(update={
            "time_based": True,
            "effort_min": effort_minutes(item.per_rep_m, metrics),
            "rest_note": float_rest_note(item.rest_sec),
        })
    if (item.distance_m or 0) >= LONG_SWIM_M and not item.reps:
        if any(_is_sighting_cue(c) for c in item.cues):
            return item
        return item.model_copy(update={"cues": [*item.cues, SIGHTING_CUE]})
    return item


def _to_pool(item: StructureItem) -> StructureItem:
    update: dict = {}
    if (item.distance_m or 0) >= BREAK_UP_M and not item.reps:
        segments = math.ceil(item.distance_m / SEGMENT_M)
        per_rep = int(math.floor(item.distance_m / segments / 50 + 0.5)) * 50
        update.update(
            reps=segments,
            per_rep_m=per_rep,
            distance_m=segments * per_rep,
            rest_sec=SEGMENT_REST_SEC,
            description=BROKEN_DESCRIPTION,
        )
    if item.time_based:
        update.update(time_based=False, effort_min=None, rest_note=None)
    description = update.get("description", item.description)
    stripped = strip_sighting(description)
    if stripped != description:
        update["description"] = stripped
    cues = [c for c in item.cues if not _is_sighting_cue(c)]
    if cues != item.cues:
        update["cues"] = cues
    return item.model_copy(update=update) if update else item


def adapt_pool_to_open_water(structure: Sequence[StructureBlock], metrics: Metrics) -> Adaptation:
    adapted = [
        StructureBlock(label=block.label, items=[_to_open_water(item, metrics) for item in block.items])
        for block in structure
    ]
    return Adaptation(
        adapted_structure=adapted,
        open_water_addons=list(OPEN_WATER_ADDONS),
        safety_note=OPEN_WATER_SAFETY_NOTE,
    )


def adapt_open_water_to_pool(structure: Sequence[StructureBlock]) -> Adaptation:
    """Break long continuous swims into rested segments and drop sighting cues.

    The session-level safety note is left to the caller.
    """
    adapted = [
        StructureBlock(label=block.label, items=[_to_pool(item) for item in block.items])
        for block in structure
    ]
    return Adaptation(adapted_structure=adapted)
