"""Display text for workout items, rendered from their structured fields."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from swimcoach.models import StructureItem

DEFAULT_FLOAT_NOTE = "20s easy float"


def _join(head: str, tail: str) -> str:
    tail = (tail or "").strip()
    return f"{head} {tail}" if tail else head


def format_item_text(item: "StructureItem") -> str:
    """Render the human-readable line for an item.

    - time-based efforts: "4x 4 min effort (target ~200m), 30s easy float between"
    - repeats: "8x100m <description>"
    - plain distances: "300m <description>"
    - notes with no distance: the description as-is
    Cues are appended comma-separated.
    """
    if item.time_based and item.reps and item.per_rep_m:
        rest = item.rest_note or DEFAULT_FLOAT_NOTE
        text = f"{item.reps}x {item.effort_min} min effort (target ~{item.per_rep_m}m), {rest} between"
    elif item.reps and item.per_rep_m:
        text = _join(f"{item.reps}x{item.per_rep_m}m", item.description)
    elif item.distance_m:
        text = _join(f"{item.distance_m}m", item.description)
    else:
        text = (item.description or "").strip()
    if item.cues:
        text = ", ".join([text, *item.cues])
    return text

