"""Pydantic data model for the session planner.

Everything a planning call consumes or produces is plain data so that a
SessionPlan survives a JSON round trip unchanged (it is posted to the polish
collaborator and persisted by the host).
"""

from __future__ import annotations

from datetime import date as dt_date
from datetime import datetime as dt_datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

from swimcoach.services.formatting import format_item_text

GOALS = {"finish_comfortably", "target_time", "personal_best", "just_finish"}
TONES = {"neutral", "calm", "tough_love"}
SWIM_TYPES = {"pool", "open_water"}
SESSION_TYPES = SWIM_TYPES | {"rest"}
EFFORT_LEVELS = {"easy", "moderate", "hard"}
INTENSITIES = EFFORT_LEVELS | {"rest"}
PHASES = ("BUILD", "SHARPEN", "TAPER")
READINESS_LEVELS = ("READY", "FATIGUED", "NEEDS_REST")
WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

DEFAULT_WEEKLY_VOLUME_M = 5000
DEFAULT_SESSIONS_PER_WEEK = 3

# numeric view of the effort buckets, on the 1-10 RPE scale
EFFORT_SCORES = {"easy": 3, "moderate": 5, "hard": 8}
HARD_EFFORT_SCORE = 7


def effort_from_rpe(rpe: int) -> str:
    """Map a legacy 1-10 RPE onto the three effort buckets."""
    if rpe <= 3:
        return "easy"
    if rpe <= 6:
        return "moderate"
    return "hard"


# -- Athlete inputs --


class SwimRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    distance_m: int = Field(ge=0)
    time_min: float = Field(ge=0)


class WaterAccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    pool: bool = True
    open_water: bool = False


class AthleteProfile(BaseModel):
    """Immutable athlete profile for one planning call.

    Missing numbers are tolerated: the planner falls back to
    DEFAULT_WEEKLY_VOLUME_M and DEFAULT_SESSIONS_PER_WEEK.
    """

    model_config = ConfigDict(frozen=True)

    goal: str = "finish_comfortably"
    target_time: Optional[str] = None
    event_date: Optional[dt_date] = None
    weekly_volume_estimate_m: Optional[int] = Field(default=None, ge=0)
    longest_recent_swim: Optional[SwimRecord] = None
    access: WaterAccess = Field(default_factory=WaterAccess)
    tone: str = "neutral"
    available_days: Optional[list[str]] = None
    sessions_per_week: Optional[int] = Field(default=None, ge=1, le=14)

    @field_validator("goal")
    @classmethod
    def valid_goal(cls, v):
        if v not in GOALS:
            raise ValueError(f"goal must be one of {sorted(GOALS)}")
        return v

    @field_validator("tone")
    @classmethod
    def valid_tone(cls, v):
        if v not in TONES:
            raise ValueError(f"tone must be one of {sorted(TONES)}")
        return v

    @field_validator("available_days")
    @classmethod
    def valid_days(cls, v):
        if v is None:
            return v
        days: list[str] = []
        for day in v:
            key = str(day or "").strip()[:3].title()
            if key not in WEEKDAYS:
                raise ValueError(f"unknown weekday: {day!r}")
            if key not in days:
                days.append(key)
        return days

    @model_validator(mode="after")
    def _availability_is_exclusive(self):
        if self.available_days is not None and self.sessions_per_week is not None:
            raise ValueError("available_days and sessions_per_week are mutually exclusive")
        return self

    @property
    def weekly_target_m(self) -> int:
        return self.weekly_volume_estimate_m or DEFAULT_WEEKLY_VOLUME_M

    @property
    def sessions_per_week_target(self) -> int:
        if self.available_days:
            return len(self.available_days)
        return self.sessions_per_week or DEFAULT_SESSIONS_PER_WEEK


class TrainingSession(BaseModel):
    """A logged swim. Several sessions may share a date."""

    model_config = ConfigDict(frozen=True)

    date: dt_date
    type: str = "pool"
    distance_m: int = Field(default=0, ge=0)
    time_min: float = Field(default=0, ge=0)
    effort: str = "moderate"
    rpe: Optional[int] = Field(default=None, ge=1, le=10)
    notes: str = ""
    conditions: str = ""

    @model_validator(mode="before")
    @classmethod
    def _legacy_numeric_effort(cls, data):
        if not isinstance(data, dict):
            return data
        effort = data.get("effort")
        if isinstance(effort, (int, float)) and not isinstance(effort, bool):
            rpe = max(1, min(10, int(round(effort))))
            data = {**data, "effort": effort_from_rpe(rpe), "rpe": data.get("rpe") or rpe}
        elif effort is None and data.get("rpe") is not None:
            data = {**data, "effort": effort_from_rpe(int(data["rpe"]))}
        return data

    @field_validator("type")
    @classmethod
    def valid_type(cls, v):
        if v not in SWIM_TYPES:
            raise ValueError(f"type must be one of {sorted(SWIM_TYPES)}")
        return v

    @field_validator("effort")
    @classmethod
    def valid_effort(cls, v):
        if v not in EFFORT_LEVELS:
            raise ValueError(f"effort must be one of {sorted(EFFORT_LEVELS)}")
        return v

    @property
    def effort_score(self) -> int:
        if self.rpe is not None:
            return self.rpe
        return EFFORT_SCORES[self.effort]

    @property
    def is_hard(self) -> bool:
        return self.effort_score >= HARD_EFFORT_SCORE


# -- Workout structure --


class StructureItem(BaseModel):
    """One line of a workout.

    The numeric fields are the source of truth; `text` is always rendered
    from them so repeated scale/adapt passes never compound formatting drift.
    """

    model_config = ConfigDict(frozen=True)

    description: str = ""
    distance_m: Optional[int] = None
    reps: Optional[int] = None
    per_rep_m: Optional[int] = None
    rest_sec: Optional[int] = None
    time_based: bool = False
    effort_min: Optional[int] = None
    rest_note: Optional[str] = None
    cues: list[str] = Field(default_factory=list)

    @computed_field
    @property
    def text(self) -> str:
        return format_item_text(self)

    @property
    def is_repeat(self) -> bool:
        return bool(self.reps and self.per_rep_m)


class StructureBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    items: list[StructureItem] = Field(default_factory=list)


def structure_distance(structure: list[StructureBlock]) -> int:
    """Sum of item distances across all blocks."""
    return sum(item.distance_m or 0 for block in structure for item in block.items)


# -- Planner outputs --


class Metrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_recent_distance_m: int = 0
    avg_weekly_volume_m: float = 0
    avg_effort: float = 0
    avg_pace_min_per_km: Optional[float] = None
    session_count_7d: int = 0
    session_count_14d: int = 0


class Readiness(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: str = "READY"
    reasons: list[str] = Field(default_factory=list)


class Validation(BaseModel):
    model_config = ConfigDict(frozen=True)

    distance_check_passed: bool = True
    guardrails_check_passed: bool = True
    warnings: list[str] = Field(default_factory=list)


class Session(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    total_distance_m: Optional[int] = None
    estimated_duration_min: int = 0
    intensity: str = "rest"
    structure: list[StructureBlock] = Field(default_factory=list)
    open_water_addons: list[str] = Field(default_factory=list)
    safety_note: Optional[str] = None


class Provenance(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str
    template_id: str
    template_name: str
    scaling_notes: str = ""


class Lineage(BaseModel):
    """Generation 0 is the orchestrator output; each adapt/scale adds one."""

    model_config = ConfigDict(frozen=True)

    generation: int = 0
    operations: list[str] = Field(default_factory=lambda: ["generate"])

    def branch(self, operation: str) -> "Lineage":
        return Lineage(generation=self.generation + 1, operations=[*self.operations, operation])


class SessionPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    session: Session
    derived_from_template: Provenance
    phase: str
    days_to_event: Optional[int] = None
    readiness: Readiness
    validation: Validation = Field(default_factory=Validation)
    lineage: Lineage = Field(default_factory=Lineage)

    @property
    def is_rest(self) -> bool:
        return self.session.type == "rest"


# -- Polish / recommendation --


class Polish(BaseModel):
    why_this: str
    technique_focus: list[str] = Field(default_factory=list)
    event_prep_tip: Optional[str] = None
    flags: list[str] = Field(default_factory=list)
    is_fallback: bool = False

    @field_validator("technique_focus")
    @classmethod
    def _cap_cues(cls, v):
        return list(v)[:3]

    @field_validator("flags")
    @classmethod
    def _cap_flags(cls, v):
        return list(v)[:4]


class Recommendation(BaseModel):
    session_plan: SessionPlan
    polish: Polish
    generated_at: dt_datetime
    adapted_from: Optional[str] = None
    scaled_to: Optional[int] = None
