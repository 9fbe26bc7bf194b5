from __future__ import annotations

from datetime import date as dt_date
from typing import Literal, Optional

from pydantic import BaseModel, Field

from swimcoach.models import AthleteProfile, SessionPlan, TrainingSession

SwimType = Literal["pool", "open_water"]


class PlanRequest(BaseModel):
    profile: AthleteProfile = Field(default_factory=AthleteProfile)
    sessions: list[TrainingSession] = Field(default_factory=list)
    preferred_type: Optional[SwimType] = None
    today: Optional[dt_date] = None


class AdaptPlanRequest(BaseModel):
    plan: SessionPlan
    new_type: SwimType
    sessions: list[TrainingSession] = Field(default_factory=list)
    profile: Optional[AthleteProfile] = None
    today: Optional[dt_date] = None


class ScalePlanRequest(BaseModel):
    plan: SessionPlan
    new_distance_m: int
    sessions: list[TrainingSession] = Field(default_factory=list)
    profile: Optional[AthleteProfile] = None
    today: Optional[dt_date] = None


class ValidatePlanRequest(BaseModel):
    plan: SessionPlan
    profile: AthleteProfile = Field(default_factory=AthleteProfile)
    sessions: list[TrainingSession] = Field(default_factory=list)
    today: Optional[dt_date] = None


class MetricsRequest(BaseModel):
    sessions: list[TrainingSession] = Field(default_factory=list)
    today: Optional[dt_date] = None


class RecommendationRequest(BaseModel):
    profile: AthleteProfile = Field(default_factory=AthleteProfile)
    sessions: list[TrainingSession] = Field(default_factory=list)
    today: Optional[dt_date] = None


class HealthOut(BaseModel):
    status: str
    service: str
    version: str
    polish_mode: str
