from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from api.schemas import (
    AdaptPlanRequest,
    HealthOut,
    MetricsRequest,
    PlanRequest,
    RecommendationRequest,
    ScalePlanRequest,
    ValidatePlanRequest,
)
from swimcoach.config import get_settings
from swimcoach.logging_config import log_plan_event
from swimcoach.models import Metrics, Recommendation, SessionPlan, Validation
from swimcoach.services.coach import CoachService
from swimcoach.services.planner import (
    adapt_plan_to_type,
    calculate_recent_metrics,
    generate_session_plan,
    scale_plan_to_distance,
    validate_plan,
)
from swimcoach.services.polish import PolishClient
from swimcoach.services.template_catalog import default_catalog

logger = logging.getLogger(__name__)

SERVICE_NAME = "keep-swimming-planner"
SERVICE_VERSION = "1.0.0"

health_router = APIRouter(prefix="/api")
router = APIRouter(prefix="/api/v1")


def get_coach_service() -> CoachService:
    return CoachService(PolishClient(get_settings()), catalog=default_catalog())


@health_router.get("/health", response_model=HealthOut, tags=["health"])
def health():
    return HealthOut(
        status="ok",
        service=SERVICE_NAME,
        version=SERVICE_VERSION,
        polish_mode=PolishClient(get_settings()).mode,
    )


@router.post("/plans", response_model=SessionPlan, tags=["plans"])
def create_plan(body: PlanRequest):
    return generate_session_plan(
        body.profile,
        body.sessions,
        body.preferred_type,
        today=body.today,
        catalog=default_catalog(),
    )


@router.post("/plans/adapt", response_model=SessionPlan, tags=["plans"])
def adapt_plan(body: AdaptPlanRequest):
    metrics = calculate_recent_metrics(body.sessions, body.today)
    return adapt_plan_to_type(
        body.plan,
        body.new_type,
        metrics,
        profile=body.profile,
        catalog=default_catalog(),
    )


@router.post("/plans/scale", response_model=SessionPlan, tags=["plans"])
def scale_plan(body: ScalePlanRequest):
    if body.new_distance_m <= 0:
        raise HTTPException(
            status_code=422,
            detail="new_distance_m must be positive",
        )
    metrics = calculate_recent_metrics(body.sessions, body.today)
    return scale_plan_to_distance(body.plan, body.new_distance_m, metrics, profile=body.profile)


@router.post("/plans/validate", response_model=Validation, tags=["plans"])
def check_plan(body: ValidatePlanRequest):
    metrics = calculate_recent_metrics(body.sessions, body.today)
    return validate_plan(body.plan, body.profile, metrics)


@router.post("/metrics", response_model=Metrics, tags=["metrics"])
def metrics(body: MetricsRequest):
    return calculate_recent_metrics(body.sessions, body.today)


@router.post("/recommendations", response_model=Recommendation, tags=["recommendations"])
def create_recommendation(
    body: RecommendationRequest,
    coach: Annotated[CoachService, Depends(get_coach_service)],
):
    recommendation = coach.get_recommendation(body.profile, body.sessions, today=body.today)
    if recommendation.polish.is_fallback:
        log_plan_event(logger, "recommendation_fallback_polish", recommendation.session_plan, level=logging.INFO)
    return recommendation
