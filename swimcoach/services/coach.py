"""Coaching recommendations: a deterministic plan plus polish."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Optional, Sequence

from swimcoach.models import AthleteProfile, Recommendation, SessionPlan, TrainingSession
from swimcoach.services.planner import (
    adapt_plan_to_type,
    calculate_recent_metrics,
    default_preferred_type,
    generate_session_plan,
    recent_sessions,
    scale_plan_to_distance,
)
from swimcoach.services.polish import PolishClient
from swimcoach.services.template_catalog import TemplateCatalog, default_catalog


def _now() -> datetime:
    return datetime.now(timezone.utc)


class CoachService:
    def __init__(self, polish_client: PolishClient, catalog: Optional[TemplateCatalog] = None):
        self.polish_client = polish_client
        self.catalog = catalog or default_catalog()

    def get_recommendation(
        self,
        profile: AthleteProfile,
        sessions: Sequence[TrainingSession],
        today: Optional[date] = None,
    ) -> Recommendation:
        today = today or date.today()
        history = [s for s in sessions if s.date <= today]
        recent = recent_sessions(history, today)
        plan = generate_session_plan(
            profile,
            history,
            default_preferred_type(profile),
            today=today,
            catalog=self.catalog,
        )
        polish = self.polish_client.request_polish(plan, profile, recent)
        return Recommendation(session_plan=plan, polish=polish, generated_at=_now())

    def adapt_recommendation(
        self,
        recommendation: Recommendation,
        new_type: str,
        sessions: Sequence[TrainingSession],
        profile: Optional[AthleteProfile] = None,
        today: Optional[date] = None,
    ) -> Recommendation:
        today = today or date.today()
        profile = profile or AthleteProfile()
        metrics = calculate_recent_metrics(sessions, today)
        plan = adapt_plan_to_type(
            recommendation.session_plan, new_type, metrics, profile=profile, catalog=self.catalog
        )
        polish = self.polish_client.request_polish(plan, profile, recent_sessions(sessions, today))
        return Recommendation(
            session_plan=plan,
            polish=polish,
            generated_at=_now(),
            adapted_from=recommendation.session_plan.derived_from_template.template_id,
        )

    def scale_recommendation(
        self,
        recommendation: Recommendation,
        new_distance_m: int,
        profile: AthleteProfile,
        sessions: Sequence[TrainingSession],
        today: Optional[date] = None,
    ) -> Recommendation:
        today = today or date.today()
        metrics = calculate_recent_metrics(sessions, today)
        plan = scale_plan_to_distance(recommendation.session_plan, new_distance_m, metrics, profile=profile)
        polish = self.polish_client.request_polish(plan, profile, recent_sessions(sessions, today))
        return Recommendation(
            session_plan=plan,
            polish=polish,
            generated_at=_now(),
            scaled_to=new_distance_m,
        )


def format_for_storage(recommendation: Recommendation) -> dict[str, Any]:
    """Flatten to the legacy `tomorrow_session` shape, keeping the structured plan."""
    plan: SessionPlan = recommendation.session_plan
    polish = recommendation.polish
    session = plan.session
    return {
        "tomorrow_session": {
            "type": session.type,
            "duration_min": session.estimated_duration_min,
            "distance_m": session.total_distance_m,
            "structure": [item.text for block in session.structure for item in block.items],
            "intensity": session.intensity,
            "technique_focus": list(polish.technique_focus),
        },
        "why_this": polish.why_this,
        "flags": list(polish.flags),
        "event_prep_tip": polish.event_prep_tip or "",
        "template_info": plan.derived_from_template.model_dump(mode="json"),
        "validation": plan.validation.model_dump(mode="json"),
        "phase": plan.phase,
        "days_to_event": plan.days_to_event,
        "readiness": plan.readiness.model_dump(mode="json"),
        "structured_session": plan.model_dump(mode="json"),
    }
