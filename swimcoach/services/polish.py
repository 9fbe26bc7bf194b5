"""Coaching polish: explanatory text layered onto a finished plan.

The polish collaborator is an HTTP service backed by a language model. It
only writes prose (why this session, technique cues, an event tip, flags)
and must never change the structure. When it is disabled, unreachable or
returns something malformed, a deterministic local fallback is used.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import httpx

from swimcoach.config import Settings
from swimcoach.models import AthleteProfile, Polish, Session, SessionPlan, TrainingSession

logger = logging.getLogger(__name__)

MAX_PROMPT_SESSIONS = 5

OPEN_WATER_FLAG = "Always swim with a buddy or in supervised areas"

POLISH_SYSTEM_PROMPT = """You are a supportive swim coach assistant for open-water mile preparation.

RULES:
1. You provide POLISH ONLY: explanatory text for a workout that is already decided
2. Never change distances, reps, sets or structure, and never add exercises
3. Explain why the session fits and give technique cues
4. Be encouraging but realistic, with cautious non-medical language ("consider rest", not "you may be injured")

Return ONLY a JSON object:
{
  "why_this": "max 60 words",
  "technique_focus": ["up to 3 short cues"],
  "event_prep_tip": "one practical tip, or null",
  "flags": ["0-4 cautionary notes"]
}

Tone: neutral is informative, calm is gentle and reassuring, tough_love is direct and performance-focused."""


# -- Deterministic fallback --

_WHY_REST = "Your body needs recovery. Rest today will help you come back stronger for your next session."
_WHY_SHARPEN = (
    "Race-specific work to dial in your pacing and build confidence. "
    "Quality over quantity as you approach event day."
)
_WHY_BUILD = (
    "Building your aerobic base with consistent volume. "
    "This foundation supports everything that comes later."
)

_TECHNIQUE_CUES = {
    "easy": ["Focus on smooth, relaxed strokes", "Breathe naturally, no rushing"],
    "moderate": ["Maintain good catch position", "Steady rhythm throughout", "Sight regularly in open water sets"],
    "hard": ["High elbow catch on hard efforts", "Strong kick from the hips", "Controlled breathing pattern"],
}


def _why_this(plan: SessionPlan) -> str:
    if plan.is_rest:
        return _WHY_REST
    if plan.phase == "TAPER":
        return (
            f"With {plan.days_to_event} days to event, this session maintains fitness while ensuring "
            "you arrive fresh. Reduced volume, preserved intensity."
        )
    if plan.phase == "SHARPEN":
        return _WHY_SHARPEN
    return _WHY_BUILD


def event_prep_tip(days_to_event: Optional[int]) -> str:
    if days_to_event is not None and days_to_event <= 7:
        return "Final week: trust your training, prioritize sleep, stay hydrated."
    if days_to_event is not None and days_to_event <= 14:
        return "Two weeks out: maintain routine, visualize race day success."
    return "Stay consistent, listen to your body, enjoy the process."


def generate_fallback_polish(plan: SessionPlan) -> Polish:
    technique: list[str] = []
    if not plan.is_rest:
        technique = _TECHNIQUE_CUES.get(plan.session.intensity, _TECHNIQUE_CUES["hard"])

    flags: list[str] = []
    if plan.readiness.status != "READY":
        flags.extend(r for r in plan.readiness.reasons if "looks balanced" not in r)
    if plan.session.type == "open_water":
        flags.append(OPEN_WATER_FLAG)

    return Polish(
        why_this=_why_this(plan),
        technique_focus=list(technique),
        event_prep_tip=event_prep_tip(plan.days_to_event),
        flags=flags,
        is_fallback=True,
    )


# -- Prompt rendering --


def format_session_for_prompt(session: Session) -> str:
    if session.type == "rest":
        return "REST DAY - No swimming scheduled"

    lines = [
        f"{session.type.upper()} SESSION",
        f"Duration: {session.estimated_duration_min} minutes",
    ]
    if session.total_distance_m:
        lines.append(f"Total Distance: {session.total_distance_m}m")
    lines.append(f"Intensity: {session.intensity}")
    lines.append("")
    lines.append("STRUCTURE (DO NOT MODIFY):")
    for block in session.structure:
        lines.append("")
        lines.append(f"{block.label}:")
        for item in block.items:
            suffix = f" ({item.distance_m}m)" if item.distance_m else ""
            lines.append(f"  - {item.text}{suffix}")
    if session.open_water_addons:
        lines.append("")
        lines.append("OPEN WATER ADDITIONS:")
        lines.extend(f"  - {addon}" for addon in session.open_water_addons)
    return "\n".join(lines) + "\n"


def _session_line(s: TrainingSession) -> str:
    effort = f"RPE {s.rpe}" if s.rpe is not None else f"effort {s.effort}"
    line = f"- {s.date.isoformat()}: {s.type}, {s.distance_m}m, {s.time_min:g}min, {effort}"
    if s.notes:
        line += f' - "{s.notes}"'
    return line


def build_polish_prompt(
    plan: SessionPlan,
    profile: AthleteProfile,
    recent_sessions: Sequence[TrainingSession],
) -> str:
    """User message for a model asked to polish `plan`."""
    readiness = plan.readiness
    provenance = plan.derived_from_template
    goal = profile.goal + (f" (target: {profile.target_time})" if profile.target_time else "")
    readiness_line = readiness.status
    if readiness.reasons:
        readiness_line += f" ({'; '.join(readiness.reasons)})"

    lines = [
        "Please provide polish for this pre-determined workout session.",
        "",
        "ATHLETE CONTEXT:",
        f"- Days to event: {plan.days_to_event if plan.days_to_event is not None else 'no event set'}",
        f"- Training phase: {plan.phase}",
        f"- Goal: {goal}",
        f"- Preferred tone: {profile.tone}",
        f"- Training readiness: {readiness_line}",
        "",
        "TEMPLATE SOURCE:",
        f"- Based on: {provenance.source} program",
        f"- Template: {provenance.template_name}",
    ]
    if provenance.scaling_notes:
        lines.append(f"- Scaling: {provenance.scaling_notes}")
    lines += ["", f"RECENT TRAINING (last {MAX_PROMPT_SESSIONS} sessions):"]
    if recent_sessions:
        lines.extend(_session_line(s) for s in list(recent_sessions)[:MAX_PROMPT_SESSIONS])
    else:
        lines.append("No recent sessions logged.")
    lines += [
        "",
        "THE SESSION (structure is FINAL - do not suggest changes):",
        format_session_for_prompt(plan.session),
        "Please provide:",
        "1. why_this: Brief explanation (max 60 words) of why this session fits the athlete's current phase and recent history",
        "2. technique_focus: Up to 3 technique cues relevant to this specific workout",
        "3. event_prep_tip: One practical tip for event preparation (or null if the event is more than 21 days away)",
        "4. flags: Any cautionary notes (0-4 items) based on readiness status or session demands",
    ]
    if plan.session.type == "open_water":
        lines += [
            "",
            "NOTE: This is an open water session. Include a safety reminder in flags "
            "about swimming with a buddy or in supervised areas.",
        ]
    lines += ["", "Return ONLY the JSON object, no other text."]
    return "\n".join(lines)


def build_polish_messages(
    plan: SessionPlan,
    profile: AthleteProfile,
    recent_sessions: Sequence[TrainingSession],
) -> list[dict[str, str]]:
    """Chat messages for hosts that call a model directly instead of the polish service.

    The system message carries the polish-only rules; the user message is
    `build_polish_prompt`. A reply can be validated with `parse_polish_response`.
    """
    return [
        {"role": "system", "content": POLISH_SYSTEM_PROMPT},
        {"role": "user", "content": build_polish_prompt(plan, profile, recent_sessions)},
    ]


# -- HTTP client --


def build_polish_request(
    plan: SessionPlan,
    profile: AthleteProfile,
    recent_sessions: Sequence[TrainingSession],
) -> dict[str, Any]:
    return {
        "session_plan": plan.model_dump(mode="json"),
        "profile": {
            "event_date": profile.event_date.isoformat() if profile.event_date else None,
            "goal": profile.goal,
            "target_time": profile.target_time,
            "tone": profile.tone,
            "sessions_per_week": profile.sessions_per_week_target,
            "access": profile.access.model_dump(),
        },
        "recent_sessions": [
            {
                "date": s.date.isoformat(),
                "type": s.type,
                "distance_m": s.distance_m,
                "time_min": s.time_min,
                "effort": s.effort,
                "rpe": s.rpe,
                "notes": s.notes,
            }
            for s in list(recent_sessions)[:MAX_PROMPT_SESSIONS]
        ],
        "phase": plan.phase,
        "days_to_event": plan.days_to_event,
    }


def parse_polish_response(data: Any) -> Polish:
    """Validate the collaborator's JSON. Raises ValueError on a bad shape."""
    if not isinstance(data, dict):
        raise ValueError("polish response is not an object")
    why_this = data.get("why_this")
    technique = data.get("technique_focus")
    if not isinstance(why_this, str) or not isinstance(technique, list):
        raise ValueError("polish response missing why_this or technique_focus")
    flags = data.get("flags") or []
    if not isinstance(flags, list):
        raise ValueError("polish flags must be a list")
    tip = data.get("event_prep_tip")
    return Polish(
        why_this=why_this,
        technique_focus=[str(c) for c in technique],
        event_prep_tip=str(tip) if tip else None,
        flags=[str(f) for f in flags],
        is_fallback=False,
    )


class PolishClient:
    """Requests polish from the collaborator, falling back locally on any failure."""

    def __init__(self, settings: Settings, client: httpx.Client | None = None):
        self.settings = settings
        self._client = client

    @property
    def mode(self) -> str:
        return "remote" if self.settings.polish_enabled else "fallback"

    def _post(self, body: dict[str, Any]) -> httpx.Response:
        if self._client is not None:
            return self._client.post(
                self.settings.polish_api_url,
                json=body,
                timeout=self.settings.polish_timeout_seconds,
            )
        return httpx.post(
            self.settings.polish_api_url,
            json=body,
            timeout=self.settings.polish_timeout_seconds,
        )

    def request_polish(
        self,
        plan: SessionPlan,
        profile: AthleteProfile,
        recent_sessions: Sequence[TrainingSession] = (),
    ) -> Polish:
        if not self.settings.polish_enabled:
            return generate_fallback_polish(plan)

        try:
            resp = self._post(build_polish_request(plan, profile, recent_sessions))
            resp.raise_for_status()
            return parse_polish_response(resp.json())
        except httpx.HTTPError as exc:
            logger.warning("Polish service unavailable, using fallback: %s", exc)
        except ValueError as exc:
            logger.warning("Polish response malformed, using fallback: %s", exc)
        return generate_fallback_polish(plan)
