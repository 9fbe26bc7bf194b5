"""Tests for the polish client and its deterministic fallback."""

from __future__ import annotations

import json
from datetime import date, timedelta

import httpx
import pytest

from swimcoach.config import Settings
from swimcoach.models import AthleteProfile, Readiness, TrainingSession, WaterAccess
from swimcoach.services.planner import generate_rest_plan, generate_session_plan
from swimcoach.services.polish import (
    OPEN_WATER_FLAG,
    POLISH_SYSTEM_PROMPT,
    PolishClient,
    build_polish_messages,
    build_polish_prompt,
    event_prep_tip,
    format_session_for_prompt,
    generate_fallback_polish,
    parse_polish_response,
)

TODAY = date(2026, 10, 19)
POLISH_URL = "http://polish.test/api/coach"


def _settings(**kw) -> Settings:
    data = {"polish_api_url": POLISH_URL}
    data.update(kw)
    return Settings(**data)


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def _plan(preferred_type: str = "pool", days: int = 30):
    profile = AthleteProfile(event_date=TODAY + timedelta(days=days))
    return generate_session_plan(profile, [], preferred_type, today=TODAY)


def _sessions(n: int) -> list[TrainingSession]:
    return [
        TrainingSession(date=TODAY - timedelta(days=i + 1), distance_m=1500, time_min=32, effort="easy", notes=f"swim {i}")
        for i in range(n)
    ]


def test_successful_polish_is_used():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={
            "why_this": "Steady aerobic work.",
            "technique_focus": ["a", "b", "c", "d"],
            "event_prep_tip": None,
            "flags": ["1", "2", "3", "4", "5"],
        })

    client = PolishClient(_settings(), client=_client(handler))
    polish = client.request_polish(_plan(), AthleteProfile(), _sessions(7))
    assert polish.is_fallback is False
    assert polish.why_this == "Steady aerobic work."
    assert polish.technique_focus == ["a", "b", "c"]
    assert len(polish.flags) == 4
    assert polish.event_prep_tip is None
    assert seen["url"] == POLISH_URL
    assert len(seen["body"]["recent_sessions"]) == 5
    assert set(seen["body"]["profile"]) == {"event_date", "goal", "target_time", "tone", "sessions_per_week", "access"}
    assert seen["body"]["phase"] == "BUILD"
    assert seen["body"]["session_plan"]["session"]["structure"][0]["items"][0]["text"]


def test_server_error_uses_fallback():
    client = PolishClient(_settings(), client=_client(lambda r: httpx.Response(503, text="down")))
    polish = client.request_polish(_plan(), AthleteProfile())
    assert polish.is_fallback is True


def test_connection_error_uses_fallback():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    polish = PolishClient(_settings(), client=_client(handler)).request_polish(_plan(), AthleteProfile())
    assert polish.is_fallback is True


def test_invalid_json_uses_fallback():
    client = PolishClient(_settings(), client=_client(lambda r: httpx.Response(200, text="not json")))
    assert client.request_polish(_plan(), AthleteProfile()).is_fallback is True


def test_missing_fields_use_fallback():
    client = PolishClient(_settings(), client=_client(lambda r: httpx.Response(200, json={"why_this": "x"})))
    assert client.request_polish(_plan(), AthleteProfile()).is_fallback is True


def test_disabled_polish_skips_network():
    def handler(request):
        raise AssertionError("network should not be used")

    client = PolishClient(_settings(polish_enabled=False), client=_client(handler))
    assert client.mode == "fallback"
    assert client.request_polish(_plan(), AthleteProfile()).is_fallback is True


def test_fallback_for_rest():
    plan = generate_rest_plan("BUILD", Readiness(status="NEEDS_REST", reasons=["Notes mention: sore"]), 20)
    polish = generate_fallback_polish(plan)
    assert polish.why_this.startswith("Your body needs recovery.")
    assert polish.technique_focus == []
    assert polish.flags == ["Notes mention: sore"]


def test_fallback_taper_mentions_days():
    polish = generate_fallback_polish(_plan(days=2))
    assert polish.why_this.startswith("With 2 days to event")
    assert polish.event_prep_tip.startswith("Final week")


def test_fallback_open_water_flag():
    polish = generate_fallback_polish(_plan("open_water"))
    assert polish.flags == [OPEN_WATER_FLAG]
    assert polish.why_this.startswith("Building your aerobic base")


def test_fallback_skips_balanced_reason():
    plan = _plan()
    plan = plan.model_copy(update={
        "readiness": Readiness(status="FATIGUED", reasons=["Hard session yesterday", "Training load looks balanced"]),
    })
    assert generate_fallback_polish(plan).flags == ["Hard session yesterday"]


def test_event_prep_tip_buckets():
    assert event_prep_tip(7).startswith("Final week")
    assert event_prep_tip(14).startswith("Two weeks out")
    assert event_prep_tip(15).startswith("Stay consistent")
    assert event_prep_tip(None).startswith("Stay consistent")


def test_prompt_sections():
    plan = _plan("open_water")
    prompt = build_polish_prompt(plan, AthleteProfile(target_time="30:00", goal="target_time"), _sessions(2))
    assert "ATHLETE CONTEXT:" in prompt
    assert "- Goal: target_time (target: 30:00)" in prompt
    assert "TEMPLATE SOURCE:" in prompt
    assert "RECENT TRAINING (last 5 sessions):" in prompt
    assert 'effort easy - "swim 0"' in prompt
    assert "THE SESSION (structure is FINAL - do not suggest changes):" in prompt
    assert "NOTE: This is an open water session." in prompt


def test_prompt_without_history():
    prompt = build_polish_prompt(_plan(), AthleteProfile(), [])
    assert "No recent sessions logged." in prompt
    assert "NOTE: This is an open water session." not in prompt


def test_format_session_for_prompt():
    rest = generate_rest_plan("BUILD", Readiness(), None)
    assert format_session_for_prompt(rest.session) == "REST DAY - No swimming scheduled"
    text = format_session_for_prompt(_plan("open_water").session)
    assert text.startswith("OPEN_WATER SESSION")
    assert "STRUCTURE (DO NOT MODIFY):" in text
    assert "OPEN WATER ADDITIONS:" in text


def test_open_water_access_serialised():
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        return httpx.Response(500)

    profile = AthleteProfile(access=WaterAccess(open_water=True))
    PolishClient(_settings(), client=_client(handler)).request_polish(_plan(), profile)
    assert seen["body"]["profile"]["access"] == {"pool": True, "open_water": True}


def test_polish_messages_pair_rules_with_prompt():
    plan = _plan()
    messages = build_polish_messages(plan, AthleteProfile(), _sessions(1))
    assert [m["role"] for m in messages] == ["system", "user"]
    assert messages[0]["content"] == POLISH_SYSTEM_PROMPT
    assert "Never change distances" in messages[0]["content"]
    assert messages[1]["content"] == build_polish_prompt(plan, AthleteProfile(), _sessions(1))


def test_parse_polish_response_rejects_non_object():
    with pytest.raises(ValueError):
        parse_polish_response(["why_this"])
    assert parse_polish_response({"why_this": "ok", "technique_focus": []}).flags == []
