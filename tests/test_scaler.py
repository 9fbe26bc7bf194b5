"""Tests for template scaling."""

from __future__ import annotations

from swimcoach.models import AthleteProfile, Metrics, StructureItem, structure_distance
from swimcoach.services.metrics import safe_progression_ceiling
from swimcoach.services.scaler import round_to_nearest, scale_item, scale_template
from swimcoach.services.template_catalog import BUILTIN_TEMPLATES, default_catalog


def _template(template_id: str):
    return default_catalog().get(template_id)


def test_rest_template_not_scaled():
    scaled = scale_template(_template("rest-day"), AthleteProfile(), Metrics())
    assert scaled.scaled_structure == []
    assert scaled.total_distance_m == 0
    assert scaled.estimated_duration_min == 0
    assert scaled.scaling_notes == "Rest day - no scaling needed"


def test_template_that_fits_is_unchanged():
    scaled = scale_template(_template("6w-interval-8x100"), AthleteProfile(), Metrics())
    assert scaled.scaling_notes == "No scaling needed - template fits well"
    assert scaled.total_distance_m == 1400
    assert scaled.estimated_duration_min == 45


def test_low_volume_athlete_hits_floor():
    scaled = scale_template(
        _template("6w-interval-8x100"), AthleteProfile(weekly_volume_estimate_m=2000), Metrics()
    )
    assert scaled.scaling_notes == "Scaled down to match weekly volume target; Minimum scale applied (70%)"
    main = scaled.scaled_structure[1].items[0]
    assert (main.reps, main.per_rep_m, main.distance_m) == (8, 75, 600)
    drill = scaled.scaled_structure[2].items[0]
    assert (drill.reps, drill.per_rep_m) == (2, 50)
    assert scaled.total_distance_m == 1050
    assert scaled.estimated_duration_min == 34


def test_cap_to_progression_ceiling():
    metrics = Metrics(max_recent_distance_m=1600)
    scaled = scale_template(_template("6w-interval-8x200"), AthleteProfile(weekly_volume_estimate_m=20000), metrics)
    assert scaled.scaling_notes == "Capped to avoid volume jump (max: 1840m)"
    main = scaled.scaled_structure[1].items[0]
    assert (main.reps, main.per_rep_m) == (8, 175)


def test_duration_from_pace():
    scaled = scale_template(_template("6w-interval-8x100"), AthleteProfile(), Metrics(avg_pace_min_per_km=20))
    assert scaled.estimated_duration_min == 31


def test_total_is_exact_sum_for_every_template():
    profiles = [AthleteProfile(), AthleteProfile(weekly_volume_estimate_m=1500), AthleteProfile(weekly_volume_estimate_m=12000)]
    metrics_set = [Metrics(), Metrics(max_recent_distance_m=2500)]
    for template in BUILTIN_TEMPLATES:
        for profile in profiles:
            for metrics in metrics_set:
                scaled = scale_template(template, profile, metrics)
                assert scaled.total_distance_m == structure_distance(scaled.scaled_structure)


def test_scaling_floor_and_ceiling_hold_within_rounding():
    for template in BUILTIN_TEMPLATES:
        if template.is_rest:
            continue
        for profile in (AthleteProfile(weekly_volume_estimate_m=1000), AthleteProfile(weekly_volume_estimate_m=9000)):
            metrics = Metrics()
            scaled = scale_template(template, profile, metrics)
            items = sum(len(b.items) for b in scaled.scaled_structure)
            slack = 50 * items
            summed_base = structure_distance(template.structure)
            assert scaled.total_distance_m >= 0.7 * summed_base - slack
            assert scaled.total_distance_m <= safe_progression_ceiling(metrics) + slack + (summed_base - template.base_distance_m)


def test_template_is_not_mutated():
    template = _template("6w-endurance-4x200")
    before = template.structure[1].items[0]
    scale_template(template, AthleteProfile(weekly_volume_estimate_m=1000), Metrics())
    assert template.structure[1].items[0] is before
    assert before.per_rep_m == 200


def test_scale_item_plain_distance_rounds_to_50():
    item = StructureItem(description="easy", distance_m=300)
    assert scale_item(item, 0.8).distance_m == 250
    assert scale_item(StructureItem(description="note"), 0.5).distance_m is None


def test_round_to_nearest_rounds_half_up():
    assert round_to_nearest(75, 50) == 100
    assert round_to_nearest(74, 50) == 50
    assert round_to_nearest(37.5, 25) == 50
