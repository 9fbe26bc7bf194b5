"""Swim workout template catalog.

Templates are drawn from the 6-week and 9-week intermediate mile programmes.
Each one carries:
- phase fit (BUILD, SHARPEN, TAPER) and an intensity bucket
- tags used by the selector ("recovery", "race_specific", "taper", ...)
- a base distance and duration estimate
- a block/item structure whose numeric fields drive scaling

The catalog is an immutable value passed explicitly to the selector and the
orchestrator; `default_catalog()` builds the standard one.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Iterable, Optional

from swimcoach.models import StructureBlock, StructureItem

REST_TEMPLATE_ID = "rest-day"
RECOVERY_TEMPLATE_ID = "recovery-easy-swim"
ALL_PHASES = ("BUILD", "SHARPEN", "TAPER")


@dataclass(frozen=True)
class WorkoutTemplate:
    """A reference workout blueprint. Never modified at runtime."""
    id: str
    name: str
    source: str             # programme label: "6-week" or "9-week"
    phase_fit: tuple[str, ...]
    intensity: str          # easy | moderate | hard | rest
    base_distance_m: int
    base_duration_min_est: int
    tags: frozenset[str] = frozenset()
    structure: tuple[StructureBlock, ...] = ()

    @property
    def is_rest(self) -> bool:
        return self.intensity == "rest" or self.base_distance_m == 0

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags


class TemplateCatalog:
    """Read-only lookup over a fixed set of templates."""

    def __init__(self, templates: Iterable[WorkoutTemplate]):
        self._by_id = MappingProxyType({t.id: t for t in templates})

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._by_id

    def get(self, template_id: str) -> Optional[WorkoutTemplate]:
        return self._by_id.get(template_id)

    def all(self) -> list[WorkoutTemplate]:
        return list(self._by_id.values())

    def by_phase(self, phase: str) -> list[WorkoutTemplate]:
        return [t for t in self._by_id.values() if phase in t.phase_fit]

    def by_tag(self, tag: str) -> list[WorkoutTemplate]:
        return [t for t in self._by_id.values() if t.has_tag(tag)]

    def by_intensity(self, intensity: str) -> list[WorkoutTemplate]:
        return [t for t in self._by_id.values() if t.intensity == intensity]

    def by_source(self, source: str) -> list[WorkoutTemplate]:
        return [t for t in self._by_id.values() if t.source == source]

    def by_distance_range(self, min_m: int, max_m: int) -> list[WorkoutTemplate]:
        return [t for t in self._by_id.values() if min_m <= t.base_distance_m <= max_m]

    @property
    def rest_template(self) -> WorkoutTemplate:
        return self._by_id.get(REST_TEMPLATE_ID, REST_DAY)

    @property
    def recovery_template(self) -> WorkoutTemplate:
        return self._by_id.get(RECOVERY_TEMPLATE_ID, RECOVERY_EASY_SWIM)


# -- Structure builders --


def _swim(distance_m: int, description: str) -> StructureItem:
    return StructureItem(description=description, distance_m=distance_m)


def _repeat(reps: int, per_rep_m: int, rest_sec: int, description: str) -> StructureItem:
    return StructureItem(
        description=description,
        distance_m=reps * per_rep_m,
        reps=reps,
        per_rep_m=per_rep_m,
        rest_sec=rest_sec,
    )


def _note(description: str) -> StructureItem:
    return StructureItem(description=description)


def _block(label: str, *items: StructureItem) -> StructureBlock:
    return StructureBlock(label=label, items=list(items))


# ── 6-week intermediate ──────────────────────────────────────────────────

_SIX_WEEK = (
    WorkoutTemplate(
        id="6w-interval-8x100",
        name="8x100m Interval Foundation",
        source="6-week",
        tags=frozenset({"interval", "technique", "build"}),
        phase_fit=("BUILD",),
        intensity="moderate",
        base_distance_m=1400,
        base_duration_min_est=45,
        structure=(
            _block(
                "Warm-up",
                _swim(100, "freestyle easy - long smooth strokes"),
                _swim(50, "breaststroke - focus on glide phase"),
                _swim(50, "backstroke - relaxed arm recovery"),
            ),
            _block("Main set", _repeat(8, 100, 20, "freestyle at moderate pace (aim for consistent splits), 20 sec rest between each")),
            _block(
                "Technique drills",
                _repeat(2, 50, 15, "catch-up drill (touch hands together before each stroke), 15 sec rest"),
                _repeat(2, 50, 15, "fingertip drag (drag fingertips along the surface on recovery), 15 sec rest"),
            ),
            _block("Cool-down", _swim(100, "easy breaststroke"), _swim(100, "easy backstroke")),
        ),
    ),
    WorkoutTemplate(
        id="6w-endurance-4x200",
        name="4x200m Endurance Builder",
        source="6-week",
        tags=frozenset({"endurance", "build"}),
        phase_fit=("BUILD",),
        intensity="moderate",
        base_distance_m=1400,
        base_duration_min_est=45,
        structure=(
            _block(
                "Warm-up",
                _swim(150, "freestyle easy - focus on exhaling underwater"),
                _swim(100, "alternating: 25m breaststroke / 25m freestyle"),
                _swim(50, "backstroke - long arm extension"),
            ),
            _block("Main set", _repeat(4, 200, 30, "freestyle steady pace (breathe every 3 strokes), 30 sec rest between each")),
            _block("Technique - Bilateral breathing", _repeat(4, 50, 15, "freestyle breathing every 3 strokes (alternate sides), 15 sec rest")),
            _block("Cool-down", _swim(100, "easy breaststroke - long glide between strokes")),
        ),
    ),
    WorkoutTemplate(
        id="6w-continuous-1000",
        name="1000m Continuous Build",
        source="6-week",
        tags=frozenset({"endurance", "long", "build"}),
        phase_fit=("BUILD",),
        intensity="easy",
        base_distance_m=1400,
        base_duration_min_est=45,
        structure=(
            _block(
                "Warm-up",
                _swim(100, "freestyle easy - count strokes per length (aim for consistency)"),
                _swim(50, "breaststroke - wide pull, strong kick"),
                _swim(50, "backstroke - keep hips high"),
            ),
            _block(
                "Main set",
                _swim(1000, "continuous freestyle at easy/conversational pace - you should be able to talk if needed. "
                            "Focus on rhythm and relaxed breathing."),
            ),
            _block("Cool-down", _swim(100, "breaststroke - super easy, stretch out"), _swim(100, "backstroke - relaxed arm circles")),
        ),
    ),
    WorkoutTemplate(
        id="6w-interval-10x100",
        name="10x100m Interval Progression",
        source="6-week",
        tags=frozenset({"interval", "build"}),
        phase_fit=("BUILD", "SHARPEN"),
        intensity="moderate",
        base_distance_m=1700,
        base_duration_min_est=50,
        structure=(
            _block("Warm-up", _swim(200, "freestyle easy - build stroke length"), _swim(100, "choice stroke (breaststroke or backstroke)")),
            _block("Main set", _repeat(10, 100, 15, "freestyle at moderate-hard pace, 15 sec rest. First 50m strong, second 50m hold pace.")),
            _block("Kick set (with kickboard)", _repeat(4, 50, 15, "flutter kick with kickboard - keep kick tight and fast, 15 sec rest")),
            _block("Cool-down", _swim(100, "breaststroke easy"), _swim(100, "backstroke easy")),
        ),
    ),
    WorkoutTemplate(
        id="6w-pyramid-5x200",
        name="5x200m Pyramid Build",
        source="6-week",
        tags=frozenset({"endurance", "interval", "build"}),
        phase_fit=("BUILD", "SHARPEN"),
        intensity="moderate",
        base_distance_m=1600,
        base_duration_min_est=50,
        structure=(
            _block("Warm-up", _swim(200, "freestyle easy"), _swim(100, "backstroke - focus on rotation")),
            _block(
                "Main set - Pyramid effort",
                _swim(200, "freestyle EASY (1st of 5) - find your rhythm"),
                _swim(200, "freestyle MODERATE (2nd of 5) - pick up the pace slightly"),
                _swim(200, "freestyle MODERATE-HARD (3rd of 5) - push it, this is the peak"),
                _swim(200, "freestyle MODERATE (4th of 5) - bring it back down"),
                _swim(200, "freestyle EASY (5th of 5) - finish smooth"),
                _note("(25 sec rest between each 200m)"),
            ),
            _block(
                "Open water sighting practice",
                _repeat(4, 50, 15, 'freestyle with head-up "Tarzan" stroke every 6 strokes (look forward like sighting a buoy), 15 sec rest'),
            ),
            _block("Cool-down", _swim(100, "breaststroke - slow and stretchy")),
        ),
    ),
    WorkoutTemplate(
        id="6w-race-specific-1500",
        name="1500m Race Simulation",
        source="6-week",
        tags=frozenset({"race_specific", "long", "sharpen"}),
        phase_fit=("SHARPEN",),
        intensity="moderate",
        base_distance_m=1900,
        base_duration_min_est=55,
        structure=(
            _block(
                "Warm-up",
                _swim(100, "freestyle easy - loosen up"),
                _swim(50, "breaststroke - open up shoulders"),
                _swim(50, "freestyle with head-up sighting every 8 strokes"),
            ),
            _block(
                "Main set - Race simulation",
                _swim(1500, "continuous freestyle at your target race pace. Lift your head to look forward every 8-10 strokes. "
                            "Start controlled, build into the middle, hold strong to the finish."),
            ),
            _block("Cool-down", _swim(100, "backstroke - very easy, let heart rate come down"), _swim(100, "breaststroke - stretch and recover")),
        ),
    ),
    WorkoutTemplate(
        id="6w-interval-8x200",
        name="8x200m Sustained Effort",
        source="6-week",
        tags=frozenset({"interval", "endurance", "sharpen"}),
        phase_fit=("BUILD", "SHARPEN"),
        intensity="hard",
        base_distance_m=2100,
        base_duration_min_est=60,
        structure=(
            _block(
                "Warm-up",
                _swim(100, "freestyle easy"),
                _swim(100, "freestyle moderate - build into it"),
                _swim(100, "alternating 25m breaststroke / 25m backstroke"),
            ),
            _block(
                "Main set",
                _repeat(8, 200, 20, "freestyle at moderate-hard sustained effort. Hold the same pace across all 8. "
                                    "Focus on strong catch and steady kick. 20 sec rest between each."),
            ),
            _block("Cool-down", _swim(100, "backstroke - slow and easy"), _swim(100, "breaststroke - long glides")),
        ),
    ),
    WorkoutTemplate(
        id="6w-descend-6x300",
        name="6x300m Descending Set",
        source="6-week",
        tags=frozenset({"interval", "endurance", "sharpen"}),
        phase_fit=("SHARPEN",),
        intensity="moderate",
        base_distance_m=2200,
        base_duration_min_est=65,
        structure=(
            _block(
                "Warm-up - Mixed strokes",
                _swim(100, "freestyle easy"),
                _swim(100, "breaststroke - focus on wide pull, then snap kick together"),
                _swim(100, "backstroke - rotate shoulders with each stroke"),
            ),
            _block(
                "Main set - Descending 300s",
                _repeat(6, 300, 30, "freestyle DESCENDING (each one faster than the last): #1 easy, #2 easy-moderate, "
                                    "#3 moderate, #4 moderate-hard, #5 hard, #6 sprint finish! 30 sec rest between each."),
            ),
            _block("Cool-down", _swim(50, "breaststroke - very easy"), _swim(50, "backstroke - float and recover")),
        ),
    ),
    WorkoutTemplate(
        id="6w-race-distance-1609",
        name="Mile Distance Practice",
        source="6-week",
        tags=frozenset({"race_specific", "long", "taper"}),
        phase_fit=("SHARPEN", "TAPER"),
        intensity="moderate",
        base_distance_m=2000,
        base_duration_min_est=55,
        structure=(
            _block("Warm-up", _swim(200, "easy with race-start simulation (10 strokes hard)")),
            _block("Main set", _swim(1609, "(1 mile) at race effort, practice pacing")),
            _block("Cool-down", _swim(200, "very easy")),
        ),
    ),
    WorkoutTemplate(
        id="6w-taper-sharpener",
        name="Pre-Race Sharpener",
        source="6-week",
        tags=frozenset({"taper", "race_specific"}),
        phase_fit=("TAPER",),
        intensity="easy",
        base_distance_m=1200,
        base_duration_min_est=35,
        structure=(
            _block(
                "Warm-up",
                _swim(150, "freestyle easy - smooth and relaxed"),
                _swim(100, "breaststroke - open up shoulders and hips"),
                _swim(50, "backstroke - easy arm circles"),
            ),
            _block(
                "Race pace practice",
                _repeat(4, 100, 30, "freestyle at RACE PACE - the pace you want to hold on race day. Feel confident. 30 sec rest between each."),
            ),
            _block("Recovery", _swim(100, "breaststroke - easy, let heart rate come down"), _swim(100, "backstroke - easy, relaxed")),
            _block(
                "Race start practice",
                _repeat(4, 50, 20, "RACE START SIMULATION: first 10 strokes HARD (like fighting for position at the start), "
                                   "then settle into race pace. 20 sec rest."),
            ),
            _block("Cool-down", _swim(100, "choice stroke - very easy, stay loose")),
        ),
    ),
)

# ── 9-week intermediate ──────────────────────────────────────────────────

_NINE_WEEK = (
    WorkoutTemplate(
        id="9w-technique-drills",
        name="Technique Focus Session",
        source="9-week",
        tags=frozenset({"technique", "build"}),
        phase_fit=("BUILD",),
        intensity="easy",
        base_distance_m=1200,
        base_duration_min_est=40,
        structure=(
            _block("Warm-up", _swim(100, "freestyle easy - focus on smooth entry"), _swim(100, "breaststroke - wide pull, frog kick")),
            _block(
                "Freestyle drills",
                _repeat(4, 50, 15, "CATCH-UP DRILL: touch hands together in front before starting the next stroke. Full extension. 15 sec rest."),
                _repeat(4, 50, 15, "FINGERTIP DRAG: drag fingertips along the surface during arm recovery. Keeps elbows high. 15 sec rest."),
            ),
            _block(
                "Kick set (with kickboard)",
                _repeat(4, 50, 15, "FLUTTER KICK with kickboard: small, fast kicks from the hips (not knees). Keep ankles relaxed. 15 sec rest."),
            ),
            _block(
                "Pull set (with pull buoy)",
                _repeat(4, 50, 15, "FREESTYLE PULL with pull buoy between thighs: arms only. High elbow catch, push water back. 15 sec rest."),
            ),
            _block(
                "Swim - Apply technique",
                _repeat(2, 100, 20, "freestyle at moderate pace - apply the drills: long strokes, high elbows, steady kick. 20 sec rest."),
            ),
            _block("Cool-down", _swim(100, "backstroke - very easy")),
        ),
    ),
    WorkoutTemplate(
        id="9w-endurance-blocks",
        name="Endurance Block Training",
        source="9-week",
        tags=frozenset({"endurance", "build"}),
        phase_fit=("BUILD",),
        intensity="moderate",
        base_distance_m=1800,
        base_duration_min_est=55,
        structure=(
            _block(
                "Warm-up",
                _swim(150, "freestyle easy - smooth strokes"),
                _swim(100, "backstroke - focus on steady rotation"),
                _swim(50, "breaststroke - wide pull, snap kick together"),
            ),
            _block(
                "Main set - Endurance blocks",
                _repeat(3, 400, 45, "freestyle at steady moderate pace. Break it into 100m chunks mentally. "
                                    "Stay relaxed, consistent stroke rate. 45 sec rest between each."),
            ),
            _block(
                "Open water sighting drill",
                _repeat(4, 50, 15, "TARZAN DRILL: freestyle with head up, looking forward (like sighting a buoy). "
                                   "Builds neck strength for open water. 15 sec rest."),
            ),
            _block("Cool-down", _swim(50, "breaststroke - easy"), _swim(50, "backstroke - easy")),
        ),
    ),
    WorkoutTemplate(
        id="9w-negative-split",
        name="Negative Split Practice",
        source="9-week",
        tags=frozenset({"endurance", "race_specific", "sharpen"}),
        phase_fit=("BUILD", "SHARPEN"),
        intensity="moderate",
        base_distance_m=1600,
        base_duration_min_est=50,
        structure=(
            _block("Warm-up", _swim(300, "easy progressive")),
            _block("Main set", _repeat(2, 600, 60, "negative split (second half faster than first), 60 seconds rest")),
            _block("Cool-down", _swim(100, "easy")),
        ),
    ),
    WorkoutTemplate(
        id="9w-longer-steady",
        name="Long Steady Swim",
        source="9-week",
        tags=frozenset({"endurance", "long", "build"}),
        phase_fit=("BUILD",),
        intensity="easy",
        base_distance_m=2000,
        base_duration_min_est=60,
        structure=(
            _block(
                "Warm-up",
                _swim(100, "freestyle easy - loosen up"),
                _swim(50, "breaststroke - stretch out chest and shoulders"),
                _swim(50, "backstroke - easy rotation"),
            ),
            _block(
                "Main set - Long continuous swim",
                _swim(1600, "continuous freestyle at easy/steady pace. This simulates race distance. Lift your head to look "
                            "forward every 10 strokes. Consistent stroke rate, relaxed breathing, 400m chunks."),
            ),
            _block("Cool-down", _swim(100, "breaststroke - slow and easy"), _swim(100, "backstroke - gentle kicks, relaxed arms")),
        ),
    ),
    WorkoutTemplate(
        id="9w-speed-touch",
        name="Speed Touch Session",
        source="9-week",
        tags=frozenset({"interval", "sharpen"}),
        phase_fit=("SHARPEN",),
        intensity="hard",
        base_distance_m=1500,
        base_duration_min_est=45,
        structure=(
            _block(
                "Warm-up",
                _swim(200, "freestyle easy"),
                _swim(100, "alternating 25m breaststroke / 25m backstroke"),
                _repeat(4, 25, 10, "freestyle PICKUPS: start easy, build to fast by the end of each length. 10 sec rest."),
            ),
            _block("Sprint set", _repeat(8, 50, 30, "freestyle SPRINTS - GO FAST! Max effort on each. 30 sec rest between each to recover fully.")),
            _block("Recovery", _swim(100, "breaststroke - very easy, catch your breath"), _swim(100, "backstroke - easy recovery")),
            _block("Race pace set", _repeat(4, 100, 20, "freestyle at race pace - your goal pace for the event. Strong but sustainable. 20 sec rest.")),
            _block("Cool-down", _swim(100, "choice stroke - very easy, shake out the arms")),
        ),
    ),
    WorkoutTemplate(
        id="9w-broken-mile",
        name="Broken Mile",
        source="9-week",
        tags=frozenset({"race_specific", "sharpen"}),
        phase_fit=("SHARPEN",),
        intensity="moderate",
        base_distance_m=2000,
        base_duration_min_est=55,
        structure=(
            _block("Warm-up", _swim(300, "easy")),
            _block("Main set", _repeat(4, 400, 15, "at race pace, 15 seconds rest (minimal recovery simulates continuous effort)")),
            _block("Cool-down", _swim(100, "easy")),
        ),
    ),
    WorkoutTemplate(
        id="9w-mixed-intensity",
        name="Mixed Intensity Session",
        source="9-week",
        tags=frozenset({"interval", "endurance", "build"}),
        phase_fit=("BUILD", "SHARPEN"),
        intensity="moderate",
        base_distance_m=1700,
        base_duration_min_est=50,
        structure=(
            _block(
                "Warm-up - Mixed strokes",
                _swim(100, "freestyle easy"),
                _swim(50, "backstroke - long strokes"),
                _swim(50, "breaststroke - focus on timing (pull, breathe, kick, glide)"),
                _swim(50, "butterfly arms only (kick optional) - if comfortable, or substitute freestyle"),
                _swim(50, "freestyle easy"),
            ),
            _block(
                "Main set - Mixed intensity",
                _swim(400, "freestyle steady - find your cruise pace, breathe every 3 strokes"),
                _repeat(4, 100, 15, "freestyle moderate-hard - push the pace, 15 sec rest between each"),
                _swim(400, "freestyle steady - return to cruise pace, controlled effort"),
            ),
            _block("Cool-down", _swim(100, "breaststroke - easy, stretch out"), _swim(100, "backstroke - easy, relax shoulders")),
        ),
    ),
    WorkoutTemplate(
        id="9w-kick-pull-focus",
        name="Kick & Pull Development",
        source="9-week",
        tags=frozenset({"technique", "build"}),
        phase_fit=("BUILD",),
        intensity="moderate",
        base_distance_m=1400,
        base_duration_min_est=45,
        structure=(
            _block("Warm-up", _swim(100, "freestyle easy"), _swim(100, "breaststroke - focus on timing")),
            _block(
                "Kick set (with kickboard)",
                _repeat(4, 50, 15, "FLUTTER KICK with kickboard: small and fast, from the hips not the knees. 15 sec rest."),
                _repeat(4, 50, 15, "BREASTSTROKE KICK with kickboard: wide frog kick, snap heels together, glide. 15 sec rest."),
            ),
            _block(
                "Pull set (with pull buoy)",
                _repeat(4, 50, 15, "FREESTYLE PULL with pull buoy: high elbow catch, pull water back towards the hips. No kick. 15 sec rest."),
                _repeat(4, 50, 15, "BREASTSTROKE PULL with pull buoy: wide outsweep, then powerful insweep. Elbows high. 15 sec rest."),
            ),
            _block("Full stroke - Apply the work", _repeat(4, 100, 20, "freestyle at moderate pace - feel the improved catch and kick. 20 sec rest.")),
            _block("Cool-down", _swim(100, "easy choice stroke")),
        ),
    ),
    WorkoutTemplate(
        id="9w-taper-maintenance",
        name="Taper Maintenance",
        source="9-week",
        tags=frozenset({"taper", "recovery"}),
        phase_fit=("TAPER",),
        intensity="easy",
        base_distance_m=1000,
        base_duration_min_est=30,
        structure=(
            _block(
                "Warm-up",
                _swim(100, "freestyle very easy - gentle start"),
                _swim(50, "breaststroke - stretch it out"),
                _swim(50, "backstroke - relaxed arm circles"),
            ),
            _block(
                "Main set - Stay sharp",
                _repeat(4, 100, 30, "freestyle at moderate pace - keep the feel for the water, don't push too hard. 30 sec rest."),
            ),
            _block("Recovery swim", _swim(100, "breaststroke - super easy"), _swim(100, "backstroke - float and kick gently")),
            _block("Cool-down", _swim(100, "choice stroke - whatever feels good, zero effort")),
        ),
    ),
)

RECOVERY_EASY_SWIM = WorkoutTemplate(
    id=RECOVERY_TEMPLATE_ID,
    name="Recovery Easy Swim",
    source="6-week",
    tags=frozenset({"recovery"}),
    phase_fit=ALL_PHASES,
    intensity="easy",
    base_distance_m=800,
    base_duration_min_est=25,
    structure=(
        _block(
            "Warm-up",
            _swim(100, "freestyle VERY EASY - just get the body moving, long smooth strokes"),
            _swim(100, "breaststroke - slow, exaggerate the glide phase"),
        ),
        _block(
            "Main set - Active recovery",
            _swim(100, "freestyle easy - focus on relaxed breathing"),
            _swim(100, "backstroke easy - let arms float up"),
            _swim(100, "breaststroke easy - long glides, no rush"),
            _swim(100, "freestyle easy - count strokes, try to minimize"),
        ),
        _block(
            "Cool-down",
            _swim(100, "choice stroke - whatever feels best, zero effort"),
            _swim(100, "easy backstroke - float and kick gently"),
        ),
    ),
)

REST_DAY = WorkoutTemplate(
    id=REST_TEMPLATE_ID,
    name="Rest Day",
    source="6-week",
    tags=frozenset({"recovery"}),
    phase_fit=ALL_PHASES,
    intensity="rest",
    base_distance_m=0,
    base_duration_min_est=0,
)

BUILTIN_TEMPLATES: tuple[WorkoutTemplate, ...] = (*_SIX_WEEK, *_NINE_WEEK, RECOVERY_EASY_SWIM, REST_DAY)


@lru_cache(maxsize=1)
def default_catalog() -> TemplateCatalog:
    return TemplateCatalog(BUILTIN_TEMPLATES)
