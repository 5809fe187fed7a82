"""
Fake Repository Implementations for Testing.

Part of RIT-28: In-memory fake repositories

This package provides in-memory fake implementations of the repository
ports for fast, isolated testing. No database or external dependencies
required.

Features:
- All fakes implement the same Protocol interfaces as the Supabase repositories
- Multi-table writes are atomic (snapshot/restore) with failure injection
- Supports seeding with test data and reset() for test isolation
- Factory functions for common rituals and a wired set of fakes

Usage:
    from tests.fakes import create_fake_repos, make_ritual

    repos = create_fake_repos()
    [ritual] = repos.rituals.seed([make_ritual(user_id="user-1")])
"""
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import List, Optional

from domain.models import (
    BooleanStep,
    CounterConfig,
    CounterStep,
    Exercise,
    FrequencyRule,
    FrequencyType,
    MeasurementType,
    QnaStep,
    RitualCategory,
    RitualDefinition,
    ScaleConfig,
    ScaleStep,
    TimerConfig,
    TimerStep,
    Visibility,
    WorkoutConfig,
    WorkoutExercise,
    WorkoutSet,
    WorkoutStep,
)
from tests.fakes.completion_repository import FakeCompletionRepository
from tests.fakes.ritual_repository import FakeRitualRepository
from tests.fakes.user_stats_repository import FakeUserStatsRepository


# =============================================================================
# Factory Functions
# =============================================================================


@dataclass
class FakeRepos:
    """A ritual, completion and stats fake sharing one in-memory store."""
    rituals: FakeRitualRepository = field(default_factory=FakeRitualRepository)
    stats: FakeUserStatsRepository = field(default_factory=FakeUserStatsRepository)
    completions: Optional[FakeCompletionRepository] = None

    def __post_init__(self):
        if self.completions is None:
            self.completions = FakeCompletionRepository(self.rituals, self.stats)


def create_fake_repos() -> FakeRepos:
    return FakeRepos()


def at_midnight(day: date) -> datetime:
    return datetime.combine(day, time(), tzinfo=timezone.utc)


def make_ritual(
    *,
    user_id: str = "user-1",
    name: str = "Morning routine",
    steps: Optional[List] = None,
    frequency: Optional[FrequencyRule] = None,
    visibility: Visibility = Visibility.PRIVATE,
    category: RitualCategory = RitualCategory.OTHER,
    created: date = date(2024, 1, 1),
    **extra,
) -> RitualDefinition:
    """
    Build an unsaved ritual. Defaults: daily, one required boolean step,
    created 2024-01-01 (a Monday).
    """
    extra.setdefault("created_at", at_midnight(created))
    return RitualDefinition(
        user_id=user_id,
        name=name,
        category=category,
        visibility=visibility,
        steps=steps if steps is not None else [BooleanStep(name="Done", order_index=0)],
        frequency=frequency or FrequencyRule(type=FrequencyType.DAILY),
        **extra,
    )


def make_workout_step(order_index: int = 0, *, is_required: bool = True) -> WorkoutStep:
    """Workout step with a weight_reps squat (3 sets) and a distance_time run (1 set)."""
    squat = WorkoutExercise(
        exercise=Exercise(name="Back squat", measurement_type=MeasurementType.WEIGHT_REPS),
        order_index=0,
        sets=[
            WorkoutSet(set_number=n, target_weight_kg=60.0, target_reps=5)
            for n in (1, 2, 3)
        ],
    )
    run = WorkoutExercise(
        exercise=Exercise(name="Run", measurement_type=MeasurementType.DISTANCE_TIME),
        order_index=1,
        sets=[WorkoutSet(set_number=1, target_distance_m=5000.0, target_seconds=1800)],
    )
    return WorkoutStep(
        name="Strength",
        order_index=order_index,
        is_required=is_required,
        config=WorkoutConfig(exercises=[squat, run]),
    )


def make_all_steps() -> List:
    """One step of every kind, in order."""
    return [
        BooleanStep(name="Make bed", order_index=0),
        CounterStep(
            name="Water",
            order_index=1,
            config=CounterConfig(target_count=0.002, quantity_key="l"),
        ),
        QnaStep(name="Intention", order_index=2, is_required=False),
        TimerStep(name="Meditate", order_index=3, config=TimerConfig(target_seconds=600)),
        ScaleStep(name="Mood", order_index=4, config=ScaleConfig(min_value=1, max_value=5)),
        make_workout_step(order_index=5, is_required=False),
    ]


__all__ = [
    "FakeRitualRepository",
    "FakeCompletionRepository",
    "FakeUserStatsRepository",
    "FakeRepos",
    "create_fake_repos",
    "at_midnight",
    "make_ritual",
    "make_workout_step",
    "make_all_steps",
]
