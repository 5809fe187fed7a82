"""
Unit tests for CompleteRitualUseCase.

Part of RIT-24: Atomic ritual completion

Tests for:
- Successful completion with defaults, counters and streak
- Duplicate completion idempotence (completion_count +1 only)
- Atomic rollback on storage failure
- Access rules and batch completion
"""

from datetime import date

import pytest

from application.use_cases import BatchCompletionItem, CompleteRitualUseCase
from domain.models import (
    BooleanResponse,
    BooleanStep,
    QnaResponse,
    QnaStep,
    UserStats,
    Visibility,
    WorkoutResponse,
    WorkoutSetResponse,
)
from tests.fakes import make_ritual, make_workout_step

pytestmark = pytest.mark.unit

DAY = date(2024, 3, 4)


@pytest.fixture
def use_case(fake_repos) -> CompleteRitualUseCase:
    return CompleteRitualUseCase(fake_repos.rituals, fake_repos.completions)


@pytest.fixture
def ritual(fake_repos):
    steps = [
        BooleanStep(name="Phone away", order_index=0),
        QnaStep(name="Best moment", order_index=1, is_required=False),
    ]
    [stored] = fake_repos.rituals.seed([make_ritual(user_id="user-1", steps=steps)])
    return stored


def boolean_done(ritual, value=True):
    return BooleanResponse(step_definition_id=ritual.steps[0].id, value_boolean=value)


class TestCompleteRitual:
    def test_success_records_completion(self, use_case, ritual, fake_repos):
        result = use_case.execute("user-1", ritual.id, "calm", [boolean_done(ritual)], DAY)

        assert result.success is True
        assert result.completion.id is not None
        assert result.completion.completed_date == DAY
        assert result.completion.notes == "calm"
        assert result.completed_step_count == 1
        assert result.total_step_count == 2
        assert result.counts_toward_streak is True

        [qna] = [r for r in result.completion.step_responses if isinstance(r, QnaResponse)]
        assert qna.answer == "" and qna.is_default

        assert fake_repos.rituals.get(ritual.id).completion_count == 1
        assert fake_repos.stats.get("user-1").current_streak == 1

    def test_defaults_to_today(self, use_case, ritual):
        result = use_case.execute("user-1", ritual.id, None, [boolean_done(ritual)])
        assert result.completion.completed_date == result.completion.completed_at.date()

    def test_duplicate_completion_counts_once(self, use_case, ritual, fake_repos):
        first = use_case.execute("user-1", ritual.id, None, [boolean_done(ritual)], DAY)
        second = use_case.execute("user-1", ritual.id, "again", [boolean_done(ritual, False)], DAY)

        assert first.success is True
        assert second.success is False
        assert second.error_kind == "duplicate_completion"
        assert second.ritual_id == ritual.id
        assert fake_repos.rituals.get(ritual.id).completion_count == 1
        assert len(fake_repos.completions.get_all()) == 1

    def test_next_day_is_not_a_duplicate(self, use_case, ritual, fake_repos):
        use_case.execute("user-1", ritual.id, None, [boolean_done(ritual)], DAY)
        result = use_case.execute("user-1", ritual.id, None, [boolean_done(ritual)], date(2024, 3, 5))

        assert result.success is True
        assert fake_repos.rituals.get(ritual.id).completion_count == 2
        assert fake_repos.stats.get("user-1").current_streak == 2

    def test_validation_failure_writes_nothing(self, use_case, ritual, fake_repos):
        result = use_case.execute("user-1", ritual.id, None, [], DAY)

        assert result.error_kind == "missing_required_step"
        assert result.error_details["step_id"] == ritual.steps[0].id
        assert fake_repos.completions.get_all() == []
        assert fake_repos.rituals.get(ritual.id).completion_count == 0

    def test_storage_failure_rolls_back_everything(self, use_case, ritual, fake_repos):
        fake_repos.completions.simulate_atomic_failure()

        result = use_case.execute("user-1", ritual.id, None, [boolean_done(ritual)], DAY)

        assert result.error_kind == "storage_unavailable"
        assert result.retryable is True
        assert fake_repos.completions.get_all() == []
        assert fake_repos.rituals.get(ritual.id).completion_count == 0
        assert fake_repos.stats.get("user-1").current_streak == 0

        retry = use_case.execute("user-1", ritual.id, None, [boolean_done(ritual)], DAY)
        assert retry.success is True


class TestStreak:
    def test_only_defaults_do_not_count(self, use_case, fake_repos):
        steps = [QnaStep(name="Notes", order_index=0, is_required=False)]
        [ritual] = fake_repos.rituals.seed([make_ritual(steps=steps)])

        result = use_case.execute("user-1", ritual.id, None, [], DAY)

        assert result.success is True
        assert result.counts_toward_streak is False
        assert fake_repos.stats.get("user-1").current_streak == 0

    def test_one_increment_per_day(self, use_case, fake_repos):
        [a, b] = fake_repos.rituals.seed([make_ritual(name="A"), make_ritual(name="B")])

        use_case.execute("user-1", a.id, None, [boolean_done(a)], DAY)
        use_case.execute("user-1", b.id, None, [boolean_done(b)], DAY)

        assert fake_repos.stats.get("user-1").current_streak == 1

    def test_backdated_completion_does_not_inflate_streak(self, use_case, fake_repos):
        a, b, c = fake_repos.rituals.seed(
            [make_ritual(name="A"), make_ritual(name="B"), make_ritual(name="C")]
        )

        use_case.execute("user-1", a.id, None, [boolean_done(a)], date(2024, 3, 5))
        use_case.execute("user-1", b.id, None, [boolean_done(b)], date(2024, 3, 4))
        use_case.execute("user-1", c.id, None, [boolean_done(c)], date(2024, 3, 5))

        stats = fake_repos.stats.get("user-1")
        assert stats.current_streak == 1
        assert stats.longest_streak == 1
        assert stats.last_streak_date == date(2024, 3, 5)

    def test_longest_streak_kept(self, use_case, fake_repos, ritual):
        fake_repos.stats.seed([UserStats(user_id="user-1", current_streak=0, longest_streak=5)])
        use_case.execute("user-1", ritual.id, None, [boolean_done(ritual)], DAY)

        stats = fake_repos.stats.get("user-1")
        assert stats.current_streak == 1
        assert stats.longest_streak == 5


class TestAccess:
    def test_missing_ritual(self, use_case):
        result = use_case.execute("user-1", "ghost", None, [], DAY)
        assert result.error_kind == "not_found"

    def test_private_ritual_of_someone_else(self, use_case, ritual):
        result = use_case.execute("user-2", ritual.id, None, [boolean_done(ritual)], DAY)
        assert result.error_kind == "forbidden"

    def test_public_ritual_of_someone_else(self, use_case, fake_repos):
        [ritual] = fake_repos.rituals.seed([make_ritual(user_id="author", visibility=Visibility.PUBLIC)])
        result = use_case.execute("user-2", ritual.id, None, [boolean_done(ritual)], DAY)
        assert result.success is True
        assert result.completion.user_id == "user-2"


class TestWorkoutCompletion:
    def test_set_responses_stored(self, use_case, fake_repos):
        [ritual] = fake_repos.rituals.seed([make_ritual(steps=[make_workout_step()])])
        step = ritual.steps[0]
        squat = step.config.exercises[0]
        response = WorkoutResponse(
            step_definition_id=step.id,
            set_responses=[
                WorkoutSetResponse(workout_set_id=s.id, actual_weight_kg=62.5, actual_reps=5)
                for s in squat.sets
            ],
        )

        result = use_case.execute("user-1", ritual.id, None, [response], DAY)

        assert result.success is True
        [stored] = result.completion.step_responses
        assert len(stored.set_responses) == 3

    def test_illegal_set_field_rejected(self, use_case, fake_repos):
        [ritual] = fake_repos.rituals.seed([make_ritual(steps=[make_workout_step()])])
        step = ritual.steps[0]
        set_id = step.config.exercises[0].sets[0].id
        response = WorkoutResponse(
            step_definition_id=step.id,
            set_responses=[WorkoutSetResponse(workout_set_id=set_id, actual_distance_m=400)],
        )

        result = use_case.execute("user-1", ritual.id, None, [response], DAY)

        assert result.error_kind == "malformed_response"
        assert fake_repos.completions.get_all() == []


class TestBatch:
    def test_items_succeed_or_fail_independently(self, use_case, fake_repos, ritual):
        [other] = fake_repos.rituals.seed([make_ritual(name="Other")])
        items = [
            BatchCompletionItem(ritual_id=ritual.id, responses=[boolean_done(ritual)], on_date=DAY),
            BatchCompletionItem(ritual_id="ghost", on_date=DAY),
            BatchCompletionItem(ritual_id=other.id, responses=[boolean_done(other)], on_date=DAY),
        ]

        batch = use_case.execute_batch("user-1", items)

        assert batch.succeeded == 2
        assert batch.failed == 1
        assert batch.success is False
        assert batch.results[1].error_kind == "not_found"
        assert batch.results[1].ritual_id == "ghost"
        assert len(fake_repos.completions.get_all()) == 2
