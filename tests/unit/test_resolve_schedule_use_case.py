"""
Unit tests for ResolveScheduleUseCase.

Part of RIT-21: Recurrence model for rituals
"""

from datetime import date

import pytest

from application.use_cases import CompleteRitualUseCase, ResolveScheduleUseCase
from domain.models import BooleanResponse, FrequencyRule, FrequencyType, UserStats
from tests.fakes import make_ritual

pytestmark = pytest.mark.unit

MONDAY = date(2024, 3, 4)
TUESDAY = date(2024, 3, 5)


@pytest.fixture
def use_case(fake_repos) -> ResolveScheduleUseCase:
    return ResolveScheduleUseCase(fake_repos.rituals, fake_repos.completions, fake_repos.stats)


def complete(fake_repos, ritual, on_date):
    result = CompleteRitualUseCase(fake_repos.rituals, fake_repos.completions).execute(
        ritual.user_id,
        ritual.id,
        None,
        [BooleanResponse(step_definition_id=ritual.steps[0].id, value_boolean=True)],
        on_date,
    )
    assert result.success
    return result.completion


class TestResolveSchedule:
    def test_partitions_scheduled_and_completed(self, use_case, fake_repos):
        [daily, weekday] = fake_repos.rituals.seed([
            make_ritual(name="Daily"),
            make_ritual(
                name="Mon/Wed/Fri",
                frequency=FrequencyRule(type=FrequencyType.WEEKLY, days_of_week=[1, 3, 5]),
            ),
        ])
        done = complete(fake_repos, daily, MONDAY)

        result = use_case.execute("user-1", MONDAY)

        assert result.success is True
        assert result.date == MONDAY
        assert [r.id for r in result.scheduled] == [weekday.id]
        assert [c.id for c in result.completed] == [done.id]

    def test_not_due_appears_nowhere(self, use_case, fake_repos):
        fake_repos.rituals.seed([
            make_ritual(frequency=FrequencyRule(type=FrequencyType.WEEKLY, days_of_week=[1]))
        ])

        result = use_case.execute("user-1", TUESDAY)

        assert result.scheduled == []
        assert result.completed == []

    def test_completion_on_non_occurrence_not_listed(self, use_case, fake_repos):
        [weekly] = fake_repos.rituals.seed([
            make_ritual(frequency=FrequencyRule(type=FrequencyType.WEEKLY, days_of_week=[1]))
        ])
        complete(fake_repos, weekly, TUESDAY)

        assert use_case.execute("user-1", TUESDAY).completed == []

    def test_only_own_active_rituals(self, use_case, fake_repos):
        fake_repos.rituals.seed([
            make_ritual(name="Paused", is_active=False),
            make_ritual(name="Someone else's", user_id="user-2"),
        ])
        result = use_case.execute("user-1", MONDAY)
        assert result.scheduled == []

    def test_before_creation_not_scheduled(self, use_case, fake_repos):
        fake_repos.rituals.seed([make_ritual(created=TUESDAY)])
        assert use_case.execute("user-1", MONDAY).scheduled == []

    def test_invalid_stored_rule_skipped(self, use_case, fake_repos):
        broken = FrequencyRule.model_construct(
            type=FrequencyType.CUSTOM, interval=1, days_of_week=None, specific_dates=None, exclude_dates=[]
        )
        [good, _] = fake_repos.rituals.seed([
            make_ritual(name="Good"),
            make_ritual(name="Broken").model_copy(update={"frequency": broken}),
        ])

        result = use_case.execute("user-1", MONDAY)

        assert result.success is True
        assert [r.id for r in result.scheduled] == [good.id]

    def test_current_streak_reported(self, use_case, fake_repos):
        fake_repos.stats.seed([UserStats(user_id="user-1", current_streak=4, longest_streak=9)])
        assert use_case.execute("user-1", MONDAY).current_streak == 4

    def test_without_stats_repo(self, fake_repos):
        result = ResolveScheduleUseCase(fake_repos.rituals, fake_repos.completions).execute("user-1", MONDAY)
        assert result.success is True
        assert result.current_streak is None

    def test_storage_failure(self, fake_repos):
        class Down:
            def list_for_user(self, *args, **kwargs):
                from application.exceptions import RitualStorageError
                raise RitualStorageError("timeout")

        result = ResolveScheduleUseCase(Down(), fake_repos.completions).execute("user-1", MONDAY)
        assert result.error_kind == "storage_unavailable"
