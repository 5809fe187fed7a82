"""
Tests for the Supabase repository implementations.

Part of RIT-22: Define repository interfaces (ports)
Part of RIT-25: Transaction handling for completions and forks

The Supabase client is replaced by a MagicMock whose query builder returns
itself, so these tests check the queries issued, the RPC payloads and the
translation of PostgREST failures into ritual errors.
"""
from datetime import date, datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock

import httpx
import pytest
from postgrest.exceptions import APIError

import infrastructure.db
from application.exceptions import RitualStorageError
from domain.exceptions import (
    DuplicateCompletionError,
    ForbiddenError,
    InvalidStepDefinitionError,
    NotFoundError,
)
from domain.models import BooleanResponse, RitualCompletion, Visibility
from infrastructure import (
    SupabaseCompletionRepository,
    SupabaseRitualRepository,
    SupabaseUserStatsRepository,
)
from infrastructure.db.errors import storage_call, translate_api_error
from tests.fakes import make_ritual

# All tests in this module are pure logic tests with mocks - mark as unit
pytestmark = pytest.mark.unit

RITUAL_ROW = {
    "id": "r-1",
    "user_id": "user-1",
    "name": "Morning routine",
    "category": "wellness",
    "visibility": "private",
    "created_at": "2024-01-01T00:00:00Z",
    "ritual_frequencies": [{"type": "daily", "interval": 1}],
    "step_definitions": [
        {"id": "s-1", "type": "boolean", "name": "Done", "order_index": 0, "is_required": True}
    ],
}


def _query(data=None, count=None):
    """A PostgREST query builder stand-in whose filters chain."""
    query = MagicMock()
    for name in ("select", "eq", "order", "range", "limit", "update", "delete", "or_"):
        getattr(query, name).return_value = query
    query.execute.return_value = MagicMock(data=data, count=count)
    return query


def _client(query=None, rpc_data=None, rpc_error=None):
    client = MagicMock()
    client.table.return_value = query or _query()
    if rpc_error is not None:
        client.rpc.return_value.execute.side_effect = rpc_error
    else:
        client.rpc.return_value.execute.return_value = MagicMock(data=rpc_data)
    return client


def _api_error(code, message="boom", details=None):
    return APIError({"message": message, "code": code, "hint": None, "details": details})


def _completion():
    return RitualCompletion(
        ritual_id="r-1",
        user_id="user-1",
        completed_at=datetime(2024, 1, 2, 8, 0, tzinfo=timezone.utc),
        completed_date=date(2024, 1, 2),
        step_responses=[BooleanResponse(step_definition_id="s-1", value_boolean=True)],
    )


# =============================================================================
# Error translation
# =============================================================================


class TestTranslateApiError:
    def test_unique_violation_on_completion_is_duplicate(self):
        error = translate_api_error(_api_error("23505"), "complete_ritual", ritual_id="r-1", on_date="2024-01-02")

        assert isinstance(error, DuplicateCompletionError)
        assert error.details["date"] == "2024-01-02"

    def test_no_data_found_is_not_found(self):
        error = translate_api_error(_api_error("P0002"), "fork_ritual", ritual_id="r-1")

        assert isinstance(error, NotFoundError)

    def test_insufficient_privilege_is_forbidden(self):
        error = translate_api_error(_api_error("42501", "ritual is not public"), "fork_ritual")

        assert isinstance(error, ForbiddenError)
        assert error.message == "ritual is not public"

    def test_measurement_mismatch_is_invalid_step_definition(self):
        error = translate_api_error(
            _api_error("22023", "exercise e-1 is measured as distance_time, not weight_reps", "2"),
            "create_ritual",
        )

        assert isinstance(error, InvalidStepDefinitionError)
        assert error.step_index == 2
        assert "distance_time" in error.reason

    def test_other_codes_are_storage_errors(self):
        error = translate_api_error(_api_error("57014", "canceling statement due to statement timeout"), "create_ritual")

        assert isinstance(error, RitualStorageError)
        assert error.retryable is True
        assert "statement timeout" not in error.message

    def test_storage_call_wraps_transport_errors(self):
        with pytest.raises(RitualStorageError):
            with storage_call("get_ritual"):
                raise httpx.ReadTimeout("timed out")

    def test_storage_call_lets_ritual_errors_through(self):
        with pytest.raises(NotFoundError):
            with storage_call("get_ritual"):
                raise NotFoundError("Ritual", "r-1")


# =============================================================================
# SupabaseRitualRepository
# =============================================================================


class TestSupabaseRitualRepository:
    def test_get_embeds_children(self):
        query = _query(data=[RITUAL_ROW])
        repo = SupabaseRitualRepository(_client(query))

        ritual = repo.get("r-1")

        assert ritual.id == "r-1"
        assert ritual.steps[0].id == "s-1"
        select_arg = query.select.call_args[0][0]
        assert "ritual_frequencies" in select_arg
        assert "step_definitions" in select_arg
        query.eq.assert_called_with("id", "r-1")

    def test_get_missing_returns_none(self):
        repo = SupabaseRitualRepository(_client(_query(data=[])))

        assert repo.get("r-1") is None

    def test_list_for_user_pages_with_range(self):
        query = _query(data=[RITUAL_ROW])
        repo = SupabaseRitualRepository(_client(query))

        rituals = repo.list_for_user("user-1", limit=10, offset=20)

        assert len(rituals) == 1
        query.order.assert_called_with("created_at", desc=True)
        query.range.assert_called_with(20, 29)

    def test_list_for_user_without_limit(self):
        query = _query(data=[])
        SupabaseRitualRepository(_client(query)).list_for_user("user-1", limit=None)

        query.range.assert_not_called()

    def test_list_public_search(self):
        query = _query(data=[])
        repo = SupabaseRitualRepository(_client(query))

        repo.list_public(search="stretch", sort_by="fork_count", descending=False)

        query.eq.assert_any_call("visibility", "public")
        query.or_.assert_called_once_with("name.ilike.%stretch%,description.ilike.%stretch%")
        query.order.assert_called_with("fork_count", desc=False)

    def test_create_calls_rpc_then_reloads(self):
        client = _client(_query(data=[RITUAL_ROW]), rpc_data="r-1")
        repo = SupabaseRitualRepository(client)

        saved = repo.create(make_ritual())

        name, payload = client.rpc.call_args[0]
        assert name == "create_ritual"
        assert payload["p_ritual"]["name"] == "Morning routine"
        assert payload["p_frequency"]["type"] == "daily"
        assert len(payload["p_steps"]) == 1
        assert saved.id == "r-1"

    def test_create_failure_is_storage_error(self):
        repo = SupabaseRitualRepository(_client(rpc_error=_api_error("08006")))

        with pytest.raises(RitualStorageError):
            repo.create(make_ritual())

    def test_create_with_mismatched_catalog_exercise(self):
        repo = SupabaseRitualRepository(_client(rpc_error=_api_error("22023", "exercise mismatch", "0")))

        with pytest.raises(InvalidStepDefinitionError) as exc_info:
            repo.create(make_ritual())
        assert exc_info.value.kind == "invalid_step_definition"

    def test_update_sends_only_given_parts(self):
        client = _client(_query(data=[RITUAL_ROW]))
        repo = SupabaseRitualRepository(client)

        repo.update("r-1", {"name": "Evening"})

        name, payload = client.rpc.call_args[0]
        assert name == "update_ritual"
        assert payload["p_changes"] == {"name": "Evening"}
        assert payload["p_steps"] is None
        assert payload["p_frequency"] is None

    def test_set_visibility_missing(self):
        repo = SupabaseRitualRepository(_client(_query(data=[])))

        with pytest.raises(NotFoundError):
            repo.set_visibility("r-1", Visibility.PUBLIC)

    def test_fork_forbidden(self):
        repo = SupabaseRitualRepository(_client(rpc_error=_api_error("42501", "ritual is not public")))

        with pytest.raises(ForbiddenError):
            repo.fork("r-1", "user-2")

    def test_fork_returns_new_ritual(self):
        row = {**RITUAL_ROW, "id": "r-2", "user_id": "user-2", "forked_from_id": "r-1"}
        client = _client(_query(data=[row]), rpc_data="r-2")

        copy = SupabaseRitualRepository(client).fork("r-1", "user-2")

        assert copy.id == "r-2"
        assert copy.forked_from_id == "r-1"
        client.rpc.assert_called_once_with(
            "fork_ritual", {"p_source_id": "r-1", "p_owner_id": "user-2"}
        )


# =============================================================================
# SupabaseCompletionRepository
# =============================================================================


class TestSupabaseCompletionRepository:
    def test_record_completion_uses_rpc(self):
        client = _client(rpc_data="c-1")
        repo = SupabaseCompletionRepository(client)

        saved = repo.record_completion(_completion(), qualifying=True)

        name, payload = client.rpc.call_args[0]
        assert name == "complete_ritual"
        assert payload["p_qualifying"] is True
        assert saved.id == "c-1"

    def test_duplicate_completion(self):
        repo = SupabaseCompletionRepository(_client(rpc_error=_api_error("23505")))

        with pytest.raises(DuplicateCompletionError):
            repo.record_completion(_completion(), qualifying=True)

    def test_missing_ritual(self):
        repo = SupabaseCompletionRepository(_client(rpc_error=_api_error("P0002")))

        with pytest.raises(NotFoundError):
            repo.record_completion(_completion(), qualifying=False)

    def test_private_ritual_of_another_user(self):
        repo = SupabaseCompletionRepository(
            _client(rpc_error=_api_error("42501", "Only the owner can complete a private ritual"))
        )

        with pytest.raises(ForbiddenError):
            repo.record_completion(_completion(), qualifying=True)

    def test_timeout_is_retryable_storage_error(self):
        repo = SupabaseCompletionRepository(_client(rpc_error=httpx.ReadTimeout("timed out")))

        with pytest.raises(RitualStorageError) as exc_info:
            repo.record_completion(_completion(), qualifying=True)
        assert exc_info.value.retryable is True

    def test_count_for_ritual(self):
        query = _query(data=[{"id": "c-1"}], count=3)

        assert SupabaseCompletionRepository(_client(query)).count_for_ritual("user-1", "r-1") == 3
        query.select.assert_called_with("id", count="exact")


# =============================================================================
# SupabaseUserStatsRepository
# =============================================================================


class TestSupabaseUserStatsRepository:
    def test_missing_row_is_zero_stats(self):
        stats = SupabaseUserStatsRepository(_client(_query(data=[]))).get("user-1")

        assert stats.current_streak == 0
        assert stats.longest_streak == 0

    def test_reads_row(self):
        row = {"user_id": "user-1", "current_streak": 4, "longest_streak": 9, "last_streak_date": "2024-01-02"}

        stats = SupabaseUserStatsRepository(_client(_query(data=[row]))).get("user-1")

        assert stats.current_streak == 4
        assert stats.last_streak_date == date(2024, 1, 2)

    def test_reset_streak(self):
        row = {"user_id": "user-1", "current_streak": 0, "longest_streak": 9}
        query = _query(data=[row])

        stats = SupabaseUserStatsRepository(_client(query)).reset_streak("user-1")

        query.update.assert_called_once_with({"current_streak": 0})
        assert stats.longest_streak == 9


# =============================================================================
# Schema functions
# =============================================================================


@pytest.fixture(scope="module")
def schema() -> str:
    path = Path(infrastructure.db.__file__).parent / "sql" / "rituals_schema.sql"
    return path.read_text()


def _function_body(schema: str, name: str) -> str:
    start = schema.index(f"create or replace function {name}(")
    return schema[start:schema.index("\n$$;", start)]


class TestRitualsSchema:
    def test_step_update_keeps_workout_rows(self, schema):
        step_fn = _function_body(schema, "upsert_ritual_step")
        sync_fn = _function_body(schema, "sync_workout_exercises")

        assert "delete from workout_exercises where step_definition_id = v_step_id" not in step_fn
        assert "sync_workout_exercises" in step_fn
        assert "update workout_exercises set" in sync_fn
        assert "update workout_sets set" in sync_fn

    def test_known_exercise_measurement_type_checked(self, schema):
        body = _function_body(schema, "resolve_exercise")

        assert "v_stored_type is distinct from p_exercise->>'measurement_type'" in body
        assert "errcode = '22023'" in body

    def test_completion_rechecks_access_under_lock(self, schema):
        body = _function_body(schema, "complete_ritual")

        assert "for update" in body
        assert "v_ritual.visibility <> 'public'" in body
        assert "errcode = '42501'" in body

    def test_streak_only_moves_forward(self, schema):
        body = _function_body(schema, "complete_ritual")

        assert "user_stats.last_streak_date < excluded.last_streak_date" in body
