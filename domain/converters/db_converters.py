"""
Database row converters for rituals and completions.

Part of RIT-22: Define repository interfaces (ports)

Pure functions translating between Supabase/PostgREST rows (with embedded
child resources) and domain models, and building the JSON payloads passed to
the atomic RPC functions.

Rows are read with embedded resources, so a ritual row looks like:

    {
        "id": "...", "name": "...", ...,
        "ritual_frequencies": {"type": "weekly", "days_of_week": [1, 3], ...},
        "step_definitions": [
            {"id": "...", "type": "workout", "config": {}, "workout_exercises": [
                {"id": "...", "order_index": 0, "exercises": {...}, "workout_sets": [...]},
            ]},
        ],
    }

All converters are pure functions with no side effects.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter

from domain.models import (
    FrequencyRule,
    RitualCompletion,
    RitualDefinition,
    StepDefinition,
    StepResponse,
    UserStats,
    WorkoutResponse,
    WorkoutStep,
)
from domain.models.step import SET_FIELDS

RITUAL_SELECT = (
    "*, ritual_frequencies(*), "
    "step_definitions(*, workout_exercises(*, exercises(*), workout_sets(*)))"
)
COMPLETION_SELECT = "*, step_responses(*, workout_set_responses(*))"

RITUAL_COLUMNS = (
    "name",
    "category",
    "description",
    "location",
    "gear",
    "scheduled_time",
    "visibility",
    "is_active",
)

# Step response column holding each kind's payload
RESPONSE_PAYLOAD_COLUMNS = {
    "boolean": "value_boolean",
    "counter": "actual_count",
    "qna": "answer",
    "timer": "actual_seconds",
    "scale": "scale_response",
}

_step_adapter = TypeAdapter(StepDefinition)
_response_adapter = TypeAdapter(StepResponse)


def _parse_datetime(value: Any) -> Optional[datetime]:
    """Parse a PostgREST timestamp (ISO, possibly with Z suffix)."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            if value.endswith("Z"):
                value = value[:-1] + "+00:00"
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None


def _one(embedded: Any) -> Optional[Dict[str, Any]]:
    """Embedded to-one resources arrive as an object or a one-item list."""
    if isinstance(embedded, list):
        return embedded[0] if embedded else None
    return embedded


def _by_order(rows: Optional[List[Dict[str, Any]]], key: str = "order_index") -> List[Dict[str, Any]]:
    return sorted(rows or [], key=lambda r: r.get(key) or 0)


# =============================================================================
# Rituals
# =============================================================================


def row_to_frequency(row: Dict[str, Any]) -> FrequencyRule:
    return FrequencyRule(
        type=row["type"],
        interval=row.get("interval") or 1,
        days_of_week=row.get("days_of_week"),
        specific_dates=row.get("specific_dates"),
        exclude_dates=row.get("exclude_dates") or [],
    )


def frequency_to_row(rule: FrequencyRule) -> Dict[str, Any]:
    return rule.model_dump(mode="json")


def _row_to_workout_exercise(row: Dict[str, Any]) -> Dict[str, Any]:
    exercise = _one(row.get("exercises")) or {}
    return {
        "id": row.get("id"),
        "order_index": row.get("order_index") or 0,
        "exercise": {
            "id": exercise.get("id") or row.get("exercise_id"),
            "name": exercise.get("name"),
            "measurement_type": exercise.get("measurement_type"),
            "body_part": exercise.get("body_part"),
            "equipment": exercise.get("equipment") or [],
        },
        "sets": [
            {
                "id": s.get("id"),
                "set_number": s["set_number"],
                **{
                    f"target_{name}": s.get(f"target_{name}")
                    for name in SET_FIELDS
                },
            }
            for s in _by_order(row.get("workout_sets"), "set_number")
        ],
    }


def row_to_step(row: Dict[str, Any]) -> StepDefinition:
    """
    Convert a step_definitions row to its StepDefinition variant.

    Raises:
        pydantic.ValidationError: If the stored type/config pair is invalid.
    """
    data: Dict[str, Any] = {
        "id": row.get("id"),
        "type": row["type"],
        "name": row["name"],
        "question": row.get("question"),
        "is_required": row.get("is_required", True),
        "order_index": row.get("order_index") or 0,
    }
    if row["type"] == "workout":
        data["config"] = {
            "exercises": [
                _row_to_workout_exercise(we) for we in _by_order(row.get("workout_exercises"))
            ]
        }
    elif row["type"] in ("counter", "timer", "scale"):
        data["config"] = row.get("config") or {}
    return _step_adapter.validate_python(data)


def step_to_row(step) -> Dict[str, Any]:
    """
    Serialize a step for the create_ritual / update_ritual RPC payload.

    Workout steps carry their exercises and sets under "exercises"; other
    kinds carry their config object under "config".
    """
    row: Dict[str, Any] = {
        "id": step.id,
        "type": step.type,
        "name": step.name,
        "question": step.question,
        "is_required": step.is_required,
        "order_index": step.order_index,
        "config": {},
        "exercises": [],
    }
    if isinstance(step, WorkoutStep):
        row["exercises"] = [
            {
                "id": we.id,
                "order_index": we.order_index,
                "exercise": we.exercise.model_dump(mode="json"),
                "sets": [s.model_dump(mode="json") for s in we.sets],
            }
            for we in step.config.exercises
        ]
    elif hasattr(step, "config"):
        row["config"] = step.config.model_dump(mode="json")
    return row


def row_to_ritual(row: Dict[str, Any]) -> RitualDefinition:
    """
    Convert a rituals row with embedded frequency and steps to a domain model.

    Raises:
        ValueError: If the row has no frequency rule.
    """
    frequency_row = _one(row.get("ritual_frequencies"))
    if not frequency_row:
        raise ValueError(f"Ritual {row.get('id')} has no frequency rule")

    return RitualDefinition(
        id=row.get("id"),
        user_id=row.get("user_id"),
        name=row["name"],
        category=row.get("category") or "other",
        description=row.get("description"),
        location=row.get("location"),
        gear=row.get("gear") or [],
        scheduled_time=row.get("scheduled_time"),
        visibility=row.get("visibility") or "private",
        forked_from_id=row.get("forked_from_id"),
        fork_count=row.get("fork_count") or 0,
        completion_count=row.get("completion_count") or 0,
        is_active=row.get("is_active", True),
        steps=[row_to_step(s) for s in _by_order(row.get("step_definitions"))],
        frequency=row_to_frequency(frequency_row),
        created_at=_parse_datetime(row.get("created_at")),
        updated_at=_parse_datetime(row.get("updated_at")),
    )


def ritual_to_row(ritual: RitualDefinition) -> Dict[str, Any]:
    """Scalar columns of the rituals table."""
    row = ritual.model_dump(mode="json", include=set(RITUAL_COLUMNS))
    row["user_id"] = ritual.user_id
    return row


def ritual_to_rpc_payload(ritual: RitualDefinition) -> Dict[str, Any]:
    """Arguments for the create_ritual RPC."""
    return {
        "p_ritual": ritual_to_row(ritual),
        "p_frequency": frequency_to_row(ritual.frequency),
        "p_steps": [step_to_row(s) for s in ritual.ordered_steps],
    }


# =============================================================================
# Completions
# =============================================================================


def _row_to_response(row: Dict[str, Any]) -> StepResponse:
    data: Dict[str, Any] = {
        "type": row["type"],
        "step_definition_id": row["step_definition_id"],
        "is_default": row.get("is_default", False),
    }
    if row["type"] == "workout":
        data["set_responses"] = [
            {
                "workout_set_id": s["workout_set_id"],
                **{
                    f"actual_{name}": s.get(f"actual_{name}")
                    for name in SET_FIELDS
                },
            }
            for s in row.get("workout_set_responses") or []
            if s.get("workout_set_id")
        ]
    else:
        column = RESPONSE_PAYLOAD_COLUMNS[row["type"]]
        data[column] = row.get(column)
    return _response_adapter.validate_python(data)


def row_to_completion(row: Dict[str, Any]) -> RitualCompletion:
    """
    Convert a ritual_completions row with embedded responses.

    Responses whose step definition has since been removed from the ritual
    (step_definition_id set to null) are left out.
    """
    responses = [
        _row_to_response(r)
        for r in _by_order(row.get("step_responses"), "position")
        if r.get("step_definition_id")
    ]
    return RitualCompletion(
        id=row.get("id"),
        ritual_id=row["ritual_id"],
        user_id=row["user_id"],
        completed_at=_parse_datetime(row.get("completed_at")),
        completed_date=row["completed_date"],
        notes=row.get("notes"),
        step_responses=responses,
    )


def response_to_row(response, position: int) -> Dict[str, Any]:
    row: Dict[str, Any] = {
        "step_definition_id": response.step_definition_id,
        "type": response.type,
        "is_default": response.is_default,
        "position": position,
    }
    if isinstance(response, WorkoutResponse):
        row["set_responses"] = [
            s.model_dump(mode="json") for s in response.set_responses or []
        ]
    else:
        column = RESPONSE_PAYLOAD_COLUMNS[response.type]
        row[column] = getattr(response, column)
    return row


def completion_to_rpc_payload(completion: RitualCompletion, qualifying: bool) -> Dict[str, Any]:
    """Arguments for the complete_ritual RPC."""
    return {
        "p_completion": {
            "ritual_id": completion.ritual_id,
            "user_id": completion.user_id,
            "completed_at": completion.completed_at.isoformat(),
            "completed_date": completion.completed_date.isoformat(),
            "notes": completion.notes,
        },
        "p_responses": [
            response_to_row(r, position) for position, r in enumerate(completion.step_responses)
        ],
        "p_qualifying": qualifying,
    }


# =============================================================================
# User stats
# =============================================================================


def row_to_user_stats(row: Dict[str, Any]) -> UserStats:
    return UserStats(
        user_id=row["user_id"],
        current_streak=row.get("current_streak") or 0,
        longest_streak=row.get("longest_streak") or 0,
        last_streak_date=row.get("last_streak_date"),
    )
