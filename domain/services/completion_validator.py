"""
Completion validation: match candidate responses to step definitions.

Part of RIT-18: Typed step responses

Pure function, no I/O. For each step definition in order_index order:

1. A response with the same step id and type is accepted after its payload
   has been checked (and counter values normalized to SI).
2. No response and the step is required -> MissingRequiredStepError.
3. No response and the step is optional -> a neutral default is synthesized
   (false, 0, "", min_value, no sets) and flagged with is_default=True.
4. A response whose type differs from the step's -> TypeMismatchError.

After the walk, duplicate responses for one step and responses for steps that
are not part of the ritual are rejected as malformed.
"""

from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from domain.exceptions import (
    InvalidQuantityError,
    MalformedResponseError,
    MissingRequiredStepError,
    TypeMismatchError,
)
from domain.models.response import (
    BooleanResponse,
    CounterResponse,
    QnaResponse,
    ScaleResponse,
    TimerResponse,
    ValidatedResponses,
    WorkoutResponse,
)
from domain.models.step import (
    LEGAL_SET_FIELDS,
    BooleanStep,
    CounterStep,
    QnaStep,
    ScaleStep,
    TimerStep,
    WorkoutStep,
)
from domain.services.unit_converter import UnitConverter

_default_converter = UnitConverter()


def default_response(step):
    """Neutral placeholder for a skipped optional step."""
    common = {"step_definition_id": step.id, "is_default": True}
    if isinstance(step, BooleanStep):
        return BooleanResponse(value_boolean=False, **common)
    if isinstance(step, CounterStep):
        return CounterResponse(actual_count=0, **common)
    if isinstance(step, QnaStep):
        return QnaResponse(answer="", **common)
    if isinstance(step, TimerStep):
        return TimerResponse(actual_seconds=0, **common)
    if isinstance(step, ScaleStep):
        return ScaleResponse(scale_response=step.config.min_value, **common)
    if isinstance(step, WorkoutStep):
        return WorkoutResponse(set_responses=[], **common)
    raise TypeError(f"Unsupported step type: {type(step).__name__}")


def _require(step_id: str, value, field: str) -> None:
    if value is None:
        raise MalformedResponseError(step_id, f"{field} is required")


def _check_counter(step: CounterStep, response: CounterResponse, converter: UnitConverter) -> CounterResponse:
    _require(step.id, response.actual_count, "actual_count")
    if response.unit is None:
        return response
    unit = converter.resolve(response.unit)
    target = converter.resolve(step.config.quantity_key)
    if unit.dimension != target.dimension:
        raise InvalidQuantityError(
            f"Unit '{unit.key}' is not a {target.dimension.value} unit",
            step_id=step.id,
            quantity=unit.key,
        )
    return response.model_copy(
        update={"actual_count": converter.to_si(response.actual_count, unit), "unit": None}
    )


def _check_scale(step: ScaleStep, response: ScaleResponse) -> ScaleResponse:
    _require(step.id, response.scale_response, "scale_response")
    low, high = step.config.min_value, step.config.max_value
    if not low <= response.scale_response <= high:
        raise MalformedResponseError(
            step.id, f"scale_response must be between {low} and {high}"
        )
    return response


def _check_qna(step: QnaStep, response: QnaResponse) -> QnaResponse:
    _require(step.id, response.answer, "answer")
    if step.is_required and not response.answer.strip():
        raise MalformedResponseError(step.id, "answer must not be blank")
    return response


def _check_workout(step: WorkoutStep, response: WorkoutResponse) -> WorkoutResponse:
    _require(step.id, response.set_responses, "set_responses")
    seen = set()
    for set_response in response.set_responses:
        set_id = set_response.workout_set_id
        if set_id in seen:
            raise MalformedResponseError(step.id, f"set {set_id} answered more than once")
        seen.add(set_id)

        found = step.find_set(set_id)
        if found is None:
            raise MalformedResponseError(step.id, f"set {set_id} does not belong to this step")
        exercise, _ = found

        populated = set_response.populated_fields()
        illegal = populated - LEGAL_SET_FIELDS[exercise.measurement_type]
        if illegal:
            names = ", ".join(f"actual_{name}" for name in sorted(illegal))
            raise MalformedResponseError(
                step.id,
                f"set {set_id} of {exercise.name} ({exercise.measurement_type.value}) cannot carry {names}",
            )
        if not populated:
            raise MalformedResponseError(step.id, f"set {set_id} has no actual values")
    return response


def _check_payload(step, response, converter: UnitConverter):
    if isinstance(step, BooleanStep):
        _require(step.id, response.value_boolean, "value_boolean")
        return response
    if isinstance(step, CounterStep):
        return _check_counter(step, response, converter)
    if isinstance(step, QnaStep):
        return _check_qna(step, response)
    if isinstance(step, TimerStep):
        _require(step.id, response.actual_seconds, "actual_seconds")
        return response
    if isinstance(step, ScaleStep):
        return _check_scale(step, response)
    if isinstance(step, WorkoutStep):
        return _check_workout(step, response)
    raise TypeError(f"Unsupported step type: {type(step).__name__}")


def validate_completion(
    step_definitions: Sequence,
    responses: Sequence,
    converter: Optional[UnitConverter] = None,
) -> ValidatedResponses:
    """
    Validate candidate responses against a ritual's step definitions.

    Args:
        step_definitions: The ritual's current steps (must carry ids)
        responses: Candidate StepResponse instances
        converter: Quantity catalog for counter unit conversion

    Returns:
        ValidatedResponses with exactly one response per step, in step order.

    Raises:
        MissingRequiredStepError, TypeMismatchError, MalformedResponseError,
        InvalidQuantityError
    """
    converter = converter or _default_converter
    steps = sorted(step_definitions, key=lambda s: s.order_index)

    by_step: Dict[str, List] = defaultdict(list)
    for response in responses:
        by_step[response.step_definition_id].append(response)

    validated = []
    for step in steps:
        candidates = by_step.pop(step.id, [])
        if not candidates:
            if step.is_required:
                raise MissingRequiredStepError(step.id, step.name)
            validated.append(default_response(step))
            continue

        response = candidates[0]
        if response.type != step.type:
            raise TypeMismatchError(step.id, expected=step.type, actual=response.type)
        if len(candidates) > 1:
            raise MalformedResponseError(step.id, "more than one response for this step")

        # Only the validator synthesizes defaults
        if response.is_default:
            response = response.model_copy(update={"is_default": False})
        validated.append(_check_payload(step, response, converter))

    if by_step:
        stray_id = sorted(by_step)[0]
        raise MalformedResponseError(stray_id, "response does not match any step of this ritual")

    return ValidatedResponses(responses=validated)
