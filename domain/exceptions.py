"""
Domain errors for the rituals core.

Part of RIT-9: Structured error kinds

Every error carries a stable `kind` tag and a human-readable message. The
`details` dict holds the structured fields callers may need (step ids, step
index, ...) and never contains storage internals.
"""

from typing import Any, Dict, Optional


class RitualError(Exception):
    """Base class for all errors raised by the rituals core."""

    kind = "error"
    retryable = False

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = {k: v for k, v in details.items() if v is not None}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_kind": self.kind,
            "message": self.message,
            "details": dict(self.details),
        }


class NotFoundError(RitualError):
    """Ritual, step, completion or user is absent."""

    kind = "not_found"

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        super().__init__(f"{resource} not found", resource=resource, resource_id=resource_id)


class ForbiddenError(RitualError):
    """Access or ownership violation."""

    kind = "forbidden"


class ConflictError(RitualError):
    """Requested state change is already in effect (e.g. publishing a public ritual)."""

    kind = "conflict"


class InvalidRequestError(RitualError):
    """Malformed request parameters (pagination, date ranges, ...)."""

    kind = "invalid_request"


class InvalidStepDefinitionError(RitualError):
    kind = "invalid_step_definition"

    def __init__(self, step_index: int, reason: str):
        super().__init__(
            f"Invalid step definition at index {step_index}: {reason}",
            step_index=step_index,
            reason=reason,
        )
        self.step_index = step_index
        self.reason = reason


class InvalidFrequencyRuleError(RitualError):
    kind = "invalid_frequency_rule"

    def __init__(self, reason: str):
        super().__init__(f"Invalid frequency rule: {reason}", reason=reason)
        self.reason = reason


class MissingRequiredStepError(RitualError):
    kind = "missing_required_step"

    def __init__(self, step_id: str, step_name: str):
        super().__init__(
            f"Missing response for required step '{step_name}'",
            step_id=step_id,
            step_name=step_name,
        )
        self.step_id = step_id
        self.step_name = step_name


class TypeMismatchError(RitualError):
    kind = "type_mismatch"

    def __init__(self, step_id: str, expected: Optional[str] = None, actual: Optional[str] = None):
        super().__init__(
            f"Response type does not match step {step_id}",
            step_id=step_id,
            expected=expected,
            actual=actual,
        )
        self.step_id = step_id


class MalformedResponseError(RitualError):
    """A response payload is incomplete or carries fields illegal for its step."""

    kind = "malformed_response"

    def __init__(self, step_id: str, reason: str):
        super().__init__(
            f"Malformed response for step {step_id}: {reason}",
            step_id=step_id,
            reason=reason,
        )
        self.step_id = step_id
        self.reason = reason


class DuplicateCompletionError(RitualError):
    kind = "duplicate_completion"

    def __init__(self, ritual_id: str, on_date: Any):
        super().__init__(
            f"Ritual already completed on {on_date}",
            ritual_id=ritual_id,
            date=str(on_date),
        )


class InvalidQuantityError(RitualError):
    kind = "invalid_quantity"
