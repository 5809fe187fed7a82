"""
Translation of Supabase/PostgREST failures into ritual errors.

Part of RIT-25: Transaction handling for completions and forks

The RPC functions signal domain outcomes with SQLSTATE codes:
- 23505 (unique_violation): a completion already exists for the date
- P0002 (no_data_found): the ritual does not exist
- 42501 (insufficient_privilege): the ritual may not be forked or completed
- 22023 (invalid_parameter_value): a workout step names a catalog exercise
  with a different measurement_type; the detail carries the step index

Everything else (connection errors, timeouts, other SQL errors) is a
transient RitualStorageError; the transaction was rolled back.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from postgrest.exceptions import APIError

from application.exceptions import RitualStorageError
from domain.exceptions import (
    DuplicateCompletionError,
    ForbiddenError,
    InvalidStepDefinitionError,
    NotFoundError,
    RitualError,
)

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
NO_DATA_FOUND = "P0002"
INSUFFICIENT_PRIVILEGE = "42501"
INVALID_PARAMETER_VALUE = "22023"


def translate_api_error(error: APIError, operation: str, **context: Any) -> RitualError:
    """Map a PostgREST APIError to the matching RitualError."""
    code = getattr(error, "code", None)

    if code == UNIQUE_VIOLATION and "on_date" in context:
        return DuplicateCompletionError(context.get("ritual_id"), context["on_date"])
    if code == NO_DATA_FOUND:
        return NotFoundError(context.get("resource", "Ritual"), context.get("ritual_id"))
    if code == INSUFFICIENT_PRIVILEGE:
        return ForbiddenError(getattr(error, "message", None) or "Operation not permitted")
    if code == INVALID_PARAMETER_VALUE:
        return InvalidStepDefinitionError(
            _step_index(error), getattr(error, "message", None) or "exercise does not match the catalog"
        )

    logger.error(f"{operation} failed with database error {code}: {getattr(error, 'message', error)}")
    return RitualStorageError(f"Storage error during {operation}")


def _step_index(error: APIError) -> int:
    details = str(getattr(error, "details", None) or "")
    return int(details) if details.isdigit() else 0


@contextmanager
def storage_call(operation: str, **context: Any) -> Iterator[None]:
    """
    Wrap a Supabase call so only RitualError subclasses escape.

    Usage:
        with storage_call("complete_ritual", ritual_id=rid, on_date=d):
            response = client.rpc("complete_ritual", payload).execute()
    """
    try:
        yield
    except RitualError:
        raise
    except APIError as e:
        raise translate_api_error(e, operation, **context) from e
    except Exception as e:
        logger.error(f"{operation} failed: {type(e).__name__}: {e}")
        raise RitualStorageError(f"Storage unavailable during {operation}") from e
