"""
Shared pieces of the ritual use cases.

Part of RIT-9: Structured error kinds

Use cases never let exceptions escape. A RitualError becomes a failed result
carrying its stable kind tag; anything else is logged with its traceback and
reported as a generic internal_error.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from application.ports import RitualRepository
from domain.exceptions import ForbiddenError, InvalidRequestError, NotFoundError, RitualError
from domain.models import RitualDefinition

INTERNAL_ERROR = "internal_error"


@dataclass
class UseCaseResult:
    """Fields common to every use case result."""

    success: bool
    error: Optional[str] = None
    error_kind: Optional[str] = None
    error_details: Dict[str, Any] = field(default_factory=dict)
    retryable: bool = False

    @classmethod
    def from_error(cls, error: RitualError):
        return cls(
            success=False,
            error=error.message,
            error_kind=error.kind,
            error_details=dict(error.details),
            retryable=error.retryable,
        )

    @classmethod
    def internal_error(cls):
        return cls(success=False, error="Internal error", error_kind=INTERNAL_ERROR)


def failure(result_cls, error: RitualError, log: logging.Logger, operation: str):
    """Log a RitualError at the right level and wrap it in result_cls."""
    if error.retryable:
        log.error(f"{operation} failed, storage unavailable: {error.message}")
    else:
        log.warning(f"{operation} rejected ({error.kind}): {error.message}")
    return result_cls.from_error(error)


def load_visible_ritual(
    ritual_repo: RitualRepository, ritual_id: str, user_id: str
) -> RitualDefinition:
    """Load a ritual the user owns or that is public."""
    ritual = ritual_repo.get(ritual_id)
    if ritual is None:
        raise NotFoundError("Ritual", ritual_id)
    if not ritual.is_visible_to(user_id):
        raise ForbiddenError("Ritual is private", ritual_id=ritual_id)
    return ritual


def load_owned_ritual(
    ritual_repo: RitualRepository, ritual_id: str, user_id: str
) -> RitualDefinition:
    """Load a ritual the user owns."""
    ritual = ritual_repo.get(ritual_id)
    if ritual is None:
        raise NotFoundError("Ritual", ritual_id)
    if not ritual.is_owned_by(user_id):
        raise ForbiddenError("Only the owner can modify this ritual", ritual_id=ritual_id)
    return ritual


def check_page(limit: int, offset: int, max_limit: int) -> None:
    if limit < 1 or limit > max_limit:
        raise InvalidRequestError(f"limit must be between 1 and {max_limit}", limit=limit)
    if offset < 0:
        raise InvalidRequestError("offset must be >= 0", offset=offset)
