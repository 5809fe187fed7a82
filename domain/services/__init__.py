"""
Domain services for the Rituals API.

Pure functions over domain models. None of them perform I/O, so they are
safe to call concurrently and are unit-tested in isolation.
"""

from domain.services.completion_validator import default_response, validate_completion
from domain.services.recurrence import (
    OccurrenceRange,
    enumerate_occurrences,
    next_occurrence,
    occurs_on,
    validate_rule,
    weekday_index,
)
from domain.services.step_validation import validate_step_definitions
from domain.services.unit_converter import UnitConverter, from_si, to_si

__all__ = [
    # Recurrence
    "occurs_on",
    "enumerate_occurrences",
    "next_occurrence",
    "validate_rule",
    "weekday_index",
    "OccurrenceRange",
    # Units
    "UnitConverter",
    "to_si",
    "from_si",
    # Validation
    "validate_step_definitions",
    "validate_completion",
    "default_response",
]
