"""
Domain converters between storage rows and domain models.

Part of RIT-22: Define repository interfaces (ports)

- row_to_ritual / ritual_to_rpc_payload: rituals with frequency and steps
- row_to_completion / completion_to_rpc_payload: completions with responses
- row_to_user_stats: streak counters

All converters are pure functions with no side effects.

Examples:
    >>> from domain.converters import row_to_ritual
    >>> ritual = row_to_ritual(row)  # row selected with RITUAL_SELECT
"""

from domain.converters.db_converters import (
    COMPLETION_SELECT,
    RITUAL_SELECT,
    completion_to_rpc_payload,
    frequency_to_row,
    ritual_to_row,
    ritual_to_rpc_payload,
    row_to_completion,
    row_to_frequency,
    row_to_ritual,
    row_to_step,
    row_to_user_stats,
    step_to_row,
)

__all__ = [
    "RITUAL_SELECT",
    "COMPLETION_SELECT",
    "row_to_ritual",
    "row_to_frequency",
    "row_to_step",
    "ritual_to_row",
    "ritual_to_rpc_payload",
    "frequency_to_row",
    "step_to_row",
    "row_to_completion",
    "completion_to_rpc_payload",
    "row_to_user_stats",
]
