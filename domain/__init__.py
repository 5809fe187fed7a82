"""
Domain layer for the Rituals API.

This package contains pure domain models and services that are independent
of infrastructure concerns (database, API, external services):

- models/: rituals, steps, responses, frequency rules, quantities
- services/: recurrence resolution, unit conversion, step and completion
  validation (all pure functions, safe to call concurrently)
- exceptions: error kinds with stable tags
"""

from domain.models import (
    FrequencyRule,
    FrequencyType,
    PhysicalQuantity,
    RitualCategory,
    RitualCompletion,
    RitualDefinition,
    StepType,
    Visibility,
)

__all__ = [
    "FrequencyRule",
    "FrequencyType",
    "PhysicalQuantity",
    "RitualCategory",
    "RitualCompletion",
    "RitualDefinition",
    "StepType",
    "Visibility",
]
