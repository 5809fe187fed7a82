"""
Repository Interfaces (Ports) for the Rituals API.

Part of RIT-22: Define repository interfaces (ports)

This package defines abstract interfaces that decouple domain logic from
infrastructure (database, external services). Implementations are provided
in the infrastructure layer.

Architecture follows the Ports & Adapters (Hexagonal) pattern:
- Ports: Abstract interfaces defined here (what the domain needs)
- Adapters: Concrete implementations in infrastructure/ (how it's provided)

Usage:
    from application.ports import RitualRepository, CompletionRepository

    class RitualService:
        def __init__(self, ritual_repo: RitualRepository):
            self.ritual_repo = ritual_repo
"""

# Ritual persistence
from application.ports.ritual_repository import RitualRepository

# Completion persistence
from application.ports.completion_repository import CompletionRepository

# Streaks (RIT-26)
from application.ports.user_stats_repository import UserStatsRepository

__all__ = [
    "RitualRepository",
    "CompletionRepository",
    "UserStatsRepository",
]
