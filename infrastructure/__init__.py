"""
Infrastructure Layer for the Rituals API.

Part of RIT-22: Define repository interfaces (ports)

This package contains concrete implementations of repository interfaces:
- db/: Supabase database implementations
"""

# Re-export database repositories for convenient access
from infrastructure.db import (
    SupabaseCompletionRepository,
    SupabaseRitualRepository,
    SupabaseUserStatsRepository,
)

__all__ = [
    "SupabaseRitualRepository",
    "SupabaseCompletionRepository",
    "SupabaseUserStatsRepository",
]
