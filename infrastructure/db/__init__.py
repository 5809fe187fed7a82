"""
Infrastructure Database Layer.

Part of RIT-22: Define repository interfaces (ports)

This package provides Supabase-backed implementations of the repository
interfaces defined in application.ports. The schema and the atomic RPC
functions they call live in sql/rituals_schema.sql.

Usage:
    from supabase import create_client
    from infrastructure.db import (
        SupabaseRitualRepository,
        SupabaseCompletionRepository,
        SupabaseUserStatsRepository,
    )

    client = create_client(url, key)
    ritual_repo = SupabaseRitualRepository(client)
"""

from infrastructure.db.completion_repository import SupabaseCompletionRepository
from infrastructure.db.ritual_repository import SupabaseRitualRepository
from infrastructure.db.user_stats_repository import SupabaseUserStatsRepository

__all__ = [
    "SupabaseRitualRepository",
    "SupabaseCompletionRepository",
    "SupabaseUserStatsRepository",
]
