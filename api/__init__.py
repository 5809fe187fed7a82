"""
API package for the Rituals API.

This package contains:
- deps.py: FastAPI dependency providers for DI
- errors.py: Use case failure to HTTP response mapping
- routers/: API route handlers
"""

# Re-export dependency providers for convenient access
from api.deps import (
    get_settings,
    get_supabase_client,
    get_supabase_client_required,
    get_ritual_repo,
    get_completion_repo,
    get_user_stats_repo,
    get_unit_converter,
    get_current_user,
    get_optional_user,
)

__all__ = [
    # Settings
    "get_settings",
    # Database
    "get_supabase_client",
    "get_supabase_client_required",
    # Repositories
    "get_ritual_repo",
    "get_completion_repo",
    "get_user_stats_repo",
    "get_unit_converter",
    # Authentication
    "get_current_user",
    "get_optional_user",
]
