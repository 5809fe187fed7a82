"""
FastAPI Dependency Providers for the Rituals API.

Part of RIT-4: Dependency providers

This module provides FastAPI dependency injection functions that return
interface types (Protocols) rather than concrete implementations. This
enables clean separation of concerns and easy testing with fake implementations.

Architecture:
- Settings, Supabase client and unit catalog are cached per-process (lru_cache)
- Repository and use case providers create new instances per-request
- Auth providers wrap backend.auth

Usage in routers:
    from api.deps import get_complete_ritual_use_case, get_current_user

    @router.post("/rituals/{ritual_id}/complete")
    def complete(
        ritual_id: str,
        user_id: str = Depends(get_current_user),
        use_case: CompleteRitualUseCase = Depends(get_complete_ritual_use_case),
    ):
        ...

Testing:
    # Override repositories in tests; use case providers pick the fakes up
    app.dependency_overrides[get_ritual_repo] = lambda: fake_ritual_repo
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException
from supabase import Client, ClientOptions, create_client

# Protocol types (interfaces)
from application.ports import (
    CompletionRepository,
    RitualRepository,
    UserStatsRepository,
)
from application.use_cases import (
    CompleteRitualUseCase,
    CompletionHistoryUseCase,
    CreateRitualUseCase,
    DeleteRitualUseCase,
    ForkRitualUseCase,
    GetRitualUseCase,
    PublishRitualUseCase,
    ResolveScheduleUseCase,
    UpdateRitualUseCase,
)

# Concrete implementations
from infrastructure import (
    SupabaseCompletionRepository,
    SupabaseRitualRepository,
    SupabaseUserStatsRepository,
)

from backend.settings import Settings, get_settings as _get_settings
from domain.services import UnitConverter

from backend.auth import (
    get_current_user as _get_current_user,
    get_optional_user as _get_optional_user,
)


# =============================================================================
# Settings Provider
# =============================================================================


def get_settings() -> Settings:
    """
    Get application settings.

    Returns cached Settings instance from backend.settings.
    Use this as a FastAPI dependency for settings access.

    Returns:
        Settings: Application settings instance
    """
    return _get_settings()


# =============================================================================
# Supabase Client Provider
# =============================================================================


@lru_cache
def get_supabase_client() -> Optional[Client]:
    """
    Get Supabase client instance (cached).

    Creates a Supabase client using credentials from settings, with the
    PostgREST timeout taken from DB_TIMEOUT_SECONDS.
    Returns None if credentials are not configured.

    Returns:
        Client: Supabase client instance, or None if not configured
    """
    settings = _get_settings()

    if not settings.supabase_url or not settings.supabase_key:
        return None

    options = ClientOptions(postgrest_client_timeout=settings.db_timeout_seconds)
    return create_client(settings.supabase_url, settings.supabase_key, options=options)


def get_supabase_client_required() -> Client:
    """
    Get Supabase client instance, raising if not configured.

    Use this dependency when the endpoint requires database access.

    Raises:
        HTTPException: 503 if Supabase is not configured
    """
    client = get_supabase_client()
    if client is None:
        raise HTTPException(
            status_code=503,
            detail="Database not available. Supabase credentials not configured.",
        )
    return client


# =============================================================================
# Repository Providers
# =============================================================================


def get_ritual_repo(
    client: Client = Depends(get_supabase_client_required),
) -> RitualRepository:
    """
    Get RitualRepository implementation.

    Returns a SupabaseRitualRepository instance with injected client.
    The return type is the Protocol to enable easy faking.
    """
    return SupabaseRitualRepository(client)


def get_completion_repo(
    client: Client = Depends(get_supabase_client_required),
) -> CompletionRepository:
    """Get CompletionRepository implementation."""
    return SupabaseCompletionRepository(client)


def get_user_stats_repo(
    client: Client = Depends(get_supabase_client_required),
) -> UserStatsRepository:
    """Get UserStatsRepository implementation."""
    return SupabaseUserStatsRepository(client)


@lru_cache
def get_unit_converter() -> UnitConverter:
    """Get the quantity catalog (built-in units, cached)."""
    return UnitConverter()


# =============================================================================
# Use Case Providers
# =============================================================================


def get_resolve_schedule_use_case(
    ritual_repo: RitualRepository = Depends(get_ritual_repo),
    completion_repo: CompletionRepository = Depends(get_completion_repo),
    stats_repo: UserStatsRepository = Depends(get_user_stats_repo),
) -> ResolveScheduleUseCase:
    return ResolveScheduleUseCase(ritual_repo, completion_repo, stats_repo)


def get_create_ritual_use_case(
    ritual_repo: RitualRepository = Depends(get_ritual_repo),
    converter: UnitConverter = Depends(get_unit_converter),
) -> CreateRitualUseCase:
    return CreateRitualUseCase(ritual_repo, converter)


def get_update_ritual_use_case(
    ritual_repo: RitualRepository = Depends(get_ritual_repo),
    converter: UnitConverter = Depends(get_unit_converter),
) -> UpdateRitualUseCase:
    return UpdateRitualUseCase(ritual_repo, converter)


def get_delete_ritual_use_case(
    ritual_repo: RitualRepository = Depends(get_ritual_repo),
) -> DeleteRitualUseCase:
    return DeleteRitualUseCase(ritual_repo)


def get_publish_ritual_use_case(
    ritual_repo: RitualRepository = Depends(get_ritual_repo),
) -> PublishRitualUseCase:
    return PublishRitualUseCase(ritual_repo)


def get_get_ritual_use_case(
    ritual_repo: RitualRepository = Depends(get_ritual_repo),
    completion_repo: CompletionRepository = Depends(get_completion_repo),
    settings: Settings = Depends(get_settings),
) -> GetRitualUseCase:
    return GetRitualUseCase(
        ritual_repo,
        completion_repo,
        max_page_size=settings.max_page_size,
        horizon_days=settings.schedule_horizon_days,
    )


def get_complete_ritual_use_case(
    ritual_repo: RitualRepository = Depends(get_ritual_repo),
    completion_repo: CompletionRepository = Depends(get_completion_repo),
    converter: UnitConverter = Depends(get_unit_converter),
) -> CompleteRitualUseCase:
    return CompleteRitualUseCase(ritual_repo, completion_repo, converter)


def get_fork_ritual_use_case(
    ritual_repo: RitualRepository = Depends(get_ritual_repo),
) -> ForkRitualUseCase:
    return ForkRitualUseCase(ritual_repo)


def get_completion_history_use_case(
    completion_repo: CompletionRepository = Depends(get_completion_repo),
    settings: Settings = Depends(get_settings),
) -> CompletionHistoryUseCase:
    return CompletionHistoryUseCase(completion_repo, max_page_size=settings.max_page_size)


# =============================================================================
# Authentication Providers
# =============================================================================


async def get_current_user(
    authorization: Optional[str] = Header(None),
    x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
) -> str:
    """
    Get authenticated user ID (required).

    Wraps backend.auth.get_current_user for dependency injection.
    Supports API key (key:user_id) and bearer JWT authentication.

    Returns:
        str: Authenticated user ID

    Raises:
        HTTPException: 401 if not authenticated
    """
    return await _get_current_user(authorization=authorization, x_api_key=x_api_key)


async def get_optional_user(
    authorization: Optional[str] = Header(None),
    x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
) -> Optional[str]:
    """
    Get authenticated user ID if present (optional).

    Returns:
        Optional[str]: User ID if authenticated, None otherwise
    """
    return await _get_optional_user(authorization=authorization, x_api_key=x_api_key)


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
    # Use cases
    "get_resolve_schedule_use_case",
    "get_create_ritual_use_case",
    "get_update_ritual_use_case",
    "get_delete_ritual_use_case",
    "get_publish_ritual_use_case",
    "get_get_ritual_use_case",
    "get_complete_ritual_use_case",
    "get_fork_ritual_use_case",
    "get_completion_history_use_case",
    # Auth
    "get_current_user",
    "get_optional_user",
]
