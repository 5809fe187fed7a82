"""
Ritual Repository Interface (Port).

Part of RIT-22: Define repository interfaces (ports)

This module defines the abstract interface for ritual persistence: the
ritual row together with its frequency rule and ordered step definitions
(including nested workout exercises and sets). Every write that touches more
than one table must be atomic.
"""
from typing import Any, Dict, List, Optional, Protocol

from domain.models import FrequencyRule, RitualCategory, RitualDefinition, Visibility


class RitualRepository(Protocol):
    """
    Abstract interface for ritual persistence operations.

    Implementations return fully hydrated RitualDefinition aggregates
    (frequency and steps included) and raise RitualStorageError on
    transient storage failures.
    """

    def get(self, ritual_id: str) -> Optional[RitualDefinition]:
        """
        Get a ritual with its steps and frequency rule.

        Access control is the caller's job; this returns private rituals too.

        Args:
            ritual_id: Ritual UUID

        Returns:
            RitualDefinition or None if not found
        """
        ...

    def list_for_user(
        self,
        user_id: str,
        *,
        category: Optional[RitualCategory] = None,
        active_only: bool = False,
        limit: Optional[int] = 50,
        offset: int = 0,
    ) -> List[RitualDefinition]:
        """
        List rituals owned by a user, newest first.

        Args:
            user_id: Owner user ID
            category: Optional category filter
            active_only: Only return rituals with is_active = true
            limit: Maximum results, or None for all
            offset: Pagination offset

        Returns:
            List of rituals (may be empty)
        """
        ...

    def list_public(
        self,
        *,
        search: Optional[str] = None,
        category: Optional[RitualCategory] = None,
        sort_by: str = "created_at",
        descending: bool = True,
        limit: int = 20,
        offset: int = 0,
    ) -> List[RitualDefinition]:
        """
        List public rituals (the shared library).

        Args:
            search: Case-insensitive substring match on name or description
            category: Optional category filter
            sort_by: created_at, name, fork_count or completion_count
            descending: Sort direction
            limit: Maximum results
            offset: Pagination offset

        Returns:
            List of public rituals
        """
        ...

    def create(self, ritual: RitualDefinition) -> RitualDefinition:
        """
        Persist a new ritual, its frequency rule and its steps atomically.

        Storage assigns ids to the ritual, steps, workout exercises and sets.

        Args:
            ritual: Unsaved ritual with user_id set

        Returns:
            The stored ritual with all ids populated

        Raises:
            RitualStorageError: If the write failed (nothing was stored)
        """
        ...

    def update(
        self,
        ritual_id: str,
        changes: Dict[str, Any],
        *,
        steps: Optional[List[Any]] = None,
        frequency: Optional[FrequencyRule] = None,
    ) -> RitualDefinition:
        """
        Update scalar fields and optionally replace steps/frequency atomically.

        Steps carrying an id of an existing step are updated in place; steps
        without an id are inserted; existing steps absent from the list are
        removed.

        Args:
            ritual_id: Ritual UUID
            changes: Column values to set on the ritual row
            steps: Replacement step list, or None to keep the current steps
            frequency: Replacement frequency rule, or None to keep it

        Returns:
            The updated ritual

        Raises:
            NotFoundError: If the ritual does not exist
        """
        ...

    def delete(self, ritual_id: str) -> bool:
        """
        Delete a ritual. Steps, frequency and completions cascade.

        Returns:
            True if a row was deleted
        """
        ...

    def set_visibility(self, ritual_id: str, visibility: Visibility) -> RitualDefinition:
        """
        Change a ritual's visibility.

        Raises:
            NotFoundError: If the ritual does not exist
        """
        ...

    def fork(self, source_ritual_id: str, new_owner_id: str) -> RitualDefinition:
        """
        Copy a public ritual for a new owner and bump the source's fork_count.

        The copy (ritual, frequency, steps, workout exercises and sets, all
        with new ids) and the `fork_count = fork_count + 1` increment happen
        in one transaction: either both are visible or neither is.

        Args:
            source_ritual_id: Ritual to copy
            new_owner_id: Owner of the copy

        Returns:
            The new private ritual with forked_from_id = source_ritual_id

        Raises:
            NotFoundError: If the source does not exist
            ForbiddenError: If the source is not public
            RitualStorageError: If the transaction failed
        """
        ...
