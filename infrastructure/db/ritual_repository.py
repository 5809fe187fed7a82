"""
Supabase implementation of RitualRepository.

Part of RIT-22: Define repository interfaces (ports)
Part of RIT-27: Fork public rituals

Reads use PostgREST resource embedding to load a ritual with its frequency
rule and steps in one request. Writes spanning several tables go through the
create_ritual, update_ritual and fork_ritual PostgreSQL functions (see
sql/rituals_schema.sql) so that each runs in a single transaction.
"""
import logging
from typing import Any, Dict, List, Optional

from supabase import Client

from application.exceptions import RitualStorageError
from domain.converters.db_converters import (
    RITUAL_SELECT,
    frequency_to_row,
    ritual_to_rpc_payload,
    row_to_ritual,
    step_to_row,
)
from domain.exceptions import NotFoundError
from domain.models import FrequencyRule, RitualCategory, RitualDefinition, Visibility
from infrastructure.db.errors import storage_call

logger = logging.getLogger(__name__)


class SupabaseRitualRepository:
    """
    Supabase implementation of RitualRepository protocol.

    Tables: rituals, ritual_frequencies, step_definitions,
    workout_exercises, workout_sets, exercises.
    """

    def __init__(self, client: Client):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected, not global)
        """
        self._client = client

    def get(self, ritual_id: str) -> Optional[RitualDefinition]:
        with storage_call("get_ritual", ritual_id=ritual_id):
            result = (
                self._client.table("rituals")
                .select(RITUAL_SELECT)
                .eq("id", ritual_id)
                .limit(1)
                .execute()
            )
        if not result.data:
            return None
        return row_to_ritual(result.data[0])

    def list_for_user(
        self,
        user_id: str,
        *,
        category: Optional[RitualCategory] = None,
        active_only: bool = False,
        limit: Optional[int] = 50,
        offset: int = 0,
    ) -> List[RitualDefinition]:
        with storage_call("list_user_rituals"):
            query = self._client.table("rituals").select(RITUAL_SELECT).eq("user_id", user_id)
            if category:
                query = query.eq("category", RitualCategory(category).value)
            if active_only:
                query = query.eq("is_active", True)
            query = query.order("created_at", desc=True)
            if limit is not None:
                query = query.range(offset, offset + limit - 1)
            result = query.execute()
        return [row_to_ritual(row) for row in result.data or []]

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
        with storage_call("list_public_rituals"):
            query = (
                self._client.table("rituals")
                .select(RITUAL_SELECT)
                .eq("visibility", Visibility.PUBLIC.value)
            )
            if category:
                query = query.eq("category", RitualCategory(category).value)
            if search:
                pattern = search.replace(",", " ").replace("%", "")
                query = query.or_(f"name.ilike.%{pattern}%,description.ilike.%{pattern}%")
            result = (
                query.order(sort_by, desc=descending)
                .range(offset, offset + limit - 1)
                .execute()
            )
        return [row_to_ritual(row) for row in result.data or []]

    def create(self, ritual: RitualDefinition) -> RitualDefinition:
        """Create ritual + frequency + steps via the create_ritual RPC."""
        with storage_call("create_ritual"):
            response = self._client.rpc("create_ritual", ritual_to_rpc_payload(ritual)).execute()
        ritual_id = response.data
        if not ritual_id:
            raise RitualStorageError("create_ritual returned no id")

        logger.info(f"Ritual {ritual_id} stored for {ritual.user_id}")
        return self._reload(ritual_id)

    def update(
        self,
        ritual_id: str,
        changes: Dict[str, Any],
        *,
        steps: Optional[List[Any]] = None,
        frequency: Optional[FrequencyRule] = None,
    ) -> RitualDefinition:
        """Update fields and replace steps/frequency via the update_ritual RPC."""
        payload = {
            "p_ritual_id": ritual_id,
            "p_changes": changes,
            "p_frequency": frequency_to_row(frequency) if frequency is not None else None,
            "p_steps": [step_to_row(s) for s in steps] if steps is not None else None,
        }
        with storage_call("update_ritual", ritual_id=ritual_id):
            self._client.rpc("update_ritual", payload).execute()
        return self._reload(ritual_id)

    def delete(self, ritual_id: str) -> bool:
        with storage_call("delete_ritual", ritual_id=ritual_id):
            result = self._client.table("rituals").delete().eq("id", ritual_id).execute()
        deleted = bool(result.data)
        if deleted:
            logger.info(f"Ritual {ritual_id} deleted")
        return deleted

    def set_visibility(self, ritual_id: str, visibility: Visibility) -> RitualDefinition:
        with storage_call("set_ritual_visibility", ritual_id=ritual_id):
            result = (
                self._client.table("rituals")
                .update({"visibility": Visibility(visibility).value})
                .eq("id", ritual_id)
                .execute()
            )
        if not result.data:
            raise NotFoundError("Ritual", ritual_id)
        return self._reload(ritual_id)

    def fork(self, source_ritual_id: str, new_owner_id: str) -> RitualDefinition:
        """
        Fork via the fork_ritual RPC.

        The function locks the source row, refuses non-public sources with
        SQLSTATE 42501, copies every child row and bumps fork_count.
        """
        with storage_call("fork_ritual", ritual_id=source_ritual_id):
            response = self._client.rpc(
                "fork_ritual",
                {"p_source_id": source_ritual_id, "p_owner_id": new_owner_id},
            ).execute()
        new_id = response.data
        if not new_id:
            raise RitualStorageError("fork_ritual returned no id")
        return self._reload(new_id)

    def _reload(self, ritual_id: str) -> RitualDefinition:
        ritual = self.get(ritual_id)
        if ritual is None:
            raise NotFoundError("Ritual", ritual_id)
        return ritual
