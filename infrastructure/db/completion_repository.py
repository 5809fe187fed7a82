"""
Supabase implementation of CompletionRepository.

Part of RIT-24: Atomic ritual completion

Completions are written exclusively through the complete_ritual PostgreSQL
function, which runs the duplicate check, the inserts, the completion_count
increment and the streak increment in one transaction. The PostgREST client
timeout bounds every call; a timed-out call surfaces as RitualStorageError
and the function's transaction is rolled back by the database.
"""
import logging
from datetime import date
from typing import List, Optional

from supabase import Client

from application.exceptions import RitualStorageError
from domain.converters.db_converters import (
    COMPLETION_SELECT,
    completion_to_rpc_payload,
    row_to_completion,
)
from domain.models import RitualCompletion
from infrastructure.db.errors import storage_call

logger = logging.getLogger(__name__)


class SupabaseCompletionRepository:
    """
    Supabase implementation of CompletionRepository protocol.

    Tables: ritual_completions, step_responses, workout_set_responses.
    """

    def __init__(self, client: Client):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected, not global)
        """
        self._client = client

    def record_completion(
        self,
        completion: RitualCompletion,
        *,
        qualifying: bool,
    ) -> RitualCompletion:
        payload = completion_to_rpc_payload(completion, qualifying)
        with storage_call(
            "complete_ritual",
            ritual_id=completion.ritual_id,
            on_date=completion.completed_date.isoformat(),
        ):
            response = self._client.rpc("complete_ritual", payload).execute()

        completion_id = response.data
        if not completion_id:
            raise RitualStorageError("complete_ritual returned no id")

        logger.info(
            f"Completion {completion_id} stored for ritual {completion.ritual_id} "
            f"({len(completion.step_responses)} responses, qualifying={qualifying})"
        )
        return completion.model_copy(update={"id": completion_id})

    def list_for_date(self, user_id: str, on_date: date) -> List[RitualCompletion]:
        with storage_call("list_completions_for_date"):
            result = (
                self._client.table("ritual_completions")
                .select(COMPLETION_SELECT)
                .eq("user_id", user_id)
                .eq("completed_date", on_date.isoformat())
                .execute()
            )
        return [row_to_completion(row) for row in result.data or []]

    def list_for_user(
        self,
        user_id: str,
        *,
        ritual_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[RitualCompletion]:
        with storage_call("list_completions"):
            query = (
                self._client.table("ritual_completions")
                .select(COMPLETION_SELECT)
                .eq("user_id", user_id)
            )
            if ritual_id:
                query = query.eq("ritual_id", ritual_id)
            result = (
                query.order("completed_at", desc=True)
                .range(offset, offset + limit - 1)
                .execute()
            )
        return [row_to_completion(row) for row in result.data or []]

    def get(self, completion_id: str) -> Optional[RitualCompletion]:
        with storage_call("get_completion"):
            result = (
                self._client.table("ritual_completions")
                .select(COMPLETION_SELECT)
                .eq("id", completion_id)
                .limit(1)
                .execute()
            )
        return row_to_completion(result.data[0]) if result.data else None

    def count_for_ritual(self, user_id: str, ritual_id: str) -> int:
        with storage_call("count_completions"):
            result = (
                self._client.table("ritual_completions")
                .select("id", count="exact")
                .eq("user_id", user_id)
                .eq("ritual_id", ritual_id)
                .limit(1)
                .execute()
            )
        return result.count or 0
