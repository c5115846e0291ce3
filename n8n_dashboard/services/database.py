"""
Read-only access to the execution log table in Supabase.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from supabase import Client, create_client

from n8n_dashboard.core.config import settings
from n8n_dashboard.core.exceptions import StorageNotConfiguredError, StorageQueryError
from n8n_dashboard.schemas.execution import EXECUTION_LIST_COLUMNS

logger = logging.getLogger(__name__)


class DatabaseService:
    """Queries the execution log table. Every query can be narrowed to one n8n instance."""

    def __init__(self, client: Optional[Client] = None, table: Optional[str] = None):
        self._client = client
        self.table = table or settings.EXECUTION_LOGS_TABLE

    @property
    def client(self) -> Client:
        if self._client is None:
            if not settings.supabase_configured:
                raise StorageNotConfiguredError()
            self._client = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)
        return self._client

    def _select(self, columns: str, instance: Optional[str] = None):
        query = self.client.table(self.table).select(columns)
        if instance:
            query = query.eq("n8n_instance", instance)
        return query

    @staticmethod
    def _run(query) -> List[Dict[str, Any]]:
        try:
            response = query.execute()
        except Exception as e:
            raise StorageQueryError(str(e)) from e
        return response.data or []

    async def get_instances(self) -> List[str]:
        """Sorted distinct non-null instance identifiers."""
        query = self.client.table(self.table).select("n8n_instance").not_.is_("n8n_instance", "null")
        rows = self._run(query)
        return sorted({row["n8n_instance"] for row in rows if row.get("n8n_instance")})

    async def get_executions(self, limit: int, instance: Optional[str] = None) -> List[Dict[str, Any]]:
        """Most recent executions first, without the execution/workflow JSON payloads."""
        query = self._select(", ".join(EXECUTION_LIST_COLUMNS), instance)
        query = query.order("created_at", desc=True).limit(limit)
        return self._run(query)

    async def get_stat_rows(self, instance: Optional[str] = None) -> List[Dict[str, Any]]:
        return self._run(self._select("status, duration_ms", instance))

    async def get_daily_rows(self, since: datetime, instance: Optional[str] = None) -> List[Dict[str, Any]]:
        query = self._select("started_at, status", instance)
        query = query.gte("started_at", since.isoformat()).order("started_at", desc=False)
        return self._run(query)

    async def get_workflow_rows(self, instance: Optional[str] = None) -> List[Dict[str, Any]]:
        return self._run(self._select("workflow_name, status, duration_ms", instance))


db_service = DatabaseService()
