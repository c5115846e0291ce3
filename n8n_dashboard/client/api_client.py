import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from n8n_dashboard.client.cache import QueryCache
from n8n_dashboard.core.exceptions import SectionFetchError
from n8n_dashboard.schemas.execution import DailyStats, ExecutionRecord, ExecutionStats, WorkflowStats

logger = logging.getLogger(__name__)

INSTANCES_ENDPOINT = "/api/instances"
EXECUTIONS_ENDPOINT = "/api/executions"
STATS_ENDPOINT = "/api/executions/stats"
DAILY_ENDPOINT = "/api/executions/daily"
WORKFLOWS_ENDPOINT = "/api/executions/workflows"

INSTANCES_MAX_AGE_SECONDS = 60


class DashboardApiClient:
    """Client for the dashboard API. Responses are cached per (endpoint, params)."""

    def __init__(self, base_url: str, cache: QueryCache, http_client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip("/")
        self.cache = cache
        self._http = http_client

    async def _request(self, endpoint: str, params: Dict[str, Any]) -> Any:
        query = {k: v for k, v in params.items() if v is not None}
        try:
            if self._http is not None:
                response = await self._http.get(f"{self.base_url}{endpoint}", params=query, timeout=30.0)
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.get(f"{self.base_url}{endpoint}", params=query, timeout=30.0)
        except httpx.HTTPError as e:
            raise SectionFetchError(endpoint, f"Request to {endpoint} failed: {e}") from e

        if response.is_error:
            message = None
            try:
                message = response.json().get("error")
            except (ValueError, AttributeError):
                pass
            raise SectionFetchError(endpoint, message or f"Failed to fetch {endpoint}", response.status_code)

        return response.json()

    async def _get(self, endpoint: str, params: Dict[str, Any], max_age: Optional[float] = None) -> Any:
        cached = self.cache.get(endpoint, params, max_age=max_age)
        if cached is not None:
            return cached
        data = await self._request(endpoint, params)
        self.cache.set(endpoint, params, data)
        return data

    async def get_instances(self) -> List[str]:
        return await self._get(INSTANCES_ENDPOINT, {}, max_age=INSTANCES_MAX_AGE_SECONDS)

    async def get_executions(self, instance: Optional[str] = None, limit: Optional[int] = None) -> List[ExecutionRecord]:
        data = await self._get(EXECUTIONS_ENDPOINT, {"instance": instance, "limit": limit})
        records = []
        for row in data:
            try:
                records.append(ExecutionRecord(**row))
            except ValidationError as e:
                logger.warning(f"Skipping execution {row.get('id')!r}: {e.error_count()} invalid fields")
        return records

    async def get_stats(self, instance: Optional[str] = None) -> ExecutionStats:
        data = await self._get(STATS_ENDPOINT, {"instance": instance})
        return ExecutionStats(**data)

    async def get_daily(self, instance: Optional[str] = None, days: Optional[int] = None) -> List[DailyStats]:
        data = await self._get(DAILY_ENDPOINT, {"instance": instance, "days": days})
        return [DailyStats(**row) for row in data]

    async def get_workflow_stats(self, instance: Optional[str] = None) -> List[WorkflowStats]:
        data = await self._get(WORKFLOWS_ENDPOINT, {"instance": instance})
        return [WorkflowStats(**row) for row in data]

    def invalidate(self, instance: Optional[str] = None) -> None:
        """Drop the cached responses the dashboard shows for an instance."""
        self.cache.invalidate(INSTANCES_ENDPOINT)
        self.cache.invalidate(EXECUTIONS_ENDPOINT, {"instance": instance})
        self.cache.invalidate(STATS_ENDPOINT, {"instance": instance})
        self.cache.invalidate(DAILY_ENDPOINT, {"instance": instance})
        self.cache.invalidate(WORKFLOWS_ENDPOINT, {"instance": instance})
