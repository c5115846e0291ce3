"""
Dashboard session: fetched sections, filter state and the derived view.

The three dashboard queries (executions, stats, daily) run concurrently and
fail independently. Only the instance filter is sent to the API; the other
filter dimensions are applied to the fetched window by the local
re-aggregation engine, so changing them never triggers a request.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import tzinfo
from typing import Any, Dict, Generic, List, Optional, TypeVar

from n8n_dashboard.client.api_client import DashboardApiClient
from n8n_dashboard.schemas.execution import DailyStats, ExecutionRecord, ExecutionStats
from n8n_dashboard.schemas.filters import ExecutionFilters
from n8n_dashboard.services.filtering import filter_for_table
from n8n_dashboard.services.local_aggregation import recompute

logger = logging.getLogger(__name__)

T = TypeVar("T")

CONNECTION_ISSUE_MESSAGE = (
    "Unable to connect to the data source. Please verify that Supabase credentials are configured."
)


@dataclass
class Section(Generic[T]):
    data: Optional[T] = None
    # Instance filter the data was fetched for
    instance: Optional[str] = None
    error: Optional[str] = None
    loading: bool = False


@dataclass
class FilterOptions:
    workflows: List[str]
    statuses: List[str]
    modes: List[str]


@dataclass
class DashboardView:
    stats: Optional[ExecutionStats]
    daily: List[DailyStats]
    rows: List[ExecutionRecord]
    total_rows: int
    filter_options: FilterOptions
    active_status: Optional[str]
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def has_error(self) -> bool:
        return bool(self.errors)

    @property
    def banner(self) -> Optional[str]:
        return CONNECTION_ISSUE_MESSAGE if self.errors else None


def collect_filter_options(records: List[ExecutionRecord]) -> FilterOptions:
    return FilterOptions(
        workflows=sorted({r.workflow_name for r in records if r.workflow_name}),
        statuses=sorted({r.status.value for r in records}),
        modes=sorted({r.mode for r in records if r.mode}),
    )


class DashboardSession:
    def __init__(
        self,
        api: DashboardApiClient,
        filters: Optional[ExecutionFilters] = None,
        tz: Optional[tzinfo] = None,
    ):
        self.api = api
        self.filters = filters or ExecutionFilters()
        self.tz = tz
        self.instances: List[str] = []
        self.executions: Section[List[ExecutionRecord]] = Section()
        self.stats: Section[ExecutionStats] = Section()
        self.daily: Section[List[DailyStats]] = Section()
        self._generation = 0

    @property
    def sections(self) -> Dict[str, Section]:
        return {"executions": self.executions, "stats": self.stats, "daily": self.daily}

    @property
    def has_error(self) -> bool:
        return any(section.error for section in self.sections.values())

    async def load_instances(self) -> List[str]:
        try:
            self.instances = await self.api.get_instances()
        except Exception as e:
            logger.warning(f"Failed to load instances: {e}")
        return self.instances

    async def load(self) -> bool:
        """
        Fetch the three dashboard sections for the current instance.

        Returns:
            False when the responses were discarded because the instance filter
            changed or a newer load started while the requests were in flight,
            True otherwise.
        """
        self._generation += 1
        generation = self._generation
        instance = self.filters.instance_filter
        for section in self.sections.values():
            section.loading = True

        results = await asyncio.gather(
            self.api.get_executions(instance),
            self.api.get_stats(instance),
            self.api.get_daily(instance),
            return_exceptions=True,
        )

        if generation != self._generation or self.filters.instance_filter != instance:
            logger.debug(f"Discarding stale responses for instance {instance!r}")
            return False

        for (name, section), result in zip(self.sections.items(), results):
            section.loading = False
            if isinstance(result, Exception):
                logger.warning(f"Failed to load {name}: {result}")
                section.error = str(result) or "An error occurred while fetching data"
                if section.instance != instance:
                    section.data = None
                    section.instance = instance
            else:
                section.data = result
                section.instance = instance
                section.error = None
        return True

    async def set_filters(self, filters: ExecutionFilters) -> bool:
        """Apply a new filter state. Returns True when it required a refetch."""
        previous = self.filters
        self.filters = filters
        if filters.instance_filter != previous.instance_filter:
            await self.load()
            return True
        return False

    def toggle_status(self, status: str) -> ExecutionFilters:
        """Stat card click. Local only: status never changes what is fetched."""
        self.filters = self.filters.toggle_status(status)
        return self.filters

    async def refresh(self) -> bool:
        """Invalidate cached responses for the current instance and fetch everything again."""
        self.api.invalidate(self.filters.instance_filter)
        await self.load_instances()
        return await self.load()

    def view(self) -> DashboardView:
        records = self.executions.data
        aggregates = recompute(records, self.filters, self.stats.data, self.daily.data, self.tz)
        window = records or []
        errors: Dict[str, Any] = {name: s.error for name, s in self.sections.items() if s.error}
        return DashboardView(
            stats=aggregates.stats,
            daily=aggregates.daily,
            rows=filter_for_table(window, self.filters, self.tz),
            total_rows=len(window),
            filter_options=collect_filter_options(window),
            active_status=self.filters.status_filter,
            errors=errors,
        )
