"""
Local re-aggregation of the fetched execution window.

When the user changes the workflow, mode, status or date range filters, the
dashboard recomputes its stat cards and chart series from the records it
already holds instead of issuing new requests.

Rules:
- No in-memory filter active: the server stats and daily series are returned
  unchanged, even if the record window is a capped view of the store.
- Counts (total and per status) use the count-eligible subset, which ignores
  the status filter. The average duration uses that subset further narrowed
  by the status filter.
- The daily series is recomputed only when workflow, mode or date range is
  active. A status filter on its own never changes the series.
- Recomputed daily buckets contain only dates present in the filtered set;
  unlike the server series they are not pre-seeded with empty days.
"""
from datetime import tzinfo
from typing import List, NamedTuple, Optional, Sequence

from n8n_dashboard.schemas.execution import DailyStats, ExecutionRecord, ExecutionStats
from n8n_dashboard.schemas.filters import ExecutionFilters
from n8n_dashboard.services.aggregation_service import build_daily_stats, build_execution_stats
from n8n_dashboard.services.filtering import (
    dashboard_timezone,
    filter_for_counts,
    local_date,
    matches_status_filter,
)


class DashboardAggregates(NamedTuple):
    stats: Optional[ExecutionStats]
    daily: List[DailyStats]


def recompute_stats(
    records: Sequence[ExecutionRecord],
    filters: ExecutionFilters,
    server_stats: Optional[ExecutionStats],
    tz: Optional[tzinfo] = None,
) -> Optional[ExecutionStats]:
    if not filters.has_local_filters:
        return server_stats

    count_set = filter_for_counts(records, filters, tz)
    duration_set = [record for record in count_set if matches_status_filter(record, filters)]

    return build_execution_stats(
        [record.status for record in count_set],
        [record.duration_ms for record in duration_set if record.duration_ms is not None],
    )


def recompute_daily(
    records: Sequence[ExecutionRecord],
    filters: ExecutionFilters,
    server_daily: Optional[List[DailyStats]],
    tz: Optional[tzinfo] = None,
) -> List[DailyStats]:
    if not filters.has_count_filters:
        return server_daily if server_daily is not None else []

    zone = tz or dashboard_timezone()
    entries = []
    for record in filter_for_counts(records, filters, zone):
        day = local_date(record.started_at, zone)
        if day is None:
            continue
        entries.append((day, record.status))
    return build_daily_stats(entries)


def recompute(
    records: Optional[Sequence[ExecutionRecord]],
    filters: ExecutionFilters,
    server_stats: Optional[ExecutionStats],
    server_daily: Optional[List[DailyStats]],
    tz: Optional[tzinfo] = None,
) -> DashboardAggregates:
    """
    Recompute display stats and daily buckets for the given filter state.

    Args:
        records: The fetched execution window (None while it is still loading)
        filters: Current filter state
        server_stats: Stats reported by /executions/stats
        server_daily: Series reported by /executions/daily
        tz: Timezone for calendar day boundaries (defaults to DASHBOARD_TIMEZONE)

    Returns:
        DashboardAggregates(stats, daily)
    """
    if records is None:
        return DashboardAggregates(server_stats, server_daily if server_daily is not None else [])

    return DashboardAggregates(
        recompute_stats(records, filters, server_stats, tz),
        recompute_daily(records, filters, server_daily, tz),
    )
