"""
Record predicates shared by the local re-aggregation engine and the execution table.

Instance filtering is not handled here: it is applied at the query boundary
(the `instance` API parameter). The remaining dimensions are evaluated in memory.
"""
from datetime import date, datetime, time, timezone, tzinfo
from typing import Iterable, List, Optional, Union
from zoneinfo import ZoneInfo

from n8n_dashboard.core.config import settings
from n8n_dashboard.schemas.execution import ExecutionRecord
from n8n_dashboard.schemas.filters import ExecutionFilters


def dashboard_timezone() -> tzinfo:
    return ZoneInfo(settings.DASHBOARD_TIMEZONE)


def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Parse a storage timestamp into an aware datetime.

    Naive values are assumed to be UTC. Returns None for missing or
    unparsable values.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def local_date(value: Union[str, datetime, None], tz: Optional[tzinfo] = None) -> Optional[date]:
    """Calendar date of a timestamp in the dashboard timezone."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return parsed.astimezone(tz or dashboard_timezone()).date()


def matches_count_filters(
    record: ExecutionRecord,
    filters: ExecutionFilters,
    tz: Optional[tzinfo] = None,
) -> bool:
    """Workflow, mode and date range predicate. Ignores the status filter."""
    if filters.workflow_filter and record.workflow_name != filters.workflow_filter:
        return False

    if filters.mode_filter and record.mode != filters.mode_filter:
        return False

    if filters.date_range:
        started_at = parse_timestamp(record.started_at)
        # An undated record cannot fall within a window
        if started_at is None:
            return False
        zone = tz or dashboard_timezone()
        start = datetime.combine(filters.date_range.from_date, time.min, tzinfo=zone)
        end = datetime.combine(filters.date_range.last_day, time.max, tzinfo=zone)
        if not start <= started_at <= end:
            return False

    return True


def matches_status_filter(record: ExecutionRecord, filters: ExecutionFilters) -> bool:
    return not filters.status_filter or record.status == filters.status_filter


def filter_for_counts(
    records: Iterable[ExecutionRecord],
    filters: ExecutionFilters,
    tz: Optional[tzinfo] = None,
) -> List[ExecutionRecord]:
    return [record for record in records if matches_count_filters(record, filters, tz)]


def filter_for_table(
    records: Iterable[ExecutionRecord],
    filters: ExecutionFilters,
    tz: Optional[tzinfo] = None,
) -> List[ExecutionRecord]:
    """Rows shown in the execution table: every in-memory dimension, status included."""
    return [
        record
        for record in records
        if matches_status_filter(record, filters) and matches_count_filters(record, filters, tz)
    ]
