"""
Server-side aggregation of execution log rows.

The reducers in this module are also used by the local re-aggregation engine,
so both computation paths produce identical numbers for the same record set.
"""
import logging
import math
from datetime import date, datetime, timedelta, tzinfo
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from n8n_dashboard.schemas.execution import DailyStats, ExecutionStats, ExecutionStatus, WorkflowStats
from n8n_dashboard.services.filtering import dashboard_timezone, local_date

logger = logging.getLogger(__name__)

KNOWN_STATUSES = frozenset(status.value for status in ExecutionStatus)


def round_half_up(value: float) -> int:
    """Round like JavaScript's Math.round (halves go up)."""
    return math.floor(value + 0.5)


def status_value(status: Any) -> Any:
    return status.value if isinstance(status, ExecutionStatus) else status


def is_known_status(status: Any) -> bool:
    return status_value(status) in KNOWN_STATUSES


def known_status_rows(rows: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Drop rows whose status is outside the five execution statuses."""
    rows = list(rows)
    known = [row for row in rows if is_known_status(row.get("status"))]
    if len(known) < len(rows):
        logger.warning(f"Skipped {len(rows) - len(known)} execution rows with an unknown status")
    return known


def average(values: Sequence[float]) -> float:
    if not values:
        return 0
    return sum(values) / len(values)


def build_execution_stats(statuses: Sequence[str], durations: Sequence[float]) -> ExecutionStats:
    """
    Reduce statuses and durations into an ExecutionStats object.

    Args:
        statuses: One status per counted execution. Unknown statuses are not counted
        durations: Non-null durations of the executions that contribute to the average

    Returns:
        ExecutionStats with counts, mean duration and success rate
    """
    counts = {status.value: 0 for status in ExecutionStatus}
    for status in map(status_value, statuses):
        if status in counts:
            counts[status] += 1
    total = sum(counts.values())

    success_count = counts[ExecutionStatus.SUCCESS.value]

    return ExecutionStats(
        total_executions=total,
        success_count=success_count,
        error_count=counts[ExecutionStatus.ERROR.value],
        running_count=counts[ExecutionStatus.RUNNING.value],
        waiting_count=counts[ExecutionStatus.WAITING.value],
        canceled_count=counts[ExecutionStatus.CANCELED.value],
        avg_duration_ms=average(durations),
        success_rate=(success_count / total) * 100 if total > 0 else 0,
    )


def day_label(day: date) -> str:
    return f"{day:%b} {day.day}"


def build_daily_stats(
    entries: Iterable[Tuple[date, str]],
    seed_days: Iterable[date] = (),
) -> List[DailyStats]:
    """
    Group (day, status) pairs into daily buckets sorted by date.

    Every day in seed_days gets a bucket even when no entry falls on it.
    """
    buckets: Dict[date, Dict[str, int]] = {day: {"total": 0, "success": 0, "error": 0} for day in seed_days}

    for day, status in entries:
        if not is_known_status(status):
            continue
        status = status_value(status)
        bucket = buckets.setdefault(day, {"total": 0, "success": 0, "error": 0})
        bucket["total"] += 1
        if status == ExecutionStatus.SUCCESS.value:
            bucket["success"] += 1
        elif status == ExecutionStatus.ERROR.value:
            bucket["error"] += 1

    return [
        DailyStats(date=day.isoformat(), label=day_label(day), **counts)
        for day, counts in sorted(buckets.items())
    ]


def compute_execution_stats(rows: Iterable[Dict[str, Any]]) -> ExecutionStats:
    """Stats over already instance-filtered rows. The server has no status dimension."""
    rows = known_status_rows(rows)
    statuses = [row.get("status") for row in rows]
    durations = [row["duration_ms"] for row in rows if row.get("duration_ms") is not None]
    return build_execution_stats(statuses, durations)


def daily_window(days: int, today: Optional[date] = None, tz: Optional[tzinfo] = None) -> List[date]:
    """Calendar days in [today - days, today]."""
    if today is None:
        today = datetime.now(tz or dashboard_timezone()).date()
    return [today - timedelta(days=days - offset) for offset in range(days + 1)]


def window_start(days: int, today: Optional[date] = None, tz: Optional[tzinfo] = None) -> datetime:
    """Start of the first day of the trailing window, as an aware datetime."""
    zone = tz or dashboard_timezone()
    first_day = daily_window(days, today, zone)[0]
    return datetime.combine(first_day, datetime.min.time(), tzinfo=zone)


def compute_daily_stats(
    rows: Iterable[Dict[str, Any]],
    days: int,
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None,
) -> List[DailyStats]:
    """Gap-free daily series over the trailing window, grouped by start date."""
    zone = tz or dashboard_timezone()
    entries = []
    for row in rows:
        day = local_date(row.get("started_at"), zone)
        if day is None:
            continue
        entries.append((day, row.get("status")))
    return build_daily_stats(entries, seed_days=daily_window(days, today, zone))


def compute_workflow_stats(rows: Iterable[Dict[str, Any]]) -> List[WorkflowStats]:
    """Per-workflow counts and average duration. Only workflows with executions appear."""
    groups: Dict[str, Dict[str, Any]] = {}

    for row in known_status_rows(rows):
        name = row.get("workflow_name")
        group = groups.setdefault(name, {"total_executions": 0, "successful": 0, "failed": 0, "durations": []})
        group["total_executions"] += 1
        if row.get("status") == ExecutionStatus.SUCCESS.value:
            group["successful"] += 1
        if row.get("status") == ExecutionStatus.ERROR.value:
            group["failed"] += 1
        if row.get("duration_ms") is not None:
            group["durations"].append(row["duration_ms"])

    return [
        WorkflowStats(
            workflow_name=name,
            total_executions=group["total_executions"],
            successful=group["successful"],
            failed=group["failed"],
            avg_duration_ms=round_half_up(average(group["durations"])),
        )
        for name, group in groups.items()
    ]
