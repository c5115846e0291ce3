from datetime import date, datetime, timezone

import pytest
from freezegun import freeze_time
from zoneinfo import ZoneInfo

from n8n_dashboard.services.aggregation_service import (
    build_daily_stats,
    compute_daily_stats,
    compute_execution_stats,
    compute_workflow_stats,
    daily_window,
    round_half_up,
    window_start,
)

UTC = timezone.utc


@pytest.mark.unit
class TestExecutionStats:
    def test_counts_average_and_rate(self):
        rows = [
            {"status": "success", "duration_ms": 100},
            {"status": "success", "duration_ms": 300},
            {"status": "error", "duration_ms": None},
            {"status": "running", "duration_ms": None},
            {"status": "waiting", "duration_ms": None},
            {"status": "canceled", "duration_ms": 200},
        ]

        stats = compute_execution_stats(rows)

        assert stats.total_executions == 6
        assert stats.success_count == 2
        assert stats.error_count == 1
        assert stats.running_count == 1
        assert stats.waiting_count == 1
        assert stats.canceled_count == 1
        assert stats.avg_duration_ms == 200
        assert stats.success_rate == pytest.approx(100 * 2 / 6)

    def test_empty_rows(self):
        stats = compute_execution_stats([])
        assert stats.total_executions == 0
        assert stats.avg_duration_ms == 0
        assert stats.success_rate == 0

    def test_serializes_camel_case(self):
        payload = compute_execution_stats([{"status": "success", "duration_ms": 10}]).model_dump(by_alias=True)
        assert payload == {
            "totalExecutions": 1,
            "successCount": 1,
            "errorCount": 0,
            "runningCount": 0,
            "waitingCount": 0,
            "canceledCount": 0,
            "avgDurationMs": 10,
            "successRate": 100.0,
        }


@pytest.mark.unit
class TestDailyStats:
    def test_window_is_seeded_with_every_day(self):
        rows = [
            {"started_at": "2024-01-14T08:00:00Z", "status": "success"},
            {"started_at": "2024-01-14T09:00:00Z", "status": "error"},
            {"started_at": "2024-01-14T10:00:00Z", "status": "running"},
        ]

        daily = compute_daily_stats(rows, days=3, today=date(2024, 1, 15), tz=UTC)

        assert [b.date for b in daily] == ["2024-01-12", "2024-01-13", "2024-01-14", "2024-01-15"]
        assert [b.total for b in daily] == [0, 0, 3, 0]
        assert daily[2].success == 1
        assert daily[2].error == 1
        assert daily[2].label == "Jan 14"

    def test_rows_without_start_time_are_skipped(self):
        daily = compute_daily_stats([{"started_at": None, "status": "success"}], days=1, today=date(2024, 1, 15), tz=UTC)
        assert sum(b.total for b in daily) == 0

    def test_buckets_use_timezone_calendar_day(self):
        rows = [{"started_at": "2024-01-14T23:30:00Z", "status": "success"}]
        daily = compute_daily_stats(rows, days=1, today=date(2024, 1, 15), tz=ZoneInfo("Europe/Amsterdam"))
        assert [(b.date, b.total) for b in daily] == [("2024-01-14", 0), ("2024-01-15", 1)]

    def test_build_without_seed_only_has_present_days(self):
        daily = build_daily_stats([(date(2024, 1, 3), "success"), (date(2024, 1, 1), "error")])
        assert [b.date for b in daily] == ["2024-01-01", "2024-01-03"]

    def test_daily_window_and_start(self):
        assert daily_window(2, today=date(2024, 3, 1)) == [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]
        assert window_start(2, today=date(2024, 3, 1), tz=UTC) == datetime(2024, 2, 28, tzinfo=UTC)


@pytest.mark.unit
class TestWorkflowStats:
    def test_groups_by_workflow_name(self):
        rows = [
            {"workflow_name": "A", "status": "success", "duration_ms": 100},
            {"workflow_name": "A", "status": "error", "duration_ms": 201},
            {"workflow_name": "A", "status": "running", "duration_ms": None},
            {"workflow_name": "B", "status": "success", "duration_ms": None},
        ]

        stats = {s.workflow_name: s for s in compute_workflow_stats(rows)}

        assert set(stats) == {"A", "B"}
        assert stats["A"].total_executions == 3
        assert stats["A"].successful == 1
        assert stats["A"].failed == 1
        assert stats["A"].avg_duration_ms == 151
        assert stats["B"].avg_duration_ms == 0

    def test_no_rows_no_groups(self):
        assert compute_workflow_stats([]) == []


@pytest.mark.unit
@pytest.mark.parametrize(
    "value,expected",
    [(0.4, 0), (0.5, 1), (1.5, 2), (2.5, 3), (-0.5, 0), (-1.6, -2), (59.999, 60)],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


@pytest.mark.unit
@freeze_time("2024-01-15 23:30:00")
def test_daily_window_defaults_to_today_in_dashboard_timezone():
    assert daily_window(1, tz=UTC) == [date(2024, 1, 14), date(2024, 1, 15)]
    # Already the 16th in Amsterdam
    assert daily_window(1, tz=ZoneInfo("Europe/Amsterdam"))[-1] == date(2024, 1, 16)


@pytest.mark.unit
class TestUnknownStatus:
    def test_unknown_status_is_left_out_of_total_and_average(self):
        rows = [
            {"status": "crashed", "duration_ms": 1},
            {"status": "success", "duration_ms": 100},
            {"status": None, "duration_ms": 50},
        ]

        stats = compute_execution_stats(rows)

        per_status = (
            stats.success_count + stats.error_count + stats.running_count + stats.waiting_count + stats.canceled_count
        )
        assert stats.total_executions == per_status == 1
        assert stats.avg_duration_ms == 100
        assert stats.success_rate == 100

    def test_unknown_status_is_left_out_of_daily_and_workflow_stats(self):
        rows = [
            {"workflow_name": "A", "started_at": "2024-01-15T08:00:00Z", "status": "crashed", "duration_ms": 1},
            {"workflow_name": "A", "started_at": "2024-01-15T09:00:00Z", "status": "error", "duration_ms": 10},
        ]

        daily = compute_daily_stats(rows, days=0, today=date(2024, 1, 15), tz=UTC)
        workflows = compute_workflow_stats(rows)

        assert [(b.total, b.error) for b in daily] == [(1, 1)]
        assert [(w.total_executions, w.avg_duration_ms) for w in workflows] == [(1, 10)]
