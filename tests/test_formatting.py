from datetime import datetime, timezone

import pytest

from n8n_dashboard.services.formatting import (
    build_execution_url,
    format_date,
    format_duration,
    format_instance_for_display,
    normalize_instance_url,
)

UTC = timezone.utc


@pytest.mark.unit
@pytest.mark.parametrize(
    "ms,expected",
    [
        (0, "0ms"),
        (500, "500ms"),
        (999, "999ms"),
        (999.6, "1000ms"),
        (1000, "1s"),
        (1499, "1s"),
        (1500, "2s"),
        (59999, "60s"),
        (60000, "1m"),
        (125000, "2m"),
        (-20, "-20ms"),
    ],
)
def test_format_duration(ms, expected):
    assert format_duration(ms) == expected


@pytest.mark.unit
def test_format_duration_missing_value():
    assert format_duration(None) == "-"


@pytest.mark.unit
class TestFormatDate:
    def test_formats_iso_string(self):
        assert format_date("2024-01-05T10:04:09Z", UTC) == "Jan 05, 2024 at 10:04:09"

    def test_formats_datetime(self):
        assert format_date(datetime(2024, 12, 31, 23, 0, 0, tzinfo=UTC), UTC) == "Dec 31, 2024 at 23:00:00"

    def test_missing_value(self):
        assert format_date(None) == "-"
        assert format_date("") == "-"

    def test_invalid_value_fails_soft(self):
        assert format_date("yesterday-ish", UTC) == "Invalid date"


@pytest.mark.unit
class TestInstanceUrls:
    def test_normalize_adds_https_and_strips_slashes(self):
        assert normalize_instance_url("n8n.example.com//") == "https://n8n.example.com"
        assert normalize_instance_url(" http://n8n.local/ ") == "http://n8n.local"
        assert normalize_instance_url(None) == ""

    def test_display_strips_protocol(self):
        assert format_instance_for_display("https://n8n.example.com/") == "n8n.example.com"
        assert format_instance_for_display("HTTP://prod") == "prod"
        assert format_instance_for_display(None) == ""

    def test_build_execution_url(self):
        url = build_execution_url("n8n.example.com", "wf-1", "42")
        assert url == "https://n8n.example.com/workflow/wf-1/executions/42"

    def test_build_execution_url_without_instance(self):
        assert build_execution_url(None, "wf-1", "42") is None
