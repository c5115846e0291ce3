"""
Display helpers for durations, timestamps and n8n instance URLs.
"""
import re
from datetime import datetime, tzinfo
from typing import Optional, Union

from n8n_dashboard.services.aggregation_service import round_half_up
from n8n_dashboard.services.filtering import dashboard_timezone, parse_timestamp

INVALID_DATE = "Invalid date"
EMPTY_VALUE = "-"

_PROTOCOL_RE = re.compile(r"^https?://", re.IGNORECASE)
_TRAILING_SLASHES_RE = re.compile(r"/+$")


def format_duration(ms: Optional[float]) -> str:
    """
    Format a duration in milliseconds.

    Under a second shows whole milliseconds, under a minute whole seconds,
    anything longer whole minutes. Values are rounded half up, so 59999
    renders as "60s".
    """
    if ms is None:
        return EMPTY_VALUE
    if ms < 1000:
        return f"{round_half_up(ms)}ms"
    if ms < 60000:
        return f"{round_half_up(ms / 1000)}s"
    return f"{round_half_up(ms / 60000)}m"


def format_date(value: Union[str, datetime, None], tz: Optional[tzinfo] = None) -> str:
    """Format a timestamp as "Jan 05, 2024 at 10:00:00" in the dashboard timezone."""
    if not value:
        return EMPTY_VALUE
    parsed = parse_timestamp(value)
    if parsed is None:
        return INVALID_DATE
    local = parsed.astimezone(tz or dashboard_timezone())
    return local.strftime("%b %d, %Y at %H:%M:%S")


def normalize_instance_url(url: Optional[str]) -> str:
    """Strip trailing slashes and make sure the URL carries a protocol (https by default)."""
    if not url:
        return ""
    normalized = _TRAILING_SLASHES_RE.sub("", url.strip())
    if not _PROTOCOL_RE.match(normalized):
        normalized = f"https://{normalized}"
    return normalized


def format_instance_for_display(instance: Optional[str]) -> str:
    if not instance:
        return ""
    return _TRAILING_SLASHES_RE.sub("", _PROTOCOL_RE.sub("", instance))


def build_execution_url(instance_url: Optional[str], workflow_id: str, execution_id: str) -> Optional[str]:
    """Link to an execution in the n8n editor, or None when the instance is unknown."""
    if not instance_url:
        return None
    return f"{normalize_instance_url(instance_url)}/workflow/{workflow_id}/executions/{execution_id}"
