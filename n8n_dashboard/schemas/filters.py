"""
Filter state for the dashboard.

ExecutionFilters is an immutable value: every change produces a new instance,
so callers can compare the previous and current state to decide whether a
refetch (instance change) or only a local re-aggregation is needed.
"""
from datetime import date
from typing import Optional

from pydantic import BaseModel, model_validator


class DateRange(BaseModel):
    """Inclusive calendar date range. A missing end date means a single day."""
    from_date: date
    to_date: Optional[date] = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_order(self) -> "DateRange":
        if self.to_date is not None and self.to_date < self.from_date:
            raise ValueError("to_date must not be before from_date")
        return self

    @property
    def last_day(self) -> date:
        return self.to_date or self.from_date


class ExecutionFilters(BaseModel):
    instance_filter: Optional[str] = None
    status_filter: Optional[str] = None
    workflow_filter: Optional[str] = None
    mode_filter: Optional[str] = None
    date_range: Optional[DateRange] = None

    model_config = {"frozen": True}

    @property
    def has_count_filters(self) -> bool:
        """True when a dimension that narrows counts and the time series is set."""
        return bool(self.workflow_filter or self.mode_filter or self.date_range)

    @property
    def has_local_filters(self) -> bool:
        """True when any dimension applied in memory is set (instance is applied by the API)."""
        return self.has_count_filters or bool(self.status_filter)

    @property
    def active_filter_count(self) -> int:
        return sum(
            1
            for value in (
                self.instance_filter,
                self.status_filter,
                self.workflow_filter,
                self.mode_filter,
                self.date_range,
            )
            if value
        )

    def replace(self, **changes) -> "ExecutionFilters":
        return self.model_copy(update=changes)

    def toggle_status(self, status: str) -> "ExecutionFilters":
        """Stat card click: select the status, or clear it if it is already selected."""
        if self.status_filter == status:
            return self.replace(status_filter=None)
        return self.replace(status_filter=status)

    def reset(self) -> "ExecutionFilters":
        return ExecutionFilters()
