from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, Union
from datetime import datetime
from enum import Enum


class ExecutionStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    RUNNING = "running"
    WAITING = "waiting"
    CANCELED = "canceled"


# Columns returned by the list endpoint - execution_data and workflow_data are excluded
EXECUTION_LIST_COLUMNS = [
    "id",
    "execution_id",
    "workflow_id",
    "workflow_name",
    "status",
    "finished",
    "started_at",
    "finished_at",
    "duration_ms",
    "mode",
    "node_count",
    "error_message",
    "created_at",
    "n8n_instance",
]


class ExecutionRecord(BaseModel):
    """One logged workflow run as written by the execution hook."""
    id: Union[str, int]
    execution_id: Optional[str] = None
    workflow_id: str
    workflow_name: str
    status: ExecutionStatus
    finished: bool = False
    # Timestamps are kept as received; unparsable values render as "Invalid date"
    started_at: Optional[Union[datetime, str]] = None
    finished_at: Optional[Union[datetime, str]] = None
    duration_ms: Optional[int] = None  # None until both timestamps are known
    mode: Optional[str] = None  # manual, trigger, webhook, etc.
    node_count: Optional[int] = None
    error_message: Optional[str] = None
    execution_data: Optional[Dict[str, Any]] = None
    workflow_data: Optional[Dict[str, Any]] = None
    created_at: Optional[Union[datetime, str]] = None
    n8n_instance: Optional[str] = None

    model_config = {"from_attributes": True}


class ExecutionStats(BaseModel):
    total_executions: int = Field(0, ge=0, alias="totalExecutions", serialization_alias="totalExecutions")
    success_count: int = Field(0, ge=0, alias="successCount", serialization_alias="successCount")
    error_count: int = Field(0, ge=0, alias="errorCount", serialization_alias="errorCount")
    running_count: int = Field(0, ge=0, alias="runningCount", serialization_alias="runningCount")
    waiting_count: int = Field(0, ge=0, alias="waitingCount", serialization_alias="waitingCount")
    canceled_count: int = Field(0, ge=0, alias="canceledCount", serialization_alias="canceledCount")
    # Not clamped: negative durations from clock skew are averaged as-is
    avg_duration_ms: float = Field(0, alias="avgDurationMs", serialization_alias="avgDurationMs")
    success_rate: float = Field(0, ge=0, le=100, alias="successRate", serialization_alias="successRate")

    model_config = {"populate_by_name": True}


class DailyStats(BaseModel):
    date: str  # yyyy-MM-dd
    label: Optional[str] = None  # short chart label, e.g. "Jan 5"
    total: int = 0
    success: int = 0
    error: int = 0


class WorkflowStats(BaseModel):
    workflow_name: Optional[str] = None
    total_executions: int
    successful: int
    failed: int
    avg_duration_ms: int
