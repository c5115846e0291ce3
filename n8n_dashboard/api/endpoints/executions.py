import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, status

from n8n_dashboard.api.params import parse_positive_int
from n8n_dashboard.core.config import settings
from n8n_dashboard.schemas.execution import DailyStats, ExecutionStats, WorkflowStats
from n8n_dashboard.services.aggregation_service import (
    compute_daily_stats,
    compute_execution_stats,
    compute_workflow_stats,
    window_start,
)
from n8n_dashboard.services.database import db_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _server_error(e: Exception, fallback: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(e) or fallback,
    )


@router.get("", response_model=List[Dict[str, Any]])
async def get_executions(limit: Optional[str] = None, instance: Optional[str] = None):
    """Most recent executions, optionally narrowed to one n8n instance"""
    try:
        row_limit = parse_positive_int(limit, settings.DEFAULT_EXECUTIONS_LIMIT)
        return await db_service.get_executions(row_limit, instance=instance)
    except Exception as e:
        logger.error(f"Error fetching executions: {e}")
        raise _server_error(e, "Failed to fetch executions")


@router.get("/stats", response_model=ExecutionStats)
async def get_execution_stats(instance: Optional[str] = None):
    """Totals, per-status counts, average duration and success rate"""
    try:
        rows = await db_service.get_stat_rows(instance=instance)
        return compute_execution_stats(rows)
    except Exception as e:
        logger.error(f"Error fetching stats: {e}")
        raise _server_error(e, "Failed to fetch statistics")


@router.get("/daily", response_model=List[DailyStats])
async def get_daily_stats(days: Optional[str] = None, instance: Optional[str] = None):
    """Daily totals over the trailing window, one bucket per day even when empty"""
    try:
        window_days = parse_positive_int(days, settings.DEFAULT_DAILY_DAYS)
        rows = await db_service.get_daily_rows(window_start(window_days), instance=instance)
        return compute_daily_stats(rows, window_days)
    except Exception as e:
        logger.error(f"Error fetching daily stats: {e}")
        raise _server_error(e, "Failed to fetch daily statistics")


@router.get("/workflows", response_model=List[WorkflowStats])
async def get_workflow_stats(instance: Optional[str] = None):
    """Per-workflow execution counts and average duration"""
    try:
        rows = await db_service.get_workflow_rows(instance=instance)
        return compute_workflow_stats(rows)
    except Exception as e:
        logger.error(f"Error fetching workflow stats: {e}")
        raise _server_error(e, "Failed to fetch workflow statistics")
