import logging
from typing import List

from fastapi import APIRouter, HTTPException, status

from n8n_dashboard.services.database import db_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[str])
async def get_instances():
    """Distinct n8n instances that have logged executions"""
    try:
        return await db_service.get_instances()
    except Exception as e:
        logger.error(f"Error fetching instances: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e) or "Failed to fetch instances"
        )
