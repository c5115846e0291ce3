from fastapi import APIRouter

from n8n_dashboard.api.endpoints import executions, instances

api_router = APIRouter()
api_router.include_router(instances.router, prefix="/instances", tags=["instances"])
api_router.include_router(executions.router, prefix="/executions", tags=["executions"])
