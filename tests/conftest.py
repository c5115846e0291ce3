"""Shared pytest fixtures."""
from itertools import count
from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient

from n8n_dashboard.main import app
from n8n_dashboard.schemas.execution import ExecutionRecord


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def make_record() -> Callable[..., ExecutionRecord]:
    """Build an ExecutionRecord with sensible defaults; keyword arguments override fields."""
    ids = count(1)

    def _make(**overrides: Any) -> ExecutionRecord:
        n = next(ids)
        data = {
            "id": f"row-{n}",
            "execution_id": str(1000 + n),
            "workflow_id": "wf-1",
            "workflow_name": "Order Sync",
            "status": "success",
            "finished": True,
            "started_at": "2024-01-15T10:00:00+00:00",
            "finished_at": "2024-01-15T10:00:01+00:00",
            "duration_ms": 1000,
            "mode": "trigger",
            "created_at": "2024-01-15T10:00:02+00:00",
            "n8n_instance": "https://n8n.example.com",
        }
        data.update(overrides)
        return ExecutionRecord(**data)

    return _make
