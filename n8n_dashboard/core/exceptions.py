"""
Exceptions raised by the storage layer and the dashboard client.
"""


class DashboardError(Exception):
    """Base class for dashboard errors."""


class StorageNotConfiguredError(DashboardError):
    """Raised when Supabase credentials are missing."""

    def __init__(self):
        super().__init__(
            "Supabase client not initialized. Please set SUPABASE_URL and "
            "SUPABASE_SERVICE_KEY environment variables."
        )


class StorageQueryError(DashboardError):
    """Raised when a query against the execution log table fails."""


class SectionFetchError(DashboardError):
    """Raised by the dashboard client when an API section cannot be loaded."""

    def __init__(self, endpoint: str, message: str, status_code: int = None):
        self.endpoint = endpoint
        self.status_code = status_code
        super().__init__(message)
