from __future__ import annotations


class DashboardError(Exception):
    """Base error for everything surfaced to the dashboard error banner."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DashboardError):
    """Draft failed a client-side check. No request was sent."""

    def __init__(self, message: str, fields: list[str] | None = None):
        super().__init__(message)
        self.fields = list(fields or [])


class ConflictError(DashboardError):
    """Guarded delete refused because dependent records exist."""

    def __init__(self, message: str, dependent_count: int):
        super().__init__(message)
        self.dependent_count = dependent_count


class OperationInProgressError(DashboardError):
    def __init__(self, operation_key: str):
        super().__init__(f"Operation already in progress: {operation_key}")
        self.operation_key = operation_key


class RemoteError(DashboardError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(RemoteError):
    pass
