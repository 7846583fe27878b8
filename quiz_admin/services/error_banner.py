from __future__ import annotations

from dataclasses import dataclass
from threading import Lock
from typing import Optional

from quiz_admin.core.errors import DashboardError


@dataclass
class BannerMessage:
    message: str
    kind: str
    status_code: Optional[int] = None


class ErrorBanner:
    """Single dismissible error slot. The latest error replaces the previous one."""

    def __init__(self) -> None:
        self._current: Optional[BannerMessage] = None
        self._lock = Lock()

    @property
    def current(self) -> Optional[BannerMessage]:
        with self._lock:
            return self._current

    @property
    def message(self) -> Optional[str]:
        current = self.current
        return current.message if current else None

    def show(self, error: DashboardError) -> BannerMessage:
        entry = BannerMessage(
            message=error.message,
            kind=error.__class__.__name__,
            status_code=getattr(error, "status_code", None),
        )
        with self._lock:
            self._current = entry
        return entry

    def dismiss(self) -> None:
        with self._lock:
            self._current = None
