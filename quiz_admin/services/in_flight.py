from __future__ import annotations

import uuid
from contextlib import contextmanager
from threading import Lock
from typing import Iterator

from quiz_admin.core.errors import OperationInProgressError
from quiz_admin.core.request_context import clear_operation_context, set_operation_context


class InFlightRegistry:
    """Per-operation busy flags.

    Keys look like ``"menus:submit"`` or ``"menu_items:delete:3"``. A key
    that is already in flight cannot be entered again; different keys never
    block each other. Record keys (``"menus:record:1"``) are taken as extra
    keys by every mutation of that record.
    """

    def __init__(self) -> None:
        self._active: dict[str, str] = {}
        self._lock = Lock()

    def is_busy(self, key: str) -> bool:
        with self._lock:
            return key in self._active

    def any_busy(self, prefix: str = "") -> bool:
        with self._lock:
            return any(key.startswith(prefix) for key in self._active)

    def active_keys(self) -> list[str]:
        with self._lock:
            return sorted(self._active)

    def _acquire(self, keys: tuple[str, ...]) -> str:
        # All keys or none
        with self._lock:
            for key in keys:
                if key in self._active:
                    raise OperationInProgressError(key)
            operation_id = str(uuid.uuid4())
            for key in keys:
                self._active[key] = operation_id
            return operation_id

    def _release(self, keys: tuple[str, ...]) -> None:
        with self._lock:
            for key in keys:
                self._active.pop(key, None)

    @contextmanager
    def track(self, key: str, *extra_keys: str) -> Iterator[str]:
        """Hold ``key`` (and ``extra_keys``) for the duration of the block.

        ``key`` names the operation in logs; the extra keys are record locks
        such as ``"menus:record:1"`` shared by every mutation of that record.
        """
        keys = (key,) + tuple(dict.fromkeys(k for k in extra_keys if k != key))
        operation_id = self._acquire(keys)
        set_operation_context(operation_id=operation_id, operation_key=key)
        try:
            yield operation_id
        finally:
            self._release(keys)
            clear_operation_context()
