from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, replace


@dataclass(frozen=True)
class OperationContext:
    """What the log formatter attaches to every line.

    ``operation_id``/``operation_key`` live for one tracked operation;
    ``actor`` is the logged-in team and lives until logout.
    """

    operation_id: str | None = None
    operation_key: str | None = None
    actor: str | None = None


_CONTEXT: ContextVar[OperationContext] = ContextVar("quiz_admin_operation", default=OperationContext())


def current_context() -> OperationContext:
    return _CONTEXT.get()


def set_operation_context(
    *, operation_id: str | None = None, operation_key: str | None = None, actor: str | None = None
) -> None:
    changes = {
        name: value
        for name, value in (("operation_id", operation_id), ("operation_key", operation_key), ("actor", actor))
        if value is not None
    }
    _CONTEXT.set(replace(_CONTEXT.get(), **changes))


def get_operation_id() -> str | None:
    return _CONTEXT.get().operation_id


def get_operation_key() -> str | None:
    return _CONTEXT.get().operation_key


def get_actor() -> str | None:
    return _CONTEXT.get().actor


def clear_operation_context(*, include_actor: bool = False) -> None:
    """End the current operation. The actor is kept unless ``include_actor``."""
    actor = None if include_actor else _CONTEXT.get().actor
    _CONTEXT.set(OperationContext(actor=actor))
