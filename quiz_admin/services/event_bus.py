from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, DefaultDict, List

Handler = Callable[[dict[str, Any]], None]

COLLECTION_CHANGED = "collection_changed"

logger = logging.getLogger(__name__)


class EventBus:
    """In-process notifications for the presentation layer.

    Handlers run synchronously in subscription order. A handler that raises is
    logged and skipped; the store mutation that emitted the event stands.
    """

    def __init__(self) -> None:
        self._handlers: DefaultDict[str, List[Handler]] = defaultdict(list)

    def subscribe(self, event_name: str, handler: Handler) -> None:
        self._handlers[event_name].append(handler)

    def unsubscribe(self, event_name: str, handler: Handler) -> None:
        handlers = self._handlers.get(event_name)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def on_collection_changed(self, collection: str, handler: Handler) -> Handler:
        """Subscribe ``handler`` to changes of one collection only.

        Returns the wrapper actually registered, for ``unsubscribe``.
        """

        def _filtered(payload: dict[str, Any]) -> None:
            if payload.get("collection") == collection:
                handler(payload)

        self.subscribe(COLLECTION_CHANGED, _filtered)
        return _filtered

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        handlers = list(self._handlers.get(event_name, []))
        if not handlers:
            logger.debug("no subscribers for %s", event_name)
            return
        for handler in handlers:
            try:
                handler(payload)
            except Exception:
                logger.exception(
                    "event handler failed for %s",
                    event_name,
                    extra={"collection": payload.get("collection")},
                )
