from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock


def status_class(status_code: int | None) -> str:
    if status_code is None:
        return "transport_error"
    return f"{status_code // 100}xx"


@dataclass
class EndpointMetric:
    total_requests: int = 0
    total_duration_ms: float = 0.0
    max_duration_ms: float = 0.0
    error_count: int = 0
    status_classes: dict[str, int] = field(default_factory=dict)

    def as_dict(self) -> dict[str, object]:
        avg = self.total_duration_ms / self.total_requests if self.total_requests else 0.0
        return {
            "total_requests": self.total_requests,
            "total_duration_ms": round(self.total_duration_ms, 2),
            "avg_duration_ms": round(avg, 2),
            "max_duration_ms": round(self.max_duration_ms, 2),
            "error_count": self.error_count,
            "status_classes": dict(self.status_classes),
        }


class RemoteCallMetrics:
    """Per-endpoint counters for calls made to the quiz API.

    Endpoints are the templated paths (``/menus/{id}``), so one entry covers
    every record of a resource.
    """

    def __init__(self) -> None:
        self._metrics: dict[str, EndpointMetric] = {}
        self._lock = Lock()

    def observe(
        self,
        endpoint: str,
        method: str,
        status_code: int | None,
        duration_ms: float,
    ) -> None:
        key = f"{method.upper()} {endpoint}"
        bucket = status_class(status_code)
        with self._lock:
            metric = self._metrics.setdefault(key, EndpointMetric())
            metric.total_requests += 1
            metric.total_duration_ms += duration_ms
            metric.max_duration_ms = max(metric.max_duration_ms, duration_ms)
            metric.status_classes[bucket] = metric.status_classes.get(bucket, 0) + 1
            if status_code is None or status_code >= 400:
                metric.error_count += 1

    def snapshot(self) -> dict[str, dict[str, object]]:
        with self._lock:
            return {key: metric.as_dict() for key, metric in self._metrics.items()}

    def slowest(self, limit: int = 5) -> list[tuple[str, float]]:
        with self._lock:
            ranked = sorted(
                ((key, metric.max_duration_ms) for key, metric in self._metrics.items()),
                key=lambda entry: entry[1],
                reverse=True,
            )
        return [(key, round(duration, 2)) for key, duration in ranked[:limit]]

    def reset(self) -> None:
        with self._lock:
            self._metrics.clear()


remote_call_metrics = RemoteCallMetrics()
