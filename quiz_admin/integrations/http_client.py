from __future__ import annotations

import json
import logging
import time
from typing import Any, Mapping
from urllib.parse import quote

import httpx
from pydantic import BaseModel

from quiz_admin.core.config import QUIZ_API_BASE_URL, QUIZ_API_TIMEOUT_SECONDS, QUIZ_API_TOKEN
from quiz_admin.core.errors import NotFoundError, RemoteError
from quiz_admin.core.metrics import RemoteCallMetrics, remote_call_metrics

logger = logging.getLogger(__name__)


def _to_jsonable(body: Any) -> Any:
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json")
    if isinstance(body, list):
        return [_to_jsonable(item) for item in body]
    if isinstance(body, dict):
        return {key: _to_jsonable(value) for key, value in body.items()}
    return body


def _extract_detail(response: httpx.Response) -> str | None:
    try:
        data = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    if not isinstance(data, dict):
        return None
    detail = data.get("detail")
    if isinstance(detail, str) and detail.strip():
        return detail
    # FastAPI validation errors: [{"loc": [...], "msg": "..."}]
    if isinstance(detail, list):
        messages = [str(entry.get("msg")) for entry in detail if isinstance(entry, dict) and entry.get("msg")]
        if messages:
            return "; ".join(messages)
    return None


def resource_path(resource: str, key: Any | None = None, action: str | None = None) -> str:
    path = f"/{resource.strip('/')}"
    if key is not None:
        path = f"{path}/{quote(str(key), safe='')}"
    if action:
        path = f"{path}/{action.strip('/')}"
    return path


class RemoteDataClient:
    """JSON client for the quiz API.

    Every call is a single attempt. Non-2xx answers become RemoteError with
    the server's ``detail`` message when there is one; 404 becomes
    NotFoundError so callers can tell "absent" from "failed".
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        token: str | None = None,
        http_client: httpx.Client | None = None,
        metrics: RemoteCallMetrics | None = None,
    ) -> None:
        self.base_url = (base_url or QUIZ_API_BASE_URL).rstrip("/")
        self.timeout = QUIZ_API_TIMEOUT_SECONDS if timeout is None else timeout
        self.token = token if token is not None else (QUIZ_API_TOKEN or None)
        self.metrics = metrics or remote_call_metrics
        self._client = http_client
        self._owns_client = http_client is None

    def _http(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout or None)
        return self._client

    def close(self) -> None:
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    def __enter__(self) -> "RemoteDataClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        body: Any = None,
        files: Any = None,
        token: str | None = None,
        endpoint: str | None = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        headers = {"Accept": "application/json"}
        bearer = token or self.token
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        query = {key: value for key, value in (params or {}).items() if value is not None}
        payload = _to_jsonable(body) if body is not None else None
        endpoint = endpoint or path

        start = time.perf_counter()
        status_code: int | None = None
        try:
            response = self._http().request(
                method,
                url,
                params=query or None,
                json=payload,
                files=files,
                headers=headers,
            )
            status_code = response.status_code
        except httpx.HTTPError as exc:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            self.metrics.observe(endpoint=endpoint, method=method, status_code=None, duration_ms=duration_ms)
            logger.warning(
                "quiz api transport failure: %s",
                exc,
                extra={"endpoint": endpoint, "method": method, "duration_ms": duration_ms},
            )
            raise RemoteError(str(exc) or exc.__class__.__name__) from exc

        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        self.metrics.observe(endpoint=endpoint, method=method, status_code=status_code, duration_ms=duration_ms)
        logger.info(
            "quiz api request completed",
            extra={
                "endpoint": endpoint,
                "method": method,
                "status_code": status_code,
                "duration_ms": duration_ms,
            },
        )

        if 200 <= status_code < 300:
            if not response.content:
                return None
            try:
                return response.json()
            except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                raise RemoteError("API returned an invalid JSON body", status_code) from exc

        message = _extract_detail(response) or f"API request failed with status {status_code}"
        logger.warning(
            "quiz api request failed: %s",
            message,
            extra={"endpoint": endpoint, "method": method, "status_code": status_code},
        )
        if status_code == 404:
            raise NotFoundError(message, status_code)
        raise RemoteError(message, status_code)

    def list(self, resource: str, params: Mapping[str, Any] | None = None) -> Any:
        return self.request("GET", resource_path(resource), params=params, endpoint=resource_path(resource))

    def get(self, resource: str, key: Any) -> Any:
        return self.request("GET", resource_path(resource, key), endpoint=f"{resource_path(resource)}/{{id}}")

    def create(self, resource: str, body: Any) -> Any:
        return self.request("POST", resource_path(resource), body=body, endpoint=resource_path(resource))

    def update(self, resource: str, key: Any, body: Any) -> Any:
        return self.request(
            "PUT", resource_path(resource, key), body=body, endpoint=f"{resource_path(resource)}/{{id}}"
        )

    def patch(self, resource: str, key: Any, action: str | None = None, body: Any = None) -> Any:
        endpoint = f"{resource_path(resource)}/{{id}}"
        if action:
            endpoint = f"{endpoint}/{action}"
        return self.request("PATCH", resource_path(resource, key, action), body=body, endpoint=endpoint)

    def delete(self, resource: str, key: Any) -> Any:
        return self.request("DELETE", resource_path(resource, key), endpoint=f"{resource_path(resource)}/{{id}}")
