# src/rice_planner/backend/http_client.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..planning.errors import BackendError
from ..planning.task_models import Task, task_from_wire, task_to_wire

logger = logging.getLogger(__name__)


def _make_timeout(seconds: float | None) -> httpx.Timeout:
    """
    Per-request timeout. None/0 disables it (requests may then hang forever).
    """
    if not seconds or seconds <= 0:
        return httpx.Timeout(None)
    return httpx.Timeout(seconds, connect=min(5.0, seconds))


class HttpScoringBackend:
    """
    Remote scorer over HTTP/JSON.

    Endpoints:
    - GET    /api/tasks?username=<name>  -> [task, ...]
    - POST   /api/calculate               -> task (authoritative id + score)
    - DELETE /api/delete/<id>             -> body ignored

    Every failure is reported as BackendError:
    - non-2xx            -> status_code set
    - transport/timeouts -> unreachable=True
    - bad JSON / shape, undecodable body and other httpx errors
                         -> plain BackendError
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float | None = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url or not base_url.strip():
            raise ValueError("base_url is required")
        self.base_url = base_url.strip().rstrip("/")
        self._timeout = _make_timeout(timeout_seconds)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """Create lazily so the client binds to the event loop that first uses it."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self._timeout,
                transport=self._transport,
                headers={"Content-Type": "application/json"},
            )
        return self._client

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        client = self._get_client()
        try:
            response = await client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.info("Backend %s %s rejected: HTTP %s", method, url, status)
            raise BackendError(f"Backend rejected {method} {url} (HTTP {status})", status_code=status) from e
        except httpx.TransportError as e:
            logger.info("Backend %s %s unreachable: %s", method, url, e.__class__.__name__)
            raise BackendError(
                f"Backend unreachable for {method} {url}: {e.__class__.__name__}",
                unreachable=True,
            ) from e
        except httpx.HTTPError as e:
            logger.info("Backend %s %s failed: %s", method, url, e.__class__.__name__)
            raise BackendError(f"Backend call {method} {url} failed: {e.__class__.__name__}: {e}") from e
        logger.debug("Backend %s %s -> %s", method, url, response.status_code)
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise BackendError(f"Backend returned invalid JSON: {e}") from e

    async def fetch_tasks(self, username: str) -> list[Task]:
        response = await self._request("GET", "/api/tasks", params={"username": username})
        data = self._json(response)
        if not isinstance(data, list):
            raise BackendError(f"Expected a JSON array of tasks, got {type(data).__name__}")
        return [task_from_wire(item) for item in data]

    async def calculate(self, task: Task, username: str) -> Task:
        response = await self._request("POST", "/api/calculate", json=task_to_wire(task, username))
        return task_from_wire(self._json(response))

    async def delete(self, task_id: int) -> None:
        await self._request("DELETE", f"/api/delete/{int(task_id)}")

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
