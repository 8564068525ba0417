# tests/test_http_client.py

from __future__ import annotations

import json

import httpx
import pytest

from rice_planner.backend.http_client import HttpScoringBackend
from rice_planner.planning.errors import BackendError
from rice_planner.planning.sync import SyncCoordinator
from rice_planner.planning.task_store import TaskStore

from .fakes import make_task


class FakeScorerServer:
    """
    httpx.MockTransport handler mimicking the scoring service.

    Records every request; names in `reject` get HTTP 500 from /api/calculate.
    """

    def __init__(self, reject: set[str] | None = None) -> None:
        self.reject = reject or set()
        self.requests: list[httpx.Request] = []
        self.bodies: list[dict] = []
        self._next_id = 1

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.method == "POST" and request.url.path == "/api/calculate":
            body = json.loads(request.content)
            self.bodies.append(body)
            if body["name"] in self.reject:
                return httpx.Response(500, json={"error": "boom"})
            task_id = body.get("id")
            if task_id is None:
                task_id = self._next_id
                self._next_id += 1
            score = body["reach"] * body["impact"] * (body["confidence"] / 100) * body["strategy"] / body["effort"]
            payload = {k: v for k, v in body.items() if k != "username"}
            payload.update({"id": task_id, "score": score})
            return httpx.Response(200, json=payload)

        if request.method == "GET" and request.url.path == "/api/tasks":
            return httpx.Response(
                200,
                json=[
                    {"id": 3, "name": "saved", "reach": 10, "impact": 1.0, "confidence": 50,
                     "strategy": 1.0, "effort": 2, "score": 2.5},
                ],
            )

        if request.method == "DELETE" and request.url.path.startswith("/api/delete/"):
            return httpx.Response(200)

        return httpx.Response(404)


def _backend(handler) -> HttpScoringBackend:
    return HttpScoringBackend("http://scorer.test/", timeout_seconds=5.0, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_calculate_sends_attributes_and_username() -> None:
    server = FakeScorerServer()
    backend = _backend(server)
    store = TaskStore()
    draft = store.add(name="search", reach=1000, impact=2.0, confidence=80, strategy=1.0, effort=10)

    scored = await backend.calculate(draft, "alice")
    await backend.aclose()

    body = server.bodies[0]
    assert body == {
        "id": draft.id,
        "name": "search",
        "reach": 1000.0,
        "impact": 2.0,
        "confidence": 80,
        "strategy": 1.0,
        "effort": 10.0,
        "username": "alice",
    }
    assert scored.id == draft.id
    assert scored.synced is True
    assert scored.score == pytest.approx(160.0)


@pytest.mark.asyncio
async def test_calculate_sends_confirmed_id() -> None:
    server = FakeScorerServer()
    backend = _backend(server)

    scored = await backend.calculate(make_task(42, name="existing"), "alice")
    await backend.aclose()

    assert server.bodies[0]["id"] == 42
    assert scored.id == 42


@pytest.mark.asyncio
async def test_fetch_tasks_scopes_by_username() -> None:
    server = FakeScorerServer()
    backend = _backend(server)

    tasks = await backend.fetch_tasks("bob")
    await backend.aclose()

    request = server.requests[0]
    assert request.url.path == "/api/tasks"
    assert request.url.params["username"] == "bob"
    assert [t.id for t in tasks] == [3]
    assert tasks[0].score == 2.5
    assert tasks[0].synced is True


@pytest.mark.asyncio
async def test_delete_hits_delete_endpoint() -> None:
    server = FakeScorerServer()
    backend = _backend(server)

    await backend.delete(7)
    await backend.aclose()

    assert server.requests[0].method == "DELETE"
    assert server.requests[0].url.path == "/api/delete/7"


@pytest.mark.asyncio
async def test_non_2xx_is_rejected_backend_error() -> None:
    backend = _backend(FakeScorerServer(reject={"bad"}))

    with pytest.raises(BackendError) as excinfo:
        await backend.calculate(make_task(1, name="bad"), "alice")
    await backend.aclose()

    assert excinfo.value.status_code == 500
    assert excinfo.value.unreachable is False


@pytest.mark.asyncio
async def test_transport_failure_is_unreachable() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    backend = _backend(refuse)

    with pytest.raises(BackendError) as excinfo:
        await backend.fetch_tasks("alice")
    await backend.aclose()

    assert excinfo.value.unreachable is True
    assert excinfo.value.status_code is None


@pytest.mark.asyncio
async def test_malformed_payloads() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/tasks":
            return httpx.Response(200, json={"not": "a list"})
        if request.url.path == "/api/calculate":
            return httpx.Response(200, content=b"<html>oops</html>")
        return httpx.Response(404)

    backend = _backend(handler)

    with pytest.raises(BackendError):
        await backend.fetch_tasks("alice")
    with pytest.raises(BackendError):
        await backend.calculate(make_task(1), "alice")
    await backend.aclose()


def test_base_url_is_required() -> None:
    with pytest.raises(ValueError):
        HttpScoringBackend("  ")


@pytest.mark.asyncio
async def test_analyze_over_http_keeps_pool_when_one_request_fails() -> None:
    server = FakeScorerServer(reject={"flaky"})
    backend = _backend(server)
    store = TaskStore()
    store.add(name="solid", reach=100, impact=1.0, confidence=100, strategy=1.0, effort=1)
    store.add(name="flaky", reach=100, impact=1.0, confidence=100, strategy=1.0, effort=1)
    before = store.pool()

    with pytest.raises(BackendError):
        await SyncCoordinator(store, backend).analyze("alice")
    await backend.aclose()

    assert store.pool() == before


@pytest.mark.asyncio
async def test_analyze_over_http_commits_scores() -> None:
    backend = _backend(FakeScorerServer())
    store = TaskStore()
    store.add(name="a", reach=100, impact=1.0, confidence=100, strategy=1.0, effort=4)
    store.add(name="b", reach=100, impact=3.0, confidence=100, strategy=1.0, effort=1)

    ranked = await SyncCoordinator(store, backend).analyze("alice")
    await backend.aclose()

    assert [t.name for t in ranked] == ["b", "a"]
    assert [t.score for t in ranked] == pytest.approx([300.0, 25.0])
    assert len({t.id for t in ranked}) == 2


@pytest.mark.asyncio
async def test_task_with_non_positive_effort_is_malformed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json=[{"id": 1, "name": "x", "reach": 1, "impact": 1, "confidence": 1, "strategy": 1, "effort": 0}],
        )

    backend = _backend(handler)

    with pytest.raises(BackendError, match="effort"):
        await backend.fetch_tasks("alice")
    await backend.aclose()


def _broken_gzip(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, headers={"content-encoding": "gzip"}, content=b"definitely not gzip")


@pytest.mark.asyncio
async def test_undecodable_body_is_backend_error() -> None:
    backend = _backend(_broken_gzip)

    with pytest.raises(BackendError) as excinfo:
        await backend.calculate(make_task(1), "alice")
    await backend.aclose()

    assert excinfo.value.unreachable is False
    assert excinfo.value.status_code is None


@pytest.mark.asyncio
async def test_analyze_over_http_undecodable_body_keeps_pool() -> None:
    backend = _backend(_broken_gzip)
    store = TaskStore()
    store.add(name="a", reach=100, impact=1.0, confidence=100, strategy=1.0, effort=4)
    before = store.pool()

    with pytest.raises(BackendError):
        await SyncCoordinator(store, backend).analyze("alice")
    await backend.aclose()

    assert store.pool() == before


@pytest.mark.asyncio
async def test_undecodable_delete_response_is_tracked() -> None:
    backend = _backend(_broken_gzip)
    store = TaskStore()
    store.replace_all([make_task(1, 5.0)])
    coordinator = SyncCoordinator(store, backend)

    await coordinator.delete(1)
    await coordinator.drain()
    await backend.aclose()

    assert 1 not in store
    assert coordinator.unresolved_deletes == {1}
