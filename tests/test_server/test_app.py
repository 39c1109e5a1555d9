"""Tests for the webhook receiver — status codes and background scheduling."""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator
from typing import Any

import pytest
from aiohttp import test_utils

from tmbreaker.breaker.engine import Breaker
from tmbreaker.core.types import CycleOutcome, CycleResult, ResourceIdentity
from tmbreaker.server.app import RESP_ACCEPTED, create_web_app
from tmbreaker.server.tasks import CycleScheduler

TM_ID = (
    "/subscriptions/11111111-1111-1111-1111-11111111/resourcegroups/rg-test"
    "/providers/microsoft.network/trafficmanagerprofiles/tmprof-test"
)
STORAGE_ID = (
    "/subscriptions/11111111-1111-1111-1111-11111111/resourceGroups/rg-test"
    "/providers/Microsoft.Storage/storageAccounts/tmprof-test"
)


# ── Helpers ─────────────────────────────────────────────────────


class FakeBreaker(Breaker):
    """Records every trip; optionally blocks until released."""

    def __init__(self, block: bool = False) -> None:
        self.calls: list[ResourceIdentity] = []
        self.cancelled = 0
        self.release = asyncio.Event()
        if not block:
            self.release.set()

    async def trip(self, identity: ResourceIdentity) -> CycleResult:
        self.calls.append(identity)
        try:
            await self.release.wait()
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        return CycleResult(identity=identity, outcome=CycleOutcome.PRIMARY_ONLINE)


def _alert(condition: str = "Fired", target_ids: list[str] | None = None) -> str:
    payload: dict[str, Any] = {
        "schemaId": "azureMonitorCommonAlertSchema",
        "data": {
            "essentials": {
                "monitorCondition": condition,
                "alertTargetIDs": [TM_ID] if target_ids is None else target_ids,
            }
        },
    }
    return json.dumps(payload)


async def _make_client(
    breaker: FakeBreaker, shutdown_grace_secs: float = 0.1
) -> test_utils.TestClient:
    app = create_web_app(CycleScheduler(breaker), shutdown_grace_secs=shutdown_grace_secs)
    client = test_utils.TestClient(test_utils.TestServer(app))
    await client.start_server()
    return client


@pytest.fixture()
def breaker() -> FakeBreaker:
    return FakeBreaker()


@pytest.fixture()
async def client(breaker: FakeBreaker) -> AsyncIterator[test_utils.TestClient]:
    client = await _make_client(breaker)
    yield client
    await client.close()


async def _settle() -> None:
    for _ in range(5):
        await asyncio.sleep(0)


# ── Accepted ────────────────────────────────────────────────────


class TestAccepted:
    async def test_fired_alert_returns_202(self, client: test_utils.TestClient, breaker: FakeBreaker) -> None:
        resp = await client.post("/api/breaker", data=_alert())
        assert resp.status == 202
        assert await resp.text() == RESP_ACCEPTED

    async def test_cycle_runs_for_resolved_identity(
        self, client: test_utils.TestClient, breaker: FakeBreaker
    ) -> None:
        await client.post("/api/breaker", data=_alert())
        await _settle()
        assert breaker.calls == [
            ResourceIdentity(
                subscription_id="11111111-1111-1111-1111-11111111",
                resource_group="rg-test",
                profile_name="tmprof-test",
            )
        ]

    async def test_response_does_not_wait_for_cycle(self) -> None:
        breaker = FakeBreaker(block=True)
        client = await _make_client(breaker)
        try:
            resp = await asyncio.wait_for(client.post("/api/breaker", data=_alert()), 2.0)
            assert resp.status == 202
            await _settle()
            assert len(breaker.calls) == 1
            assert client.app["scheduler"].pending == 1
        finally:
            breaker.release.set()
            await client.close()

    async def test_duplicate_alerts_each_schedule(
        self, client: test_utils.TestClient, breaker: FakeBreaker
    ) -> None:
        for _ in range(3):
            resp = await client.post("/api/breaker", data=_alert())
            assert resp.status == 202
        await _settle()
        assert len(breaker.calls) == 3


# ── Ignored ─────────────────────────────────────────────────────


class TestNoContent:
    async def test_resolved_returns_204(self, client: test_utils.TestClient, breaker: FakeBreaker) -> None:
        resp = await client.post("/api/breaker", data=_alert("Resolved"))
        assert resp.status == 204
        await _settle()
        assert breaker.calls == []


# ── Rejected ────────────────────────────────────────────────────


class TestBadRequest:
    async def test_invalid_json(self, client: test_utils.TestClient, breaker: FakeBreaker) -> None:
        resp = await client.post("/api/breaker", data="{not json")
        assert resp.status == 400
        assert breaker.calls == []

    async def test_empty_body(self, client: test_utils.TestClient, breaker: FakeBreaker) -> None:
        resp = await client.post("/api/breaker", data=b"")
        assert resp.status == 400

    async def test_wrong_resource_type(self, client: test_utils.TestClient, breaker: FakeBreaker) -> None:
        resp = await client.post("/api/breaker", data=_alert(target_ids=[STORAGE_ID]))
        assert resp.status == 400
        assert STORAGE_ID in await resp.text()
        await _settle()
        assert breaker.calls == []

    async def test_no_target_ids(self, client: test_utils.TestClient, breaker: FakeBreaker) -> None:
        resp = await client.post("/api/breaker", data=_alert(target_ids=[]))
        assert resp.status == 400
        assert breaker.calls == []


# ── Shutdown ────────────────────────────────────────────────────


class TestShutdown:
    async def test_cleanup_cancels_running_cycles(self) -> None:
        breaker = FakeBreaker(block=True)
        client = await _make_client(breaker, shutdown_grace_secs=0.05)
        scheduler: CycleScheduler = client.app["scheduler"]

        resp = await client.post("/api/breaker", data=_alert())
        assert resp.status == 202
        await _settle()
        assert scheduler.pending == 1

        await client.close()
        assert breaker.cancelled == 1
        assert scheduler.pending == 0

    async def test_cleanup_waits_for_quick_cycles(self) -> None:
        breaker = FakeBreaker(block=True)
        client = await _make_client(breaker, shutdown_grace_secs=1.0)
        scheduler: CycleScheduler = client.app["scheduler"]

        await client.post("/api/breaker", data=_alert())
        await _settle()
        asyncio.get_running_loop().call_later(0.02, breaker.release.set)

        await client.close()
        assert breaker.cancelled == 0
        assert scheduler.pending == 0


class TestRouting:
    async def test_get_not_allowed(self, client: test_utils.TestClient) -> None:
        resp = await client.get("/api/breaker")
        assert resp.status == 405

    async def test_custom_path(self, breaker: FakeBreaker) -> None:
        app = create_web_app(CycleScheduler(breaker), path="/hooks/tm")
        client = test_utils.TestClient(test_utils.TestServer(app))
        await client.start_server()
        try:
            resp = await client.post("/hooks/tm", data=_alert())
            assert resp.status == 202
        finally:
            await client.close()
