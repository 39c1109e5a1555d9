"""Breaker decision engine — one stateless failover cycle per alert."""

from __future__ import annotations

import abc
import asyncio

import structlog

from tmbreaker.breaker.gates import evaluate_gates
from tmbreaker.breaker.ranker import rank_endpoints
from tmbreaker.core.config import BreakerConfig, get_settings
from tmbreaker.core.types import CycleOutcome, CycleResult, ResourceIdentity
from tmbreaker.trafficmanager.client import TrafficManagerClient
from tmbreaker.trafficmanager.exceptions import ControlPlaneError, TrafficManagerError

logger = structlog.stdlib.get_logger()

# Floor for a control-plane call's own timeout once the cycle budget is spent.
_MIN_CALL_TIMEOUT_SECS = 0.1


def _error_code(exc: TrafficManagerError) -> str | None:
    if isinstance(exc, ControlPlaneError):
        return exc.code
    return None


def _remaining(deadline: float) -> float:
    """Seconds left before *deadline* on the running loop's clock."""
    return max(deadline - asyncio.get_running_loop().time(), _MIN_CALL_TIMEOUT_SECS)


class Breaker(abc.ABC):
    """Something that can run a decision cycle for a profile."""

    @abc.abstractmethod
    async def trip(self, identity: ResourceIdentity) -> CycleResult:
        """Evaluate the profile and disable endpoints as needed."""


class TrafficManagerBreaker(Breaker):
    """Disables unhealthy endpoints ranked above the first Online one.

    Each call to :meth:`trip` is independent: the profile is fetched fresh,
    nothing is remembered between cycles, and endpoints are never
    re-enabled.  A failed disable ends the cycle; endpoints disabled before
    the failure stay disabled.

    Usage::

        breaker = TrafficManagerBreaker(client, settings.breaker)
        result = await breaker.trip(identity)
    """

    def __init__(
        self,
        client: TrafficManagerClient,
        config: BreakerConfig | None = None,
    ) -> None:
        self._client = client
        self._config = config or get_settings().breaker

    async def trip(self, identity: ResourceIdentity) -> CycleResult:
        log = logger.bind(
            subscription_id=identity.subscription_id,
            resource_group=identity.resource_group,
            profile=identity.profile_name,
        )
        log.debug("breaker_cycle_started")

        # Shared with _run so a timeout still reports what was disabled.
        disabled: list[str] = []
        deadline = asyncio.get_running_loop().time() + self._config.cycle_timeout_secs
        try:
            result = await asyncio.wait_for(
                self._run(identity, disabled, log, deadline),
                timeout=self._config.cycle_timeout_secs,
            )
        except TimeoutError:
            log.error(
                "breaker_cycle_timed_out",
                timeout_secs=self._config.cycle_timeout_secs,
                disabled=disabled,
            )
            result = CycleResult(
                identity=identity,
                outcome=CycleOutcome.TIMED_OUT,
                disabled=list(disabled),
                reason=f"cycle exceeded {self._config.cycle_timeout_secs}s",
            )

        log.debug("breaker_cycle_finished", outcome=result.outcome.value)
        return result

    async def _run(
        self,
        identity: ResourceIdentity,
        disabled: list[str],
        log: structlog.stdlib.BoundLogger,
        deadline: float,
    ) -> CycleResult:
        try:
            profile = await self._client.get_profile(identity, timeout=_remaining(deadline))
        except TrafficManagerError as exc:
            code = _error_code(exc)
            log.error("profile_fetch_failed", error_code=code, error=str(exc))
            return CycleResult(
                identity=identity,
                outcome=CycleOutcome.FAILED,
                reason="failed to get Traffic Manager profile",
                error_code=code,
            )

        for ep in profile.endpoints:
            log.info(
                "endpoint_found",
                endpoint=ep.name,
                priority=ep.priority,
                status=ep.status,
                monitor_status=ep.monitor_status,
            )

        verdict = evaluate_gates(profile, self._config)
        if not verdict.approved:
            log.error(
                "breaker_skipped",
                reason=verdict.reason.value if verdict.reason else None,
                detail=verdict.detail,
            )
            return CycleResult(
                identity=identity,
                outcome=CycleOutcome.SKIPPED,
                reason=verdict.detail,
            )

        for ep in rank_endpoints(profile.endpoints):
            if ep.online:
                log.info(
                    "primary_endpoint_found",
                    endpoint=ep.name,
                    priority=ep.priority,
                    disabled=disabled,
                )
                return CycleResult(
                    identity=identity,
                    outcome=CycleOutcome.PRIMARY_ONLINE,
                    disabled=list(disabled),
                    primary=ep.name,
                )

            if ep.disabled:
                continue

            log.info("endpoint_disabling", endpoint=ep.name, priority=ep.priority)
            try:
                await self._client.disable_endpoint(
                    identity, ep, timeout=_remaining(deadline)
                )
            except TrafficManagerError as exc:
                code = _error_code(exc)
                log.error(
                    "endpoint_disable_failed",
                    endpoint=ep.name,
                    error_code=code,
                    error=str(exc),
                    disabled=disabled,
                )
                return CycleResult(
                    identity=identity,
                    outcome=CycleOutcome.FAILED,
                    disabled=list(disabled),
                    reason=f"failed to disable endpoint: {ep.name}",
                    error_code=code,
                )
            disabled.append(ep.name)
            log.info("endpoint_disabled", endpoint=ep.name)

        log.info("endpoints_exhausted", disabled=disabled)
        return CycleResult(
            identity=identity,
            outcome=CycleOutcome.EXHAUSTED,
            disabled=list(disabled),
        )
