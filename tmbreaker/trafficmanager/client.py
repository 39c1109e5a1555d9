"""Async wrapper around the synchronous azure-mgmt-trafficmanager SDK."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from threading import RLock
from typing import Any

import structlog
from azure.core.credentials import TokenCredential
from azure.core.exceptions import AzureError, HttpResponseError
from azure.mgmt.trafficmanager import TrafficManagerManagementClient
from azure.mgmt.trafficmanager.models import Endpoint as SdkEndpoint

from tmbreaker.core.types import Endpoint, EndpointStatus, ResourceIdentity, RoutingProfile
from tmbreaker.trafficmanager.exceptions import (
    ControlPlaneError,
    TrafficManagerError,
    TransportError,
)

logger = structlog.stdlib.get_logger()

ClientFactory = Callable[[str], Any]


def _enum_value(raw: Any) -> str:
    """SDK enums are ``str`` subclasses but may also come back as plain strings."""
    if raw is None:
        return ""
    return str(getattr(raw, "value", raw))


def _parse_endpoint(raw: Any) -> Endpoint:
    priority = getattr(raw, "priority", None)
    return Endpoint(
        name=getattr(raw, "name", None) or "",
        type=getattr(raw, "type", None) or "",
        id=getattr(raw, "id", None) or "",
        target=getattr(raw, "target", None) or "",
        priority=int(priority) if priority is not None else None,
        status=_enum_value(getattr(raw, "endpoint_status", None)),
        monitor_status=_enum_value(getattr(raw, "endpoint_monitor_status", None)),
    )


def _parse_profile(raw: Any) -> RoutingProfile:
    """Convert an SDK ``Profile`` into our RoutingProfile."""
    return RoutingProfile(
        name=getattr(raw, "name", None) or "",
        routing_method=_enum_value(getattr(raw, "traffic_routing_method", None)),
        endpoints=[_parse_endpoint(ep) for ep in getattr(raw, "endpoints", None) or []],
    )


def _normalize_error(exc: Exception) -> TrafficManagerError:
    """Map SDK exceptions onto ControlPlaneError / TransportError."""
    if isinstance(exc, HttpResponseError):
        code = getattr(exc.error, "code", None) or (
            str(exc.status_code) if exc.status_code else "Unknown"
        )
        return ControlPlaneError(code, status_code=exc.status_code, message=str(exc))
    return TransportError(str(exc) or type(exc).__name__)


def _call_options(timeout: float | None) -> dict[str, float]:
    """azure-core per-operation limits: total time across retries and socket read."""
    if timeout is None:
        return {}
    return {"timeout": timeout, "read_timeout": timeout}


class TrafficManagerClient:
    """Reads profiles and disables endpoints through the management API.

    One SDK client is kept per subscription and shared by every decision
    cycle; SDK calls run in worker threads so the event loop never blocks.

    Usage::

        client = TrafficManagerClient(DefaultAzureCredential())
        profile = await client.get_profile(identity)
        await client.disable_endpoint(identity, profile.endpoints[0])
    """

    def __init__(
        self,
        credential: TokenCredential | None = None,
        client_factory: ClientFactory | None = None,
    ) -> None:
        if credential is None and client_factory is None:
            raise ValueError("either credential or client_factory is required")
        self._credential = credential
        self._client_factory = client_factory or self._default_factory
        self._clients: dict[str, Any] = {}
        self._lock = RLock()

    def _default_factory(self, subscription_id: str) -> TrafficManagerManagementClient:
        return TrafficManagerManagementClient(self._credential, subscription_id)

    def _sdk(self, subscription_id: str) -> Any:
        """Get (or create) the cached SDK client for a subscription."""
        with self._lock:
            existing = self._clients.get(subscription_id)
            if existing is not None:
                return existing
            client = self._client_factory(subscription_id)
            self._clients[subscription_id] = client
            return client

    async def get_profile(
        self,
        identity: ResourceIdentity,
        timeout: float | None = None,
    ) -> RoutingProfile:
        """Fetch the current routing method and endpoint set of a profile.

        Args:
            identity: Profile to read.
            timeout: Upper bound in seconds for the SDK call, retries included.

        Raises:
            ControlPlaneError: the management API rejected the read.
            TransportError: the read failed before a response was received.
        """
        sdk = self._sdk(identity.subscription_id)
        try:
            raw = await asyncio.to_thread(
                sdk.profiles.get,
                identity.resource_group,
                identity.profile_name,
                **_call_options(timeout),
            )
        except (AzureError, OSError) as exc:
            raise _normalize_error(exc) from exc
        return _parse_profile(raw)

    async def disable_endpoint(
        self,
        identity: ResourceIdentity,
        endpoint: Endpoint,
        timeout: float | None = None,
    ) -> None:
        """Set one endpoint's status to Disabled, leaving other fields as they are.

        Raises:
            ControlPlaneError: the management API rejected the update.
            TransportError: the update failed before a response was received.
        """
        sdk = self._sdk(identity.subscription_id)
        parameters = SdkEndpoint(
            name=endpoint.name,
            type=endpoint.type or None,
            id=endpoint.id or None,
            endpoint_status=EndpointStatus.DISABLED.value,
        )
        try:
            await asyncio.to_thread(
                sdk.endpoints.update,
                identity.resource_group,
                identity.profile_name,
                endpoint.endpoint_type,
                endpoint.name,
                parameters,
                **_call_options(timeout),
            )
        except (AzureError, OSError) as exc:
            raise _normalize_error(exc) from exc

    async def close(self) -> None:
        """Close every cached SDK client."""
        with self._lock:
            clients = list(self._clients.items())
            self._clients.clear()
        for subscription_id, client in clients:
            try:
                await asyncio.to_thread(client.close)
            except Exception:
                logger.exception("tm_client_close_error", subscription_id=subscription_id)
        logger.info("tm_client_closed", clients=len(clients))
