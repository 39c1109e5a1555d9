"""Core module — config, types, logging."""

from tmbreaker.core.config import Settings, get_settings, load_settings, reset_settings
from tmbreaker.core.logging import setup_logging
from tmbreaker.core.types import (
    CycleOutcome,
    CycleResult,
    Endpoint,
    EndpointMonitorStatus,
    EndpointStatus,
    GateRejectionReason,
    GateVerdict,
    MonitorCondition,
    ResourceIdentity,
    RoutingMethod,
    RoutingProfile,
)

__all__ = [
    "CycleOutcome",
    "CycleResult",
    "Endpoint",
    "EndpointMonitorStatus",
    "EndpointStatus",
    "GateRejectionReason",
    "GateVerdict",
    "MonitorCondition",
    "ResourceIdentity",
    "RoutingMethod",
    "RoutingProfile",
    "Settings",
    "get_settings",
    "load_settings",
    "reset_settings",
    "setup_logging",
]
