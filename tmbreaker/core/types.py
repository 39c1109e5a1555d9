"""Domain types for Traffic Manager failover decisions."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ARM type prefix shared by every Traffic Manager endpoint type.
ENDPOINT_TYPE_PREFIX = "Microsoft.Network/trafficManagerProfiles/"


class MonitorCondition(StrEnum):
    """Alert monitor condition."""

    FIRED = "Fired"
    RESOLVED = "Resolved"


class RoutingMethod(StrEnum):
    """Traffic Manager routing method the breaker acts on."""

    PRIORITY = "Priority"


class EndpointStatus(StrEnum):
    """Administrative endpoint status (operator intent)."""

    ENABLED = "Enabled"
    DISABLED = "Disabled"


class EndpointMonitorStatus(StrEnum):
    """Observed endpoint health as reported by Traffic Manager probes."""

    CHECKING_ENDPOINT = "CheckingEndpoint"
    ONLINE = "Online"
    DEGRADED = "Degraded"
    DISABLED = "Disabled"
    INACTIVE = "Inactive"
    STOPPED = "Stopped"
    UNMONITORED = "Unmonitored"


class ResourceIdentity(BaseModel):
    """Traffic Manager profile addressed by an alert."""

    model_config = ConfigDict(frozen=True)

    subscription_id: str
    resource_group: str
    profile_name: str


class Endpoint(BaseModel):
    """One routable target inside a profile.

    ``monitor_status`` stays a plain string: the platform adds new probe
    states over time and an unknown one must never fail a decision cycle.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    type: str = ""
    id: str = ""
    target: str = ""
    priority: int | None = None
    status: str = EndpointStatus.ENABLED
    monitor_status: str = ""

    @property
    def endpoint_type(self) -> str:
        """Short type segment used in the endpoint URL (e.g. ``externalEndpoints``)."""
        if self.type.startswith(ENDPOINT_TYPE_PREFIX):
            return self.type[len(ENDPOINT_TYPE_PREFIX):]
        return self.type

    @property
    def online(self) -> bool:
        return self.monitor_status == EndpointMonitorStatus.ONLINE

    @property
    def disabled(self) -> bool:
        return self.status == EndpointStatus.DISABLED


class RoutingProfile(BaseModel):
    """Current topology of a Traffic Manager profile."""

    name: str = ""
    routing_method: str = ""
    endpoints: list[Endpoint] = Field(default_factory=list)

    @property
    def online_count(self) -> int:
        return sum(1 for ep in self.endpoints if ep.online)


class GateRejectionReason(StrEnum):
    """Reason a profile is not eligible for a breaker trip."""

    ROUTING_METHOD = "ROUTING_METHOD"
    ENDPOINT_COUNT = "ENDPOINT_COUNT"
    NO_ONLINE_ENDPOINT = "NO_ONLINE_ENDPOINT"


class GateVerdict(BaseModel):
    """Result of an eligibility gate check."""

    approved: bool = True
    reason: GateRejectionReason | None = None
    detail: str = ""


class CycleOutcome(StrEnum):
    """Terminal state of one decision cycle."""

    PRIMARY_ONLINE = "PRIMARY_ONLINE"
    EXHAUSTED = "EXHAUSTED"
    SKIPPED = "SKIPPED"
    FAILED = "FAILED"
    TIMED_OUT = "TIMED_OUT"


class CycleResult(BaseModel):
    """Summary of a decision cycle, reported through the diagnostic log."""

    identity: ResourceIdentity
    outcome: CycleOutcome
    disabled: list[str] = Field(default_factory=list)
    primary: str | None = None
    reason: str = ""
    error_code: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome not in (CycleOutcome.FAILED, CycleOutcome.TIMED_OUT)
