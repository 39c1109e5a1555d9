"""Pure eligibility gate functions — each returns a GateVerdict."""

from __future__ import annotations

from tmbreaker.core.config import BreakerConfig
from tmbreaker.core.types import (
    GateRejectionReason,
    GateVerdict,
    RoutingMethod,
    RoutingProfile,
)


def check_routing_method(
    profile: RoutingProfile,
    required: str = RoutingMethod.PRIORITY,
) -> GateVerdict:
    """Reject profiles that do not route by priority."""
    if profile.routing_method != required:
        return GateVerdict(
            approved=False,
            reason=GateRejectionReason.ROUTING_METHOD,
            detail=(
                f"routing method is not '{required}':"
                f" {profile.routing_method or '<unset>'}"
            ),
        )
    return GateVerdict(approved=True)


def check_endpoint_count(profile: RoutingProfile, minimum: int = 2) -> GateVerdict:
    """Reject profiles with nothing to fail over to."""
    if len(profile.endpoints) < minimum:
        return GateVerdict(
            approved=False,
            reason=GateRejectionReason.ENDPOINT_COUNT,
            detail=f"low total endpoint count: {len(profile.endpoints)} < {minimum}",
        )
    return GateVerdict(approved=True)


def check_online_endpoint(profile: RoutingProfile) -> GateVerdict:
    """Reject when no endpoint is Online — disabling would cause an outage."""
    if profile.online_count < 1:
        return GateVerdict(
            approved=False,
            reason=GateRejectionReason.NO_ONLINE_ENDPOINT,
            detail="no online endpoint",
        )
    return GateVerdict(approved=True)


def evaluate_gates(profile: RoutingProfile, config: BreakerConfig) -> GateVerdict:
    """Run every gate in order; the first rejection wins."""
    for verdict in (
        check_routing_method(profile, config.required_routing_method),
        check_endpoint_count(profile, config.min_endpoints),
        check_online_endpoint(profile),
    ):
        if not verdict.approved:
            return verdict
    return GateVerdict(approved=True)
