"""Failover decision logic — ranking, eligibility gates, and the breaker engine."""

from tmbreaker.breaker.engine import Breaker, TrafficManagerBreaker
from tmbreaker.breaker.gates import (
    check_endpoint_count,
    check_online_endpoint,
    check_routing_method,
    evaluate_gates,
)
from tmbreaker.breaker.ranker import rank_endpoints

__all__ = [
    "Breaker",
    "TrafficManagerBreaker",
    "check_endpoint_count",
    "check_online_endpoint",
    "check_routing_method",
    "evaluate_gates",
    "rank_endpoints",
]
