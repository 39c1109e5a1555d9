"""Tests for rank_endpoints — ascending priority, stable ties."""

from __future__ import annotations

from tmbreaker.breaker.ranker import rank_endpoints
from tmbreaker.core.types import Endpoint


def _ep(name: str, priority: int | None) -> Endpoint:
    return Endpoint(
        name=name,
        type="Microsoft.Network/trafficManagerProfiles/externalEndpoints",
        id=name,
        target=f"{name}.example.com",
        priority=priority,
        status="Enabled",
        monitor_status="Online",
    )


def _names(eps: list[Endpoint]) -> list[str]:
    return [ep.name for ep in eps]


class TestRankEndpoints:
    def test_ascending(self) -> None:
        eps = [_ep("target1", 1), _ep("target2", 2), _ep("target3", 3)]
        assert _names(rank_endpoints(eps)) == ["target1", "target2", "target3"]

    def test_descending(self) -> None:
        eps = [_ep("target3", 3), _ep("target2", 2), _ep("target1", 1)]
        assert _names(rank_endpoints(eps)) == ["target1", "target2", "target3"]

    def test_irregular(self) -> None:
        eps = [_ep("target2", 2), _ep("target1", 1), _ep("target3", 3)]
        assert _names(rank_endpoints(eps)) == ["target1", "target2", "target3"]

    def test_ties_keep_input_order(self) -> None:
        eps = [_ep("b", 5), _ep("a", 1), _ep("c", 5), _ep("d", 5)]
        assert _names(rank_endpoints(eps)) == ["a", "b", "c", "d"]

    def test_ties_reversed_input(self) -> None:
        eps = [_ep("d", 5), _ep("c", 5), _ep("b", 5)]
        assert _names(rank_endpoints(eps)) == ["d", "c", "b"]

    def test_non_decreasing(self) -> None:
        eps = [_ep(f"ep{i}", p) for i, p in enumerate([7, 3, 3, 1000, 1, 42, 3])]
        ranked = rank_endpoints(eps)
        priorities = [ep.priority for ep in ranked]
        assert priorities == sorted(priorities)  # type: ignore[type-var]

    def test_missing_priority_sorts_last(self) -> None:
        eps = [_ep("none", None), _ep("two", 2), _ep("one", 1)]
        assert _names(rank_endpoints(eps)) == ["one", "two", "none"]

    def test_input_not_mutated(self) -> None:
        eps = [_ep("target2", 2), _ep("target1", 1)]
        rank_endpoints(eps)
        assert _names(eps) == ["target2", "target1"]

    def test_accepts_iterables(self) -> None:
        eps = (_ep(n, p) for n, p in [("b", 2), ("a", 1)])
        assert _names(rank_endpoints(eps)) == ["a", "b"]

    def test_empty(self) -> None:
        assert rank_endpoints([]) == []
