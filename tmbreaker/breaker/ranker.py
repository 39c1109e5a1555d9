"""Endpoint ranking by routing priority."""

from __future__ import annotations

from collections.abc import Iterable

from tmbreaker.core.types import Endpoint


def _priority_key(ep: Endpoint) -> tuple[bool, int]:
    # Endpoints without a priority sort after every prioritised one.
    return (ep.priority is None, ep.priority or 0)


def rank_endpoints(endpoints: Iterable[Endpoint]) -> list[Endpoint]:
    """Return endpoints in ascending priority (lowest value first).

    The sort is stable: endpoints sharing a priority keep their input order.
    """
    return sorted(endpoints, key=_priority_key)
