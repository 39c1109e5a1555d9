"""Alert validation exceptions."""

from __future__ import annotations


class AlertError(Exception):
    """Base exception for rejected alert deliveries."""


class AlertDecodeError(AlertError):
    """The payload is not JSON or does not match the alert schema."""


class ConditionMismatchError(AlertError):
    """The alert is not newly fired — nothing to do (not a failure)."""

    def __init__(self, condition: str) -> None:
        super().__init__(
            "breaker will not trip because the condition of the alert"
            f" is not 'Fired': {condition!r}"
        )
        self.condition = condition


class IdentityFormatError(AlertError):
    """The alert target is not a Traffic Manager profile resource ID."""

    def __init__(self, resource_id: str) -> None:
        super().__init__(
            "breaker will not trip because ID format is not for"
            f" Traffic Manager profile: {resource_id!r}"
        )
        self.resource_id = resource_id
