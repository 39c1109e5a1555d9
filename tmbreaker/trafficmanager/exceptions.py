"""Traffic Manager control-plane exceptions."""

from __future__ import annotations


class TrafficManagerError(Exception):
    """Base exception for control-plane failures."""


class ControlPlaneError(TrafficManagerError):
    """The management API answered with a structured error."""

    def __init__(self, code: str, status_code: int | None = None, message: str = "") -> None:
        super().__init__(message or code)
        self.code = code
        self.status_code = status_code


class TransportError(TrafficManagerError):
    """The call did not produce a management API response."""


class CredentialError(TrafficManagerError):
    """No usable credential for the management plane (fatal at startup)."""
