"""Azure Traffic Manager control-plane adapter."""

from tmbreaker.trafficmanager.client import TrafficManagerClient
from tmbreaker.trafficmanager.credentials import create_credential
from tmbreaker.trafficmanager.exceptions import (
    ControlPlaneError,
    CredentialError,
    TrafficManagerError,
    TransportError,
)

__all__ = [
    "ControlPlaneError",
    "CredentialError",
    "TrafficManagerClient",
    "TrafficManagerError",
    "TransportError",
    "create_credential",
]
