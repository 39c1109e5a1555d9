"""Inbound alert decoding and validation."""

from tmbreaker.alerts.exceptions import (
    AlertDecodeError,
    AlertError,
    ConditionMismatchError,
    IdentityFormatError,
)
from tmbreaker.alerts.models import AlertContext, AlertData, AlertPayload, Essentials
from tmbreaker.alerts.parser import (
    check_condition,
    decode_alert,
    extract_identity,
    parse_alert,
    parse_resource_id,
)

__all__ = [
    "AlertContext",
    "AlertData",
    "AlertDecodeError",
    "AlertError",
    "AlertPayload",
    "ConditionMismatchError",
    "Essentials",
    "IdentityFormatError",
    "check_condition",
    "decode_alert",
    "extract_identity",
    "parse_alert",
    "parse_resource_id",
]
