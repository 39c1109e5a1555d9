"""Alert parsing — decode the webhook body and resolve the target profile."""

from __future__ import annotations

import structlog
from pydantic import ValidationError

from tmbreaker.alerts.exceptions import (
    AlertDecodeError,
    ConditionMismatchError,
    IdentityFormatError,
)
from tmbreaker.alerts.models import AlertPayload
from tmbreaker.core.types import MonitorCondition, ResourceIdentity

logger = structlog.stdlib.get_logger()

# /subscriptions/<sub>/resourcegroups/<rg>/providers/microsoft.network/trafficmanagerprofiles/<name>
_ID_SEGMENTS = 8
_TYPE_SEGMENT = 6
_PROFILE_TYPE = "trafficmanagerprofiles"


def decode_alert(raw: bytes | str) -> AlertPayload:
    """Decode a webhook body into an :class:`AlertPayload`.

    Raises:
        AlertDecodeError: body is not valid JSON or does not fit the schema.
    """
    try:
        return AlertPayload.model_validate_json(raw)
    except ValidationError as exc:
        logger.error("alert_decode_failed", errors=exc.error_count(), detail=str(exc))
        raise AlertDecodeError(f"failed to decode request: {exc}") from exc


def check_condition(payload: AlertPayload) -> None:
    """Reject alerts that are not newly fired."""
    condition = payload.data.essentials.monitor_condition
    if condition != MonitorCondition.FIRED:
        logger.error("alert_condition_mismatch", condition=condition)
        raise ConditionMismatchError(condition)


def parse_resource_id(resource_id: str) -> ResourceIdentity:
    """Split a Traffic Manager profile resource ID into its identity.

    Raises:
        IdentityFormatError: wrong segment count or resource type.
    """
    elems = resource_id.removeprefix("/").split("/")
    if len(elems) != _ID_SEGMENTS or elems[_TYPE_SEGMENT].lower() != _PROFILE_TYPE:
        logger.error("alert_target_format_invalid", resource_id=resource_id)
        raise IdentityFormatError(resource_id)
    return ResourceIdentity(
        subscription_id=elems[1],
        resource_group=elems[3],
        profile_name=elems[7],
    )


def extract_identity(payload: AlertPayload) -> ResourceIdentity:
    """Resolve the profile from the first (authoritative) alert target."""
    target_ids = payload.data.essentials.alert_target_ids
    if not target_ids:
        logger.error("alert_target_missing")
        raise IdentityFormatError("")

    identity = parse_resource_id(target_ids[0])
    logger.info(
        "alert_target_resolved",
        subscription_id=identity.subscription_id,
        resource_group=identity.resource_group,
        profile=identity.profile_name,
    )
    return identity


def parse_alert(raw: bytes | str) -> ResourceIdentity:
    """Decode, check and resolve a webhook body in one step."""
    payload = decode_alert(raw)
    check_condition(payload)
    return extract_identity(payload)
