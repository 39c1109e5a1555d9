"""Azure credential acquisition for the management plane."""

from __future__ import annotations

import asyncio

import structlog
from azure.core.credentials import TokenCredential
from azure.identity import DefaultAzureCredential

from tmbreaker.core.config import AzureConfig
from tmbreaker.trafficmanager.exceptions import CredentialError

logger = structlog.stdlib.get_logger()

MANAGEMENT_SCOPE = "https://management.azure.com/.default"


async def create_credential(config: AzureConfig) -> TokenCredential:
    """Build a DefaultAzureCredential and prove it can issue a token.

    Raises:
        CredentialError: no credential source could produce a token.
    """
    kwargs: dict[str, object] = {
        "exclude_interactive_browser_credential": config.exclude_interactive_browser_credential,
    }
    if config.managed_identity_client_id:
        kwargs["managed_identity_client_id"] = config.managed_identity_client_id

    try:
        credential = DefaultAzureCredential(**kwargs)
        await asyncio.to_thread(credential.get_token, MANAGEMENT_SCOPE)
    except Exception as exc:
        raise CredentialError(f"failed to create Azure credential: {exc}") from exc

    logger.info("azure_credential_ready", scope=MANAGEMENT_SCOPE)
    return credential
