"""Credential descriptors and the default credential policy."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal, Union

from .settings import AzureSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManagedIdentityCredentials:
    """Authenticate as the workload's managed identity."""

    client_id: str | None = None
    auth_type: Literal["msi"] = field(default="msi", init=False)


@dataclass(frozen=True)
class ClientSecretCredentials:
    """Authenticate as an app registration in ``tenant_id``.

    The app proves its identity with a federated assertion issued to the
    managed identity selected by ``managed_identity_client_id`` rather than
    with a stored secret. ``client_id`` is the app registration, not the
    managed identity.
    """

    azure_cloud: str
    tenant_id: str = ""
    client_id: str = ""
    managed_identity_client_id: str | None = None
    auth_type: Literal["clientsecret"] = field(default="clientsecret", init=False)


AzureCredentials = Union[ManagedIdentityCredentials, ClientSecretCredentials]


def get_default_credentials(settings: AzureSettings) -> AzureCredentials:
    """Pick the credential kind a new datasource starts with.

    No validation happens here; :func:`adxauth.client.new_aad_client` checks
    the descriptor when a client is built.
    """
    if settings.managed_identity_enabled:
        logger.debug("Managed identity enabled; defaulting to managed identity credentials")
        return ManagedIdentityCredentials()
    return ClientSecretCredentials(azure_cloud=settings.get_default_cloud())
