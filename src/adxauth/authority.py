"""Authority resolution and tenant id validation."""

from __future__ import annotations

import logging
import re

from .errors import CloudNotSupportedError, InvalidCredentialsError, InvalidTenantIdError
from .settings import AzureSettings

logger = logging.getLogger(__name__)

_TENANT_ID_PATTERN = re.compile(r"[0-9a-zA-Z.-]+")


def resolve_authority_for_cloud(cloud_name: str, settings: AzureSettings) -> str:
    """Return the Entra ID authority host of ``cloud_name``.

    The host is returned exactly as configured; use :func:`join_authority`
    to append a tenant.

    Raises:
        CloudNotSupportedError: If the settings do not define ``cloud_name``.
    """
    cloud = settings.get_cloud(cloud_name)
    if cloud is None:
        raise CloudNotSupportedError(cloud_name)
    logger.debug("Resolved cloud %s to authority %s", cloud_name, cloud.aad_authority)
    return cloud.aad_authority


def valid_tenant_id(tenant_id: str) -> bool:
    """Return True if ``tenant_id`` is safe to embed in an authority URL.

    Only ASCII letters, digits, ``-`` and ``.`` are allowed. The empty string
    is rejected. Never raises: anything the matcher cannot handle is invalid.
    """
    try:
        return _TENANT_ID_PATTERN.fullmatch(tenant_id) is not None
    except TypeError:
        return False


def join_authority(authority_host: str, tenant_id: str) -> str:
    """Join an authority host and a tenant id with exactly one slash."""
    return f"{authority_host.rstrip('/')}/{tenant_id}"


def checked_authority_host(
    cloud_name: str, tenant_id: str, settings: AzureSettings
) -> str:
    """Resolve the authority host of ``cloud_name`` and validate ``tenant_id``.

    The cloud is resolved before the tenant is looked at.

    Raises:
        InvalidCredentialsError: If the settings do not define ``cloud_name``.
        InvalidTenantIdError: If ``tenant_id`` is unsafe for an authority URL.
    """
    try:
        authority_host = resolve_authority_for_cloud(cloud_name, settings)
    except CloudNotSupportedError as e:
        raise InvalidCredentialsError(f"invalid Azure credentials: {e}") from e

    if not valid_tenant_id(tenant_id):
        raise InvalidTenantIdError(tenant_id)
    return authority_host
