"""Exceptions raised while building and using on-behalf-of clients."""

from __future__ import annotations


class AzureAuthError(Exception):
    """Base class for all adxauth errors."""


class CloudNotSupportedError(AzureAuthError, ValueError):
    """The requested Azure cloud is not known to the settings."""

    def __init__(self, cloud_name: str) -> None:
        self.cloud_name = cloud_name
        super().__init__(f"the Azure cloud '{cloud_name}' not supported")


class InvalidCredentialsError(AzureAuthError, ValueError):
    """The credential descriptor cannot be turned into a client."""


class InvalidTenantIdError(AzureAuthError, ValueError):
    """The tenant id contains characters not allowed in an authority URL."""

    def __init__(self, tenant_id: str) -> None:
        self.tenant_id = tenant_id
        super().__init__("invalid tenantId")


class IdentityProviderConstructionError(AzureAuthError):
    """The managed identity credential could not be constructed."""


class ClientConstructionError(AzureAuthError):
    """MSAL refused to build the confidential client."""


class TokenAcquisitionError(AzureAuthError):
    """The identity provider returned an error for a token request."""

    def __init__(
        self,
        error: str,
        error_description: str | None = None,
        correlation_id: str | None = None,
    ) -> None:
        self.error = error
        self.error_description = error_description
        self.correlation_id = correlation_id
        message = error if not error_description else f"{error}: {error_description}"
        super().__init__(message)
