"""On-behalf-of token exchange for Azure Data Explorer datasources.

Public API:
- new_aad_client() → AADClient (on-behalf-of exchange with a federated assertion)
- get_credential() → TokenCredential (service identity)
- get_default_credentials() → credential descriptor chosen from settings
- AzureSettings, AzureCloudSettings (settings)
- ManagedIdentityCredentials, ClientSecretCredentials (credential descriptors)
- resolve_authority_for_cloud(), valid_tenant_id() (authority helpers)
- TOKEN_EXCHANGE_SCOPE, resource_scope_from_url() (scope helpers)
"""

from .authority import resolve_authority_for_cloud, valid_tenant_id
from .client import AADClient, new_aad_client
from .credentials import (
    AzureCredentials,
    ClientSecretCredentials,
    ManagedIdentityCredentials,
    get_default_credentials,
)
from .errors import (
    AzureAuthError,
    ClientConstructionError,
    CloudNotSupportedError,
    IdentityProviderConstructionError,
    InvalidCredentialsError,
    InvalidTenantIdError,
    TokenAcquisitionError,
)
from .factory import get_credential
from .scopes import TOKEN_EXCHANGE_SCOPE, resource_scope_from_url
from .settings import AzureCloudSettings, AzureSettings

__all__ = [
    "AADClient",
    "new_aad_client",
    "get_credential",
    "get_default_credentials",
    "AzureSettings",
    "AzureCloudSettings",
    "AzureCredentials",
    "ManagedIdentityCredentials",
    "ClientSecretCredentials",
    "resolve_authority_for_cloud",
    "valid_tenant_id",
    "TOKEN_EXCHANGE_SCOPE",
    "resource_scope_from_url",
    "AzureAuthError",
    "CloudNotSupportedError",
    "InvalidCredentialsError",
    "InvalidTenantIdError",
    "IdentityProviderConstructionError",
    "ClientConstructionError",
    "TokenAcquisitionError",
]
