from __future__ import annotations

from azure.core.credentials import TokenCredential
from azure.identity import ClientAssertionCredential, ManagedIdentityCredential

from .assertion import new_assertion_callback
from .authority import checked_authority_host
from .credentials import AzureCredentials, ClientSecretCredentials, ManagedIdentityCredentials
from .errors import InvalidCredentialsError
from .settings import BUILTIN_CLOUDS, AzureSettings


def get_credential(
    credentials: AzureCredentials, settings: AzureSettings | None = None
) -> TokenCredential:
    """Construct a :class:`TokenCredential` acting as the service itself.

    Use this when the datasource queries with its own identity rather than
    on behalf of the signed-in user.

    Args:
        credentials: Credential descriptor of the datasource.
        settings: Azure settings. If ``None``, settings are read from the environment.

    Returns:
        A concrete :class:`TokenCredential`.
    """
    cfg = settings or AzureSettings()
    transport_kwargs: dict[str, float] = {}
    if cfg.token_request_timeout is not None:
        transport_kwargs["connection_timeout"] = cfg.token_request_timeout
        transport_kwargs["read_timeout"] = cfg.token_request_timeout

    match credentials:
        case ManagedIdentityCredentials():
            return ManagedIdentityCredential(
                client_id=credentials.client_id or cfg.managed_identity_client_id,
                **transport_kwargs,
            )
        case ClientSecretCredentials():
            authority = checked_authority_host(
                credentials.azure_cloud, credentials.tenant_id, cfg
            )
            return ClientAssertionCredential(
                tenant_id=credentials.tenant_id,
                client_id=credentials.client_id,
                func=new_assertion_callback(
                    credentials.managed_identity_client_id
                    or cfg.managed_identity_client_id,
                    timeout=cfg.token_request_timeout,
                ),
                authority=authority,
                disable_instance_discovery=credentials.azure_cloud not in BUILTIN_CLOUDS,
                **transport_kwargs,
            )
        case _:
            raise InvalidCredentialsError(
                f"unsupported credentials type {type(credentials).__name__}"
            )
