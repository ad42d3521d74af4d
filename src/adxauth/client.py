"""On-behalf-of clients authenticated with a federated managed identity assertion."""

from __future__ import annotations

import logging
from functools import cached_property
from typing import Any, Protocol, Sequence

import msal
import requests

from .assertion import AssertionCallback, new_assertion_callback
from .authority import checked_authority_host, join_authority
from .credentials import AzureCredentials, ClientSecretCredentials, ManagedIdentityCredentials
from .errors import ClientConstructionError, InvalidCredentialsError, TokenAcquisitionError
from .settings import BUILTIN_CLOUDS, AzureSettings

logger = logging.getLogger(__name__)


class AADClient(Protocol):
    """The part of a confidential client the query layer relies on."""

    def acquire_token_on_behalf_of(
        self, user_assertion: str, scopes: Sequence[str]
    ) -> dict[str, Any]:
        """Exchange ``user_assertion`` for a token scoped to ``scopes``."""
        raise NotImplementedError


class _TimeoutHttpClient:
    """Borrowed session that applies a default timeout to MSAL's requests.

    MSAL only honours its own ``timeout`` for sessions it creates itself.
    """

    def __init__(self, session: requests.Session, timeout: float | None) -> None:
        self._session = session
        self._timeout = timeout

    def get(self, url: str, **kwargs: Any) -> requests.Response:
        kwargs.setdefault("timeout", self._timeout)
        return self._session.get(url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> requests.Response:
        kwargs.setdefault("timeout", self._timeout)
        return self._session.post(url, **kwargs)

    def close(self) -> None:
        # The session belongs to the caller.
        pass


class ConfidentialClient(AADClient):
    """MSAL confidential client using a callback as client assertion.

    The underlying ``msal.ConfidentialClientApplication`` is created on the
    first exchange: MSAL fetches the tenant's OpenID configuration in its
    constructor, and building a client must not touch the network.
    """

    def __init__(
        self,
        authority: str,
        client_id: str,
        client_assertion: AssertionCallback,
        http_client: requests.Session,
        *,
        timeout: float | None = None,
        instance_discovery: bool | None = None,
    ) -> None:
        self.authority = authority
        self.client_id = client_id
        self._client_assertion = client_assertion
        self._http_client = http_client
        self._timeout = timeout
        self._instance_discovery = instance_discovery

    @cached_property
    def _app(self) -> msal.ConfidentialClientApplication:
        logger.debug("Building MSAL confidential client for authority %s", self.authority)
        try:
            return msal.ConfidentialClientApplication(
                self.client_id,
                client_credential={"client_assertion": self._client_assertion},
                authority=self.authority,
                http_client=_TimeoutHttpClient(self._http_client, self._timeout),
                instance_discovery=self._instance_discovery,
            )
        except ValueError as e:
            raise ClientConstructionError(str(e)) from e

    def acquire_token_on_behalf_of(
        self,
        user_assertion: str,
        scopes: Sequence[str],
        claims_challenge: str | None = None,
    ) -> dict[str, Any]:
        """Exchange ``user_assertion`` for a token scoped to ``scopes``.

        Args:
            user_assertion: The bearer token the caller received from the user.
            scopes: Scopes of the downstream resource, e.g.
                ``["https://mycluster.kusto.windows.net/.default"]``.
            claims_challenge: Optional claims challenge returned by the resource.

        Returns:
            The MSAL result, containing at least ``access_token``.

        Raises:
            ClientConstructionError: If MSAL rejects the client configuration.
            TokenAcquisitionError: If Entra ID answers with an error.
        """
        result = self._app.acquire_token_on_behalf_of(
            user_assertion, list(scopes), claims_challenge=claims_challenge
        )
        if "error" in result:
            logger.warning(
                "On-behalf-of token request failed: %s (correlation id %s)",
                result["error"],
                result.get("correlation_id"),
            )
            raise TokenAcquisitionError(
                result["error"],
                result.get("error_description"),
                result.get("correlation_id"),
            )
        return result


def new_aad_client(
    credentials: AzureCredentials,
    http_client: requests.Session,
    settings: AzureSettings,
) -> AADClient:
    """Build an on-behalf-of client for ``credentials``.

    Nothing is sent over the network here; the first request happens when
    the returned client performs an exchange.

    Args:
        credentials: Credential descriptor of the datasource.
        http_client: Session used for every request to Entra ID. Borrowed, not closed.
        settings: Deployment-wide Azure settings.

    Raises:
        InvalidCredentialsError: If the credential kind cannot perform an
            on-behalf-of exchange or its cloud is not supported.
        InvalidTenantIdError: If the tenant id is unsafe for an authority URL.
        IdentityProviderConstructionError: If the managed identity used for
            the client assertion cannot be constructed.
    """
    match credentials:
        case ManagedIdentityCredentials():
            raise InvalidCredentialsError(
                "managed identity credentials do not support on-behalf-of authentication"
            )
        case ClientSecretCredentials():
            pass
        case _:
            raise InvalidCredentialsError(
                f"unsupported credentials type {type(credentials).__name__}"
            )

    authority_host = checked_authority_host(
        credentials.azure_cloud, credentials.tenant_id, settings
    )
    authority = join_authority(authority_host, credentials.tenant_id)

    client_assertion = new_assertion_callback(
        credentials.managed_identity_client_id or settings.managed_identity_client_id,
        timeout=settings.token_request_timeout,
    )

    logger.debug("Created on-behalf-of client %s for %s", credentials.client_id, authority)
    return ConfidentialClient(
        authority,
        credentials.client_id,
        client_assertion,
        http_client,
        timeout=settings.token_request_timeout,
        # MSAL only knows the public Entra hosts; custom clouds skip its check.
        instance_discovery=(
            None if credentials.azure_cloud in BUILTIN_CLOUDS else False
        ),
    )
