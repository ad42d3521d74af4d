"""Federated client assertions issued by a managed identity.

Entra ID lets an app registration trust a managed identity: a token the
managed identity obtains for ``api://AzureADTokenExchange`` is accepted as
the app's client assertion. :class:`FederatedAssertionProvider` is installed
as MSAL's assertion callback so every token request gets a freshly issued
assertion.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from azure.identity import ManagedIdentityCredential

from .errors import IdentityProviderConstructionError
from .scopes import TOKEN_EXCHANGE_SCOPE

logger = logging.getLogger(__name__)

AssertionCallback = Callable[[], str]


@dataclass(frozen=True)
class AssertionContext:
    """Optional request details forwarded to the managed identity."""

    tenant_id: str | None = None
    claims: str | None = None


class FederatedAssertionProvider:
    """Callable returning a managed identity token to use as client assertion.

    Args:
        client_id: Client id of a user-assigned managed identity. ``None``
            selects the system-assigned identity.
        timeout: Connection and read timeout in seconds for the managed
            identity endpoint. ``None`` keeps the transport defaults.

    Raises:
        IdentityProviderConstructionError: If the managed identity credential
            cannot be constructed from ``client_id``.
    """

    def __init__(self, client_id: str | None = None, timeout: float | None = None) -> None:
        kwargs: dict[str, object] = {}
        if timeout is not None:
            kwargs["connection_timeout"] = timeout
            kwargs["read_timeout"] = timeout
        try:
            self._credential = ManagedIdentityCredential(client_id=client_id, **kwargs)
        except (ValueError, TypeError) as e:
            raise IdentityProviderConstructionError(
                f"error constructing managed identity credential: {e}"
            ) from e
        self.client_id = client_id

    def __call__(self, context: AssertionContext | None = None) -> str:
        # One token request per call; nothing is cached here.
        logger.debug(
            "Requesting federated assertion from managed identity %s",
            self.client_id or "(system-assigned)",
        )
        kwargs: dict[str, str] = {}
        if context is not None:
            if context.tenant_id:
                kwargs["tenant_id"] = context.tenant_id
            if context.claims:
                kwargs["claims"] = context.claims
        return self._credential.get_token(TOKEN_EXCHANGE_SCOPE, **kwargs).token


def new_assertion_callback(
    client_id: str | None = None, timeout: float | None = None
) -> AssertionCallback:
    """Build the assertion callback handed to MSAL as ``client_assertion``."""
    return FederatedAssertionProvider(client_id, timeout=timeout)
