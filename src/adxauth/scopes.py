from typing import Final
from urllib.parse import urlparse

# Audience Entra ID expects on a managed identity token used as a federated
# client assertion.
TOKEN_EXCHANGE_SCOPE: Final[str] = "api://AzureADTokenExchange/.default"


def authority_from_url(url: str) -> str:
    """Return the URL authority (scheme + host).

    Args:
        url: Absolute URL (e.g., "https://mycluster.westeurope.kusto.windows.net/db").

    Returns:
        The "<scheme>://<host>" portion of the URL.

    Raises:
        ValueError: If ``url`` is not absolute or lacks a host.
    """
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError("url must be an absolute URL")
    return f"{parsed.scheme}://{parsed.netloc}"


def resource_scope_from_url(cluster_url: str) -> str:
    return f"{authority_from_url(cluster_url)}/.default"
