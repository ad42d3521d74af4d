from __future__ import annotations

import os
import time
from typing import Any, Iterator
from unittest import mock

import msal
import pytest
import requests
from azure.core.credentials import AccessToken

import adxauth.assertion
import adxauth.factory
from adxauth.settings import AzureSettings


@pytest.fixture(autouse=True)
def clear_azure_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Remove AZURE_* vars to prevent cross-test leakage.

    Yields:
        Iterator[None]: Context manager semantics for pytest.
    """
    to_clear = [k for k in os.environ.keys() if k.upper().startswith("AZURE_")]
    for k in to_clear:
        monkeypatch.delenv(k, raising=False)
    yield


class _Recorder:
    """Factory to create recorder classes that capture init kwargs."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.cls = self._make(name)

    @staticmethod
    def _make(name: str):
        class _C:
            last_args: tuple[Any, ...] | None = None
            last_kwargs: dict[str, Any] | None = None
            call_count: int = 0
            token_requests: list[tuple[tuple[str, ...], dict[str, Any]]]

            def __init__(self, *args: Any, **kwargs: Any) -> None:
                type(self).last_args = args
                type(self).last_kwargs = dict(kwargs)
                type(self).call_count += 1

            def get_token(self, *scopes: str, **kwargs: Any) -> AccessToken:
                requests_made = type(self).token_requests
                requests_made.append((scopes, dict(kwargs)))
                return AccessToken(
                    f"mi-token-{len(requests_made)}", int(time.time()) + 3600
                )

        _C.token_requests = []
        _C.__name__ = name
        _C.__qualname__ = name
        return _C


@pytest.fixture()
def stub_identity(monkeypatch: pytest.MonkeyPatch) -> dict[str, Any]:
    """Replace azure.identity credentials used by adxauth with recorders.

    Returns:
        dict[str, Any]: Exposes recorder classes for assertion (e.g., call kwargs).
    """
    recorders = {
        n: _Recorder(n).cls
        for n in ["ManagedIdentityCredential", "ClientAssertionCredential"]
    }
    monkeypatch.setattr(
        adxauth.assertion,
        "ManagedIdentityCredential",
        recorders["ManagedIdentityCredential"],
    )
    monkeypatch.setattr(
        adxauth.factory,
        "ManagedIdentityCredential",
        recorders["ManagedIdentityCredential"],
    )
    monkeypatch.setattr(
        adxauth.factory,
        "ClientAssertionCredential",
        recorders["ClientAssertionCredential"],
    )
    return recorders


@pytest.fixture()
def stub_msal(monkeypatch: pytest.MonkeyPatch) -> type:
    """Replace msal.ConfidentialClientApplication with a recorder.

    ``result`` on the returned class is what every exchange answers with.
    """

    class FakeConfidentialClientApplication:
        instances: list["FakeConfidentialClientApplication"] = []
        result: dict[str, Any] = {
            "access_token": "downstream-token",
            "token_type": "Bearer",
            "expires_in": 3599,
        }

        def __init__(self, client_id: str, **kwargs: Any) -> None:
            self.client_id = client_id
            self.kwargs = kwargs
            self.exchanges: list[tuple[str, list[str], str | None]] = []
            type(self).instances.append(self)

        def acquire_token_on_behalf_of(
            self,
            user_assertion: str,
            scopes: list[str],
            claims_challenge: str | None = None,
        ) -> dict[str, Any]:
            self.exchanges.append((user_assertion, scopes, claims_challenge))
            return dict(type(self).result)

    monkeypatch.setattr(
        msal, "ConfidentialClientApplication", FakeConfidentialClientApplication
    )
    return FakeConfidentialClientApplication


@pytest.fixture()
def http_client() -> mock.MagicMock:
    """A requests.Session double; any use of it shows up in ``mock_calls``."""
    return mock.create_autospec(requests.Session, instance=True)


@pytest.fixture()
def settings() -> AzureSettings:
    return AzureSettings()
