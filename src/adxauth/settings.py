from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .scopes import authority_from_url

AZURE_PUBLIC_CLOUD = "AzureCloud"
AZURE_CHINA_CLOUD = "AzureChinaCloud"
AZURE_US_GOVERNMENT = "AzureUSGovernment"


class AzureCloudSettings(BaseModel):
    """Metadata of an Azure cloud environment."""

    model_config = ConfigDict(frozen=True)

    name: str
    display_name: str = ""
    aad_authority: str

    @field_validator("aad_authority")
    @classmethod
    def _ensure_absolute(cls, v: str) -> str:
        """The authority host must be an absolute URL; it is kept verbatim."""
        authority_from_url(v)
        return v


BUILTIN_CLOUDS: Mapping[str, AzureCloudSettings] = MappingProxyType(
    {
        cloud.name: cloud
        for cloud in (
            AzureCloudSettings(
                name=AZURE_PUBLIC_CLOUD,
                display_name="Azure",
                aad_authority="https://login.microsoftonline.com/",
            ),
            AzureCloudSettings(
                name=AZURE_CHINA_CLOUD,
                display_name="Azure China",
                aad_authority="https://login.chinacloudapi.cn/",
            ),
            AzureCloudSettings(
                name=AZURE_US_GOVERNMENT,
                display_name="Azure US Government",
                aad_authority="https://login.microsoftonline.us/",
            ),
        )
    }
)


class AzureSettings(BaseSettings):
    """Deployment-wide Azure settings consumed read-only by the broker.

    Values are read from environment variables (case-insensitive). Every
    field also accepts its own name, so settings can be built in code.

    Environment variables:
        - AZURE_CLOUD
        - AZURE_MANAGED_IDENTITY_ENABLED
        - AZURE_MANAGED_IDENTITY_CLIENT_ID
        - AZURE_CUSTOM_CLOUDS (JSON list of cloud objects)
        - AZURE_TOKEN_REQUEST_TIMEOUT (seconds)
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
    )

    azure_cloud: str = Field(
        default=AZURE_PUBLIC_CLOUD,
        validation_alias=AliasChoices("azure_cloud", "AZURE_CLOUD"),
    )
    managed_identity_enabled: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "managed_identity_enabled", "AZURE_MANAGED_IDENTITY_ENABLED"
        ),
    )
    managed_identity_client_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "managed_identity_client_id", "AZURE_MANAGED_IDENTITY_CLIENT_ID"
        ),
    )
    custom_clouds: list[AzureCloudSettings] = Field(
        default_factory=list,
        validation_alias=AliasChoices("custom_clouds", "AZURE_CUSTOM_CLOUDS"),
    )
    token_request_timeout: float | None = Field(
        default=30.0,
        gt=0,
        validation_alias=AliasChoices(
            "token_request_timeout", "AZURE_TOKEN_REQUEST_TIMEOUT"
        ),
    )

    @field_validator("custom_clouds")
    @classmethod
    def _no_builtin_shadowing(
        cls, v: list[AzureCloudSettings]
    ) -> list[AzureCloudSettings]:
        """Custom clouds may not redefine a built-in cloud or each other."""
        seen: set[str] = set()
        for cloud in v:
            if cloud.name in BUILTIN_CLOUDS:
                raise ValueError(f"custom cloud '{cloud.name}' shadows a built-in cloud")
            if cloud.name in seen:
                raise ValueError(f"custom cloud '{cloud.name}' is defined twice")
            seen.add(cloud.name)
        return v

    @model_validator(mode="after")
    def _default_cloud_is_known(self) -> "AzureSettings":
        if self.get_cloud(self.azure_cloud) is None:
            raise ValueError(f"default Azure cloud '{self.azure_cloud}' is not defined")
        return self

    @property
    def clouds(self) -> dict[str, AzureCloudSettings]:
        return {**BUILTIN_CLOUDS, **{c.name: c for c in self.custom_clouds}}

    def get_cloud(self, name: str) -> AzureCloudSettings | None:
        """Return the cloud registered under exactly ``name``, or ``None``."""
        return self.clouds.get(name)

    def get_default_cloud(self) -> str:
        return self.azure_cloud
