"""SDK configuration schema with defaults.

All defaults are defined here in the schema. Uses Pydantic Settings so every
field can also be supplied through ``MULTIBASE_*`` environment variables:

    MULTIBASE_ENABLED=false
    MULTIBASE_REMOTE_URL=https://collector.example.com/v1
"""

from pathlib import Path
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from multibase.core.config.constants import DEFAULT_DEBOUNCE_SECONDS, DEFAULT_REMOTE_URL


class Endpoint(BaseModel):
    """A remote collection endpoint: base URL plus the API key sent to it."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    remote_url: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("remote_url", "remoteUrl"),
        description="Base URL, e.g. https://collector.example.com/v1",
    )
    token: str = Field("", description="API key sent in the x-api-key header")

    @field_validator("remote_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("remote_url must start with http:// or https://")
        return value.rstrip("/")

    @field_validator("token", mode="before")
    @classmethod
    def _none_token_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def url_for(self, path: str) -> str:
        """Join the endpoint base URL with a path suffix like ``event/track``."""
        return f"{self.remote_url}/{path.lstrip('/')}"


class MultibaseConfig(BaseSettings):
    """Validated, immutable SDK configuration.

    Built once by ``Multibase.init()`` from defaults plus the caller's
    partial overrides. Core components only ever read it.
    """

    model_config = SettingsConfigDict(
        env_prefix="MULTIBASE_",
        extra="forbid",
        frozen=True,
    )

    token: str = Field("", description="SDK token for the primary endpoint")
    remote_url: str = Field(DEFAULT_REMOTE_URL, description="Base URL of the primary endpoint")
    additional_endpoints: list[Endpoint] = Field(
        default_factory=list,
        description="Extra endpoints that receive every payload",
    )
    enabled: bool = Field(True, description="Master switch; False turns every call into a no-op")
    debug: bool = Field(False, description="Emit debug-level tracing")
    debounce_seconds: float = Field(
        DEFAULT_DEBOUNCE_SECONDS,
        gt=0,
        description="Quiet period after the last track() before the batch is sent",
    )
    user_agent: Optional[str] = Field(
        None,
        description="Host-supplied user agent, checked against the blocked list",
    )
    storage_dir: Optional[Path] = Field(
        None,
        description="Directory for the identity stores; None keeps them in memory",
    )
    request_timeout: Optional[float] = Field(
        None,
        gt=0,
        description="HTTP timeout in seconds; None keeps the httpx default",
    )

    @field_validator("remote_url")
    @classmethod
    def _validate_remote_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("remote_url must start with http:// or https://")
        return value.rstrip("/")

    @field_validator("storage_dir")
    @classmethod
    def _expand_storage_dir(cls, value: Optional[Path]) -> Optional[Path]:
        return value.expanduser() if value is not None else None

    def merge_with(self, overrides: Optional[dict[str, Any]]) -> "MultibaseConfig":
        """Merge this config with a partial overrides dict, returning a new config.

        Args:
            overrides: Partial config. Keys may be snake_case or camelCase.

        Returns:
            New validated MultibaseConfig.

        Raises:
            pydantic.ValidationError: If an override is unknown or invalid.
        """
        if not overrides:
            return self

        current = self.model_dump()
        for key, value in overrides.items():
            current[_FIELD_BY_ALIAS.get(key, key)] = value
        return type(self)(**current)

    def endpoints(self) -> list[Endpoint]:
        """Primary endpoint first, then every additional endpoint, in order."""
        primary = Endpoint(remote_url=self.remote_url, token=self.token)
        return [primary, *self.additional_endpoints]


_FIELD_BY_ALIAS: dict[str, str] = {
    "remoteUrl": "remote_url",
    "additionalEndpoints": "additional_endpoints",
    "debounceSeconds": "debounce_seconds",
    "userAgent": "user_agent",
    "storageDir": "storage_dir",
    "requestTimeout": "request_timeout",
}
