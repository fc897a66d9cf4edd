"""Connection configuration for the JWNET client."""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from jwnet.client.constants import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT_MS,
    MAX_RETRIES_LIMIT,
    REQUIRED_CONFIG_ENV_VARS,
)
from jwnet.client.errors import JwnetConfigError


class JwnetConfig(BaseModel):
    """Connection, credential and tunable settings for JWNET.

    Validated at construction: a missing or blank credential raises
    JwnetConfigError before any network activity takes place.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    api_url: Annotated[str, Field(min_length=1, description="API base URL")]
    api_key: Annotated[str, Field(min_length=1, repr=False)]
    subscriber_no: Annotated[str, Field(min_length=1)]
    public_confirm_no: Annotated[str, Field(min_length=1)]
    timeout_ms: Annotated[int, Field(ge=1, le=600_000)] = DEFAULT_TIMEOUT_MS
    max_retries: Annotated[int, Field(ge=0, le=MAX_RETRIES_LIMIT)] = (
        DEFAULT_MAX_RETRIES
    )

    @model_validator(mode="before")
    @classmethod
    def require_credentials(cls, data: Any) -> Any:
        """Fail fast when any required value is missing or blank."""
        if not isinstance(data, dict):
            return data

        missing = []
        for name, env_var in REQUIRED_CONFIG_ENV_VARS.items():
            value = data.get(name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(f"{name} ({env_var})")

        if missing:
            raise JwnetConfigError(missing)
        return data

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            msg = f"api_url must start with http:// or https://, got {v!r}"
            raise ValueError(msg)
        return v.rstrip("/")

    @field_validator("api_key", "subscriber_no", "public_confirm_no")
    @classmethod
    def validate_header_value(cls, v: str) -> str:
        """Require printable ASCII; these values are sent as HTTP headers."""
        if not (v.isascii() and v.isprintable()):
            msg = "must contain printable ASCII characters only"
            raise ValueError(msg)
        return v

    @property
    def timeout_seconds(self) -> float:
        """Per-attempt timeout in seconds."""
        return self.timeout_ms / 1000.0

    def url_for(self, path: str) -> str:
        """Build the full URL for an endpoint path.

        Args:
            path: Endpoint path starting with '/'.

        Returns:
            Absolute URL.
        """
        return f"{self.api_url}{path}"
