"""JWNET settings powered by Pydantic BaseSettings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from jwnet.client.config import JwnetConfig
from jwnet.client.constants import DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT_MS


class JwnetSettings(BaseSettings):
    """Environment configuration for the JWNET client.

    Credentials are optional here so that a missing one surfaces as a
    JwnetConfigError naming the variable, raised by to_config().
    """

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, env_file=".env", env_file_encoding="utf-8"
    )

    api_url: str | None = Field(default=None, validation_alias="JWNET_API_URL")
    api_key: str | None = Field(default=None, validation_alias="JWNET_API_KEY")
    subscriber_no: str | None = Field(
        default=None, validation_alias="JWNET_SUBSCRIBER_NO"
    )
    public_confirm_no: str | None = Field(
        default=None, validation_alias="JWNET_PUBLIC_CONFIRM_NO"
    )
    timeout_ms: int = Field(
        default=DEFAULT_TIMEOUT_MS, validation_alias="JWNET_TIMEOUT_MS"
    )
    max_retries: int = Field(
        default=DEFAULT_MAX_RETRIES, validation_alias="JWNET_MAX_RETRIES"
    )

    def to_config(self) -> JwnetConfig:
        """Build a validated client configuration.

        Returns:
            JwnetConfig built from these settings.

        Raises:
            JwnetConfigError: If a required value is missing.
        """
        return JwnetConfig.model_validate(self.model_dump())
