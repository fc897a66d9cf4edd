"""Process-wide JWNET client lifecycle.

Prefer passing a JwnetClient explicitly. The registry is a convenience for
callers that need a shared, environment-configured instance.

The registry holds the only global mutable state of the package and does no
locking: override() and reset() are only safe before concurrent calls start,
which tests guarantee by resetting between test cases.
"""

from typing import TYPE_CHECKING, Any, ClassVar

import structlog

from jwnet.client.client import JwnetClient
from jwnet.client.constants import COMPONENT_JWNET


if TYPE_CHECKING:
    from jwnet.settings.app import JwnetSettings


logger = structlog.get_logger()


def create_jwnet_client(
    settings: "JwnetSettings | None" = None,
    **client_kwargs: Any,
) -> JwnetClient:
    """Create a JWNET client from environment settings.

    Args:
        settings: Settings to use. Loaded from the environment if omitted.
        **client_kwargs: Extra JwnetClient keyword arguments
            (retry_policy, transport, sleep).

    Returns:
        A configured JwnetClient.

    Raises:
        JwnetConfigError: If a required setting is missing.
    """
    # Imported here: jwnet.settings depends on this package
    from jwnet.settings.app import JwnetSettings

    config = (settings or JwnetSettings()).to_config()
    logger.bind(component=COMPONENT_JWNET, subcomponent="registry").info(
        "jwnet_client_created",
        api_url=config.api_url,
        timeout_ms=config.timeout_ms,
        max_retries=config.max_retries,
    )
    return JwnetClient(config, **client_kwargs)


class JwnetClientRegistry:
    """Lazily constructed, replaceable process-wide client."""

    _instance: ClassVar[JwnetClient | None] = None

    @classmethod
    def get_instance(cls) -> JwnetClient:
        """Get the shared client, creating it from the environment once."""
        if cls._instance is None:
            cls._instance = create_jwnet_client()
        return cls._instance

    @classmethod
    def override(cls, client: JwnetClient | None) -> None:
        """Replace the shared client (primarily for testing).

        Args:
            client: Client to install, or None to force lazy re-creation.
        """
        cls._instance = client

    @classmethod
    def reset(cls) -> None:
        """Drop the shared client (primarily for testing)."""
        cls._instance = None


def get_jwnet_client() -> JwnetClient:
    """Get the shared JWNET client."""
    return JwnetClientRegistry.get_instance()
