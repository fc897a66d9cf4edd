"""Shared test configuration."""

from collections.abc import Iterator

import pytest

from jwnet.client.config import JwnetConfig
from jwnet.client.constants import REQUIRED_CONFIG_ENV_VARS
from jwnet.client.registry import JwnetClientRegistry


@pytest.fixture(autouse=True)
def _reset_client_registry() -> Iterator[None]:
    """Keep the process-wide client from leaking between tests."""
    JwnetClientRegistry.reset()
    yield
    JwnetClientRegistry.reset()


@pytest.fixture(autouse=True)
def _clear_jwnet_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure real JWNET credentials never reach a test."""
    for env_var in [
        *REQUIRED_CONFIG_ENV_VARS.values(),
        "JWNET_TIMEOUT_MS",
        "JWNET_MAX_RETRIES",
    ]:
        monkeypatch.delenv(env_var, raising=False)


@pytest.fixture
def config() -> JwnetConfig:
    """Create a standard client configuration."""
    return JwnetConfig(
        api_url="https://jwnet.test/api",
        api_key="test-api-key",
        subscriber_no="1234567",
        public_confirm_no="654321",
    )


@pytest.fixture
def register_payload() -> dict:
    """A well-formed manifest registration body in wire format."""
    company = {
        "subscriberNo": "1234567",
        "publicConfirmNo": "654321",
        "name": "Example Emitter",
        "postalCode": "100-0001",
        "address": "Tokyo",
    }
    return {
        "manifestType": "INDUSTRIAL",
        "issuedDate": "2026-10-01",
        "emitter": company,
        "transporter": {**company, "name": "Example Transporter"},
        "disposer": {**company, "name": "Example Disposer"},
        "wastes": [
            {
                "wasteCode": "0100",
                "wasteName": "Waste plastics",
                "quantity": 12.5,
                "unit": "kg",
            }
        ],
    }
