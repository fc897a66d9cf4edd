"""Constants for the JWNET client.

Centralizes endpoint paths, header names, status ranges and retry tunables.
"""

# Endpoint paths (appended to the configured API URL)
PATH_MANIFEST_REGISTER = "/manifest/register"
PATH_RESERVATION_CREATE = "/reservation/create"
PATH_MANIFEST_INQUIRY = "/manifest/inquiry"
PATH_HEALTH = "/health"

# Header names
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_API_KEY = "X-JWNET-API-Key"
HEADER_SUBSCRIBER_NO = "X-JWNET-Subscriber-No"
HEADER_PUBLIC_CONFIRM_NO = "X-JWNET-Public-Confirm-No"
CONTENT_TYPE_JSON = "application/json"

# HTTP Status Code Ranges
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300
HTTP_STATUS_CLIENT_ERROR_MIN = 400
HTTP_STATUS_SERVER_ERROR_MIN = 500

# Connection defaults
DEFAULT_TIMEOUT_MS = 30_000
DEFAULT_MAX_RETRIES = 3
MAX_RETRIES_LIMIT = 10

# Backoff: delay = min(BASE * 2^attempt, MAX) + up to JITTER_FACTOR * delay
DEFAULT_BASE_DELAY_MS = 1_000
DEFAULT_MAX_DELAY_MS = 10_000
DEFAULT_EXPONENTIAL_BASE = 2.0
DEFAULT_JITTER_FACTOR = 0.2

# Required configuration fields and the environment variables that feed them
REQUIRED_CONFIG_ENV_VARS: dict[str, str] = {
    "api_url": "JWNET_API_URL",
    "api_key": "JWNET_API_KEY",
    "subscriber_no": "JWNET_SUBSCRIBER_NO",
    "public_confirm_no": "JWNET_PUBLIC_CONFIRM_NO",
}

COMPONENT_JWNET = "jwnet"
