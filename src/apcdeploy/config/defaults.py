"""Default values for apcdeploy deployments."""

# Polling and waiting
DEFAULT_POLL_INTERVAL = 5.0  # seconds
DEFAULT_TIMEOUT = 600.0  # seconds
DEFAULT_MAX_PAGES = 10_000

# AppConfig hosted configuration limit
MAX_CONFIG_SIZE = 2 * 1024 * 1024

# Content types accepted by hosted configuration versions
CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_YAML = "application/x-yaml"
CONTENT_TYPE_TEXT = "text/plain"

# Strategies shipped by AppConfig use this id prefix and never need a lookup
PREDEFINED_STRATEGY_PREFIX = "AppConfig."
DEFAULT_DEPLOYMENT_STRATEGY = "AppConfig.AllAtOnce"

DEFAULT_CONFIG_FILE = "apcdeploy.yml"

# Environment variable to settings field mapping
SETTINGS_ENV_VARS: dict[str, str] = {
    "poll_interval": "APCDEPLOY_POLL_INTERVAL",
    "timeout": "APCDEPLOY_TIMEOUT",
    "max_pages": "APCDEPLOY_MAX_PAGES",
}
