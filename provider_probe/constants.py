"""Shared constants for Provider Probe."""

APP_NAME = "Provider Probe"
APP_VERSION = "0.1.0"
AUTHOR = "diaz3618"

# Applications a provider can belong to
APPLICATION_IDS = ("claude", "codex", "gemini")

# Logging defaults
LOG_DIR = "logs"
DEFAULT_LOG_LEVEL = "INFO"

# Probe defaults
DEFAULT_PROBE_TIMEOUT = 45.0  # seconds, owned by the probe client
DEFAULT_DEGRADED_THRESHOLD_MS = 6000
DEFAULT_PROBE_PATH = "/v1/models"

# Model catalogue fetch timeout bounds (seconds)
MODELS_FETCH_TIMEOUT = 15
MODELS_FETCH_TIMEOUT_MIN = 5
MODELS_FETCH_TIMEOUT_MAX = 120

# Suggestion engine
DEFAULT_COLLATION = "en-US"
DEFAULT_LOCALE = "en"
