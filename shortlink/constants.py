import string
from enum import StrEnum


class TTL:
    """TTL durations in seconds."""

    # Replay window for cached POST /shorten responses (Idempotency-Key header)
    IDEMPOTENCY = 10
    # Loaded AppConfig sections reused by a warm Lambda container
    APPCONFIG = 60


class Timeout:
    """Network timeouts in seconds."""

    # Redis socket read/connect timeouts
    REDIS_SOCKET = 2.0


class Shortcode:
    """Shortcode alphabet and length bounds."""

    # Base62: 26 lowercase + 26 uppercase + 10 digits
    ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
    MIN_LENGTH = 6  # 62**6 ~ 5.7e10 codes (~35 bits)
    MAX_LENGTH = 16
    DEFAULT_LENGTH = 7


class Registry:
    """Default link registry tuning."""

    MAX_ATTEMPTS = 10  # candidate codes tried before giving up
    STORE_RETRIES = 2  # extra attempts for a failing store call
    RETRY_BACKOFF = 0.05  # seconds, doubled on each retry
    MAX_URL_LENGTH = 2048
    DEFAULT_SALT = 'default_salt'


class Strategy(StrEnum):
    """Shortcode generation strategies."""

    COUNTER = 'counter'
    RANDOM = 'random'


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        PROJECT_ROOT = 'PROJECT_ROOT'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'

# Log events
LINK_SHORTENED = 'LINK_SHORTENED'
LINK_REUSED = 'LINK_REUSED'
SHORTCODE_COLLISION = 'SHORTCODE_COLLISION'
GENERATION_EXHAUSTED = 'GENERATION_EXHAUSTED'
STORE_RETRY = 'STORE_RETRY'
HIT_NOT_RECORDED = 'HIT_NOT_RECORDED'
