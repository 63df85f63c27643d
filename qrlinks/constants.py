from datetime import timedelta
from enum import StrEnum


class TTL:
    """Store-side TTL durations in seconds."""

    # Session record retention (7 days in seconds), mirrors Session.LIFETIME
    SESSION = 604_800  # 60 * 60 * 24 * 7
    # Rate limit record retention (attempt window + lockout, 30 minutes in seconds)
    RATE_LIMIT = 1_800  # 60 * 30


class Session:
    """Session cookie parameters."""

    COOKIE_NAME = 'session'
    LIFETIME = timedelta(days=7)
    TOKEN_BYTES = 32


class LoginLimits:
    """Failed login rate limiting."""

    MAX_ATTEMPTS = 5  # Failed attempts before lockout
    ATTEMPT_WINDOW = timedelta(minutes=15)  # Anchored at the first failed attempt
    LOCKOUT = timedelta(minutes=15)


class Password:
    MIN_LENGTH = 6
    BCRYPT_ROUNDS = 10
    BCRYPT_MAX_BYTES = 72


class LinkStatus(StrEnum):
    DRAFT = 'draft'
    ACTIVE = 'active'


class LinkType(StrEnum):
    URL = 'url'
    PHONE = 'phone'
    SMS = 'sms'
    LOCATION = 'location'


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'
        PUBLIC_BASE_URL = 'PUBLIC_BASE_URL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'

    class Store(StrEnum):
        REDIS_URL = 'REDIS_URL'
        KV_URL = 'KV_URL'


# Client identity used for rate limiting when no proxy header is present
UNKNOWN_CLIENT = 'unknown'

# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'

# Upper bound in seconds a redirect waits for its click to be recorded
CLICK_RECORD_TIMEOUT = 1.0
