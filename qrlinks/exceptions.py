"""Application exceptions.

Every exception carries an `error_code` for structured logs and API bodies.
Client facing errors (`RequestError` subclasses) also carry the HTTP
`status_code` they map to and an optional `extra` dict which is merged into
the JSON error body.

Example:
    >>> from qrlinks.exceptions import InvalidPasswordError
    >>> error = InvalidPasswordError('Invalid password. 4 attempts remaining.', remainingAttempts=4)
    >>> error.status_code
    401
    >>> error.extra
    {'remainingAttempts': 4}
"""

from typing import Any


class QRLinksError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:qrlinks_error'
    status_code = 500


class ConfigurationError(QRLinksError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'


class RequestError(QRLinksError):
    """Base exception for errors caused by the client's request."""

    error_code = 'request:request_error'
    status_code = 400

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra = extra


class ValidationError(RequestError):
    """Raised when request data has an invalid format."""

    error_code = 'request:validation_error'


class BadRequestError(ValidationError):
    """Raised when the request itself is malformed (bad JSON, unknown action, missing parameter)."""

    error_code = 'request:bad_request_error'


class InvalidSlugError(ValidationError):
    error_code = 'links:invalid_slug_error'


class InvalidDestinationError(ValidationError):
    error_code = 'links:invalid_destination_error'


class InvalidStatusError(ValidationError):
    error_code = 'links:invalid_status_error'


class WeakPasswordError(ValidationError):
    error_code = 'auth:weak_password_error'


class MissingPasswordError(ValidationError):
    error_code = 'auth:missing_password_error'


class ConflictError(RequestError):
    """Raised when a request conflicts with existing state."""

    error_code = 'request:conflict_error'
    status_code = 409


class DuplicateSlugError(ConflictError):
    error_code = 'links:duplicate_slug_error'


class AlreadySetUpError(ConflictError):
    """Raised when the shared password was already created."""

    error_code = 'auth:already_set_up_error'
    status_code = 400


class NotSetUpError(ConflictError):
    """Raised when logging in before the shared password was created."""

    error_code = 'auth:not_set_up_error'
    status_code = 400


class NotFoundError(RequestError):
    error_code = 'request:not_found_error'
    status_code = 404


class LinkNotFoundError(NotFoundError):
    error_code = 'links:link_not_found_error'


class AuthError(RequestError):
    error_code = 'auth:auth_error'
    status_code = 401


class UnauthorizedError(AuthError):
    """Raised when a request carries no valid session."""

    error_code = 'auth:unauthorized_error'


class InvalidPasswordError(AuthError):
    error_code = 'auth:invalid_password_error'


class RateLimitError(RequestError):
    error_code = 'request:rate_limit_error'
    status_code = 429

    def __init__(self, message: str, *, retry_after: int, **extra: Any):
        super().__init__(message, **extra)
        self.retry_after = retry_after


class LoginLockedError(RateLimitError):
    """Raised when a client is locked out after too many failed logins."""

    error_code = 'auth:login_locked_error'


class MethodNotAllowedError(RequestError):
    error_code = 'request:method_not_allowed_error'
    status_code = 405
