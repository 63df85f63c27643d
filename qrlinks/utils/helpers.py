"""Helper utilities for AWS lambda functions.

Functions:
    base_url() -> str
        Extract correct public base URL from API Gateway event
    get_short_url() -> str
        Get string representation of the short URL for a given slug
    get_header() -> str | None
        Case-insensitive request header lookup
    query_parameter() / path_parameter() -> str | None
        Read API Gateway query string and path parameters
    client_ip() -> str
        Client identity used for login rate limiting
    parse_json_body() -> dict
        Decode the JSON request body
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler) -> Callable
        Decorator: Turn unexpected exceptions into a generic HTTP 500

Example:
    >>> event = {
    ...     "requestContext": {
    ...         "domainName": "abc123.execute-api.us-east-1.amazonaws.com",
    ...         "stage": "Prod"
    ...     }
    ... }
    >>> base_url(event)
    'https://abc123.execute-api.us-east-1.amazonaws.com/Prod'
    >>> get_short_url('promo', event)
    'https://abc123.execute-api.us-east-1.amazonaws.com/Prod/r/promo'
"""

import os
import json
import logging
import functools
from typing import Any
from collections.abc import Callable

from qrlinks.constants import ENV, UNKNOWN_CLIENT
from qrlinks.exceptions import BadRequestError, MissingEnvironmentVariableError
from qrlinks.types import LambdaEvent
from qrlinks.utils.responses import response_500


logger = logging.getLogger(__name__)


def base_url(event: LambdaEvent) -> str:
    """Return the public base URL for the current Lambda invocation.

    `PUBLIC_BASE_URL` wins when set. Otherwise works with both custom and
    default AWS API Gateway domains: with a custom domain the stage name is
    omitted, with the default execute-api domain it is included.

    Args:
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: Base URL without a trailing slash, e.g.:
             - "https://qr.example.com"
             - "https://abc123.execute-api.us-east-1.amazonaws.com/Prod"
    """
    configured = os.getenv(ENV.App.PUBLIC_BASE_URL)
    if configured:
        return configured.rstrip('/')

    request_context = event.get('requestContext') or {}
    domain = request_context.get('domainName', '')
    stage = request_context.get('stage', '')

    if domain and 'execute-api' not in domain:
        # If the domain is a custom domain (no execute-api), skip stage
        return f'https://{domain}'
    elif domain:
        # Otherwise include the stage (for AWS default domains)
        return f'https://{domain}/{stage}'
    else:
        # Fallback: local invocation (SAM CLI, tests, etc.)
        return 'http://localhost:3000'


def get_short_url(slug: str, event: LambdaEvent) -> str:
    return f'{base_url(event)}/r/{slug}'


def get_header(event: LambdaEvent, name: str) -> str | None:
    headers = event.get('headers') or {}
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def query_parameter(event: LambdaEvent, name: str) -> str | None:
    return (event.get('queryStringParameters') or {}).get(name)


def path_parameter(event: LambdaEvent, name: str) -> str | None:
    return (event.get('pathParameters') or {}).get(name)


def client_ip(event: LambdaEvent) -> str:
    """Return the client identity used for login rate limiting

    Reads the first hop of `X-Forwarded-For`, then `X-Real-IP`. Falls back to
    the shared 'unknown' identity when neither header is present.

    NOTE: the headers are trusted as sent. Nothing verifies that they were
          set by a trusted proxy, so a client can spoof its identity.
    """
    forwarded_for = get_header(event, 'X-Forwarded-For')
    if forwarded_for:
        first_hop = forwarded_for.split(',')[0].strip()
        if first_hop:
            return first_hop

    real_ip = get_header(event, 'X-Real-IP')
    if real_ip:
        return real_ip.strip()

    return UNKNOWN_CLIENT


def parse_json_body(event: LambdaEvent) -> dict[str, Any]:
    """Decode the JSON object in the request body

    Raises:
        BadRequestError: If the body is not a JSON object.
    """
    try:
        body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError as e:
        raise BadRequestError('Invalid JSON body') from e
    if not isinstance(body, dict):
        raise BadRequestError('JSON body must be an object')
    return body


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable) -> Callable:
    """Decorator: answer with a generic HTTP 500 when the handler raises

    The exception is logged with its traceback. Nothing about it reaches the client.
    """

    @functools.wraps(handler)
    def wrapper(event: LambdaEvent, context: Any) -> dict:
        try:
            return handler(event, context)
        except Exception as error:
            logger.exception(
                'Unhandled exception in lambda handler. Responding with 500.',
                extra={'error': error.__class__.__name__, 'errorCode': getattr(error, 'error_code', None)},
            )
            return response_500()

    return wrapper
