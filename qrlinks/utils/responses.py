"""API Gateway (Lambda proxy) response builders.

Every JSON response carries `Content-Type: application/json`. Error bodies
follow one shape:

    {"error": "<human readable message>", "errorCode": "<error code>", ...extra}
"""

import json
from typing import Any

from qrlinks.constants import UNKNOWN_INTERNAL_SERVER_ERROR
from qrlinks.exceptions import RateLimitError, RequestError
from qrlinks.types import HttpHeaders, LambdaResponse


def response_json(status_code: int, body: dict[str, Any], headers: HttpHeaders | None = None) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json', **(headers or {})},
        'body': json.dumps(body),
    }


def response_error(error: RequestError) -> LambdaResponse:
    body = {'error': error.message, 'errorCode': error.error_code, **error.extra}
    headers = {}
    if isinstance(error, RateLimitError):
        headers['Retry-After'] = str(error.retry_after)
    return response_json(error.status_code, body, headers)


def response_500() -> LambdaResponse:
    return response_json(500, {'error': 'Internal Server Error', 'errorCode': UNKNOWN_INTERNAL_SERVER_ERROR})


def response_redirect(location: str, status_code: int = 307) -> LambdaResponse:
    """Redirect response. 307 keeps the request method on the follow-up request."""
    return {
        'statusCode': status_code,
        'headers': {'Location': location, 'Cache-Control': 'no-store'},
        'body': '',
    }
