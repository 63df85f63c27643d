import logging
from typing import Any

from qrlinks.dao.factory import kv_store
from qrlinks.exceptions import BadRequestError, MethodNotAllowedError, RequestError
from qrlinks.services import CredentialManager
from qrlinks.types import LambdaEvent, LambdaResponse
from qrlinks.utils import app_prefix, client_ip, guarantee_500_response, parse_json_body, query_parameter, running_locally
from qrlinks.utils.cookies import clear_session_cookie, session_token, set_session_cookie
from qrlinks.utils.responses import response_error, response_json
from qrlinks.lambdas.auth.constants import (
    AUTH_STATUS,
    SESSION_VERIFIED,
    SETUP_SUCCESS,
    LOGIN_SUCCESS,
    LOGOUT_SUCCESS,
    AUTH_REQUEST_REJECTED,
    INVALID_ACTION,
)


logger = logging.getLogger(__name__)


def response_session(token: str, max_age: int) -> LambdaResponse:
    cookie = set_session_cookie(token, max_age, secure=not running_locally())
    return response_json(200, {'success': True}, {'Set-Cookie': cookie})


def handle_get(event: LambdaEvent, credentials: CredentialManager) -> LambdaResponse:
    action = query_parameter(event, 'action')
    token = session_token(event)

    if action == 'status':
        status = credentials.status(token)
        logger.debug('Reporting auth status.', extra={'event': AUTH_STATUS, 'isSetup': status.is_setup})
        return response_json(200, {'isSetup': status.is_setup, 'isAuthenticated': status.is_authenticated})

    if action == 'verify':
        authenticated = credentials.verify(token)
        logger.debug('Verified session.', extra={'event': SESSION_VERIFIED, 'authenticated': authenticated})
        return response_json(200, {'authenticated': authenticated})

    raise BadRequestError('Invalid action')


def handle_post(event: LambdaEvent, credentials: CredentialManager) -> LambdaResponse:
    body = parse_json_body(event)
    action = body.get('action')
    password = body.get('password')
    if password is not None and not isinstance(password, str):
        raise BadRequestError('Password must be a string')

    if action == 'setup':
        session = credentials.setup(password)
        logger.info('Shared password created. Responding with 200.', extra={'event': SETUP_SUCCESS})
        return response_session(session.token, session.max_age)

    if action == 'login':
        identity = client_ip(event)
        session = credentials.login(password, identity)
        logger.info('Client logged in. Responding with 200.', extra={'event': LOGIN_SUCCESS, 'clientIp': identity})
        return response_session(session.token, session.max_age)

    if action == 'logout':
        credentials.logout(session_token(event))
        logger.info('Client logged out. Responding with 200.', extra={'event': LOGOUT_SUCCESS})
        cookie = clear_session_cookie(secure=not running_locally())
        return response_json(200, {'success': True}, {'Set-Cookie': cookie})

    raise BadRequestError('Invalid action')


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: Any) -> LambdaResponse:
    """Handle API Gateway requests to /api/auth

    GET actions (query string `action`):
        status: {isSetup, isAuthenticated}
        verify: {authenticated}

    POST actions (JSON body `{"action": ..., "password": ...}`):
        setup:  create the shared password, open a session
        login:  check the shared password, open a session
        logout: expire the session cookie

    HTTP responses:
        200: Success (setup/login/logout set the `session` cookie)
        400: Invalid action or JSON, password already/not set up, weak or missing password
        401: Invalid password
            remainingAttempts: failed attempts left before lockout
        405: Unsupported HTTP method
        429: Client locked out after too many failed logins
            headers:
                Retry-After: seconds until the lock expires
        500: Internal server error

    Example:
        >>> event = {'httpMethod': 'GET', 'queryStringParameters': {'action': 'status'}}
        >>> response = lambda_handler(event, None)
        >>> json.loads(response['body'])
        {'isSetup': False, 'isAuthenticated': False}
    """
    credentials = CredentialManager(kv_store(), prefix=app_prefix())
    method = (event.get('httpMethod') or 'GET').upper()

    try:
        if method == 'GET':
            return handle_get(event, credentials)
        if method == 'POST':
            return handle_post(event, credentials)
        raise MethodNotAllowedError(f'Method {method} not allowed')
    except RequestError as error:
        logger.info(
            'Rejected auth request. Responding with %s.',
            error.status_code,
            extra={'event': INVALID_ACTION if isinstance(error, BadRequestError) else AUTH_REQUEST_REJECTED, 'errorCode': error.error_code},
        )
        return response_error(error)
