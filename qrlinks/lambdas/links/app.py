import logging
from typing import Any

from qrlinks.constants import LinkType
from qrlinks.dao.factory import kv_store
from qrlinks.exceptions import BadRequestError, MethodNotAllowedError, RequestError, UnauthorizedError
from qrlinks.services import CredentialManager, LinkRegistry, to_response
from qrlinks.types import LambdaEvent, LambdaResponse
from qrlinks.utils import app_prefix, get_short_url, guarantee_500_response, parse_json_body, query_parameter
from qrlinks.utils.cookies import session_token
from qrlinks.utils.responses import response_error, response_json
from qrlinks.lambdas.links.constants import (
    UNAUTHORIZED,
    LINKS_LISTED,
    LINK_FETCHED,
    LINK_CREATED,
    LINK_UPDATED,
    LINK_DELETED,
    LINK_REQUEST_REJECTED,
    METHOD_NOT_ALLOWED,
)


logger = logging.getLogger(__name__)


def _optional_string(body: dict, field: str) -> str | None:
    value = body.get(field)
    if value is not None and not isinstance(value, str):
        raise BadRequestError(f'{field} must be a string')
    return value


def handle_get(event: LambdaEvent, registry: LinkRegistry) -> LambdaResponse:
    slug = query_parameter(event, 'slug')
    if slug:
        link = registry.get(slug)
        logger.debug('Fetched link.', extra={'event': LINK_FETCHED, 'slug': slug})
        return response_json(200, to_response(link))

    wanted_type = query_parameter(event, 'type')
    if wanted_type and wanted_type not in {t.value for t in LinkType}:
        raise BadRequestError(f'type must be one of: {", ".join(t.value for t in LinkType)}')

    links = registry.list(link_type=wanted_type or None)
    logger.debug('Listed links.', extra={'event': LINKS_LISTED, 'count': len(links)})
    return response_json(200, {'links': [to_response(link) for link in links], 'isLocal': registry.store.is_local})


def handle_post(event: LambdaEvent, registry: LinkRegistry) -> LambdaResponse:
    body = parse_json_body(event)
    link = registry.create(
        slug=_optional_string(body, 'slug'),
        destination=_optional_string(body, 'destination'),
        status=body.get('status'),
        qr_code=_optional_string(body, 'qrCode'),
    )
    logger.info('Link created. Responding with 201.', extra={'event': LINK_CREATED, 'slug': link.slug})
    return response_json(201, {**to_response(link), 'redirectUrl': get_short_url(link.slug, event)})


def handle_put(event: LambdaEvent, registry: LinkRegistry) -> LambdaResponse:
    body = parse_json_body(event)
    link = registry.update(
        slug=_optional_string(body, 'slug'),
        destination=_optional_string(body, 'destination'),
        status=_optional_string(body, 'status'),
        qr_code=_optional_string(body, 'qrCode'),
    )
    logger.info('Link updated. Responding with 200.', extra={'event': LINK_UPDATED, 'slug': link.slug})
    return response_json(200, to_response(link))


def handle_delete(event: LambdaEvent, registry: LinkRegistry) -> LambdaResponse:
    slug = query_parameter(event, 'slug')
    if not slug:
        raise BadRequestError('slug is required')

    registry.delete(slug)
    logger.info('Link deleted. Responding with 200.', extra={'event': LINK_DELETED, 'slug': slug})
    return response_json(200, {'success': True, 'deleted': slug})


HANDLERS = {
    'GET': handle_get,
    'POST': handle_post,
    'PUT': handle_put,
    'DELETE': handle_delete,
}


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: Any) -> LambdaResponse:
    """Handle API Gateway requests to /api/links

    Every method requires a valid `session` cookie.

    HTTP responses:
        GET    200: {links: [...], isLocal} or a single link (`?slug=`), optionally filtered by `?type=`
        POST   201: created link, including `redirectUrl`
        PUT    200: updated link
        DELETE 200: {success: true, deleted: <slug>}
        400: Invalid JSON, slug, destination or status
        401: Missing or expired session
        404: Link not found
        405: Unsupported HTTP method
        409: Slug already exists
        500: Internal server error

    Example:
        >>> event = {'httpMethod': 'GET', 'headers': {'Cookie': 'session=<token>'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
    """
    store = kv_store()
    credentials = CredentialManager(store, prefix=app_prefix())
    registry = LinkRegistry(store, prefix=app_prefix())
    method = (event.get('httpMethod') or 'GET').upper()

    try:
        if not credentials.verify(session_token(event)):
            logger.info('Missing or expired session. Responding with 401.', extra={'event': UNAUTHORIZED})
            raise UnauthorizedError('Unauthorized')

        handler = HANDLERS.get(method)
        if handler is None:
            logger.info('Unsupported method. Responding with 405.', extra={'event': METHOD_NOT_ALLOWED, 'method': method})
            raise MethodNotAllowedError(f'Method {method} not allowed')

        return handler(event, registry)
    except RequestError as error:
        logger.info(
            'Rejected links request. Responding with %s.',
            error.status_code,
            extra={'event': LINK_REQUEST_REJECTED, 'errorCode': error.error_code},
        )
        return response_error(error)
