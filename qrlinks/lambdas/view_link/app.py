import logging
from typing import Any

from qrlinks.dao.factory import kv_store
from qrlinks.exceptions import BadRequestError, RequestError
from qrlinks.services import LinkRegistry
from qrlinks.types import LambdaEvent, LambdaResponse
from qrlinks.utils import app_prefix, guarantee_500_response, path_parameter
from qrlinks.utils.links import link_type
from qrlinks.utils.responses import response_error, response_json
from qrlinks.lambdas.view_link.constants import MISSING_SLUG, LINK_NOT_FOUND, VIEW_SUCCESS


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: Any) -> LambdaResponse:
    """Handle API Gateway requests to /r/{slug}/view

    Returns the stored content of a link (e.g. a plain text message encoded
    in a QR code) without redirecting and without counting a click.

    HTTP responses:
        200: {slug, destination, type}
        400: Missing slug in path
        404: Link not found
        500: Internal server error
    """
    slug = path_parameter(event, 'slug')
    registry = LinkRegistry(kv_store(), prefix=app_prefix())

    try:
        if not slug:
            logger.info('Missing "slug" in path. Responding with 400.', extra={'event': MISSING_SLUG})
            raise BadRequestError("missing 'slug' in path")
        link = registry.get(slug)
    except RequestError as error:
        if error.status_code == 404:
            logger.info('Link not found. Responding with 404.', extra={'event': LINK_NOT_FOUND, 'slug': slug})
        return response_error(error)

    logger.info('Showing link content. Responding with 200.', extra={'event': VIEW_SUCCESS, 'slug': slug})
    return response_json(200, {'slug': link.slug, 'destination': link.destination, 'type': str(link_type(link.destination))})
