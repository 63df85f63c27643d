import logging
from concurrent.futures import wait
from typing import Any

from qrlinks.constants import CLICK_RECORD_TIMEOUT
from qrlinks.dao.factory import kv_store
from qrlinks.exceptions import LinkNotFoundError
from qrlinks.services import LinkRegistry, RedirectResolver
from qrlinks.types import LambdaEvent, LambdaResponse
from qrlinks.utils import app_prefix, base_url, path_parameter
from qrlinks.utils.responses import response_redirect
from qrlinks.lambdas.redirect_link.constants import (
    MISSING_SLUG,
    LINK_NOT_FOUND,
    REDIRECT_SUCCESS,
    REDIRECT_FAILED,
    CLICK_PENDING,
)


logger = logging.getLogger(__name__)


def response_home(event: LambdaEvent) -> LambdaResponse:
    return response_redirect(f'{base_url(event)}/')


def lambda_handler(event: LambdaEvent, context: Any) -> LambdaResponse:
    """Handle API Gateway requests to /r/{slug}

    This Lambda handler follows this procedure to redirect clients:
    - Step 1: Extract slug from request path
    - Step 2: Look up the link's destination
    - Step 3: Count the click, waiting at most CLICK_RECORD_TIMEOUT seconds
    - Step 4: Redirect client to the destination

    HTTP responses:
        307: Redirect
            headers:
                Location: link destination, or the home page if the link
                          doesn't exist or anything goes wrong

    Example:
        >>> event = {'pathParameters': {'slug': 'promo'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        307
        >>> response['headers']['Location']
        'https://example.com/sale'
    """
    # Never answer with an error page: every failure falls back to the home page
    try:
        # 1- Extract slug from request's path
        slug = path_parameter(event, 'slug')
        if not slug:
            logger.info('Missing "slug" in path. Redirecting home.', extra={'event': MISSING_SLUG})
            return response_home(event)

        # 2-3- Look up destination and count the click
        resolver = RedirectResolver(LinkRegistry(kv_store(), prefix=app_prefix()))
        try:
            target = resolver.resolve(slug)
        except LinkNotFoundError:
            logger.info('Link not found. Redirecting home.', extra={'event': LINK_NOT_FOUND, 'slug': slug})
            return response_home(event)

        # Record the click before Lambda freezes the environment
        done, _ = wait([target.click], timeout=CLICK_RECORD_TIMEOUT)
        if not done:
            logger.warning('Click still pending when responding.', extra={'event': CLICK_PENDING, 'slug': slug})

        # 4- Redirect client to destination
        logger.info(
            'Redirecting client to destination. Responding with 307.',
            extra={'event': REDIRECT_SUCCESS, 'slug': slug},
        )
        return response_redirect(target.destination)
    except Exception:
        logger.exception('Redirect failed. Redirecting home.', extra={'event': REDIRECT_FAILED})
        return response_home(event)
