import logging
import functools

from shortlinks.dao.exceptions import DataStoreError
from shortlinks.exceptions import ConfigurationError, InternalMappingError, ShortCodeNotFoundError
from shortlinks.lambdas.responses import response_302, response_400, response_404, response_500
from shortlinks.lambdas.redirect_url.constants import (
    MISSING_SHORTCODE,
    SHORT_URL_NOT_FOUND,
    CONFIGURATION_ERROR,
    STORE_UNAVAILABLE,
    REDIRECT_SUCCESS,
)
from shortlinks.service import MappingService, build_mapping_service
from shortlinks.types import LambdaContext, LambdaEvent, LambdaResponse
from shortlinks.utils import load_config, get_short_url
from shortlinks.utils.helpers import guarantee_500_response


logger = logging.getLogger(__name__)


@functools.cache
def mapping_service() -> MappingService:
    """Build the container-wide MappingService once, reused by warm invocations"""
    return build_mapping_service(load_config('redirect_url'))


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 0: Get the container-wide mapping service
    - Step 1: Extract shortcode from request path
    - Step 2: Resolve the shortcode to its long URL
    - Step 3: Redirect client to the long URL

    HTTP responses:
        302: Successful redirect
            headers:
                Location: target URL destination
        400: Bad client request
            message: missing shortcode in path parameters
        404: Not found
            message: shortcode doesn't exist
        500: Internal server error
            message: server experienced an internal error

    Example:
        >>> event = {'pathParameters': {'shortcode': '9f3c1a2b7d4e5f60'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 0- Get the mapping service
    try:
        service = mapping_service()
    except (ConfigurationError, DataStoreError) as error:
        logger.exception(
            'Failed to initialize mapping service. Responding with 500.',
            extra={'event': CONFIGURATION_ERROR, 'error': error.__class__.__name__},
        )
        return response_500(error_code=CONFIGURATION_ERROR)

    # 1- Extract shortcode from request's path
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if not shortcode:
        logger.info('Missing "shortcode" in path. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_400(message="missing 'shortcode' in path", error_code=MISSING_SHORTCODE)
    logger.debug('Client requested short URL %s.', get_short_url(shortcode, event))

    # 2- Resolve shortcode
    try:
        target_url = service.resolve(shortcode)
    except ShortCodeNotFoundError:
        logger.info(
            'Short URL not found. Responding with 404.',
            extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND},
        )
        return response_404(message=f"short url {get_short_url(shortcode, event)} doesn't exist", error_code=SHORT_URL_NOT_FOUND)
    except InternalMappingError:
        logger.exception('Failed to resolve short URL. Responding with 500.', extra={'shortcode': shortcode, 'event': STORE_UNAVAILABLE})
        return response_500(error_code=STORE_UNAVAILABLE)

    # 3- Redirect client to target URL
    logger.info(
        'Redirecting client to target URL. Responding with 302.',
        extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS},
    )
    return response_302(location=target_url)
