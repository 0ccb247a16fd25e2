import json
import logging
import functools

from shortlinks.dao.exceptions import DataStoreError
from shortlinks.exceptions import (
    ConfigurationError,
    InvalidInputError,
    InternalMappingError,
    ShortCodeCollisionError,
    UnresolvableConflictError,
)
from shortlinks.lambdas.responses import response_200, response_400, response_500
from shortlinks.lambdas.shorten_url.constants import (
    INVALID_JSON_BODY,
    MISSING_TARGET_URL,
    CONFIGURATION_ERROR,
    STORE_UNAVAILABLE,
    UNRESOLVABLE_CONFLICT,
    SHORT_CODE_COLLISION,
    SHORTEN_SUCCESS,
    CONFLICT_RETRY_AFTER,
)
from shortlinks.service import MappingService, build_mapping_service
from shortlinks.types import LambdaContext, LambdaEvent, LambdaResponse
from shortlinks.utils import load_config, get_short_url
from shortlinks.utils.helpers import guarantee_500_response


logger = logging.getLogger(__name__)


@functools.cache
def mapping_service() -> MappingService:
    """Build the container-wide MappingService once, reused by warm invocations"""
    return build_mapping_service(load_config('shorten_url'))


def extract_long_url(request_body: object, event: LambdaEvent) -> str:
    """Extract the long URL from the JSON body ('target_url') or the 'q' query parameter

    Raises:
        InvalidInputError:
            If no non-empty long URL is provided.
    """
    query = event.get('queryStringParameters') or {}
    long_url = request_body.get('target_url') if isinstance(request_body, dict) else None
    long_url = long_url or query.get('q')
    if not isinstance(long_url, str) or not long_url.strip():
        raise InvalidInputError("missing 'target_url' in JSON body or 'q' query parameter")
    return long_url


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 0: Get the container-wide mapping service
    - Step 1: Extract long URL from request body (or 'q' query parameter)
    - Step 2: Shorten the long URL (cache, store, conflict resolution)
    - Step 3: Respond to user with 200 success

    HTTP responses:
        200: Successful URL shortening
            message: success message
            target_url: original url (provided in request)
            short_url: short url
            shortcode: short code
        400: Bad client request
            message: indicate cause of bad request (invalid JSON, or neither target_url nor q given)
        500: Internal server error
            message: indicate the server experienced an internal error
            Retry-After header is set when a concurrent request is still creating the mapping

    Example:
        >>> event = {'body': '{"target_url": "https://example.com"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
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

    # 1- Extract long URL from request
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON_BODY)

    try:
        target_url = extract_long_url(request_body, event)
    except InvalidInputError as error:
        logger.info('Missing long URL. Responding with 400.', extra={'event': MISSING_TARGET_URL})
        return response_400(message=str(error), error_code=MISSING_TARGET_URL)

    # 2- Shorten the long URL
    try:
        shortcode = service.shorten(target_url)
    except UnresolvableConflictError as error:
        logger.warning('Concurrent shorten request not yet visible. Responding with 500.', extra={'event': UNRESOLVABLE_CONFLICT})
        return response_500(message=str(error), error_code=UNRESOLVABLE_CONFLICT, retry_after=CONFLICT_RETRY_AFTER)
    except ShortCodeCollisionError:
        logger.exception('Short code collision. Responding with 500.', extra={'event': SHORT_CODE_COLLISION})
        return response_500(error_code=SHORT_CODE_COLLISION)
    except InternalMappingError:
        logger.exception('Failed to shorten URL. Responding with 500.', extra={'event': STORE_UNAVAILABLE})
        return response_500(error_code=STORE_UNAVAILABLE)

    # 3- Return successful response to user
    short_url = get_short_url(shortcode, event)
    logger.info('Shortened URL. Responding with 200.', extra={'shortcode': shortcode, 'event': SHORTEN_SUCCESS})
    return response_200(
        {
            'message': f'Successfully shortened {target_url} to {short_url}',
            'target_url': target_url,
            'short_url': short_url,
            'shortcode': shortcode,
        }
    )
