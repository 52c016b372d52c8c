import logging

from shortlink.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlink.dao.redis import LinkRedisDAO
from shortlink.dao.exceptions import DataStoreError
from shortlink.exceptions import (
    ShortlinkError,
    InvalidCodeError,
    LinkNotFoundError,
    StoreUnavailableError,
)
from shortlink.registry import LinkRegistry
from shortlink.utils import load_config, app_prefix, guarantee_500_response, is_valid_shortcode, RegistrySettings
from shortlink.lambdas.responses import response_302, response_error
from shortlink.lambdas.redirect_url.constants import (
    MISSING_SHORTCODE,
    INVALID_SHORTCODE,
    SHORT_URL_NOT_FOUND,
    STORE_UNAVAILABLE,
    REDIRECT_SUCCESS,
)


logger = logging.getLogger(__name__)

EVENT_BY_ERROR = {
    InvalidCodeError: INVALID_SHORTCODE,
    LinkNotFoundError: SHORT_URL_NOT_FOUND,
    StoreUnavailableError: STORE_UNAVAILABLE,
}


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract shortcode from request path
    - Step 2: Load the registry configuration
    - Step 3: Resolve the shortcode via the link registry (counts the hit)
    - Step 4: Redirect client to target URL

    HTTP responses:
        302: Successful redirect
            headers:
                Location: target URL destination
        400: Bad client request
            error: InvalidCode (missing or malformed shortcode)
        404: Not found
            error: NotFound (shortcode is not mapped to any link)
        500: Internal server error
            message: server experienced an internal error
        503: Service unavailable
            error: StoreUnavailable

    Args:
        event (LambdaEvent):
            API Gateway event payload containing the `code` path parameter.
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        LambdaResponse:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'pathParameters': {'code': 'Gh71WPT'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 1- Extract shortcode from request's path
    code = (event.get('pathParameters') or {}).get('code')
    if code is None:
        logger.info('Missing "code" in path. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_error(InvalidCodeError("Bad Request (missing 'code' in path)"))
    if not is_valid_shortcode(code):
        # reject before opening a Redis connection
        logger.info('Malformed shortcode in path. Responding with 400.', extra={'code': code, 'event': INVALID_SHORTCODE})
        return response_error(InvalidCodeError(f"Invalid short code '{code}'."))

    try:
        # 2- Get application's config
        app_config = load_config('redirect_url')
        settings = RegistrySettings.from_config(app_config.get('registry'))
        logger.debug('Assuming Redis as the backend database for links')
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

        try:
            dao = LinkRedisDAO(**redis_config, prefix=app_prefix(), link_ttl=settings.link_ttl_seconds)
        except DataStoreError as e:
            raise StoreUnavailableError('connect') from e

        # 3- Resolve shortcode to its target URL
        registry = LinkRegistry.from_settings(dao, settings)
        target_url = registry.resolve(code)

    except ShortlinkError as e:
        log = logger.warning if e.status_code >= 500 else logger.info
        log(
            'Redirect request rejected. Responding with %s.',
            e.status_code,
            extra={'code': code, 'error': e.error_code, 'event': EVENT_BY_ERROR.get(type(e), e.error_code)},
        )
        return response_error(e)

    # 4- Redirect client to target URL
    logger.info('Redirecting client to target URL. Responding with 302.', extra={'code': code, 'event': REDIRECT_SUCCESS})
    return response_302(location=target_url)
