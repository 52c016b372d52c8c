import json
import base64
import logging
import binascii

from shortlink.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlink.dao.redis import LinkRedisDAO, IdempotencyRedisDAO
from shortlink.dao.exceptions import DataStoreError
from shortlink.exceptions import ShortlinkError, InvalidUrlError, StoreUnavailableError
from shortlink.registry import LinkRegistry
from shortlink.utils import load_config, get_short_url, app_prefix, guarantee_500_response, RegistrySettings
from shortlink.lambdas.responses import response_200, response_error
from shortlink.lambdas.shorten_url.constants import (
    INVALID_REQUEST_BODY,
    SHORTEN_REJECTED,
    SHORTEN_SUCCESS,
    IDEMPOTENT_REPLAY,
    IDEMPOTENCY_CACHE_UNAVAILABLE,
    IDEMPOTENCY_KEY_REUSED,
    IDEMPOTENCY_HEADER,
)


logger = logging.getLogger(__name__)


def parse_request_url(event: LambdaEvent) -> str:
    """Extract the 'url' field from the JSON request body

    Raises:
        InvalidUrlError: if the body is not a JSON object with a string 'url'.
    """
    body = event.get('body') or '{}'
    try:
        if event.get('isBase64Encoded'):
            body = base64.b64decode(body).decode('utf-8')
        request_body = json.loads(body)
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidUrlError('Bad Request (invalid JSON body)') from e

    if not isinstance(request_body, dict) or not isinstance(request_body.get('url'), str):
        raise InvalidUrlError("Bad Request (missing 'url' in JSON body)")
    return request_body['url']


def idempotency_key(event: LambdaEvent) -> str | None:
    headers = event.get('headers') or {}
    for name, value in headers.items():
        if name.lower() == IDEMPOTENCY_HEADER and value:
            return value
    return None


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Extract target URL from request body
    - Step 2: Replay the cached response if the Idempotency-Key was seen recently
              with the same URL
    - Step 3: Shorten the URL via the link registry
    - Step 4: Respond to user with 200 success (and cache it under the Idempotency-Key)

    HTTP responses:
        200: Successful URL shortening
            shortUrl: newly generated (or, with canonicalization, existing) short url
            originalUrl: original url (provided in request)
            code: shortcode
            message: success message
        400: Bad client request
            error: InvalidUrl
            message: invalid JSON, missing 'url' or malformed URL
        500: Internal server error
            error: GenerationExhausted, configuration error or unknown error
        503: Service unavailable
            error: StoreUnavailable

    Args:
        event (LambdaEvent):
            API Gateway event payload in Lambda Proxy format.
        context (LambdaContext):
            AWS Lambda context object containing runtime information.

    Returns:
        LambdaResponse:
            JSON-serializable response following API Gateway Lambda Proxy
            output format. Includes status code, headers, and response body.

    Example:
        >>> event = {'body': '{"url": "https://example.com"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])['shortUrl']
        'https://sho.rt/Gh71WPT'
    """
    try:
        # 0- Get application's config
        app_config = load_config('shorten_url')
        settings = RegistrySettings.from_config(app_config.get('registry'))
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

        # 1- Extract target URL from request body
        target_url = parse_request_url(event)

        try:
            dao = LinkRedisDAO(**redis_config, prefix=app_prefix(), link_ttl=settings.link_ttl_seconds)
        except DataStoreError as e:
            raise StoreUnavailableError('connect') from e

        # 2- Replay cached response for retried requests
        key = idempotency_key(event)
        cache = None
        if key is not None:
            try:
                cache = IdempotencyRedisDAO(redis_client=dao.redis, prefix=app_prefix())
                cached = cache.get(key)
            except DataStoreError:
                logger.warning('Idempotency cache unavailable. Proceeding uncached.', exc_info=True, extra={'event': IDEMPOTENCY_CACHE_UNAVAILABLE})
                cache, cached = None, None
            if cached is not None and cached.get('originalUrl') == target_url.strip():
                logger.info('Replaying cached response for Idempotency-Key.', extra={'event': IDEMPOTENT_REPLAY})
                return response_200(cached)
            if cached is not None:
                # a key only ever replays the URL it was first used with
                logger.warning('Idempotency-Key reused with a different URL. Proceeding uncached.', extra={'event': IDEMPOTENCY_KEY_REUSED})
                cache = None

        # 3- Shorten URL via the link registry
        registry = LinkRegistry.from_settings(dao, settings)
        code = registry.shorten(target_url)

    except ShortlinkError as e:
        log = logger.warning if e.status_code >= 500 else logger.info
        log(
            'Shorten request rejected. Responding with %s.',
            e.status_code,
            extra={'error': e.error_code, 'reason': str(e), 'event': INVALID_REQUEST_BODY if isinstance(e, InvalidUrlError) else SHORTEN_REJECTED},
        )
        return response_error(e)

    # 4- Return successful response to user
    short_url = get_short_url(code, event, base=settings.base_url)
    body = {
        'shortUrl': short_url,
        'originalUrl': target_url.strip(),
        'code': code,
        'message': 'Url shortened successfully',
    }
    if cache is not None:
        try:
            cache.put(key, body, ttl=settings.idempotency_ttl_seconds)
        except DataStoreError:
            logger.warning('Failed to cache response for Idempotency-Key.', exc_info=True, extra={'event': IDEMPOTENCY_CACHE_UNAVAILABLE})

    logger.info('Shortened URL. Responding with 200.', extra={'code': code, 'event': SHORTEN_SUCCESS})
    return response_200(body)
