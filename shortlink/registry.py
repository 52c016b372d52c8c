"""Link registry: mint shortcodes for long URLs and resolve them back

The registry orchestrates a CodeGenerator and a LinkBaseDAO. It holds no copy
of stored records. Concurrent shorten requests are never serialized by a lock:
the data store's atomic insert-if-absent is the only synchronization point, and
a lost race simply costs one more candidate code.

Classes:
    LinkRegistry:
        shorten(target_url) -> code
        resolve(code) -> target_url
        lookup(code) -> LinkRecordModel

Functions:
    validate_url(target_url) -> str
        Return the normalized URL or raise InvalidUrlError.

Example:
    >>> registry = LinkRegistry.from_settings(LinkRedisDAO(prefix='shortlink:dev'), RegistrySettings())
    >>> code = registry.shorten('https://example.com/very/long/path')
    >>> registry.resolve(code)
    'https://example.com/very/long/path'
"""

import time
import logging
import urllib.parse
from concurrent.futures import Executor
from typing import Any
from collections.abc import Callable

from shortlink.constants import (
    Registry,
    LINK_SHORTENED,
    LINK_REUSED,
    SHORTCODE_COLLISION,
    GENERATION_EXHAUSTED,
    STORE_RETRY,
    HIT_NOT_RECORDED,
)
from shortlink.dao.base import LinkBaseDAO
from shortlink.dao.exceptions import DataStoreError, LinkRecordNotFoundError
from shortlink.exceptions import (
    InvalidUrlError,
    InvalidCodeError,
    LinkNotFoundError,
    GenerationExhaustedError,
    StoreUnavailableError,
)
from shortlink.generators import CodeGenerator, build_generator
from shortlink.models import LinkRecordModel
from shortlink.utils.config import RegistrySettings
from shortlink.utils.shortener import is_valid_shortcode


logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = frozenset({'http', 'https'})


def validate_url(target_url: Any) -> str:
    """Validate that a value is a well-formed absolute http(s) URL

    Surrounding whitespace is stripped. Embedded whitespace or control
    characters, a missing host, an unsupported scheme, an invalid port or a URL
    longer than Registry.MAX_URL_LENGTH are rejected.

    Returns:
        str: the stripped URL.

    Raises:
        InvalidUrlError: if the URL is malformed.

    Example:
        >>> validate_url('  https://example.com/path?q=1 ')
        'https://example.com/path?q=1'
        >>> validate_url('not a url')
        InvalidUrlError: Invalid URL format. Please enter a valid URL starting with http:// or https://
    """
    if not isinstance(target_url, str) or not target_url.strip():
        raise InvalidUrlError('URL cannot be empty. Please enter a valid URL.')

    url = target_url.strip()
    if len(url) > Registry.MAX_URL_LENGTH:
        raise InvalidUrlError(f'URL is too long (maximum length is {Registry.MAX_URL_LENGTH} characters).')
    if any(ch.isspace() or not ch.isprintable() for ch in url):
        raise InvalidUrlError('URL must not contain whitespace or control characters.')

    try:
        components = urllib.parse.urlsplit(url)
        # .port raises ValueError when out of range
        _ = components.port
    except ValueError as e:
        raise InvalidUrlError(f'Invalid URL format: {e}.') from e

    if components.scheme.lower() not in ALLOWED_SCHEMES or not components.hostname:
        raise InvalidUrlError('Invalid URL format. Please enter a valid URL starting with http:// or https://')
    return url


class LinkRegistry:
    """Orchestrate shortcode generation and link storage.

    Attributes:
        dao (LinkBaseDAO):
            Data store owning all link records.
        generator (CodeGenerator):
            Source of candidate codes.
        canonicalize (bool):
            If True, shortening an already shortened URL returns its existing code.
        max_attempts (int):
            Candidate codes tried per shorten() before GenerationExhaustedError.
        store_retries (int):
            Extra attempts for each store call failing with DataStoreError.
        retry_backoff (float):
            Seconds to wait before the first store retry, doubled on each retry.
        executor (Executor | None):
            If set, hit counting is submitted to it instead of running inline.
    """

    def __init__(
        self,
        dao: LinkBaseDAO,
        generator: CodeGenerator,
        canonicalize: bool = False,
        max_attempts: int = Registry.MAX_ATTEMPTS,
        store_retries: int = Registry.STORE_RETRIES,
        retry_backoff: float = Registry.RETRY_BACKOFF,
        executor: Executor | None = None,
    ):
        self.dao = dao
        self.generator = generator
        self.canonicalize = canonicalize
        self.max_attempts = max_attempts
        self.store_retries = store_retries
        self.retry_backoff = retry_backoff
        self.executor = executor

    @classmethod
    def from_settings(cls, dao: LinkBaseDAO, settings: RegistrySettings, executor: Executor | None = None) -> 'LinkRegistry':
        return cls(
            dao=dao,
            generator=build_generator(settings, dao),
            canonicalize=settings.canonicalize,
            max_attempts=settings.max_attempts,
            store_retries=settings.store_retries,
            retry_backoff=settings.retry_backoff,
            executor=executor,
        )

    def shorten(self, target_url: str) -> str:
        """Return a shortcode for target_url, minting and persisting a new one if needed

        Procedure:
        - Step 1: Validate target_url (no store access for malformed input)
        - Step 2: If canonicalizing, return the code already indexed for target_url
        - Step 3: Generate a candidate and insert it if absent; on conflict retry
                  with a new candidate, at most max_attempts times

        Raises:
            InvalidUrlError:
                If target_url is not a well-formed absolute http(s) URL.
            GenerationExhaustedError:
                If every candidate collided with an existing code.
            StoreUnavailableError:
                If the data store kept failing after bounded retries.
        """
        url = validate_url(target_url)

        if self.canonicalize:
            existing = self._find_existing(url)
            if existing is not None:
                logger.info('URL already shortened. Reusing existing code.', extra={'code': existing, 'event': LINK_REUSED})
                return existing

        for attempt in range(1, self.max_attempts + 1):
            code = self._call_store('generate', self.generator.generate)
            record = LinkRecordModel(code=code, target_url=url)

            if self._call_store('insert_if_absent', self.dao.insert_if_absent, record, index_target=self.canonicalize):
                logger.info('Link shortened.', extra={'code': code, 'attempt': attempt, 'event': LINK_SHORTENED})
                return code

            # NOTE: with canonicalization, a failed insert may mean a concurrent
            #       request indexed the same URL first. Its code is the answer.
            if self.canonicalize:
                existing = self._find_existing(url)
                if existing is not None:
                    logger.info('URL shortened concurrently. Reusing its code.', extra={'code': existing, 'event': LINK_REUSED})
                    return existing

            logger.warning('Shortcode collision. Retrying with a new candidate.', extra={'code': code, 'attempt': attempt, 'event': SHORTCODE_COLLISION})

        logger.error(
            'Shortcode generation exhausted. The keyspace may be saturated, consider longer codes.',
            extra={'attempts': self.max_attempts, 'code_length': self.generator.length, 'event': GENERATION_EXHAUSTED},
        )
        raise GenerationExhaustedError(f'Could not find an unused shortcode after {self.max_attempts} attempts.')

    def resolve(self, code: str) -> str:
        """Return the target URL of a shortcode and count the hit

        The hit is recorded best-effort: failures are logged, never raised.

        Raises:
            InvalidCodeError:
                If code is malformed (checked before any store access).
            LinkNotFoundError:
                If code is not mapped to any link.
            StoreUnavailableError:
                If the data store kept failing after bounded retries.
        """
        record = self.lookup(code)

        if self.executor is not None:
            self.executor.submit(self._record_hit, code)
        else:
            self._record_hit(code)

        return record.target_url

    def lookup(self, code: str) -> LinkRecordModel:
        """Return the full link record of a shortcode without counting a hit

        Raises:
            InvalidCodeError, LinkNotFoundError, StoreUnavailableError (see resolve())
        """
        if not is_valid_shortcode(code):
            raise InvalidCodeError(f"Invalid short code '{code}'.")

        try:
            return self._call_store('get', self.dao.get, code)
        except LinkRecordNotFoundError as e:
            raise LinkNotFoundError(f"Short code '{code}' not found.") from e

    def _find_existing(self, url: str) -> str | None:
        try:
            return self._call_store('find_by_url', self.dao.find_by_url, url)
        except LinkRecordNotFoundError:
            return None

    def _record_hit(self, code: str) -> None:
        # Store errors beyond connectivity (e.g. Redis OOM rejecting writes) must not fail a resolve either
        try:
            self.dao.increment_hit(code)
        except Exception:
            logger.warning('Failed to record link hit.', exc_info=True, extra={'code': code, 'event': HIT_NOT_RECORDED})

    def _call_store(self, operation: str, func: Callable[..., Any], *args, **kwargs) -> Any:
        """Call a store operation, retrying DataStoreError with exponential backoff

        Raises:
            StoreUnavailableError:
                After store_retries failed retries, chained to the last DataStoreError.
        """
        for retry in range(self.store_retries + 1):
            try:
                return func(*args, **kwargs)
            except DataStoreError as e:
                if retry == self.store_retries:
                    raise StoreUnavailableError(operation, f"Data store unavailable during '{operation}': {e}") from e

                delay = self.retry_backoff * 2**retry
                logger.warning(
                    'Data store call failed. Retrying.',
                    extra={'operation': operation, 'retry': retry + 1, 'delay': delay, 'event': STORE_RETRY},
                )
                time.sleep(delay)
