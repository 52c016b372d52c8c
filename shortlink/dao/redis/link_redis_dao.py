"""Data Access Object (DAO) implementation for managing link records in Redis

This module provides a Redis-based implementation of LinkBaseDAO for CRUD-like
operations with LinkRecordModel instances.

Responsibilities:
    - Atomically insert link records (insert-if-absent via WATCH/MULTI/EXEC);
    - Maintain the canonical target URL -> code index in the same transaction;
    - Retrieve link records by code and codes by target URL;
    - Increment per-link hit counters atomically;
    - Increment the global sequence used for counter-based shortcodes;
    - Raise appropriate DAO exceptions.

Classes:
    LinkRedisDAO:
        DAO for storing and retrieving LinkRecordModel in a Redis datastore.

Example:
    >>> from shortlink.models import LinkRecordModel
    >>> from shortlink.dao.redis import LinkRedisDAO

    >>> dao = LinkRedisDAO(prefix="app:dev")

    >>> record = LinkRecordModel(code="abc1234", target_url="https://example.com/page")
    >>> dao.insert_if_absent(record, index_target=True)
    True
    >>> dao.find_by_url("https://example.com/page")
    'abc1234'
    >>> dao.increment_hit("abc1234")
    1
    >>> dao.get("abc1234").hit_count
    1
"""

from datetime import datetime, timedelta, UTC

import redis
from beartype import beartype

from shortlink.models import LinkRecordModel
from shortlink.dao.base import LinkBaseDAO
from shortlink.dao.redis.mixins import RedisClientMixin
from shortlink.dao.redis.helpers import handle_redis_connection_error
from shortlink.dao.exceptions import LinkRecordNotFoundError


class LinkRedisDAO(RedisClientMixin, LinkBaseDAO):
    """Redis-based Data Access Object (DAO) for managing link records

    This class implements the LinkBaseDAO interface using Redis as a data store.
    Each record is a Redis hash (`target_url`, `created_at`, `hit_count`) stored
    under `links:<code>`. The canonical index maps `links:by-url:<url hash>` to a code.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.
        link_ttl (int | None):
            Seconds after which records (and their index entries) expire.
            None keeps records forever.

    Methods:
        insert_if_absent(record: LinkRecordModel, index_target: bool = False, **kwargs) -> bool:
            Insert a record unless its code (or, when indexing, its URL) is already taken.
            Raises DataStoreError on connectivity issues with Redis.

        get(code: str, **kwargs) -> LinkRecordModel:
            Retrieve a record and its metadata (hits, expiry) by code.
            Raises LinkRecordNotFoundError when the code doesn't exist.
            Raises DataStoreError on connectivity issues with Redis.

        find_by_url(target_url: str, **kwargs) -> str:
            Retrieve the code indexed for target_url.
            Raises LinkRecordNotFoundError when the URL isn't indexed.
            Raises DataStoreError on connectivity issues with Redis.

        increment_hit(code: str, **kwargs) -> int:
            Increment the hit counter of a record.
            Raises LinkRecordNotFoundError when the code doesn't exist.
            Raises DataStoreError on connectivity issues with Redis.

        count(increment: bool = False, **kwargs) -> int:
            Retrieve (and optionally increment) the global sequence.
            Raises DataStoreError on connectivity issues with Redis.
    """

    def __init__(self, *args, link_ttl: int | None = None, **kwargs):
        self.link_ttl = link_ttl
        super().__init__(*args, **kwargs)

    @handle_redis_connection_error
    @beartype
    def insert_if_absent(self, record: LinkRecordModel, index_target: bool = False, **kwargs) -> bool:
        """Insert a link record into Redis unless its code is already taken

        Uses optimistic locking: the record key (and the URL index key, when
        indexing) is WATCHed, checked for existence, and written in a single
        MULTI/EXEC transaction. If another client modifies a watched key in
        between, Redis aborts the transaction and this method reports a conflict.

        Args:
            record (LinkRecordModel):
                LinkRecordModel instance to persist.
            index_target (bool):
                If True, also write the target URL -> code index entry. The insert
                fails when the target URL is already indexed.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            bool:
                True if the record was written, False on a code collision,
                an already indexed URL or a concurrent write.

        Raises:
            DataStoreError:
                If a Redis connection issue occurs during the transaction.

        Example:
            >>> record = LinkRecordModel(code='abc1234', target_url='https://example.com')
            >>> dao.insert_if_absent(record)
            True
            >>> dao.insert_if_absent(record)
            False
        """
        link_key = self.keys.link_key(record.code)
        index_key = self.keys.link_url_index_key(record.target_url)
        watched = (link_key, index_key) if index_target else (link_key,)

        # NOTE: The record hash and its URL index entry must be written together.
        #       Otherwise a crash in between could leave a URL indexed to a code
        #       which doesn't exist, or a second concurrent request could index the
        #       same URL to another code:
        #
        #       (lambda 1): insert_if_absent(code=A, url=U)
        #                   -> EXISTS links:A, EXISTS links:by-url:H(U)  => 0, 0
        #                   ... interruption
        #       (lambda 2): insert_if_absent(code=B, url=U)
        #                   -> EXISTS links:B, EXISTS links:by-url:H(U)  => 0, 0
        #                   -> MULTI, HSET links:B ..., SET links:by-url:H(U) B, EXEC
        #       (lambda 1): continued...
        #                   -> MULTI, HSET links:A ..., SET links:by-url:H(U) A, EXEC
        #                   => aborted (nil reply) because links:by-url:H(U) was WATCHed
        with self.redis.pipeline() as pipe:
            try:
                pipe.watch(*watched)
                if pipe.exists(link_key):
                    return False
                if index_target and pipe.exists(index_key):
                    return False

                pipe.multi()
                # fmt: off
                pipe.hset(link_key, mapping={
                    'target_url': record.target_url,
                    'created_at': record.created_at.isoformat(),
                    'hit_count': record.hit_count,
                })
                # fmt: on
                if self.link_ttl is not None:
                    pipe.expire(link_key, self.link_ttl)
                if index_target:
                    pipe.set(index_key, record.code, ex=self.link_ttl)
                pipe.execute()
            except redis.exceptions.WatchError:
                return False
        return True

    @handle_redis_connection_error
    @beartype
    def get(self, code: str, **kwargs) -> LinkRecordModel:
        """Retrieve a stored link record by code

        Fetches the record hash and its remaining TTL using a single Redis
        transaction. Calculates the expiry datetime from the remaining TTL value.

        Args:
            code (str):
                The shortcode identifier of the link.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            LinkRecordModel:
                The retrieved LinkRecordModel instance if found.

        Raises:
            LinkRecordNotFoundError:
                If the link does not exist in Redis.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.get('abc1234')
            LinkRecordModel(code='abc1234', target_url='https://example.com', ...)
        """
        link_key = self.keys.link_key(code)

        with self.redis.pipeline(transaction=True) as pipe:
            pipe.hgetall(link_key)
            pipe.ttl(link_key)
            fields, ttl = pipe.execute()

        # NOTE: a hash without 'target_url' can only be a stray counter left by a
        #       hit racing an expiry (see increment_hit()). Treat it as missing.
        if not fields or 'target_url' not in fields:
            raise LinkRecordNotFoundError(f"Link with code '{code}' not found.")

        return LinkRecordModel(
            code=code,
            target_url=fields['target_url'],
            created_at=datetime.fromisoformat(fields['created_at']),
            hit_count=int(fields.get('hit_count', 0)),
            expires_at=datetime.now(UTC) + timedelta(seconds=ttl) if ttl is not None and ttl >= 0 else None,
        )

    @handle_redis_connection_error
    @beartype
    def find_by_url(self, target_url: str, **kwargs) -> str:
        """Retrieve the code indexed for a target URL

        Args:
            target_url (str):
                The original long URL.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            str:
                The code mapped to target_url.

        Raises:
            LinkRecordNotFoundError:
                If the target URL is not indexed.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.find_by_url('https://example.com')
            'abc1234'
        """
        code = self.redis.get(self.keys.link_url_index_key(target_url))
        if code is None:
            raise LinkRecordNotFoundError(f"No link indexed for URL '{target_url}'.")
        return code

    @handle_redis_connection_error
    @beartype
    def increment_hit(self, code: str, **kwargs) -> int:
        """Increment the hit counter of a link record.

        NOTE: HINCRBY is atomic, so concurrent resolves never lose increments to a
              read-modify-write race. The EXISTS check guards against creating a
              hash for a code which was never inserted. A record expiring between
              EXISTS and HINCRBY leaves a stray hash holding only 'hit_count',
              which get() reports as missing.

        Args:
            code (str):
                The code of the resolved link.
            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            int:
                hit count after incrementing.

        Raises:
            LinkRecordNotFoundError:
                If no link with the given code exists.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.increment_hit('abc1234')
            42
        """
        link_key = self.keys.link_key(code)

        if not self.redis.exists(link_key):
            raise LinkRecordNotFoundError(f"Link with code '{code}' not found.")

        return self.redis.hincrby(link_key, 'hit_count', 1)

    @handle_redis_connection_error
    def count(self, increment: bool = False, **kwargs) -> int:
        """Retrieve global sequence counter

        Args:
            increment (bool):
                If True, increments the counter. Otherwise, retrieves its value.
            **kwargs:
                Optional keyword arguments.

        Returns:
            int:
                The updated or current global counter value (0 if never incremented).

        Example:
            >>> dao.count(increment=False)
            123
            >>> dao.count(increment=True)
            124
        """
        if increment:
            return self.redis.incr(self.keys.counter_key())
        else:
            return int(self.redis.get(self.keys.counter_key()) or 0)
