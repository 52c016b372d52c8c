"""Redis-backed cache of POST /shorten responses keyed by Idempotency-Key

Clients retrying a shorten request (e.g. after a network timeout) send the same
`Idempotency-Key` header and receive the originally minted short URL instead of
a second one.

Example:
    >>> dao = IdempotencyRedisDAO(prefix='shortlink:dev')
    >>> dao.put('3f2a...', {'shortUrl': 'https://sho.rt/abc1234'}, ttl=10)
    <IdempotencyRedisDAO>
    >>> dao.get('3f2a...')
    {'shortUrl': 'https://sho.rt/abc1234'}
    >>> dao.get('unknown')
    None
"""

import json
from typing import Any

from beartype import beartype

from shortlink.constants import TTL
from shortlink.dao.redis.mixins import RedisClientMixin
from shortlink.dao.redis.helpers import handle_redis_connection_error


class IdempotencyRedisDAO(RedisClientMixin):
    """Store and replay JSON responses for a limited time window."""

    @handle_redis_connection_error
    @beartype
    def get(self, key: str) -> dict[str, Any] | None:
        payload = self.redis.get(self.keys.idempotency_key(key))
        return None if payload is None else json.loads(payload)

    @handle_redis_connection_error
    @beartype
    def put(self, key: str, value: dict[str, Any], ttl: int = TTL.IDEMPOTENCY) -> 'IdempotencyRedisDAO':
        # NX: the first response for a key wins, concurrent retries never overwrite it
        self.redis.set(self.keys.idempotency_key(key), json.dumps(value), nx=True, ex=ttl)
        return self
