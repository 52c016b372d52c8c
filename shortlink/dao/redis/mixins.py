"""Shared Redis client setup for the link and idempotency DAOs

Every DAO built on RedisClientMixin either reuses a caller-provided client (so
the shorten Lambda opens one connection pool for both of its DAOs) or takes the
process-wide client for its connection settings, created once with bounded
socket timeouts. A PING on construction turns a misconfigured
endpoint into a DataStoreError before any link operation runs.

Example:
    >>> class LinkRedisDAO(RedisClientMixin, LinkBaseDAO):
    ...     pass
    ...
    >>> dao = LinkRedisDAO(redis_host='redis.internal', prefix='shortlink:prod')
    >>> cache = IdempotencyRedisDAO(redis_client=dao.redis, prefix='shortlink:prod')
"""

import functools

import redis

from shortlink.constants import Timeout
from shortlink.dao.redis.redis_key_schema import RedisKeySchema
from shortlink.dao.exceptions import DataStoreError


def redis_endpoint(client: redis.Redis) -> str:
    """Return '<host>:<port>/<db>' of a client, for error messages"""
    info = client.connection_pool.connection_kwargs
    return f'{info.get("host")}:{info.get("port")}/{info.get("db")}'


@functools.lru_cache(maxsize=8)
def shared_client(**connection) -> redis.Redis:
    """Return the process-wide Redis client for one set of connection settings

    redis.Redis pools its connections and is thread-safe, so a warm Lambda
    container keeps reusing open sockets across invocations.
    """
    return redis.Redis(**connection)


class RedisClientMixin:
    """Inject a Redis client (`self.redis`) and a key schema (`self.keys`).

    Redis connection parameters mirror the `redis` section of the lambda's
    AppConfig, prefixed with `redis_` (e.g. `redis_host`, `redis_socket_timeout`).

    Raises:
        DataStoreError:
            If Redis doesn't answer the initial PING.
    """

    def __init__(
        self,
        redis_host: str = 'localhost',
        redis_port: int = 6379,
        redis_db: int = 0,
        redis_decode_responses: bool = True,
        redis_username: str | None = None,
        redis_password: str | None = None,
        redis_socket_timeout: float = Timeout.REDIS_SOCKET,
        redis_socket_connect_timeout: float = Timeout.REDIS_SOCKET,
        redis_client: redis.Redis | None = None,
        prefix: str | None = None,
    ):
        if redis_client is None:
            redis_client = shared_client(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                decode_responses=redis_decode_responses,
                username=redis_username,
                password=redis_password,
                socket_timeout=redis_socket_timeout,
                socket_connect_timeout=redis_socket_connect_timeout,
            )

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)

        self._healthcheck()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis; return False (or raise DataStoreError) if it is unreachable"""
        try:
            self.redis.ping()
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            if not raise_error:
                return False
            raise DataStoreError(
                f"Can't connect to Redis at {redis_endpoint(self.redis)}. Check the provided configuration parameters.",
                operation='healthcheck',
            ) from e
        return True
