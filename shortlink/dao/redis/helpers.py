import functools
from typing import TypeVar, Any
from collections.abc import Callable

import redis

from shortlink.dao.exceptions import DataStoreError
from shortlink.dao.redis.mixins import redis_endpoint


__all__ = []

F = TypeVar('F', bound=Callable[..., Any])


def handle_redis_connection_error[F](method: F) -> F:
    """Translate Redis connectivity failures of a DAO method into DataStoreError

    redis.exceptions.ConnectionError and redis.exceptions.TimeoutError become a
    DataStoreError naming the Redis endpoint and carrying the method name as
    `operation`, so the link registry can retry it and report which store call
    kept failing. Other Redis errors (e.g. WRONGTYPE) propagate unchanged.

    Example:
        >>> @handle_redis_connection_error
        ... def count(self, increment=False):
        ...     return self.redis.incr(self.keys.counter_key())
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            raise DataStoreError(
                f"Can't connect to Redis at {redis_endpoint(self.redis)} (operation: {method.__name__}).",
                operation=method.__name__,
            ) from e

    return wrapper
