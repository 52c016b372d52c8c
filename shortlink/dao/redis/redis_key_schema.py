import functools
from collections.abc import Callable

import xxhash


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for storing data models.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "shortlink:prod" or "shortlink:dev".
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def link_key(self, code: str) -> str:
        return f'links:{code}'

    @prefix_key
    def link_url_index_key(self, target_url: str) -> str:
        # Target URLs may be up to 2048 characters long, keep index keys fixed-size
        return f'links:by-url:{xxhash.xxh128_hexdigest(target_url)}'

    @prefix_key
    def counter_key(self) -> str:
        return 'links:counter'

    @prefix_key
    def idempotency_key(self, key: str) -> str:
        return f'idempotency:{key}'
