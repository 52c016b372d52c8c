from shortlink.dao.base import LinkBaseDAO
from shortlink.dao.redis import LinkRedisDAO, IdempotencyRedisDAO


__all__ = [
    'LinkBaseDAO',
    'LinkRedisDAO',
    'IdempotencyRedisDAO',
]
