"""Unit tests for handle_redis_connection_error decorator.

Test coverage includes:
    1. Normal function execution
       - Ensures the wrapped method executes and returns its result.
    2. Connection error handling
       - Ensures Redis connection errors and timeouts are converted into DataStoreError.
       - Ensures the failing operation is recorded on the error.
    3. Function metadata preservation
"""

import pytest
import redis
from unittest.mock import MagicMock

from shortlink.dao.redis.helpers import handle_redis_connection_error
from shortlink.dao.exceptions import DataStoreError


class DummyDAO:
    def __init__(self, error=None):
        self.error = error
        self.redis = MagicMock()
        self.redis.connection_pool.connection_kwargs = {'host': 'localhost', 'port': 6379, 'db': 0}

    @handle_redis_connection_error
    def ping(self):
        if self.error is not None:
            raise self.error
        return 'OK'


# -------------------------------
# 1. Normal execution
# -------------------------------


def test_decorator_allows_normal_execution():
    """Ensure the wrapped function executes normally when no error occurs."""
    assert DummyDAO().ping() == 'OK'


# -------------------------------
# 2. Connection error handling
# -------------------------------


@pytest.mark.parametrize('error', [redis.exceptions.ConnectionError('Cannot connect'), redis.exceptions.TimeoutError('Timed out')])
def test_decorator_transforms_redis_connectivity_errors(error):
    """Ensure Redis ConnectionError/TimeoutError is re-raised as DataStoreError."""
    dao = DummyDAO(error=error)

    with pytest.raises(DataStoreError, match="Can't connect to Redis at localhost:6379/0") as exc_info:
        dao.ping()

    assert exc_info.value.operation == 'ping'
    assert exc_info.value.__cause__ is error


def test_decorator_propagates_other_errors():
    """Ensure non-connectivity Redis errors are not masked."""
    dao = DummyDAO(error=redis.exceptions.ResponseError('WRONGTYPE'))

    with pytest.raises(redis.exceptions.ResponseError):
        dao.ping()


# -------------------------------
# 3. Function metadata preservation
# -------------------------------


def test_decorator_preserves_function_metadata():
    """Ensure function name and docstring are preserved via functools.wraps."""

    @handle_redis_connection_error
    def sample_function():
        """This is a sample docstring."""
        return 'OK'

    assert sample_function.__name__ == 'sample_function'
    assert 'sample docstring' in sample_function.__doc__
