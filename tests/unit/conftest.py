import threading

import pytest

from shortlink.models import LinkRecordModel
from shortlink.dao.base import LinkBaseDAO
from shortlink.dao.exceptions import LinkRecordNotFoundError


class InMemoryLinkDAO(LinkBaseDAO):
    """Thread-safe in-memory LinkBaseDAO used to exercise the registry under concurrency.

    The lock plays the role of Redis' single-threaded command execution: each
    method body is one atomic store operation.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.records: dict[str, LinkRecordModel] = {}
        self.url_index: dict[str, str] = {}
        self.counter = 0
        self.calls: list[str] = []

    def insert_if_absent(self, record: LinkRecordModel, index_target: bool = False, **kwargs) -> bool:
        with self._lock:
            self.calls.append('insert_if_absent')
            if record.code in self.records:
                return False
            if index_target and record.target_url in self.url_index:
                return False
            self.records[record.code] = record
            if index_target:
                self.url_index[record.target_url] = record.code
            return True

    def get(self, code: str, **kwargs) -> LinkRecordModel:
        with self._lock:
            self.calls.append('get')
            try:
                return self.records[code]
            except KeyError:
                raise LinkRecordNotFoundError(f"Link with code '{code}' not found.") from None

    def find_by_url(self, target_url: str, **kwargs) -> str:
        with self._lock:
            self.calls.append('find_by_url')
            try:
                return self.url_index[target_url]
            except KeyError:
                raise LinkRecordNotFoundError(f"No link indexed for URL '{target_url}'.") from None

    def increment_hit(self, code: str, **kwargs) -> int:
        with self._lock:
            self.calls.append('increment_hit')
            if code not in self.records:
                raise LinkRecordNotFoundError(f"Link with code '{code}' not found.")
            record = self.records[code]
            self.records[code] = LinkRecordModel(
                code=record.code,
                target_url=record.target_url,
                created_at=record.created_at,
                hit_count=record.hit_count + 1,
                expires_at=record.expires_at,
            )
            return record.hit_count + 1

    def count(self, increment: bool = False, **kwargs) -> int:
        with self._lock:
            self.calls.append('count')
            if increment:
                self.counter += 1
            return self.counter


@pytest.fixture
def memory_dao() -> InMemoryLinkDAO:
    return InMemoryLinkDAO()
