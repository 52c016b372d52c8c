"""Abstract base class for link record data access objects (DAOs).

This class establishes a consistent contract for all link DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis, DynamoDB, PostgreSQL).

Responsibilities:
    - Provide an atomic insert-if-absent primitive, the only synchronization
      point between concurrent shorten requests.
    - Provide point lookups by shortcode and by target URL (canonical index).
    - Provide an atomic hit counter and a durable, atomically incremented sequence.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from shortlink.models import LinkRecordModel
        >>> from shortlink.dao import LinkRedisDAO

        >>> dao = LinkRedisDAO(...)

        >>> record = LinkRecordModel(code='a1b2c3d', target_url='https://example.com/blog/article-123')
        >>> dao.insert_if_absent(record)
        True
        >>> dao.insert_if_absent(record)
        False

        >>> dao.get('a1b2c3d').target_url
        'https://example.com/blog/article-123'
"""

from abc import ABC, abstractmethod

from shortlink.models import LinkRecordModel


class LinkBaseDAO(ABC):
    """Interface for link record data access objects (DAOs).

    Methods:
        insert_if_absent(record: LinkRecordModel, index_target: bool = False, **kwargs) -> bool:
            Atomically persist a record only if its code is not taken.
            Raises DataStoreError on connection or write failure.

        get(code: str, **kwargs) -> LinkRecordModel:
            Retrieve a record by code.
            Raises LinkRecordNotFoundError if the entry does not exist.
            Raises DataStoreError on connection or read failure.

        find_by_url(target_url: str, **kwargs) -> str:
            Retrieve the code indexed for a target URL.
            Raises LinkRecordNotFoundError if the URL is not indexed.
            Raises DataStoreError on connection or read failure.

        increment_hit(code: str, **kwargs) -> int:
            Atomically bump the hit counter of a record.
            Raises LinkRecordNotFoundError if the entry does not exist.
            Raises DataStoreError on connection or write failure.

        count(increment: bool, **kwargs) -> int:
            Return the durable sequence value, optionally incrementing it first.
            Raises DataStoreError on connection or read failure.

    Subclassing:
        Datastore-specific implementations (e.g., LinkRedisDAO) must extend
        this class and implement all abstract methods.

    NOTE:
        - There is no delete operation. Records live forever unless the data
          store expires them (optional link TTL).
    """

    @abstractmethod
    def insert_if_absent(self, record: LinkRecordModel, index_target: bool = False, **kwargs) -> bool:
        """Persist a record only if no record with the same code exists.

        Args:
            record (LinkRecordModel):
                The record to be inserted.

            index_target (bool):
                If True, also map record.target_url -> record.code in the
                secondary index, in the same atomic write. The insert fails
                when the URL is already indexed.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            bool: True if the record was written, False on any conflict.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, code: str, **kwargs) -> LinkRecordModel:
        """Retrieve a record from the data store by its code.

        Args:
            code (str):
                The code of the record to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            LinkRecordModel: The stored record.

        Raises:
            LinkRecordNotFoundError:
                If no record with the given code exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def find_by_url(self, target_url: str, **kwargs) -> str:
        """Retrieve the code indexed for a target URL.

        Args:
            target_url (str):
                The original long URL.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            str: The code mapped to target_url.

        Raises:
            LinkRecordNotFoundError:
                If target_url is not indexed.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def increment_hit(self, code: str, **kwargs) -> int:
        """Atomically increment the hit counter of a record.

        Args:
            code (str):
                The code of the record which was resolved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            int: The hit count after incrementing.

        Raises:
            LinkRecordNotFoundError:
                If no record with the given code exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def count(self, increment: bool = False, **kwargs) -> int:
        """Retrieve the current sequence value from the data store.

        Args:
            increment (bool):
                If True, increment the sequence by 1 before returning the value.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            int: The current sequence value.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
