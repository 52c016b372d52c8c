"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    LinkRecordNotFoundError:
        Raised when a LinkRecordModel (or URL index entry) is not found in the data store.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).

Example:
    >>> from shortlink.dao.exceptions import LinkRecordNotFoundError
    >>> raise LinkRecordNotFoundError("Link with code 'abc123' not found.")
    Traceback (most recent call last):
        ...
    shortlink.dao.exceptions.LinkRecordNotFoundError: Link with code 'abc123' not found.
"""


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    pass


class LinkRecordNotFoundError(DAOError):
    """Exception raised when a LinkRecordModel is not found in the data store."""

    pass


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.

    Attributes:
        operation (str | None):
            Name of the DAO operation which failed, if known.
    """

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message)
        self.operation = operation
