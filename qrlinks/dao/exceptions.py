"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).

    CorruptDocumentError:
        Raised when a stored value can't be decoded as a JSON document.

Example:
    >>> from qrlinks.dao.exceptions import DataStoreError
    >>> raise DataStoreError("Can't connect to Redis at localhost:6379/0.")
    Traceback (most recent call last):
        ...
    qrlinks.dao.exceptions.DataStoreError: Can't connect to Redis at localhost:6379/0.
"""

from qrlinks.exceptions import QRLinksError


class DAOError(QRLinksError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.
    """

    error_code = 'dao:data_store_error'


class CorruptDocumentError(DataStoreError):
    """Exception raised when a stored value is not a JSON document."""

    error_code = 'dao:corrupt_document_error'
