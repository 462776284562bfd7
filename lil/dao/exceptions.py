"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    ShortLinkNotFoundError:
        Raised when no live short link exists for a shortcode.

    ShortLinkAlreadyExistsError:
        Raised when attempting to insert a shortcode that is already taken.

    DataStoreError:
        Raised when the data store is unreachable or timed out.

    InvalidCursorError:
        Raised when a search cursor cannot be decoded.

Example:
    >>> from lil.dao.exceptions import ShortLinkNotFoundError
    >>> raise ShortLinkNotFoundError("Short link with code 'abc12345' not found.")
    Traceback (most recent call last):
        ...
    lil.dao.exceptions.ShortLinkNotFoundError: Short link with code 'abc12345' not found.
"""

from lil.exceptions import LilError


class DAOError(LilError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class ShortLinkNotFoundError(DAOError):
    """Exception raised when a short link is missing or expired."""

    error_code = 'dao:short_link_not_found'


class ShortLinkAlreadyExistsError(DAOError):
    """Exception raised when a shortcode is already present in the data store."""

    error_code = 'dao:short_link_already_exists'


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, pool exhaustion, etc.
    """

    error_code = 'dao:data_store_unavailable'


class InvalidCursorError(DAOError):
    """Exception raised when a search cursor is malformed."""

    error_code = 'dao:invalid_cursor'
