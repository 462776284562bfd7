from lil.dao.base import ShortLinkBaseDAO
from lil.dao.exceptions import (
    DAOError,
    DataStoreError,
    InvalidCursorError,
    ShortLinkAlreadyExistsError,
    ShortLinkNotFoundError,
)


__all__ = [
    'ShortLinkBaseDAO',
    'DAOError',
    'DataStoreError',
    'InvalidCursorError',
    'ShortLinkAlreadyExistsError',
    'ShortLinkNotFoundError',
]
