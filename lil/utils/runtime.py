"""Runtime utilities

Functions:
    app_env() -> str:
        Name of the current application environment ('' when unset).

    running_locally() -> bool:
        True if the service runs in a local development environment.

Example:
    >>> from lil.utils.runtime import running_locally
    >>> os.environ['LIL_ENV'] = 'local'
    >>> running_locally()
    True
    >>> os.environ['LIL_ENV'] = 'prod'
    >>> running_locally()
    False
"""

import os

from lil.constants import ENV


def app_env() -> str:
    return os.getenv(ENV.App.APP_ENV, '').lower()


def running_locally() -> bool:
    """Check if the service runs locally

    Only an explicit LIL_ENV=local counts: an unset variable is treated as a
    deployed environment.
    """
    return app_env() == 'local'
