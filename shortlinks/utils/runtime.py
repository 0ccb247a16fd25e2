"""Runtime utilities

Functions:
    running_locally() -> bool:
        True under `sam local` or when APP_ENV is 'local'.

Example:
    >>> os.environ['AWS_SAM_LOCAL'] = 'true'
    >>> running_locally()
    True
"""

import os

from shortlinks.constants import ENV


TRUTHY = frozenset({'1', 'true', 'yes'})


def running_locally() -> bool:
    # `sam local` sets AWS_SAM_LOCAL; plain pytest/dev shells set APP_ENV=local
    if os.getenv(ENV.App.AWS_SAM_LOCAL, '').strip().lower() in TRUTHY:
        return True
    return os.getenv(ENV.App.APP_ENV, '').strip().lower() == 'local'
