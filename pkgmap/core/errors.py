"""Exit codes for the pkg-map command.

Callers (element install scripts) branch on these values, so they must
stay stable.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes.

    - 0: Success, including the identity fallback of ``--missing-ok``
    - 1: User error (bad invocation, malformed map, unmapped names)
    - 2: No mapping document exists for the element
    """

    OK = 0
    USER_ERROR = 1
    MAP_NOT_FOUND = 2
