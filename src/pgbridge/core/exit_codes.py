"""Standard exit codes for pgbridge.

Exit codes follow Unix conventions.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for pgbridge commands."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    USAGE_ERROR = 2
    INPUT_ERROR = 3
    QUERY_ERROR = 4
    NETWORK_ERROR = 5
    CONFLICT = 6
    CONFIG_ERROR = 7
