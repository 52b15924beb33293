"""Error codes for CLI exit status.

Every failure a publish run can hit maps to a single non-zero exit code, so
CI jobs only have to distinguish "published everything" from "did not".
Usage errors (bad flags) keep click's own exit code, 2.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable:
    - 0: Success (dry runs and skipped packages included)
    - 1: Failure (pre-flight, build, publish or restore)
    """

    OK = 0
    FAILURE = 1
