"""Platform abstraction layer."""

from .process import (
    ProcessError,
    run,
    run_live,
    which,
)

__all__ = [
    "ProcessError",
    "run",
    "run_live",
    "which",
]
