"""Package registry clients."""

from .npm import NPM_TIMEOUT_SECONDS, NpmRegistry, publish_args

__all__ = [
    "NPM_TIMEOUT_SECONDS",
    "NpmRegistry",
    "publish_args",
]
