"""Result type for explicit error handling.

Pre-flight checks, subprocess calls and manifest reads all return a
``Result`` instead of raising, so the orchestrator decides in one place
which failures are fatal and which only mark a package as failed.

Usage:
    def read_version(path: Path) -> Result[str, str]:
        if not path.exists():
            return Err(f"no manifest at {path}")
        return Ok(json.loads(path.read_text())["version"])

    match read_version(pkg / "package.json"):
        case Ok(version):
            print(f"version {version}")
        case Err(error):
            print(f"skipped: {error}")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A successful result carrying ``value``."""

    value: T

    def unwrap(self) -> T:
        """Return the contained value."""
        return self.value

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """A failed result carrying ``error``."""

    error: E

    def unwrap(self) -> None:
        """Raise ValueError with the error.

        Raises:
            ValueError: Always, containing the error.
        """
        raise ValueError(f"called unwrap on Err: {self.error}")

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result: TypeAlias = "Ok[T] | Err[E]"
