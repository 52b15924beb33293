"""Typed configuration loading and access.

Workspace settings live in an optional ``scopepub.toml`` at the workspace
root::

    [scope]
    from = "@usewaypoint"
    to = "@sownt"

    [publish]
    packages_dir = "packages"
    access = "public"
    manifest = "package.json"

Per-invocation settings (version override, dry run) are carried separately
by ``RunConfig``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_table

__all__ = [
    "CONFIG_FILENAME",
    "Config",
    "ConfigError",
    "PublishSettings",
    "RunConfig",
    "ScopeConfig",
    "load_config",
    "load_config_or_default",
    "validate_scope",
]

CONFIG_FILENAME = "scopepub.toml"

DEFAULT_FROM_SCOPE = "@usewaypoint"
DEFAULT_TO_SCOPE = "@sownt"
DEFAULT_PACKAGES_DIR = "packages"
DEFAULT_ACCESS = "public"
DEFAULT_MANIFEST = "package.json"

_SCOPE_RE = re.compile(r"^@[a-z0-9][a-z0-9_.~-]*$")
_ACCESS_VALUES = frozenset({"public", "restricted"})


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None
    hint: str | None = None


def validate_scope(scope: str) -> str:
    """Return ``scope`` if it is a valid npm scope (``@name``).

    Raises:
        ValueError: If the scope is malformed.
    """
    if not _SCOPE_RE.match(scope):
        raise ValueError(f"invalid npm scope {scope!r} (expected '@name')")
    return scope


@dataclass(frozen=True, slots=True)
class ScopeConfig:
    """Scope rename applied to every published manifest."""

    source: str = DEFAULT_FROM_SCOPE
    target: str = DEFAULT_TO_SCOPE


@dataclass(frozen=True, slots=True)
class PublishSettings:
    """Where packages live and how they are published."""

    packages_dir: str = DEFAULT_PACKAGES_DIR
    access: str = DEFAULT_ACCESS
    manifest: str = DEFAULT_MANIFEST


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    scope: ScopeConfig = field(default_factory=ScopeConfig)
    publish: PublishSettings = field(default_factory=PublishSettings)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML).

        Raises:
            ValueError: If a scope or the access level is invalid.
        """
        scope: StrDict = get_table(data, "scope") or {}
        publish: StrDict = get_table(data, "publish") or {}

        access = get_str(publish, "access") or DEFAULT_ACCESS
        if access not in _ACCESS_VALUES:
            raise ValueError(f"publish.access must be one of {sorted(_ACCESS_VALUES)}")

        return cls(
            scope=ScopeConfig(
                source=validate_scope(get_str(scope, "from") or DEFAULT_FROM_SCOPE),
                target=validate_scope(get_str(scope, "to") or DEFAULT_TO_SCOPE),
            ),
            publish=PublishSettings(
                packages_dir=get_str(publish, "packages_dir") or DEFAULT_PACKAGES_DIR,
                access=access,
                manifest=get_str(publish, "manifest") or DEFAULT_MANIFEST,
            ),
        )

    def with_scopes(self, source: str | None = None, target: str | None = None) -> Config:
        """Return a copy with CLI scope overrides applied.

        Raises:
            ValueError: If an override is not a valid scope.
        """
        return replace(
            self,
            scope=ScopeConfig(
                source=validate_scope(source) if source else self.scope.source,
                target=validate_scope(target) if target else self.scope.target,
            ),
        )


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Settings for a single publish run. Immutable for the run."""

    version: str | None = None
    dry_run: bool = False
    allow_dirty: bool = False


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except OSError as e:
        return Err(ConfigError(f"Cannot read config: {e}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to scopepub.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(
            ConfigError(
                f"Invalid config: {e}",
                path=path,
                hint=f"Fix or remove {path.name}",
            )
        )


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config from file, or return the defaults if the file is absent.

    A file that exists but cannot be parsed is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
