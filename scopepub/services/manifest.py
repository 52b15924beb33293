"""package.json reading and in-place rewriting.

Rewrites are plain text substitutions so that everything except the renamed
scope and the overridden version stays byte-for-byte identical (key order,
indentation, trailing newline). Fields are read back with ``json`` after
the rewrite.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path

from scopepub.core.result import Err, Ok, Result
from scopepub.core.structured import as_str_dict, get_bool, get_str

__all__ = [
    "Manifest",
    "ManifestError",
    "discover_package_dirs",
    "is_valid_version",
    "normalize_version",
    "override_version",
    "parse_manifest",
    "read_manifest",
    "rename_scope",
    "retarget_name",
    "rewrite_manifest",
    "transform_manifest",
]

_VERSION_FIELD_RE = re.compile(r'("version"\s*:\s*)"[^"]*"')
_SEMVER_RE = re.compile(
    r"^v?(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$"
)


@dataclass(frozen=True, slots=True)
class ManifestError:
    path: Path
    message: str


@dataclass(frozen=True, slots=True)
class Manifest:
    """The fields of a package.json that drive publishing."""

    path: Path
    name: str
    version: str
    private: bool = False

    @property
    def scope(self) -> str | None:
        """``@scope`` part of the name, or None for unscoped packages."""
        if self.name.startswith("@") and "/" in self.name:
            return self.name.split("/", 1)[0]
        return None

    @property
    def label(self) -> str:
        return f"{self.name}@{self.version}"


def is_valid_version(version: str) -> bool:
    """True if ``version`` is a semver string npm will accept."""
    return _SEMVER_RE.match(version) is not None


def normalize_version(version: str) -> str:
    """Drop the tag-style ``v`` prefix; npm publishes ``v1.2.3`` as ``1.2.3``."""
    return version[1:] if version.startswith("v") else version


def discover_package_dirs(packages_dir: Path) -> list[Path]:
    """Package directories in listing order (sorted by name, dot-dirs skipped)."""
    return sorted(
        (p for p in packages_dir.iterdir() if p.is_dir() and not p.name.startswith(".")),
        key=lambda p: p.name,
    )


def parse_manifest(text: str, path: Path) -> Result[Manifest, ManifestError]:
    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(ManifestError(path, f"invalid JSON: {e}"))

    data = as_str_dict(obj)
    if data is None:
        return Err(ManifestError(path, "manifest root must be an object"))

    name = get_str(data, "name")
    if name is None:
        return Err(ManifestError(path, "missing 'name'"))

    return Ok(
        Manifest(
            path=path,
            name=name,
            version=get_str(data, "version") or "",
            private=get_bool(data, "private") is True,
        )
    )


def read_manifest(path: Path) -> Result[Manifest, ManifestError]:
    try:
        text = path.read_bytes().decode("utf-8")
    except OSError as e:
        return Err(ManifestError(path, f"cannot read: {e}"))
    except UnicodeDecodeError as e:
        return Err(ManifestError(path, f"not UTF-8: {e}"))
    return parse_manifest(text, path)


def rename_scope(text: str, source: str, target: str) -> str:
    """Replace every quoted ``"<source>/`` prefix with ``"<target>/``.

    This covers the package name and references to sibling packages in
    dependency maps, so the source scope never reaches the registry.
    """
    return text.replace(f'"{source}/', f'"{target}/')


def retarget_name(name: str, source: str, target: str) -> str:
    """The name a package will be published under."""
    if name.startswith(f"{source}/"):
        return f"{target}/{name[len(source) + 1 :]}"
    return name


def override_version(text: str, version: str) -> str:
    """Set the first ``"version"`` field (the top-level one in package.json)."""
    return _VERSION_FIELD_RE.sub(lambda m: f'{m.group(1)}"{version}"', text, count=1)


def transform_manifest(text: str, *, source: str, target: str, version: str | None) -> str:
    out = rename_scope(text, source, target)
    if version:
        out = override_version(out, version)
    return out


def rewrite_manifest(
    path: Path,
    *,
    source: str,
    target: str,
    version: str | None,
) -> Result[Manifest, ManifestError]:
    """Rewrite ``path`` in place and return the manifest as it now reads."""
    try:
        original = path.read_bytes().decode("utf-8")
    except OSError as e:
        return Err(ManifestError(path, f"cannot read: {e}"))
    except UnicodeDecodeError as e:
        return Err(ManifestError(path, f"not UTF-8: {e}"))

    updated = transform_manifest(original, source=source, target=target, version=version)
    if updated != original:
        try:
            path.write_bytes(updated.encode("utf-8"))
        except OSError as e:
            return Err(ManifestError(path, f"cannot write: {e}"))

    return parse_manifest(updated, path)
