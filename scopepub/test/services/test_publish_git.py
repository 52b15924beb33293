"""Publish runs against a real git repository (registry still faked)."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from scopepub.core.config import Config, RunConfig
from scopepub.core.result import Err, Ok
from scopepub.core.workspace import Workspace
from scopepub.git.repository import Repository
from scopepub.output.console import MockConsole
from scopepub.services.publish import Published, PublishService
from scopepub.services.publish_errors import UntrackedManifests

from ._fakes import FakeRegistry, write_package

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def _git(root: Path, *args: str) -> str:
    proc = subprocess.run(
        [
            "git",
            "-c",
            "user.name=scopepub",
            "-c",
            "user.email=scopepub@example.invalid",
            "-c",
            "commit.gpgsign=false",
            *args,
        ],
        cwd=root,
        capture_output=True,
        text=True,
        check=True,
    )
    return proc.stdout


def _manifests(root: Path) -> dict[Path, bytes]:
    return {p: p.read_bytes() for p in (root / "packages").rglob("package.json")}


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    (tmp_path / "package.json").write_text('{"name": "root", "private": true}\n')
    packages = tmp_path / "packages"
    write_package(packages, "a", name="@usewaypoint/a", version="1.2.0")
    write_package(packages, "b", name="@usewaypoint/b", version="0.0.1", private=True)
    write_package(
        packages,
        "c",
        name="@usewaypoint/c",
        version="2.0.0",
        dependencies={"@usewaypoint/a": "^1.2.0"},
    )
    _git(tmp_path, "init", "-q")
    _git(tmp_path, "add", "-A")
    _git(tmp_path, "commit", "-q", "-m", "initial")
    return tmp_path


def _service(root: Path, registry: FakeRegistry) -> PublishService:
    return PublishService(
        workspace=Workspace(root=root),
        config=Config(),
        console=MockConsole(),
        registry=registry,
        vcs=Repository(root),
    )


def test_committed_manifests_are_restored_by_git(repo: Path) -> None:
    before = _manifests(repo)
    registry = FakeRegistry()

    result = _service(repo, registry).run(RunConfig(version="3.0.0"))

    assert isinstance(result, Ok)
    assert result.value.published == (
        Published("@sownt/a", "3.0.0"),
        Published("@sownt/c", "3.0.0"),
    )
    assert '"@sownt/a": "^1.2.0"' in registry.published[1].manifest_text
    assert _manifests(repo) == before
    assert _git(repo, "status", "--porcelain") == ""


def test_untracked_package_is_refused_and_left_alone(repo: Path) -> None:
    write_package(repo / "packages", "new", name="@usewaypoint/new", version="0.1.0")
    before = _manifests(repo)
    registry = FakeRegistry()

    result = _service(repo, registry).run(RunConfig(version="3.0.0"))

    assert result == Err(UntrackedManifests(paths=("packages/new/package.json",)))
    assert registry.published == []
    assert _manifests(repo) == before


def test_staged_package_is_restored_from_the_index(repo: Path) -> None:
    write_package(repo / "packages", "new", name="@usewaypoint/new", version="0.1.0")
    _git(repo, "add", "packages/new")
    before = _manifests(repo)
    registry = FakeRegistry()

    result = _service(repo, registry).run(RunConfig(version="3.0.0"))

    assert isinstance(result, Ok)
    assert Published("@sownt/new", "3.0.0") in result.value.published
    assert _manifests(repo) == before


def test_tracked_files_lists_index_entries(repo: Path) -> None:
    (repo / "packages" / "a" / "dist").mkdir()
    (repo / "packages" / "a" / "dist" / "index.js").write_text("")

    result = Repository(repo).tracked_files("packages")

    assert isinstance(result, Ok)
    assert "packages/a/package.json" in result.value
    assert "packages/a/dist/index.js" not in result.value
