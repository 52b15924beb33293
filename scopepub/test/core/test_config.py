"""Tests for scopepub.core.config module."""

from __future__ import annotations

from pathlib import Path

import pytest

from scopepub.core.config import (
    Config,
    ConfigError,
    PublishSettings,
    RunConfig,
    ScopeConfig,
    load_config,
    load_config_or_default,
    validate_scope,
)
from scopepub.core.result import Err, Ok


class TestDefaults:
    def test_scope_defaults(self) -> None:
        scope = ScopeConfig()
        assert scope.source == "@usewaypoint"
        assert scope.target == "@sownt"

    def test_publish_defaults(self) -> None:
        settings = PublishSettings()
        assert settings.packages_dir == "packages"
        assert settings.access == "public"
        assert settings.manifest == "package.json"

    def test_run_config_defaults(self) -> None:
        run = RunConfig()
        assert run.version is None
        assert run.dry_run is False
        assert run.allow_dirty is False

    def test_run_config_frozen(self) -> None:
        with pytest.raises(AttributeError):
            RunConfig().dry_run = True  # type: ignore[misc]


class TestFromDict:
    def test_empty(self) -> None:
        assert Config.from_dict({}) == Config()

    def test_full(self) -> None:
        config = Config.from_dict(
            {
                "scope": {"from": "@acme-internal", "to": "@acme"},
                "publish": {"packages_dir": "libs", "access": "restricted", "manifest": "pkg.json"},
            }
        )
        assert config.scope == ScopeConfig(source="@acme-internal", target="@acme")
        assert config.publish == PublishSettings(
            packages_dir="libs", access="restricted", manifest="pkg.json"
        )

    def test_blank_values_fall_back(self) -> None:
        config = Config.from_dict({"scope": {"to": "  "}})
        assert config.scope.target == "@sownt"

    def test_invalid_scope(self) -> None:
        with pytest.raises(ValueError, match="invalid npm scope"):
            Config.from_dict({"scope": {"to": "sownt"}})

    def test_invalid_access(self) -> None:
        with pytest.raises(ValueError, match="publish.access"):
            Config.from_dict({"publish": {"access": "private"}})


class TestScopes:
    @pytest.mark.parametrize("scope", ["@sownt", "@usewaypoint", "@a.b-c_d"])
    def test_valid(self, scope: str) -> None:
        assert validate_scope(scope) == scope

    @pytest.mark.parametrize("scope", ["sownt", "@", "@Sownt", "@sownt/", "@a b"])
    def test_invalid(self, scope: str) -> None:
        with pytest.raises(ValueError):
            validate_scope(scope)

    def test_with_scopes_overrides(self) -> None:
        config = Config().with_scopes(None, "@acme")
        assert config.scope == ScopeConfig(source="@usewaypoint", target="@acme")

    def test_with_scopes_validates(self) -> None:
        with pytest.raises(ValueError):
            Config().with_scopes("nope", None)


class TestLoadConfig:
    def test_load_valid(self, tmp_path: Path) -> None:
        path = tmp_path / "scopepub.toml"
        path.write_text('[scope]\nfrom = "@old"\nto = "@new"\n', encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Ok)
        assert result.value.scope == ScopeConfig(source="@old", target="@new")

    def test_load_missing(self, tmp_path: Path) -> None:
        result = load_config(tmp_path / "scopepub.toml")
        assert isinstance(result, Err)
        assert isinstance(result.error, ConfigError)
        assert "not found" in result.error.message

    def test_load_bad_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "scopepub.toml"
        path.write_text("[scope\n", encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message

    def test_load_bad_value(self, tmp_path: Path) -> None:
        path = tmp_path / "scopepub.toml"
        path.write_text('[publish]\naccess = "everyone"\n', encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Err)
        assert result.error.hint == "Fix or remove scopepub.toml"

    def test_or_default_when_absent(self, tmp_path: Path) -> None:
        assert load_config_or_default(tmp_path / "scopepub.toml") == Ok(Config())

    def test_or_default_still_reports_broken_file(self, tmp_path: Path) -> None:
        path = tmp_path / "scopepub.toml"
        path.write_text("not toml at all [", encoding="utf-8")
        assert isinstance(load_config_or_default(path), Err)

    def test_config_path_is_a_directory(self, tmp_path: Path) -> None:
        path = tmp_path / "scopepub.toml"
        path.mkdir()

        result = load_config_or_default(path)

        assert isinstance(result, Err)
        assert result.error.path == path
        assert "Cannot read config" in result.error.message
