"""Tests for CLI settings resolution."""

import argparse
import logging

import pytest

from cli_config import CliSettings, load_config_file, resolve_settings
from constants import Constants
from modversion import StringVersion, parse_version


def make_args(**overrides):
    values = {"CONFIG": None, "LOG_LEVEL": None, "REPLACE_VERSION": None}
    values.update(overrides)
    return argparse.Namespace(**values)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from the caller's environment and working directory."""
    for name in (Constants.ENV_LOG_LEVEL, Constants.ENV_REPLACE_VERSION, Constants.ENV_CONFIG):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestLoadConfigFile:
    """Tests for load_config_file."""

    def test_no_path(self):
        assert load_config_file(None) == {}

    def test_missing_file(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            assert load_config_file(str(tmp_path / "missing.yml")) == {}
        assert "Config file not found" in caplog.text

    def test_malformed_yaml(self, tmp_path, caplog):
        path = tmp_path / "bad.yml"
        path.write_text("log_level: [unclosed\n", encoding="utf-8")
        with caplog.at_level(logging.WARNING):
            assert load_config_file(str(path)) == {}
        assert "Failed to load config file" in caplog.text

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        assert load_config_file(str(path)) == {}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("", encoding="utf-8")
        assert load_config_file(str(path)) == {}

    def test_valid(self, tmp_path):
        path = tmp_path / "modversion.yml"
        path.write_text("log_level: debug\ncache_ttl: 60\n", encoding="utf-8")
        assert load_config_file(str(path)) == {"log_level": "debug", "cache_ttl": 60}


class TestResolveSettings:
    """Tests for resolve_settings precedence."""

    def write_config(self, tmp_path, text, name="custom.yml"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)

    def test_defaults(self):
        settings = resolve_settings(make_args(), environ={})
        assert settings == CliSettings(
            log_level=Constants.DEFAULT_LOG_LEVEL,
            cache_ttl=Constants.PREDICATE_CACHE_TTL_SEC,
            cache_max_entries=Constants.PREDICATE_CACHE_MAX_ENTRIES,
            overrides=settings.overrides,
            config_path=None,
        )
        assert len(settings.overrides) == 0

    def test_config_file(self, tmp_path):
        path = self.write_config(tmp_path, (
            "log_level: warning\n"
            "cache_ttl: 60\n"
            "cache_max_entries: 5\n"
            "overrides:\n"
            "  fabric-api: 0.90.0\n"
            "  minecraft: b1.7.3\n"
        ))
        settings = resolve_settings(make_args(CONFIG=path), environ={})
        assert settings.config_path == path
        assert settings.log_level == "WARNING"
        assert settings.cache_ttl == 60
        assert settings.cache_max_entries == 5
        assert settings.overrides.apply("fabric-api", parse_version("1")) == parse_version("0.90.0")
        assert settings.overrides.apply("minecraft", parse_version("1")) == StringVersion("b1.7.3")

    def test_default_config_in_working_directory(self, tmp_path):
        self.write_config(tmp_path, "log_level: error\n", name=Constants.CONFIG_FILE)
        settings = resolve_settings(make_args(), environ={})
        assert settings.config_path == Constants.CONFIG_FILE
        assert settings.log_level == "ERROR"

    def test_config_from_environment(self, tmp_path):
        path = self.write_config(tmp_path, "log_level: error\n")
        settings = resolve_settings(make_args(), environ={Constants.ENV_CONFIG: path})
        assert settings.log_level == "ERROR"

    def test_environment_beats_config(self, tmp_path):
        path = self.write_config(tmp_path, "log_level: error\noverrides:\n  a: '1.0'\n  b: '2.0'\n")
        environ = {Constants.ENV_LOG_LEVEL: "debug", Constants.ENV_REPLACE_VERSION: "b:3.0"}
        settings = resolve_settings(make_args(CONFIG=path), environ=environ)
        assert settings.log_level == "DEBUG"
        assert settings.overrides.apply("a", parse_version("0")) == parse_version("1.0")
        assert settings.overrides.apply("b", parse_version("0")) == parse_version("3.0")

    def test_cli_beats_environment(self):
        environ = {Constants.ENV_LOG_LEVEL: "debug", Constants.ENV_REPLACE_VERSION: "b:3.0"}
        settings = resolve_settings(make_args(LOG_LEVEL="ERROR", REPLACE_VERSION="b:4.0"), environ=environ)
        assert settings.log_level == "ERROR"
        assert settings.overrides.apply("b", parse_version("0")) == parse_version("4.0")

    def test_unknown_log_level(self, caplog):
        with caplog.at_level(logging.WARNING):
            settings = resolve_settings(make_args(), environ={Constants.ENV_LOG_LEVEL: "chatty"})
        assert settings.log_level == Constants.DEFAULT_LOG_LEVEL
        assert "Unknown log level" in caplog.text

    def test_invalid_cache_values(self, tmp_path):
        path = self.write_config(tmp_path, "cache_ttl: soon\ncache_max_entries: [1]\n")
        settings = resolve_settings(make_args(CONFIG=path), environ={})
        assert settings.cache_ttl == Constants.PREDICATE_CACHE_TTL_SEC
        assert settings.cache_max_entries == Constants.PREDICATE_CACHE_MAX_ENTRIES

    def test_overrides_section_must_be_mapping(self, tmp_path):
        path = self.write_config(tmp_path, "overrides: fabric-api:0.90.0\n")
        settings = resolve_settings(make_args(CONFIG=path), environ={})
        assert len(settings.overrides) == 0

    def test_unquoted_override_version(self, tmp_path):
        """Test that an unquoted numeric override is rejected instead of becoming 1.2."""
        path = self.write_config(tmp_path, "overrides:\n  minecraft: 1.20\n")
        with pytest.raises(ValueError, match="quote the version"):
            resolve_settings(make_args(CONFIG=path), environ={})

    def test_malformed_replacement(self):
        with pytest.raises(ValueError):
            resolve_settings(make_args(), environ={Constants.ENV_REPLACE_VERSION: "fabric-api"})

    def test_missing_config_keeps_defaults(self, tmp_path):
        settings = resolve_settings(make_args(CONFIG=str(tmp_path / "nope.yml")), environ={})
        assert settings.log_level == Constants.DEFAULT_LOG_LEVEL
