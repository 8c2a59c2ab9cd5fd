"""Tests for acmestore.config.loader — validation, env vars and file loading."""

from __future__ import annotations

import logging

import pytest
import yaml

from acmestore.config import ConfigValidationError, load_config, parse_config
from acmestore.config.loader import _resolve_env_vars

# ---------------------------------------------------------------------------
# parse_config
# ---------------------------------------------------------------------------


class TestParseConfig:
    def test_none_gives_defaults(self):
        assert parse_config(None).cert_expiry == 8_640_000

    def test_input_not_mutated(self):
        data = {"backend": {"retry": {"attempts": 1}}}
        parse_config(data)
        assert data == {"backend": {"retry": {"attempts": 1}}}

    def test_unknown_top_level_key_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="acmestore.config.loader"):
            parse_config({"redisOptions": {}})
        assert "redisOptions" in caplog.text

    @pytest.mark.parametrize(
        ("data", "fragment"),
        [
            ({"debug": "yes"}, "debug must be a boolean"),
            ({"cert_expiry": 0}, "cert_expiry"),
            ({"certExpiry": "soon"}, "cert_expiry"),
            ({"backend": ["redis"]}, "backend must be a mapping"),
            ({"backend": {"port": 70000}}, "backend.port"),
            ({"backend": {"db": -1}}, "backend.db"),
            ({"backend": {"url": "http://cache"}}, "backend.url"),
            ({"backend": {"key_prefix": 7}}, "key_prefix"),
            ({"backend": {"socket_timeout": 0}}, "backend.socket_timeout"),
            ({"backend": {"retry": {"attempts": -1}}}, "retry.attempts"),
            ({"backend": {"retry": {"backoff_base": 1, "backoff_cap": 0.5}}}, "backoff_cap"),
            ({"logging": {"level": "LOUD"}}, "logging.level"),
            ({"logging": {"format": "xml"}}, "logging.format"),
            ({"backend": {"retry": 3}}, "backend.retry must be a mapping"),
            ({"backendOptions": {"retry": [1]}}, "backend.retry must be a mapping"),
            ({"logging": "debug"}, "logging must be a mapping"),
            ({"logging": {"format": ["json"]}}, "logging.format"),
        ],
    )
    def test_rejects(self, data, fragment):
        with pytest.raises(ConfigValidationError) as exc_info:
            parse_config(data)
        assert any(fragment in e for e in exc_info.value.errors)

    def test_collects_every_error(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            parse_config({"debug": 1, "backend": {"port": 0, "db": "x"}})

        assert len(exc_info.value.errors) == 3
        assert "Configuration validation failed" in str(exc_info.value)

    def test_accepts_unix_socket_url(self):
        s = parse_config({"backend": {"url": "unix:///run/redis.sock"}})
        assert s.backend.url == "unix:///run/redis.sock"


# ---------------------------------------------------------------------------
# Environment variables
# ---------------------------------------------------------------------------


class TestEnvVars:
    def test_set_variable_used(self, monkeypatch):
        monkeypatch.setenv("ACMESTORE_TEST_URL", "redis://env-host:6379/1")
        data = {"backend": {"url": "${ACMESTORE_TEST_URL}"}}

        _resolve_env_vars(data)

        assert data["backend"]["url"] == "redis://env-host:6379/1"

    def test_default_when_unset(self, monkeypatch):
        monkeypatch.delenv("ACMESTORE_TEST_PREFIX", raising=False)
        data = {"items": ["${ACMESTORE_TEST_PREFIX:-le:}"]}

        _resolve_env_vars(data)

        assert data["items"] == ["le:"]

    def test_unset_without_default(self, monkeypatch):
        monkeypatch.delenv("ACMESTORE_TEST_MISSING", raising=False)

        with pytest.raises(ConfigValidationError) as exc_info:
            _resolve_env_vars({"backend": {"password": "${ACMESTORE_TEST_MISSING}"}})
        assert "backend.password" in exc_info.value.errors[0]


# ---------------------------------------------------------------------------
# load_config
# ---------------------------------------------------------------------------


class TestLoadConfig:
    def test_yaml_file(self, tmp_config_file):
        s = load_config(tmp_config_file)

        assert s.cert_expiry == 86400
        assert s.backend.url == "redis://localhost:6379/3"
        assert s.backend.key_prefix == "test:"

    def test_env_reference_in_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ACMESTORE_TEST_PASSWORD", "s3cret")
        cfg = tmp_path / "config.yaml"
        cfg.write_text(
            yaml.safe_dump({"backend": {"password": "${ACMESTORE_TEST_PASSWORD}"}}),
            encoding="utf-8",
        )

        assert load_config(cfg).backend.password == "s3cret"

    def test_empty_file(self, tmp_path):
        cfg = tmp_path / "empty.yaml"
        cfg.write_text("", encoding="utf-8")

        assert load_config(cfg).backend.host == "localhost"

    def test_non_mapping_top_level(self, tmp_path):
        cfg = tmp_path / "list.yaml"
        cfg.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigValidationError, match="must be a mapping"):
            load_config(cfg)

    def test_json_is_yaml(self, tmp_path):
        cfg = tmp_path / "config.json"
        cfg.write_text('{"cert_expiry": 600}', encoding="utf-8")

        assert load_config(cfg).cert_expiry == 600
