"""Tests de utilidades de configuración."""

import os
from unittest.mock import patch

import pytest

from statuspage_pusher.common import config


class TestParseDuration:

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("30s", 30.0),
            ("1m30s", 90.0),
            ("500ms", 0.5),
            ("1h", 3600.0),
            ("2h45m", 9900.0),
            ("1.5s", 1.5),
            ("250us", 0.00025),
            ("45", 45.0),
            ("0.25", 0.25),
            (10, 10.0),
        ],
    )
    def test_valid(self, value, expected):
        assert config.parse_duration(value) == pytest.approx(expected)

    @pytest.mark.parametrize(
        "value",
        ["", "abc", "10x", "1m x", "-5s", "-3", "nan", "inf", "-inf", "Infinity", "1e400", float("nan"), float("inf")],
    )
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            config.parse_duration(value)


class TestParseListenAddress:

    @pytest.mark.parametrize(
        "addr,expected",
        [
            (":9090", ("0.0.0.0", 9090)),
            ("127.0.0.1:9100", ("127.0.0.1", 9100)),
            ("[::1]:8080", ("::1", 8080)),
            ("localhost:0", ("localhost", 0)),
        ],
    )
    def test_valid(self, addr, expected):
        assert config.parse_listen_address(addr) == expected


class TestEnvironment:

    def test_env_name(self):
        assert config.env_name("--sp-token") == "PROM_SP_PUSHER_SP_TOKEN"
        assert config.env_name("internal-metrics-addr") == "PROM_SP_PUSHER_INTERNAL_METRICS_ADDR"

    def test_env_default(self, monkeypatch):
        monkeypatch.setenv("PROM_SP_PUSHER_PROM_URL", "http://prom:9090")

        assert config.env_default("prom-url", "x") == "http://prom:9090"
        assert config.env_default("sp-domain", "fallback") == "fallback"

    @pytest.mark.parametrize("raw,expected", [("1", True), ("true", True), ("on", True), ("0", False), ("no", False)])
    def test_env_flag(self, monkeypatch, raw, expected):
        monkeypatch.setenv("PROM_SP_PUSHER_DEBUG", raw)

        assert config.env_flag("debug") is expected

    def test_env_file_does_not_override_environment(self, tmp_path):
        env_file = tmp_path / "pusher.env"
        env_file.write_text("PROM_SP_PUSHER_SP_PAGE_ID=from-file\nPROM_SP_PUSHER_SP_TOKEN=file-token\n")

        # patch.dict restaura os.environ y descarta lo que añadió load_dotenv
        with patch.dict(
            os.environ,
            {"PROM_SP_PUSHER_ENV_FILE": str(env_file), "PROM_SP_PUSHER_SP_TOKEN": "real-token"},
        ):
            os.environ.pop("PROM_SP_PUSHER_SP_PAGE_ID", None)

            assert config.load_env_file() == env_file
            assert config.env_default("sp-page-id") == "from-file"
            assert config.env_default("sp-token") == "real-token"

    def test_missing_env_file(self, monkeypatch, tmp_path):
        monkeypatch.setenv("PROM_SP_PUSHER_ENV_FILE", str(tmp_path / "missing.env"))

        assert config.load_env_file() is None

    def test_expand_path(self, monkeypatch):
        monkeypatch.setenv("QUERY_DIR", "/etc/pusher")

        assert str(config.expand_path("$QUERY_DIR/queries.yaml")) == "/etc/pusher/queries.yaml"
