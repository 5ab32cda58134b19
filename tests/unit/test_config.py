"""Unit tests for configuration loading and the command line"""
from unittest.mock import patch

import pytest

from contmon.core.config import ServerConfig, apply_overrides, load_config_from
from contmon.main import build_parser, main
from contmon.web import RegistrationError


class TestLoadConfig:

    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_config_from(str(tmp_path / "absent.yaml"))

        assert config == ServerConfig()
        assert config.port == 8080
        assert config.http_auth_realm == "localhost"
        assert config.prometheus_endpoint == "/metrics"

    def test_yaml_values(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("port: 9090\nhttp_digest_file: /etc/contmon/htdigest\nhttp_digest_realm: ops\n")

        config = load_config_from(str(path))

        assert config.port == 9090
        assert config.http_digest_file == "/etc/contmon/htdigest"
        assert config.http_digest_realm == "ops"
        assert config.http_auth_file == ""

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert load_config_from(str(path)) == ServerConfig()


class TestOverrides:

    def test_only_given_flags_override(self):
        base = ServerConfig(port=9090, http_auth_file="/a")

        config = apply_overrides(base, {"port": None, "http_auth_file": "/b", "unknown": 1})

        assert config.port == 9090
        assert config.http_auth_file == "/b"
        assert base.http_auth_file == "/a"

    def test_parser_flags(self):
        args = build_parser().parse_args([
            "--http-auth-file", "/etc/htpasswd", "--http-auth-realm", "ops",
            "--prometheus-endpoint", "/prom", "--port", "9000",
        ])

        assert args.http_auth_file == "/etc/htpasswd"
        assert args.http_auth_realm == "ops"
        assert args.prometheus_endpoint == "/prom"
        assert args.port == 9000
        assert args.http_digest_file is None


class TestMain:

    @patch("contmon.main.uvicorn.run")
    @patch("contmon.main.create_app")
    def test_runs_with_merged_config(self, mock_create_app, mock_run, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("port: 9090\n")

        main(["-c", str(path), "--http-digest-file", "/etc/htdigest"])

        config = mock_create_app.call_args[0][0]
        assert config.port == 9090
        assert config.http_digest_file == "/etc/htdigest"
        mock_run.assert_called_once()
        assert mock_run.call_args.kwargs["port"] == 9090

    @patch("contmon.main.uvicorn.run")
    @patch("contmon.main.create_app", side_effect=RegistrationError("API", ValueError("bad")))
    def test_registration_error_exits(self, mock_create_app, mock_run, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main(["-c", str(tmp_path / "absent.yaml")])

        assert exc_info.value.code == 1
        mock_run.assert_not_called()


class TestCreateApp:

    def test_app_uses_config_auth_and_metrics_path(self, htpasswd_file, exporter):
        from fastapi.testclient import TestClient

        from contmon.core.server import create_app
        from ..conftest import FakeManager

        config = ServerConfig(http_auth_file=htpasswd_file, prometheus_endpoint="/prom")
        client = TestClient(create_app(config, manager=FakeManager(), exporter=exporter))

        assert client.get("/static/containers.css").status_code == 401
        assert client.get("/prom").status_code == 200
        assert client.get("/healthz").text == "ok"
