"""
Tests for the click entrypoint in xenmobile_backup/cli.py.

authenticate and collect are patched out so no network calls are made.
"""

from datetime import datetime, timezone

import pytest
from click.testing import CliRunner

from xenmobile_backup import cli
from xenmobile_backup.builder import build
from xenmobile_backup.errors import AuthenticationError, FetchError
from xenmobile_backup.models import ApplicationSummary, FetchFailure, Session


def _document(failures=()):
    return build(
        "mdm.example.com", [], [],
        [ApplicationSummary(id=1, name="A", app_type="Web Link")],
        datetime(2024, 6, 15, tzinfo=timezone.utc),
        failures=failures,
    )


@pytest.fixture
def patched(monkeypatch):
    calls = {}

    def fake_authenticate(host, port, username, password, *, timeout):
        calls["auth"] = (host, port, username, password, timeout)
        return Session(server_host=host, port=port, auth_token="tok")

    def fake_collect(client, *, quiet=False):
        calls["client"] = client
        return calls.get("document") or _document()

    monkeypatch.setattr(cli, "authenticate", fake_authenticate)
    monkeypatch.setattr(cli, "collect", fake_collect)
    return calls


def _invoke(tmp_path, *args, env=None):
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(
            cli.main,
            ["--host", "mdm.example.com", "--username", "admin", "--quiet", *args],
            env={"XMS_PASSWORD": "pw", **(env or {})},
        )
    return result


class TestMain:
    def test_success_exit_zero(self, tmp_path, patched):
        out = tmp_path / "out"
        result = _invoke(tmp_path, "-o", str(out))
        assert result.exit_code == 0, result.output
        assert list(out.glob("*.html"))
        assert not list(out.glob("*.json"))

    def test_defaults_applied(self, tmp_path, patched):
        _invoke(tmp_path, "-o", str(tmp_path / "out"))
        assert patched["auth"] == ("mdm.example.com", 4443, "admin", "pw", 30.0)

    def test_all_formats(self, tmp_path, patched):
        out = tmp_path / "out"
        _invoke(tmp_path, "-o", str(out), "--output-format", "all")
        assert list(out.glob("*.html")) and list(out.glob("*.json"))

    def test_auth_failure_exits_one(self, tmp_path, monkeypatch):
        def refuse(*args, **kwargs):
            raise AuthenticationError("Login rejected")

        monkeypatch.setattr(cli, "authenticate", refuse)
        result = _invoke(tmp_path, "-o", str(tmp_path / "out"))
        assert result.exit_code == 1
        assert not (tmp_path / "out").exists()

    def test_fatal_fetch_exits_one(self, tmp_path, patched, monkeypatch):
        def fail(client, *, quiet=False):
            raise FetchError("server properties", "HTTP 500")

        monkeypatch.setattr(cli, "collect", fail)
        result = _invoke(tmp_path, "-o", str(tmp_path / "out"))
        assert result.exit_code == 1
        assert not (tmp_path / "out").exists()

    def test_skipped_details_exit_two(self, tmp_path, patched):
        patched["document"] = _document([FetchFailure(resource="application detail (mobile/1)", message="x")])
        result = _invoke(tmp_path, "-o", str(tmp_path / "out"))
        assert result.exit_code == 2
        assert list((tmp_path / "out").glob("*.html"))

    def test_config_file_supplies_port_and_timeout(self, tmp_path, patched):
        cfg = tmp_path / "cfg.json"
        cfg.write_text('{"port": 443, "timeout": 10}', encoding="utf-8")
        _invoke(tmp_path, "-o", str(tmp_path / "out"), "--config", str(cfg))
        assert patched["auth"][1] == 443
        assert patched["auth"][4] == 10.0

    def test_command_line_overrides_config(self, tmp_path, patched):
        cfg = tmp_path / "cfg.json"
        cfg.write_text('{"host": "other.example.com", "port": 443}', encoding="utf-8")
        _invoke(tmp_path, "-o", str(tmp_path / "out"), "--config", str(cfg), "--port", "8443")
        assert patched["auth"][0] == "mdm.example.com"
        assert patched["auth"][1] == 8443

    def test_password_prompted_when_missing(self, tmp_path, patched):
        runner = CliRunner()
        result = runner.invoke(
            cli.main,
            ["--host", "mdm.example.com", "--username", "admin", "--quiet", "-o", str(tmp_path / "out")],
            input="typed\n",
            env={"XMS_PASSWORD": None},
        )
        assert result.exit_code == 0, result.output
        assert patched["auth"][3] == "typed"

    def test_client_built_from_session(self, tmp_path, patched):
        _invoke(tmp_path, "-o", str(tmp_path / "out"), "--timeout", "12")
        client = patched["client"]
        assert client.session.auth_token == "tok"
        assert client.timeout == 12.0


class TestIsIpAddress:
    @pytest.mark.parametrize("host", ["10.0.0.5", "::1", "[fe80::1]"])
    def test_ip_literals(self, host):
        assert cli._is_ip_address(host)

    def test_host_name(self):
        assert not cli._is_ip_address("mdm.example.com")


class TestConfigErrors:
    def test_non_numeric_port_exits_one(self, tmp_path, patched):
        cfg = tmp_path / "cfg.json"
        cfg.write_text('{"port": "abc"}', encoding="utf-8")
        result = _invoke(tmp_path, "-o", str(tmp_path / "out"), "--config", str(cfg))
        assert result.exit_code == 1
        assert not isinstance(result.exception, ValueError)
        assert "auth" not in patched
