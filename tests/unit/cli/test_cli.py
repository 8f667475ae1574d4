import json
import socket
from contextlib import closing

import pytest
from click.testing import CliRunner

from localsns import config, constants
from localsns.aws.serving.werkzeug import GatewayServer
from localsns.cli.localsns import CLIError
from localsns.cli.localsns import localsns as cli
from localsns.utils.net import get_free_tcp_port


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def no_logging_setup(monkeypatch):
    monkeypatch.setattr("localsns.logging.setup.setup_logging_from_config", lambda: None)


def test_help(runner):
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "Usage: localsns" in result.output


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip() == constants.VERSION


def test_config_show_plain(runner):
    result = runner.invoke(cli, ["config", "show", "--format", "plain"])
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert f"SNS_REGION={config.SNS_REGION}" in lines
    assert f"SNS_ACCOUNT_ID={config.SNS_ACCOUNT_ID}" in lines
    assert f"GATEWAY_LISTEN={config.GATEWAY_LISTEN}" in lines


def test_config_show_table(runner):
    result = runner.invoke(cli, ["config", "show"])
    assert result.exit_code == 0
    assert "SNS_PUBLISH_WORKERS" in result.output


def test_config_show_json(runner, monkeypatch):
    monkeypatch.setattr(config, "CONFIG_ENV_VARS", ["SNS_REGION"])
    result = runner.invoke(cli, ["config", "show", "--format", "json"])
    assert result.exit_code == 0
    assert json.loads(result.output) == {"SNS_REGION": config.SNS_REGION}


def test_start_and_interrupt(runner, monkeypatch, no_logging_setup):
    port = get_free_tcp_port()
    servers = []

    def _join(self, timeout=None):
        servers.append(self)
        assert self.is_up()
        raise KeyboardInterrupt

    monkeypatch.setattr(GatewayServer, "join", _join)

    result = runner.invoke(
        cli, ["start", "--host", "localhost", "--port", str(port), "--no-banner"]
    )

    assert result.exit_code == 0, result.output
    assert "localsns ready at" in result.output
    assert str(port) in result.output
    assert len(servers) == 1
    assert not servers[0].is_running()


def test_start_with_port_in_use(runner, no_logging_setup):
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as sock:
        sock.bind(("localhost", 0))
        sock.listen(1)
        port = sock.getsockname()[1]

        result = runner.invoke(
            cli, ["start", "--host", "localhost", "--port", str(port), "--no-banner"]
        )

    assert result.exit_code == 1
    assert "already in use" in result.output


def test_cli_error_message():
    assert "Error: something went wrong" in CLIError("something went wrong").format_message()
