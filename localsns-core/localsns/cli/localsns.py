import json
import logging
from typing import Optional

import click
from rich.table import Table

from localsns import __version__, config, constants
from localsns.utils.net import is_port_open

from .console import BANNER, console


class CLIError(click.ClickException):
    """A ClickException printed in red to stderr"""

    def format_message(self) -> str:
        return click.style(f"Error: {self.message}", fg="red")

    def show(self, file=None) -> None:
        click.echo(self.format_message(), file=file, err=True)


@click.group(name="localsns", help="The localsns Command Line Interface (CLI)")
@click.version_option(version=__version__, message="%(version)s")
@click.option("--debug", is_flag=True, help="Enable CLI debugging mode")
def localsns(debug):
    if debug:
        from localsns.logging.setup import setup_logging_for_cli

        config.DEBUG = True
        setup_logging_for_cli(logging.DEBUG)


@localsns.group(name="config", help="Inspect your localsns configuration")
def localsns_config():
    pass


@localsns.command(name="start", help="Start the localsns server in the foreground")
@click.option("--host", type=str, help="Host to bind to (defaults to GATEWAY_LISTEN)")
@click.option("--port", type=int, help="Port to bind to (defaults to GATEWAY_LISTEN)")
@click.option("--region", type=str, help="Region used in topic ARNs (defaults to SNS_REGION)")
@click.option(
    "--account-id", type=str, help="Account ID used in topic ARNs (defaults to SNS_ACCOUNT_ID)"
)
@click.option("--no-banner", is_flag=True, help="Disable localsns banner", default=False)
def cmd_start(
    host: Optional[str],
    port: Optional[int],
    region: Optional[str],
    account_id: Optional[str],
    no_banner: bool,
):
    from localsns.aws.app import SnsGateway
    from localsns.aws.serving.werkzeug import GatewayServer
    from localsns.logging.setup import setup_logging_from_config
    from localsns.services.sns.provider import SnsProvider

    setup_logging_from_config()

    host = host or config.GATEWAY_LISTEN.host
    port = port or config.GATEWAY_LISTEN.port

    if is_port_open(port, host=constants.LOCALHOST if host == constants.BIND_HOST else host):
        raise CLIError(f"could not bind to {host}:{port}, the port is already in use")

    if not no_banner:
        console.print(BANNER, style="bold")

    gateway = SnsGateway(SnsProvider(region=region, account_id=account_id))
    server = GatewayServer(gateway, port=port, host=host)
    server.start()
    try:
        if not server.wait_is_up(timeout=10):
            raise CLIError(f"gave up waiting for server on {server.url}")
        console.log(f"localsns ready at {config.external_service_url(port=port)}")
        console.rule("localsns Log (press [bold][yellow]CTRL-C[/yellow][/bold] to quit)")
        server.join()
    except KeyboardInterrupt:
        console.log("shutting down localsns")
    finally:
        server.shutdown()
        gateway.shutdown()


@localsns_config.command(name="show", help="Print the current localsns config values")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "plain", "dict", "json"]),
    default="table",
    help="The output format",
)
def cmd_config_show(output_format: str):
    values = {
        key: str(value) if isinstance(value, config.HostAndPort) else value
        for key, value in config.get_config_values().items()
    }

    match output_format:
        case "json":
            console.print_json(json.dumps(values))
        case "dict":
            console.print(values)
        case "plain":
            for key, value in values.items():
                console.print(f"{key}={value}", highlight=False)
        case _:
            table = Table("Key", "Value")
            for key, value in values.items():
                table.add_row(key, str(value))
            console.print(table)
