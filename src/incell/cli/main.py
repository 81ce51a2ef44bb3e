"""incell CLI - serial parameter setting and spreadsheet tools."""

from __future__ import annotations

import asyncio
import json
from dataclasses import replace

import click

from incell.settings import BAUD_RATES, PARITIES, AppSettings
from incell.utils.logging import setup_logging


def _echo_outcome(outcome) -> None:
    click.echo(json.dumps(outcome.to_wire(), indent=2, default=str))


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--json-output", is_flag=True, help="Log in JSON format")
@click.pass_context
def cli(ctx: click.Context, debug: bool, json_output: bool) -> None:
    """In Cell Parameter Setting - serial link and spreadsheet tool."""
    settings = AppSettings.from_env()
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    setup_logging(
        level="DEBUG" if debug else settings.log_level,
        json_output=json_output or settings.log_json,
    )


@cli.command()
def ports() -> None:
    """List available serial ports."""
    from incell.bridge import Bridge

    outcome = asyncio.run(Bridge().list_ports())
    if not outcome.success:
        raise click.ClickException(outcome.error)
    if not outcome.ports:
        click.echo("No serial ports found.")
        return
    for port in outcome.ports:
        click.echo(f"{port.device:<20} {port.description}")


@cli.command()
@click.argument("port")
@click.argument("payload")
@click.option("--baud", type=int, default=None, help="Baud rate (default from INCELL_BAUD_RATE)")
@click.option("--data-bits", type=click.Choice(["5", "6", "7", "8"]), default="8")
@click.option("--parity", type=click.Choice(list(PARITIES)), default="none")
@click.option("--stop-bits", type=click.Choice(["1", "1.5", "2"]), default="1")
@click.option("--eol", type=click.Choice(["none", "lf", "crlf"]), default="crlf",
              help="Line ending appended to the payload")
@click.pass_context
def send(
    ctx: click.Context,
    port: str,
    payload: str,
    baud: int | None,
    data_bits: str,
    parity: str,
    stop_bits: str,
    eol: str,
) -> None:
    """Open PORT, write PAYLOAD, and close it again."""
    from incell.bridge import Bridge

    baud_rate = baud or ctx.obj["settings"].baud_rate
    if baud_rate not in BAUD_RATES:
        click.echo(f"Warning: non-standard baud rate {baud_rate}", err=True)
    text = payload + {"none": "", "lf": "\n", "crlf": "\r\n"}[eol]

    async def _run():
        bridge = Bridge()
        try:
            outcome = await bridge.connect(
                port, baud_rate, int(data_bits), parity, float(stop_bits)
            )
            if outcome.success:
                outcome = await bridge.send(text)
            return outcome
        finally:
            await bridge.shutdown()

    outcome = asyncio.run(_run())
    if not outcome.success:
        raise click.ClickException(outcome.error)
    click.echo(f"Sent {len(text)} character(s) to {port}.")


@cli.command("import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def import_cmd(file: str) -> None:
    """Read a parameter workbook and print it as JSON."""
    from incell.bridge import Bridge

    outcome = asyncio.run(Bridge().import_parameters(file))
    if not outcome.success:
        raise click.ClickException(outcome.error)
    _echo_outcome(outcome)


@cli.command("export")
@click.argument("params_json", type=click.File("r"))
@click.option("--model", "model_name", default="", help="Model name used in the file name")
@click.option("--output", type=click.Path(dir_okay=False), default=None,
              help="Output file (default: <model>_<timestamp>.xlsx)")
def export_cmd(params_json, model_name: str, output: str | None) -> None:
    """Write parameters from a JSON object file to a workbook."""
    from incell.bridge import Bridge
    from incell.parameters.workbook import export_filename

    try:
        parameters = json.load(params_json)
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"Invalid JSON: {exc}") from exc
    if not isinstance(parameters, dict):
        raise click.ClickException("Parameters JSON must be an object")

    target = output or export_filename(model_name)
    outcome = asyncio.run(Bridge().export_parameters(parameters, model_name, target))
    if not outcome.success:
        raise click.ClickException(outcome.error)
    click.echo(f"Wrote {outcome.file_path}")


@cli.command()
def template() -> None:
    """Show the export template."""
    from incell.parameters.template import EXPORT_TEMPLATE

    click.echo(f"{'Category':<12}  {'Parameter':<18}  {'Range':<16}")
    click.echo("-" * 50)
    for row in EXPORT_TEMPLATE:
        click.echo(f"{row.category:<12}  {row.name:<18}  {row.value_range:<16}")


@cli.command()
@click.option("--host", default=None, help="Bind address (default from INCELL_HOST)")
@click.option("--port", type=int, default=None, help="HTTP port (default from INCELL_PORT)")
@click.option("--no-ui", is_flag=True, help="API only, no web page")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None, no_ui: bool) -> None:
    """Start the web server (API + browser UI)."""
    import uvicorn

    from incell.api.app import create_app

    settings = ctx.obj["settings"]
    settings = replace(settings, host=host or settings.host, port=port or settings.port)
    app = create_app(enable_ui=not no_ui, settings=settings)
    uvicorn.run(app, host=settings.host, port=settings.port)


@cli.command()
@click.pass_context
def desktop(ctx: click.Context) -> None:
    """Open the desktop window."""
    from incell.ui.main import run_desktop

    run_desktop(ctx.obj["settings"])


if __name__ == "__main__":
    cli()
