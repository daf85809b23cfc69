"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdblocks.cli.commands import check_cmd, export_cmd, format_cmd, parse_cmd


app = typer.Typer(name="mdblocks", no_args_is_help=True, help="Markdown <-> structured block converter")

app.command(name="parse")(parse_cmd)
app.command(name="format")(format_cmd)
app.command(name="export")(export_cmd)
app.command(name="check")(check_cmd)
