"""CLI entrypoint: Typer app definition and command registration"""

import logging
from typing import Annotated

import typer

from mdpost.cli.commands import (
    check_cmd, commit_cmd, diff_cmd, draft_cmd, dupes_cmd,
    export_cmd, history_cmd, init_cmd, list_cmd,
)


app = typer.Typer(name="mdpost", no_args_is_help=True, help="Check, catalog, and normalize Markdown blog posts")


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
    ):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


app.command(name="check")(check_cmd)
app.command(name="list")(list_cmd)
app.command(name="draft")(draft_cmd)
app.command(name="dupes")(dupes_cmd)
app.command(name="init")(init_cmd)
app.command(name="commit")(commit_cmd)
app.command(name="history")(history_cmd)
app.command(name="diff")(diff_cmd)
app.command(name="export")(export_cmd)
