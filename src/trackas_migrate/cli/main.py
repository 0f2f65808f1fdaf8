"""
``trackas-migrate`` command line.

Subcommands live next to what they drive: ``migrate`` and ``status`` in
``trackas_migrate.migrations.cli``, ``seed`` in ``trackas_migrate.cli.seed``.
"""

import typer

from trackas_migrate import __version__
from trackas_migrate.cli import seed
from trackas_migrate.migrations import cli as migrate_cli

app = typer.Typer(
    name="trackas-migrate",
    help="Apply SQL migrations and seed data to the TrackAS database.",
    add_completion=False,
)

app.add_typer(migrate_cli.app, name="migrate")
app.add_typer(migrate_cli.status_app, name="status")
app.add_typer(seed.app, name="seed")


def _print_version(requested: bool) -> None:
    if requested:
        typer.echo(f"trackas-migrate version {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def root(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Print the installed version.",
    ),
):
    """
    Apply SQL migrations and seed data to the TrackAS database.

    Typical deploy step: ``trackas-migrate migrate --env prod``.
    """
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def main():
    app()


if __name__ == "__main__":
    main()
