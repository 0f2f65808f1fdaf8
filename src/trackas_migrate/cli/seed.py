"""
trackas-migrate seed - Load seed data.
"""

from pathlib import Path

import typer

from trackas_migrate.exceptions import MigrateError
from trackas_migrate.initialization import initialize
from trackas_migrate.migrations.seeds import run_seeds

app = typer.Typer(name="seed", help="Run idempotent seed scripts", invoke_without_command=True)


@app.callback()
def seed(
    ctx: typer.Context,
    project_dir: Path = typer.Option(Path.cwd(), "--project-dir", "-d", help="Project directory"),
    env: str = typer.Option(None, "--env", "-e", help="Environment name"),
    database_url: str = typer.Option(None, "--database-url", help="Database URL (overrides config.yaml)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Execute every seed script in the seeds directory, in filename order.

    Seeds are not tracked and run on every invocation.
    """
    if ctx.invoked_subcommand is not None:
        return

    try:
        settings, connection = initialize(project_dir, env=env, database_url=database_url, verbose=verbose)
        with connection:
            result = run_seeds(settings, connection.connection)
    except MigrateError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    for filename in result.executed:
        typer.echo(f"  ✓ {filename}")

    if not result.success:
        typer.echo(f"Seed failed: {result.error}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Seed completed successfully ({len(result.executed)} file(s))")
