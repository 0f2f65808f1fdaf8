"""
CLI commands for migrations.
"""

from pathlib import Path

import typer

from trackas_migrate.exceptions import MigrateError
from trackas_migrate.initialization import initialize
from trackas_migrate.migrations.runner import APPLIED, ORPHANED, MigrationRunner, MigrationStatus, RunResult
from trackas_migrate.utils.logging import get_logger

logger = get_logger("trackas_migrate.migrations.cli")

app = typer.Typer(name="migrate", help="Run database migrations", invoke_without_command=True)
status_app = typer.Typer(name="status", help="Show applied and pending migrations", invoke_without_command=True)


@app.callback()
def migrate(
    ctx: typer.Context,
    project_dir: Path = typer.Option(Path.cwd(), "--project-dir", "-d", help="Project directory"),
    env: str = typer.Option(None, "--env", "-e", help="Environment name"),
    database_url: str = typer.Option(None, "--database-url", help="Database URL (overrides config.yaml)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be executed without running"),
    list_only: bool = typer.Option(False, "--list", "-l", help="List migrations with their status"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Run pending database migrations.

    Examples:
        # Run all pending migrations
        trackas-migrate migrate --env prod

        # Dry run (show what would be executed)
        trackas-migrate migrate --dry-run

        # List migrations
        trackas-migrate migrate --list
    """
    if ctx.invoked_subcommand is not None:
        return

    try:
        settings, connection = initialize(project_dir, env=env, database_url=database_url, verbose=verbose)
        with connection:
            runner = MigrationRunner(settings, connection.connection)
            if list_only:
                _print_status(runner.status())
                return
            result = runner.run(dry_run=dry_run)
    except MigrateError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    _print_result(result)
    if not result.success:
        raise typer.Exit(1)


@status_app.callback()
def status(
    ctx: typer.Context,
    project_dir: Path = typer.Option(Path.cwd(), "--project-dir", "-d", help="Project directory"),
    env: str = typer.Option(None, "--env", "-e", help="Environment name"),
    database_url: str = typer.Option(None, "--database-url", help="Database URL (overrides config.yaml)"),
):
    """
    Show every migration as applied, pending or orphaned.
    """
    if ctx.invoked_subcommand is not None:
        return

    try:
        settings, connection = initialize(project_dir, env=env, database_url=database_url)
        with connection:
            statuses = MigrationRunner(settings, connection.connection).status()
    except MigrateError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    _print_status(statuses)


def _print_result(result: RunResult) -> None:
    if result.dry_run:
        if not result.pending:
            typer.echo("No migrations to run")
        else:
            typer.echo(f"[DRY RUN] Would execute {len(result.pending)} migration(s):")
            for filename in result.pending:
                typer.echo(f"  ⏳ {filename}")
        if result.error is not None:
            typer.echo(f"Error: {result.error}", err=True)
        return

    for filename in result.applied:
        typer.echo(f"  ✓ {filename}")

    if result.error is not None:
        typer.echo(f"Migration failed: {result.error}", err=True)
        if result.applied:
            typer.echo(f"{len(result.applied)} migration(s) applied before the failure remain applied", err=True)
        return

    if result.applied:
        typer.echo(f"All migrations completed successfully ({len(result.applied)} applied)")
    else:
        typer.echo("No migrations to run")


def _print_status(statuses: list[MigrationStatus]) -> None:
    if not statuses:
        typer.echo("No migrations found")
        return

    applied_count = sum(1 for s in statuses if s.state == APPLIED)
    orphaned_count = sum(1 for s in statuses if s.state == ORPHANED)
    pending_count = len(statuses) - applied_count - orphaned_count

    typer.echo(f"Migrations ({len(statuses)} total):")
    summary = f"  Applied: {applied_count}, Pending: {pending_count}"
    if orphaned_count:
        summary += f", Orphaned: {orphaned_count}"
    typer.echo(summary + "\n")

    for migration in statuses:
        timestamp = f" ({migration.executed_at})" if migration.executed_at else ""
        if migration.state == APPLIED:
            typer.echo(f"  ✓ {migration.filename}{timestamp}")
        elif migration.state == ORPHANED:
            typer.echo(f"  ? {migration.filename}{timestamp} - recorded but no file on disk")
        else:
            typer.echo(f"  ⏳ {migration.filename} (pending)")
