#!/usr/bin/env python3
"""
CLI entry point for blogql database migrations.
"""

import asyncio
import os
import sys
from collections.abc import Callable
from pathlib import Path

import click

from alembic import command
from alembic.config import Config
from blogql import __version__
from blogql.logging import configure_logging, get_logger

logger = get_logger(__name__)


def get_alembic_config() -> Config:
    """Get the Alembic configuration from the project root."""
    project_dir = Path(__file__).parent.parent.parent.parent
    alembic_ini = project_dir / "alembic.ini"

    if not alembic_ini.exists():
        raise FileNotFoundError(f"alembic.ini not found at {alembic_ini}")

    config = Config(str(alembic_ini))
    config.set_main_option("script_location", str(project_dir / "alembic"))
    return config


def run_alembic(description: str, action: Callable[[Config], None], **log_fields) -> None:
    """Run an Alembic command, logging the outcome and exiting non-zero on failure."""
    try:
        config = get_alembic_config()
        logger.info(f"{description} started", **log_fields)
        action(config)
        logger.info(f"{description} completed", **log_fields)
    except Exception as e:
        logger.error(f"{description} failed", error=str(e), **log_fields)
        sys.exit(1)


@click.group()
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
@click.option(
    "--database-url",
    envvar="BLOGQL_DATABASE_URL",
    default=None,
    help="Database URL (defaults to BLOGQL_DATABASE_URL / settings)",
)
@click.version_option(version=__version__, prog_name="blogql-migrate")
def main(log_level: str, database_url: str | None) -> None:
    """blogql database migration management."""
    configure_logging(debug=(log_level == "debug"), level=log_level)
    if database_url:
        # alembic/env.py and the connection module both read this variable
        os.environ["BLOGQL_DATABASE_URL"] = database_url


@main.command()
@click.argument("revision", default="head")
def upgrade(revision: str) -> None:
    """Upgrade database to a revision (default: head)."""
    run_alembic(
        "Database upgrade", lambda cfg: command.upgrade(cfg, revision), revision=revision
    )


@main.command()
@click.argument("revision", default="-1")
def downgrade(revision: str) -> None:
    """Downgrade database to a revision (default: -1)."""
    run_alembic(
        "Database downgrade", lambda cfg: command.downgrade(cfg, revision), revision=revision
    )


@main.command()
@click.option("-m", "--message", required=True, help="Revision message")
@click.option("--autogenerate/--no-autogenerate", default=True, help="Auto-generate migration")
def revision(message: str, autogenerate: bool) -> None:
    """Create a new migration revision."""
    run_alembic(
        "Migration creation",
        lambda cfg: command.revision(cfg, message=message, autogenerate=autogenerate),
        message=message,
        autogenerate=autogenerate,
    )


@main.command()
def current() -> None:
    """Show current database revision."""
    run_alembic("Current revision lookup", command.current)


@main.command()
def history() -> None:
    """Show migration history."""
    run_alembic("History lookup", command.history)


@main.command()
def check() -> None:
    """Check that the configured database accepts connections."""
    from blogql.database.connection import (
        check_database_connection,
        close_database,
        init_database,
    )

    async def do_check() -> tuple[bool, str | None]:
        init_database()
        try:
            return await check_database_connection()
        finally:
            await close_database()

    ok, error_message = asyncio.run(do_check())
    if not ok:
        click.echo(f"✗ {error_message}", err=True)
        sys.exit(1)
    click.echo("✓ Database connection successful")


if __name__ == "__main__":
    main()
