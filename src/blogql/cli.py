#!/usr/bin/env python3
"""
Main CLI entry point for the blogql server.
"""

import os
import sys
from pathlib import Path

import click
import uvicorn

from blogql import __version__
from blogql.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="blogql")
def cli() -> None:
    """blogql CLI - run the API server and inspect its schema."""
    pass


@cli.command()
@click.option(
    "--host",
    default="0.0.0.0",
    help="Host to bind to (default: 0.0.0.0)",
)
@click.option(
    "--port",
    default=8000,
    type=int,
    help="Port to bind to (default: 8000)",
)
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
@click.option(
    "--workers",
    default=1,
    type=int,
    help="Number of worker processes (default: 1)",
)
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(
    host: str,
    port: int,
    reload: bool,
    workers: int,
    log_level: str,
) -> None:
    """Start the blogql API server."""
    configure_logging(debug=(log_level == "debug"), level=log_level)

    logger.info(
        "Starting blogql API server",
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_level=log_level,
    )

    # Settings are read at import time, so pass them through the environment
    # for worker and reloader processes
    if log_level == "debug":
        os.environ["BLOGQL_DEBUG"] = "true"
        os.environ["BLOGQL_LOG_LEVEL"] = "debug"
    else:
        os.environ.setdefault("BLOGQL_DEBUG", "false")
        os.environ.setdefault("BLOGQL_LOG_LEVEL", log_level)

    try:
        if reload or workers > 1:
            uvicorn.run(
                "blogql.api.app:app",
                host=host,
                port=port,
                reload=reload,
                workers=(workers if not reload else 1),  # reload doesn't work with multiple workers
                log_level=log_level,
                access_log=True,
            )
        else:
            from blogql.api.app import app

            uvicorn.run(
                app,
                host=host,
                port=port,
                log_level=log_level,
                access_log=True,
            )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the SDL to this file instead of stdout",
)
def schema(output: Path | None) -> None:
    """Print the GraphQL schema as SDL."""
    from blogql.graphql.schema import export_schema_sdl

    sdl = export_schema_sdl()
    if output is None:
        click.echo(sdl, nl=False)
        return

    output.write_text(sdl)
    click.echo(f"✓ Schema written to {output}")


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
