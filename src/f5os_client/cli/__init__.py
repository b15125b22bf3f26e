"""
F5OS Client - CLI Interface

This module provides the command-line interface for managing F5OS device
credentials and profiles.
"""

import sys

import typer

from ..core.log_config import configure_logging
from .delete import delete_command
from .list import list_command
from .setup import setup_command
from .test import test_command

# Create main CLI app
app = typer.Typer(
    name="f5os",
    help="F5OS Client - Device credential management",
    add_completion=False
)

# Register commands
app.command(name="setup", help="Configure F5OS device credentials")(setup_command)
app.command(name="list-profiles", help="List all configured profiles")(list_command)
app.command(name="test-connection", help="Test connection to an F5OS device")(test_command)
app.command(name="delete-profile", help="Delete a credential profile")(delete_command)


def main():
    """CLI entry point."""
    configure_logging()
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("\n\nOperation cancelled by user")
        sys.exit(1)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
