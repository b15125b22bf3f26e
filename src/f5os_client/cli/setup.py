"""
F5OS Client - Setup Command

Interactive setup for configuring F5OS device credentials.
"""

import asyncio
import getpass
from typing import Optional

import typer
from pydantic import ValidationError as PydanticValidationError

from ..core.config_loader import ConfigLoader
from ..core.exceptions import ConfigurationError, F5OSError
from ..core.models import F5OSConfig
from ..core.session import create_session


def setup_command(
    profile: str = typer.Option(
        "default", "--profile", "-p", help="Profile name (default, lab, production, etc.)"
    ),
    host: Optional[str] = typer.Option(None, "--host", help="Device address (e.g., https://10.1.1.10)"),
    username: Optional[str] = typer.Option(None, "--username", "-u", help="Login user"),
    password: Optional[str] = typer.Option(None, "--password", help="Login password"),
    port: Optional[int] = typer.Option(None, "--port", help="API port (443 or 8888)"),
    verify_ssl: bool = typer.Option(
        True, "--verify-ssl/--no-verify-ssl", help="Verify SSL certificates"
    ),
    use_keyring: bool = typer.Option(
        False, "--keyring/--no-keyring", help="Store the password in the system keyring"
    ),
    interactive: bool = typer.Option(
        True, "--interactive/--non-interactive", help="Interactive mode with prompts"
    ),
):
    """
    Configure F5OS device credentials.

    Examples:
        # Interactive setup
        f5os setup

        # Non-interactive setup
        f5os setup --host 10.1.1.10 --username admin --password secret --non-interactive

        # Setup a lab profile with the password kept in the keyring
        f5os setup --profile lab --keyring
    """
    typer.echo("\n🔧 F5OS Client - Credential Setup\n")
    typer.echo(f"Profile: {typer.style(profile, fg=typer.colors.CYAN, bold=True)}\n")

    if interactive:
        if not host:
            host = typer.prompt("Device address (e.g., https://10.1.1.10)")

        if not username:
            username = typer.prompt("Username", default="admin")

        if not password:
            password = getpass.getpass("Password (hidden): ")

        if not typer.confirm("Verify SSL certificates?", default=True):
            verify_ssl = False

    elif not all([host, username, password]):
        typer.echo(
            "❌ Error: In non-interactive mode, all parameters (--host, --username, --password) are required",
            err=True,
        )
        raise typer.Exit(1)

    try:
        config = F5OSConfig(
            host=host, username=username, password=password, port=port, verify_ssl=verify_ssl
        )
    except PydanticValidationError as e:
        typer.echo(f"❌ Invalid configuration: {e}", err=True)
        raise typer.Exit(1)

    typer.echo("\n🔍 Testing connection...")
    if not _test_connection(config):
        typer.echo("\n⚠️  Connection test failed. Save anyway?", err=True)
        if not typer.confirm("Continue with save?", default=False):
            typer.echo("Setup cancelled")
            raise typer.Exit(0)

    try:
        ConfigLoader.save_profile(profile, config, use_keyring=use_keyring)
    except ConfigurationError as e:
        typer.echo(f"\n❌ Error saving profile: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"\n✅ Profile '{profile}' saved successfully!")
    typer.echo(f"\n📍 Config location: {ConfigLoader.DEFAULT_CONFIG_FILE}")
    typer.echo("🔒 File permissions: 0600 (owner read/write only)")
    if use_keyring:
        typer.echo("🔑 Password stored in the system keyring")

    typer.echo("\n📖 Usage:")
    typer.echo(f"   • Test connection: f5os test-connection --profile {profile}")
    typer.echo("   • List profiles: f5os list-profiles")


def _test_connection(config: F5OSConfig) -> bool:
    """
    Log in to the device once.

    Returns:
        True if the login succeeded, False otherwise
    """

    async def test():
        session = await create_session(config)
        await session.close()
        return session.platform

    try:
        platform = asyncio.run(test())
    except F5OSError as e:
        typer.echo(f"⚠️  Connection failed: {e}")
        return False

    typer.echo(f"✅ Connection successful! ({platform.kind.value})")
    return True
