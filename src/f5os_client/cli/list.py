"""
F5OS Client - List Profiles Command

List all configured credential profiles.
"""

import typer

from ..core.config_loader import ConfigLoader
from ..core.exceptions import ConfigurationError


def list_command(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show detailed information for each profile"
    )
):
    """
    List all configured F5OS profiles.

    Examples:
        # List all profiles
        f5os list-profiles

        # List with details
        f5os list-profiles --verbose
    """
    typer.echo("\n📋 Configured F5OS Profiles\n")

    try:
        profiles = ConfigLoader.list_profiles()
    except ConfigurationError as e:
        typer.echo(f"❌ Error listing profiles: {e}", err=True)
        raise typer.Exit(1)

    if not profiles:
        typer.echo("❌ No profiles configured yet")
        typer.echo("\n💡 Tip: Run 'f5os setup' to configure your first profile")
        return

    typer.echo(f"Found {len(profiles)} profile(s):\n")

    for profile in profiles:
        if not verbose:
            typer.echo(f"  • {profile}")
            continue

        try:
            info = ConfigLoader.get_profile_info(profile)
        except ConfigurationError as e:
            typer.echo(f"📦 {profile} - Error loading details: {e}\n")
            continue

        typer.echo(f"📦 {typer.style(profile, fg=typer.colors.CYAN, bold=True)}")
        typer.echo(f"   Host: {info['host']}")
        if info.get("port"):
            typer.echo(f"   Port: {info['port']}")
        typer.echo(f"   Username: {info['username']}")
        typer.echo(f"   Password stored in: {info['password_in']}")
        typer.echo(f"   SSL Verification: {'✓' if info['verify_ssl'] else '✗'}")
        typer.echo()

    if not verbose:
        typer.echo("\n💡 Tip: Use --verbose to see profile details")

    typer.echo(f"\n📍 Config file: {ConfigLoader.DEFAULT_CONFIG_FILE}")
