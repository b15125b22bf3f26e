"""
F5OS Client - Delete Profile Command
"""

import typer

from ..core.config_loader import ConfigLoader
from ..core.exceptions import ConfigurationError


def delete_command(
    profile: str = typer.Argument(..., help="Profile name to delete"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
):
    """
    Delete a credential profile and its keyring password.

    Examples:
        # Delete with confirmation
        f5os delete-profile lab

        # Force delete without confirmation
        f5os delete-profile lab --force
    """
    typer.echo("\n🗑️  Delete F5OS Profile\n")

    try:
        profiles = ConfigLoader.list_profiles()
        if profile not in profiles:
            typer.echo(f"❌ Profile '{profile}' not found", err=True)
            typer.echo(f"\n📋 Available profiles: {', '.join(profiles) if profiles else 'None'}")
            raise typer.Exit(1)

        info = ConfigLoader.get_profile_info(profile)
        device = info["host"] if not info.get("port") else f"{info['host']} (port {info['port']})"
        typer.echo(f"Profile: {typer.style(profile, fg=typer.colors.YELLOW, bold=True)}")
        typer.echo(f"Device: {info['username']}@{device}\n")

        if not force and not typer.confirm(
            f"⚠️  Are you sure you want to delete profile '{profile}'?", default=False
        ):
            typer.echo("Operation cancelled")
            raise typer.Exit(0)

        ConfigLoader.delete_profile(profile)
    except ConfigurationError as e:
        typer.echo(f"❌ Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"\n✅ Profile '{profile}' deleted successfully")
    if info["password_in"] == "keyring":
        typer.echo("🔑 Keyring password removed")

    remaining = ConfigLoader.list_profiles()
    if remaining:
        typer.echo(f"\n📋 Remaining profiles: {', '.join(remaining)}")
    else:
        typer.echo("\n📋 No profiles remaining")
        typer.echo("💡 Run 'f5os setup' to configure a new profile")
