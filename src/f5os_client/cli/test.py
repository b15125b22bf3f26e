"""
F5OS Client - Test Connection Command

Test connection to an F5OS device.
"""

import asyncio
from typing import Any, Dict

import typer

from ..core.config_loader import ConfigLoader
from ..core.exceptions import AuthenticationError, ConfigurationError, F5OSError, TransportError
from ..core.models import F5OSConfig
from ..core.session import create_session
from ..shared.error_handlers import handle_operation_error


def test_command(
    profile: str = typer.Option("default", "--profile", "-p", help="Profile name to test")
):
    """
    Test connection to an F5OS device.

    Examples:
        # Test default profile
        f5os test-connection

        # Test specific profile
        f5os test-connection --profile production
    """
    typer.echo("\n🔍 Testing F5OS Connection\n")
    typer.echo(f"Profile: {typer.style(profile, fg=typer.colors.CYAN, bold=True)}\n")

    try:
        typer.echo("📡 Loading credentials...")
        config = ConfigLoader.load(profile)
    except ConfigurationError as e:
        typer.echo(f"❌ Configuration error: {e}", err=True)
        typer.echo("\n💡 Run 'f5os setup' to configure credentials")
        raise typer.Exit(1)

    typer.echo(f"Host: {config.host}")
    typer.echo(f"SSL Verification: {'Enabled' if config.verify_ssl else 'Disabled'}\n")

    typer.echo("🔌 Connecting to F5OS...")
    result = asyncio.run(_test_connection_async(config))

    if not result["success"]:
        typer.echo(f"\n❌ {typer.style('Connection failed', fg=typer.colors.RED, bold=True)}")
        typer.echo(f"\nError: {result.get('error', 'Unknown error')}")
        typer.echo("\n💡 Troubleshooting tips:")
        typer.echo("   • Verify the host and port are correct and reachable")
        typer.echo("   • Check the username and password")
        typer.echo("   • Use port 8888 for legacy RESTCONF or 443 for the API gateway")
        typer.echo("   • Try with --no-verify-ssl if using self-signed certificate")
        raise typer.Exit(1)

    typer.echo(
        f"\n✅ {typer.style('Connection successful!', fg=typer.colors.GREEN, bold=True)}"
    )
    typer.echo("\n📊 System Information:")
    typer.echo(f"   Platform: {result['platform']}")
    if result.get("version"):
        typer.echo(f"   Version: {result['version']}")
    typer.echo(f"   API root: {result['uri_root']}")


async def _test_connection_async(config: F5OSConfig) -> Dict[str, Any]:
    """
    Log in, detect the platform and close the session.

    Returns:
        Dictionary with test results
    """
    try:
        session = await create_session(config)
    except AuthenticationError as e:
        return {"success": False, "error": f"Authentication failed: {e!s}"}
    except TransportError as e:
        return {"success": False, "error": f"Network error: {e!s}"}
    except F5OSError as e:
        return {"success": False, "error": handle_operation_error("test_connection", e)}

    async with session:
        return {
            "success": True,
            "platform": session.platform_kind.value,
            "version": session.platform_version,
            "uri_root": session.uri_root,
        }
