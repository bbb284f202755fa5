from typing import Optional
from pathlib import Path
import typer
from .commands import campaign, device, group, package, update
from .commands.init import do_init
from .utils.log import resolve_log_level, setup_logging

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    context_settings={"token_normalize_func": lambda t: t.lower()},
)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Increase log verbosity (repeatable; maps to INFO/DEBUG)"),
    log_level: Optional[str] = typer.Option(None, "--log-level", envvar="OTA_LOG_LEVEL", help="DEBUG/INFO/WARNING/ERROR/CRITICAL. Overrides -v."),
    config: Optional[Path] = typer.Option(None, "--config", help="Config file (default: $OTA_CONFIG or ~/.ota.conf)"),
):
    """Manage devices, packages, updates and campaigns on an OTA server."""
    try:
        level = resolve_log_level(log_level, verbose)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--log-level")
    setup_logging(level)
    ctx.obj = {"config": config}


@app.command("init")
def init(
    ctx: typer.Context,
    credentials: Optional[Path] = typer.Option(None, "--credentials", help="Path to credentials.zip (required)"),
    campaigner: Optional[str] = typer.Option(None, "--campaigner", help="Campaigner base URL (required)"),
    director: Optional[str] = typer.Option(None, "--director", help="Director base URL (required)"),
    registry: Optional[str] = typer.Option(None, "--registry", help="Device registry base URL (required)"),
    reposerver: Optional[str] = typer.Option(None, "--reposerver", help="TUF reposerver base URL (default: from credentials.zip)"),
):
    """Write the config file used by every other command."""
    do_init(ctx, credentials, campaigner, director, registry, reposerver)


app.add_typer(campaign.app, name="campaign", help="Create and manage update campaigns")
app.add_typer(device.app, name="device", help="List, create and delete devices")
app.add_typer(group.app, name="group", help="Manage device groups")
app.add_typer(package.app, name="package", help="List, fetch and upload packages")
app.add_typer(update.app, name="update", help="Create and launch multi-target updates")
