from typing import List, Optional
import typer
from ..router import execute

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.command("list")
def list_campaigns(
    ctx: typer.Context,
    all_: bool = typer.Option(False, "--all", help="List all campaigns"),
    campaign: Optional[str] = typer.Option(None, "--campaign", help="Show one campaign (UUID)"),
    stats: bool = typer.Option(False, "--stats", help="With --campaign: show campaign statistics"),
    table: bool = typer.Option(False, "--table", help="Print a table instead of JSON"),
):
    execute(ctx, "campaign", "list", table=table, all=all_, campaign=campaign, stats=stats)


@app.command("create")
def create_campaign(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Campaign name (required)"),
    update: Optional[str] = typer.Option(None, "--update", help="Update UUID (required)"),
    group: List[str] = typer.Option(None, "--group", help="Target group UUID (repeatable, required)"),
):
    execute(ctx, "campaign", "create", name=name, update=update, group=group)


@app.command("launch")
def launch_campaign(
    ctx: typer.Context,
    campaign: Optional[str] = typer.Option(None, "--campaign", help="Campaign UUID (required)"),
):
    execute(ctx, "campaign", "launch", campaign=campaign)


@app.command("cancel")
def cancel_campaign(
    ctx: typer.Context,
    campaign: Optional[str] = typer.Option(None, "--campaign", help="Campaign UUID (required)"),
):
    execute(ctx, "campaign", "cancel", campaign=campaign)


@app.command("listupdates")
def list_updates(
    ctx: typer.Context,
    table: bool = typer.Option(False, "--table", help="Print a table instead of JSON"),
):
    execute(ctx, "campaign", "listupdates", table=table)


@app.command("createupdate")
def create_update(
    ctx: typer.Context,
    update: Optional[str] = typer.Option(None, "--update", help="Multi-target update UUID (required)"),
    name: Optional[str] = typer.Option(None, "--name", help="Update name (required)"),
    description: Optional[str] = typer.Option(None, "--description", help="Update description (required)"),
):
    """Register a director multi-target update with the campaigner."""
    execute(ctx, "campaign", "createupdate", update=update, name=name, description=description)
