from typing import Optional
import typer
from ..router import execute

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.command("list")
def list_groups(
    ctx: typer.Context,
    all_: bool = typer.Option(False, "--all", help="List all groups"),
    device: Optional[str] = typer.Option(None, "--device", help="List the groups a device belongs to (UUID)"),
    group: Optional[str] = typer.Option(None, "--group", help="List the devices in a group (UUID)"),
    table: bool = typer.Option(False, "--table", help="Print a table instead of JSON"),
):
    """List groups. Precedence when several selectors are given: --all, --device, --group."""
    execute(ctx, "group", "list", table=table, all=all_, device=device, group=group)


@app.command("create")
def create_group(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Group name (required)"),
):
    execute(ctx, "group", "create", name=name)


@app.command("add")
def add_to_group(
    ctx: typer.Context,
    group: Optional[str] = typer.Option(None, "--group", help="Group UUID (required)"),
    device: Optional[str] = typer.Option(None, "--device", help="Device UUID (required)"),
):
    execute(ctx, "group", "add", group=group, device=device)


@app.command("rename")
def rename_group(
    ctx: typer.Context,
    group: Optional[str] = typer.Option(None, "--group", help="Group UUID (required)"),
    name: Optional[str] = typer.Option(None, "--name", help="New group name (required)"),
):
    execute(ctx, "group", "rename", group=group, name=name)


@app.command("remove")
def remove_from_group(
    ctx: typer.Context,
    group: Optional[str] = typer.Option(None, "--group", help="Group UUID (required)"),
    device: Optional[str] = typer.Option(None, "--device", help="Device UUID (required)"),
):
    execute(ctx, "group", "remove", group=group, device=device)
