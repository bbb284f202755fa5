from typing import Optional
import typer
from ..router import execute

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.command("list")
def list_devices(
    ctx: typer.Context,
    all_: bool = typer.Option(False, "--all", help="List all devices"),
    device: Optional[str] = typer.Option(None, "--device", help="Show one device (UUID)"),
    group: Optional[str] = typer.Option(None, "--group", help="List the devices in a group (UUID)"),
    table: bool = typer.Option(False, "--table", help="Print a table instead of JSON"),
):
    """
    List devices. Exactly one of --all, --device or --group is used;
    if several are given the first in that order wins.
    """
    execute(ctx, "device", "list", table=table, all=all_, device=device, group=group)


@app.command("create")
def create_device(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Device name (required)"),
    id: Optional[str] = typer.Option(None, "--id", help="Device identifier, e.g. a VIN (required)"),
    vehicle: bool = typer.Option(False, "--vehicle", help="Device is a vehicle"),
    other: bool = typer.Option(False, "--other", help="Device is not a vehicle"),
):
    execute(ctx, "device", "create", name=name, id=id, vehicle=vehicle, other=other)


@app.command("delete")
def delete_device(
    ctx: typer.Context,
    device: Optional[str] = typer.Option(None, "--device", help="Device UUID (required)"),
):
    execute(ctx, "device", "delete", device=device)
