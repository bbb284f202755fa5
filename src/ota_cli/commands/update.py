from typing import Optional
from pathlib import Path
import typer
from ..router import execute

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.command("create")
def create_update(
    ctx: typer.Context,
    targets: Optional[Path] = typer.Option(None, "--targets", help="TOML file of per-hardware target requests (required)"),
):
    """Create a multi-target update with the director."""
    execute(ctx, "update", "create", targets=targets)


@app.command("launch")
def launch_update(
    ctx: typer.Context,
    update: Optional[str] = typer.Option(None, "--update", help="Multi-target update UUID (required)"),
    device: Optional[str] = typer.Option(None, "--device", help="Device UUID (required)"),
):
    execute(ctx, "update", "launch", update=update, device=device)
