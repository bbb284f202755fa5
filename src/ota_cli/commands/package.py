from typing import List, Optional
from pathlib import Path
import typer
from ..router import execute

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.command("list")
def list_packages(
    ctx: typer.Context,
    table: bool = typer.Option(False, "--table", help="Print a table instead of targets.json"),
):
    execute(ctx, "package", "list", table=table)


@app.command("add")
def add_package(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Package name (required)"),
    version: Optional[str] = typer.Option(None, "--version", help="Package version (required)"),
    format: Optional[str] = typer.Option(None, "--format", help="binary or ostree (required)"),
    hardware: List[str] = typer.Option(None, "--hardware", help="Compatible hardware id (repeatable or comma-separated)"),
    path: Optional[Path] = typer.Option(None, "--path", help="Local file to upload"),
    url: Optional[str] = typer.Option(None, "--url", help="Remote URL of the package"),
):
    """Upload one package. Exactly one of --path or --url is required."""
    execute(
        ctx, "package", "add",
        name=name, version=version, format=format, hardware=hardware, path=path, url=url,
    )


@app.command("fetch")
def fetch_package(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Package name (required)"),
    version: Optional[str] = typer.Option(None, "--version", help="Package version (required)"),
):
    execute(ctx, "package", "fetch", name=name, version=version)


@app.command("upload")
def upload_packages(
    ctx: typer.Context,
    packages: Optional[Path] = typer.Option(None, "--packages", help="TOML file describing the packages (required)"),
):
    """
    Upload every package listed in a TOML file, one after another.
    Stops at the first failure.
    """
    execute(ctx, "package", "upload", packages=packages)
