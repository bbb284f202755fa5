from typing import Optional
from pathlib import Path
import typer
from ..router import execute


def do_init(
    ctx: typer.Context,
    credentials: Optional[Path],
    campaigner: Optional[str],
    director: Optional[str],
    registry: Optional[str],
    reposerver: Optional[str],
):
    execute(
        ctx,
        "init",
        credentials=credentials,
        campaigner=campaigner,
        director=director,
        registry=registry,
        reposerver=reposerver,
    )
    typer.secho("✓ config saved", fg=typer.colors.GREEN, err=True)
