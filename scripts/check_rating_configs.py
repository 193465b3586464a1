#!/usr/bin/env python3
"""Validate and list the rating system TOML configs in a directory."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from domain.ratings.config import load_rating_system_configs

DEFAULT_CONFIG_DIR = ROOT_DIR / "configs" / "ratings"

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    help="Validate rating system configs.",
)


@app.command()
def check_rating_configs(
    config_dir: Annotated[
        Path,
        typer.Option("--config-dir", help="Directory of rating system TOML files."),
    ] = DEFAULT_CONFIG_DIR,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print each config as JSON."),
    ] = False,
) -> None:
    """Load every config, failing on the first invalid one."""
    try:
        systems = load_rating_system_configs(config_dir)
    except (FileNotFoundError, NotADirectoryError, ValueError) as exc:
        typer.echo(f"invalid config: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(f"loaded_configs={len(systems)} config_dir={config_dir}")
    for system in systems:
        if as_json:
            typer.echo(json.dumps({"name": system.name, **system.as_config_json()}, sort_keys=True))
            continue
        typer.echo(
            f"{system.name:<16} file={system.file_path.name} "
            f"best_results_count={system.parameters.best_results_count} "
            f"positions={len(system.parameters.position_points)}"
        )


if __name__ == "__main__":
    app()
