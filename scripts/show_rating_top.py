#!/usr/bin/env python3
"""Show the ranked rating table computed from the stored result feed."""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory
from domain.ratings.aggregator import RankingMode, RatingTable, build_rating_view, partition_by_gender
from domain.ratings.bracket import result_label
from domain.ratings.common import Gender
from domain.ratings.config import load_rating_system_config, validate_best_results_count
from domain.ratings.errors import DataIntegrityError, RatingConfigurationError
from domain.ratings.win_rate import player_win_rate
from repositories.rating_inputs import fetch_rating_inputs

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    help="Print the rating table (optionally per gender).",
)


def _echo_table(table: RatingTable, *, title: str, top_n: int, show_results: bool) -> None:
    typer.echo(f"{title} best_results_count={table.best_results_count} players={len(table.ratings)}")
    for rating in table.ratings[:top_n]:
        stats = player_win_rate(rating)
        typer.echo(
            f"{rating.rank:3d}. {rating.display_name:<30} "
            f"points={rating.total_points:4d} "
            f"results={len(rating.best_results)}/{len(rating.all_results)} "
            f"win_rate={stats.win_rate:5.1f}% ({stats.total_wins}-{stats.total_losses})"
        )
        if show_results:
            for counted in rating.all_results:
                result = counted.result
                marker = "*" if counted.is_counted else " "
                typer.echo(
                    f"       {marker} {result.tournament_date or '-'} "
                    f"{result.tournament_name or result.tournament_id} "
                    f"[{result_label(result)}] points={result.points}"
                )
    for rejected in table.rejected:
        typer.echo(f"  rejected {rejected.display_name or rejected.identity_key}: {rejected.reason}")


@app.command()
def show_rating_top(
    gender: Annotated[
        Gender | None,
        typer.Option("--gender", help="Only rank one gender bucket (male, female, unknown)."),
    ] = None,
    by_gender: Annotated[
        bool,
        typer.Option("--by-gender", help="Print one independently ranked table per gender."),
    ] = False,
    top_n: Annotated[
        int,
        typer.Option("--top-n", help="Number of players to print per table."),
    ] = 20,
    ranking: Annotated[
        RankingMode,
        typer.Option("--ranking", help="Rank assignment for tied totals."),
    ] = RankingMode.SEQUENTIAL,
    config_file: Annotated[
        Path | None,
        typer.Option(
            "--config-file",
            help="Rating system TOML whose best_results_count overrides the stored setting.",
        ),
    ] = None,
    best_results_count: Annotated[
        int | None,
        typer.Option("--best-results-count", help="Override the number of counted results."),
    ] = None,
    show_results: Annotated[
        bool,
        typer.Option("--show-results", help="List every result; counted ones are starred."),
    ] = False,
    licensed_only: Annotated[
        bool,
        typer.Option("--licensed-only", help="Only rank players with a licensed name."),
    ] = False,
    db_url: Annotated[
        str,
        typer.Option("--db-url", help="Database URL holding the result feed."),
    ] = DEFAULT_DB_URL,
) -> None:
    """Compute and print the rating table from one consistent snapshot."""
    if top_n <= 0:
        raise typer.BadParameter("--top-n must be greater than 0")
    if gender is not None and by_gender:
        raise typer.BadParameter("--gender and --by-gender are mutually exclusive")

    engine = create_db_engine(db_url)
    session_factory = create_session_factory(engine)
    try:
        with session_factory() as session:
            inputs = fetch_rating_inputs(session)
        config = inputs.config
        if config_file is not None:
            system = load_rating_system_config(config_file)
            config = replace(config, best_results_count=system.parameters.best_results_count)
        if best_results_count is not None:
            config = replace(
                config,
                best_results_count=validate_best_results_count(
                    best_results_count, source="--best-results-count"
                ),
            )
    except RatingConfigurationError as exc:
        raise typer.BadParameter(str(exc)) from exc
    except DataIntegrityError as exc:
        typer.echo(f"invalid stored results: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    entries = inputs.entries
    if licensed_only:
        entries = [entry for entry in entries if entry.licensed_name]

    if by_gender:
        tables = partition_by_gender(entries, config.best_results_count, ranking_mode=ranking)
        for bucket, table in tables.items():
            _echo_table(table, title=f"gender={bucket.value}", top_n=top_n, show_results=show_results)
        return

    table = build_rating_view(entries, config, gender=gender, ranking_mode=ranking)
    title = f"gender={gender.value}" if gender is not None else "gender=all"
    if not table.ratings:
        typer.echo(f"No rated players found for {title}.")
        return
    _echo_table(table, title=title, top_n=top_n, show_results=show_results)


if __name__ == "__main__":
    app()
