#!/usr/bin/env python3
"""Show the ordered, labelled cup tables of one tournament."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory
from domain.ratings.bracket import bracket_view
from domain.ratings.common import Cup
from repositories.rating_inputs import fetch_tournament_results

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Print cup A/B placements for one tournament.",
)


@app.command()
def show_tournament_bracket(
    tournament_id: Annotated[
        int,
        typer.Argument(help="Tournament id."),
    ],
    cup: Annotated[
        Cup | None,
        typer.Option("--cup", help="Only print one cup (A or B)."),
    ] = None,
    db_url: Annotated[
        str,
        typer.Option("--db-url", help="Database URL holding the result feed."),
    ] = DEFAULT_DB_URL,
) -> None:
    """Print each cup's results in placement order."""
    engine = create_db_engine(db_url)
    session_factory = create_session_factory(engine)
    with session_factory() as session:
        results = fetch_tournament_results(session, tournament_id)

    if not results:
        typer.echo(f"No results found for tournament_id={tournament_id}.")
        return

    cups = [cup] if cup is not None else list(Cup)
    for selected_cup in cups:
        entries = bracket_view(results, cup=selected_cup)
        if not entries:
            continue
        typer.echo(f"cup={selected_cup.value} teams={len(entries)}")
        for entry in entries:
            typer.echo(
                f"  {entry.label:<8} {entry.result.team_players or entry.result.team_id} "
                f"points={entry.result.points}"
            )


if __name__ == "__main__":
    app()
