"""Tests for the rating table script."""

from __future__ import annotations

from datetime import date
from pathlib import Path

from typer.testing import CliRunner

from db import create_db_engine
from repositories.rating_inputs import (
    ensure_schema,
    players,
    rating_settings,
    team_members,
    teams,
    tournament_results,
    tournaments,
)
from show_rating_top import app

runner = CliRunner()


def _database(tmp_path: Path, *, best_results_count: str, cup: str | None = "A") -> str:
    db_url = f"sqlite:///{tmp_path / 'ratings.db'}"
    engine = create_db_engine(db_url)
    ensure_schema(engine)
    with engine.begin() as conn:
        conn.execute(players.insert(), [{"id": 1, "name": "Anna", "gender": "female"}])
        conn.execute(
            tournaments.insert(),
            [{"id": 1, "name": "Spring Open", "date": date(2024, 5, 1), "manual": False}],
        )
        conn.execute(teams.insert(), [{"id": 10, "name": "A"}])
        conn.execute(team_members.insert(), [{"id": 1, "team_id": 10, "player_id": 1}])
        conn.execute(
            tournament_results.insert(),
            [
                {
                    "id": 1,
                    "tournament_id": 1,
                    "team_id": 10,
                    "points": 16,
                    "points_reason": "CUP_WINNER",
                    "cup": cup,
                    "cup_position": "WINNER",
                    "qualifying_wins": 4,
                    "wins": 7,
                    "loses": 1,
                }
            ],
        )
        conn.execute(
            rating_settings.insert(),
            [{"setting_name": "best_results_count", "setting_value": best_results_count}],
        )
    engine.dispose()
    return db_url


def test_prints_ranked_table(tmp_path: Path) -> None:
    db_url = _database(tmp_path, best_results_count="8")

    result = runner.invoke(app, ["--db-url", db_url])

    assert result.exit_code == 0, result.output
    assert "best_results_count=8" in result.output
    assert "Anna" in result.output
    assert "points=  16" in result.output


def test_invalid_stored_best_results_count_is_a_parameter_error(tmp_path: Path) -> None:
    db_url = _database(tmp_path, best_results_count="0")

    result = runner.invoke(app, ["--db-url", db_url])

    assert result.exit_code == 2
    assert "between 1 and 50" in result.output


def test_unsupported_stored_cup_exits_with_error(tmp_path: Path) -> None:
    db_url = _database(tmp_path, best_results_count="8", cup="C")

    result = runner.invoke(app, ["--db-url", db_url])

    assert result.exit_code == 1
    assert "Unsupported stored cup" in result.output
