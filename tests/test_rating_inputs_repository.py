"""Tests for reading rating inputs from the database."""

from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy.engine import Engine

from db import create_db_engine, create_session_factory
from domain.ratings.aggregator import build_rating_view
from domain.ratings.common import Cup, Gender, PointsReason
from domain.ratings.errors import DataIntegrityError, RatingConfigurationError
from repositories.rating_inputs import (
    ensure_schema,
    fetch_player_entries,
    fetch_rating_config,
    fetch_rating_inputs,
    fetch_tournament_results,
    licensed_players,
    players,
    position_points,
    rating_settings,
    team_members,
    teams,
    tournament_results,
    tournaments,
)


@pytest.fixture
def engine() -> Engine:
    engine = create_db_engine("sqlite://")
    ensure_schema(engine)
    return engine


def _seed(engine: Engine, *, best_results_count: str = "5") -> None:
    with engine.begin() as conn:
        conn.execute(
            players.insert(),
            [
                {"id": 1, "name": "Anna", "gender": "female"},
                {"id": 2, "name": "Bob", "gender": None},
            ],
        )
        conn.execute(
            licensed_players.insert(),
            [
                {"id": 1, "player_id": 2, "full_name": "Robert B", "gender": "male", "is_active": True},
                {"id": 2, "player_id": None, "full_name": "Carl C", "gender": "male", "is_active": True},
                {"id": 3, "player_id": None, "full_name": "Dora D", "gender": "female", "is_active": False},
            ],
        )
        conn.execute(
            tournaments.insert(),
            [
                {"id": 1, "name": "Spring Open", "date": date(2024, 5, 1), "manual": False},
                {"id": 2, "name": "Summer Cup", "date": date(2024, 6, 1), "manual": True},
            ],
        )
        conn.execute(teams.insert(), [{"id": 10, "name": "AB"}, {"id": 11, "name": "A"}])
        conn.execute(
            team_members.insert(),
            [
                {"id": 1, "team_id": 10, "player_id": 1},
                {"id": 2, "team_id": 10, "player_id": 2},
                {"id": 3, "team_id": 11, "player_id": 1},
            ],
        )
        conn.execute(
            tournament_results.insert(),
            [
                {
                    "id": 1,
                    "tournament_id": 1,
                    "team_id": 10,
                    "points": 100,
                    "points_reason": "CUP_WINNER",
                    "cup": "A",
                    "cup_position": "WINNER",
                    "qualifying_wins": 4,
                    "wins": 7,
                    "loses": 1,
                },
                {
                    "id": 2,
                    "tournament_id": 2,
                    "team_id": 11,
                    "points": 50,
                    "points_reason": "PLAYER_RESULT",
                    "cup": None,
                    "cup_position": None,
                    "qualifying_wins": None,
                    "wins": None,
                    "loses": None,
                },
            ],
        )
        conn.execute(
            rating_settings.insert(),
            [{"setting_name": "best_results_count", "setting_value": best_results_count}],
        )
        conn.execute(
            position_points.insert(),
            [{"position": 2, "points": 90}, {"position": 1, "points": 100}],
        )


def test_fetch_rating_config_reads_settings(engine: Engine) -> None:
    _seed(engine)
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        config = fetch_rating_config(session)

    assert config.best_results_count == 5
    assert list(config.position_points.items()) == [(1, 100), (2, 90)]


def test_fetch_rating_config_defaults_without_settings(engine: Engine) -> None:
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        config = fetch_rating_config(session)

    assert config.best_results_count == 8
    assert dict(config.position_points) == {}


def test_invalid_stored_best_results_count_raises(engine: Engine) -> None:
    _seed(engine, best_results_count="0")
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        with pytest.raises(RatingConfigurationError):
            fetch_rating_config(session)


def test_fetch_tournament_results(engine: Engine) -> None:
    _seed(engine)
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        results = fetch_tournament_results(session, 1)

    assert len(results) == 1
    result = results[0]
    assert result.result_id == 1
    assert result.points_reason is PointsReason.CUP_WINNER
    assert result.cup is Cup.A
    assert result.tournament_date == date(2024, 5, 1)
    assert result.team_players == "Anna, Bob"
    assert (result.wins, result.losses) == (7, 1)
    assert result.tournament_name == "Spring Open"


def test_fetch_player_entries_links_licensed_players(engine: Engine) -> None:
    _seed(engine)
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        entries = fetch_player_entries(session)

    assert [entry.display_name for entry in entries] == ["Anna", "Robert B", "Carl C"]
    anna, bob, carl = entries
    assert anna.gender is Gender.FEMALE
    assert [result.result_id for result in anna.results] == [1, 2]
    assert anna.results[1].tournament_manual is True
    assert bob.gender is Gender.MALE
    assert [result.result_id for result in bob.results] == [1]
    assert carl.player_id is None
    assert carl.results == ()


def test_fetch_player_entries_can_skip_unlinked_licensed(engine: Engine) -> None:
    _seed(engine)
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        entries = fetch_player_entries(session, include_unlinked_licensed=False)

    assert [entry.player_id for entry in entries] == [1, 2]


def test_rating_view_from_stored_inputs(engine: Engine) -> None:
    _seed(engine)
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        inputs = fetch_rating_inputs(session)

    table = build_rating_view(inputs.entries, inputs.config)

    assert [(rating.display_name, rating.total_points) for rating in table.ratings] == [
        ("Anna", 150),
        ("Robert B", 100),
        ("Carl C", 0),
    ]
    men = build_rating_view(inputs.entries, inputs.config, gender=Gender.MALE)
    assert [(rating.display_name, rating.rank) for rating in men.ratings] == [
        ("Robert B", 1),
        ("Carl C", 2),
    ]


def test_unsupported_stored_cup_raises_data_integrity_error(engine: Engine) -> None:
    _seed(engine)
    with engine.begin() as conn:
        conn.execute(
            tournament_results.update().where(tournament_results.c.id == 1).values(cup="C")
        )
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        with pytest.raises(DataIntegrityError, match="Unsupported stored cup"):
            fetch_tournament_results(session, 1)
