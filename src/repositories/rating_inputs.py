"""Read-only queries supplying results and configuration to the rating engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    select,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from domain.ratings.common import Cup, Gender, PlayerEntry, PointsReason, TournamentResult
from domain.ratings.config import DEFAULT_BEST_RESULTS_COUNT, QualifyingPoints, RatingConfig
from domain.ratings.errors import DataIntegrityError

logger = logging.getLogger(__name__)

BEST_RESULTS_COUNT_SETTING = "best_results_count"

metadata = MetaData()

players = Table(
    "players",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(255), nullable=False),
    Column("gender", String(16)),
)

licensed_players = Table(
    "licensed_players",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("player_id", Integer, ForeignKey("players.id")),
    Column("full_name", String(255)),
    Column("gender", String(16)),
    Column("is_active", Boolean, nullable=False, default=True),
)

tournaments = Table(
    "tournaments",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(255), nullable=False),
    Column("date", Date),
    Column("manual", Boolean, nullable=False, default=False),
)

teams = Table(
    "teams",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(255)),
)

team_members = Table(
    "team_members",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("team_id", Integer, ForeignKey("teams.id"), nullable=False),
    Column("player_id", Integer, ForeignKey("players.id"), nullable=False),
)

tournament_results = Table(
    "tournament_results",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("tournament_id", Integer, ForeignKey("tournaments.id"), nullable=False),
    Column("team_id", Integer, ForeignKey("teams.id"), nullable=False),
    Column("points", Integer, nullable=False, default=0),
    Column("points_reason", String(32), nullable=False),
    Column("cup", String(1)),
    Column("cup_position", String(16)),
    Column("qualifying_wins", Integer),
    Column("wins", Integer),
    Column("loses", Integer),
)

rating_settings = Table(
    "rating_settings",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("setting_name", String(64), nullable=False, unique=True),
    Column("setting_value", String(255), nullable=False),
)

position_points = Table(
    "position_points",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("position", Integer, nullable=False, unique=True),
    Column("points", Integer, nullable=False),
)


@dataclass(frozen=True)
class RatingInputs:
    """Configuration and result feed read from one session."""

    config: RatingConfig
    entries: list[PlayerEntry]


def _optional_int(value: object) -> int | None:
    if value is None:
        return None
    return int(value)


def _as_date(value: object) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def _parse_cup(value: object) -> Cup | None:
    if value is None or str(value).strip() == "":
        return None
    try:
        return Cup(str(value).strip().upper())
    except ValueError as exc:
        raise DataIntegrityError(f"Unsupported stored cup: {value!r}") from exc


def fetch_rating_config(
    session: Session,
    *,
    qualifying: QualifyingPoints | None = None,
) -> RatingConfig:
    """Read best-results count and the position-points table into a validated snapshot."""
    setting_value = session.execute(
        select(rating_settings.c.setting_value).where(
            rating_settings.c.setting_name == BEST_RESULTS_COUNT_SETTING
        )
    ).scalar_one_or_none()
    best_results_count: object = (
        DEFAULT_BEST_RESULTS_COUNT if setting_value is None else setting_value
    )

    rows = session.execute(
        select(position_points.c.position, position_points.c.points).order_by(
            position_points.c.position
        )
    ).all()
    if not rows:
        logger.warning("position_points table is empty")

    return RatingConfig.from_values(
        best_results_count=best_results_count,
        position_points={int(row.position): int(row.points) for row in rows},
        qualifying=qualifying,
    )


def _team_player_names(session: Session) -> dict[int, str]:
    rows = session.execute(
        select(team_members.c.team_id, players.c.name)
        .select_from(team_members.join(players, team_members.c.player_id == players.c.id))
        .order_by(team_members.c.team_id, team_members.c.id)
    ).all()
    names: dict[int, list[str]] = {}
    for row in rows:
        names.setdefault(int(row.team_id), []).append(str(row.name))
    return {team_id: ", ".join(members) for team_id, members in names.items()}


def _result_columns() -> list[Any]:
    return [
        tournament_results.c.id.label("result_id"),
        tournament_results.c.tournament_id,
        tournament_results.c.team_id,
        tournament_results.c.points,
        tournament_results.c.points_reason,
        tournament_results.c.cup,
        tournament_results.c.cup_position,
        tournament_results.c.qualifying_wins,
        tournament_results.c.wins,
        tournament_results.c.loses,
        tournaments.c.name.label("tournament_name"),
        tournaments.c.date.label("tournament_date"),
        tournaments.c.manual.label("tournament_manual"),
    ]


def _results_with_tournaments():
    return tournament_results.join(
        tournaments,
        tournament_results.c.tournament_id == tournaments.c.id,
    )


def _row_to_result(row: Any, team_players: dict[int, str]) -> TournamentResult:
    team_id = int(row["team_id"])
    return TournamentResult(
        result_id=int(row["result_id"]),
        tournament_id=int(row["tournament_id"]),
        team_id=team_id,
        points=int(row["points"]),
        points_reason=PointsReason.parse(row["points_reason"]),
        tournament_date=_as_date(row["tournament_date"]),
        cup=_parse_cup(row["cup"]),
        cup_position=row["cup_position"],
        qualifying_wins=_optional_int(row["qualifying_wins"]),
        wins=_optional_int(row["wins"]),
        losses=_optional_int(row["loses"]),
        tournament_manual=bool(row["tournament_manual"]),
        team_players=team_players.get(team_id, ""),
        tournament_name=row["tournament_name"],
    )


def fetch_tournament_results(session: Session, tournament_id: int) -> list[TournamentResult]:
    """All results of one tournament in stored order."""
    team_players = _team_player_names(session)
    rows = session.execute(
        select(*_result_columns())
        .select_from(_results_with_tournaments())
        .where(tournament_results.c.tournament_id == tournament_id)
        .order_by(tournament_results.c.id)
    ).mappings().all()
    return [_row_to_result(row, team_players) for row in rows]


def fetch_player_entries(
    session: Session,
    *,
    include_unlinked_licensed: bool = True,
) -> list[PlayerEntry]:
    """One entry per player with every result of the teams the player played in.

    Licensed names replace player names when linked. Active licensed players
    without a player record become entries keyed by their licensed name.
    """
    team_players = _team_player_names(session)

    licensed_rows = session.execute(
        select(
            licensed_players.c.player_id,
            licensed_players.c.full_name,
            licensed_players.c.gender,
            licensed_players.c.is_active,
        ).order_by(licensed_players.c.id)
    ).all()
    licensed_by_player: dict[int, Any] = {}
    unlinked_licensed: list[Any] = []
    for row in licensed_rows:
        if row.player_id is None:
            if row.is_active and row.full_name:
                unlinked_licensed.append(row)
        else:
            licensed_by_player.setdefault(int(row.player_id), row)

    result_rows = session.execute(
        select(*_result_columns(), team_members.c.player_id)
        .select_from(
            _results_with_tournaments().join(
                team_members,
                team_members.c.team_id == tournament_results.c.team_id,
            )
        )
        .order_by(team_members.c.player_id, tournament_results.c.id)
    ).mappings().all()
    results_by_player: dict[int, list[TournamentResult]] = {}
    for row in result_rows:
        results_by_player.setdefault(int(row["player_id"]), []).append(
            _row_to_result(row, team_players)
        )

    player_rows = session.execute(
        select(players.c.id, players.c.name, players.c.gender).order_by(players.c.name, players.c.id)
    ).all()

    entries: list[PlayerEntry] = []
    for row in player_rows:
        player_id = int(row.id)
        licensed = licensed_by_player.get(player_id)
        gender = Gender.parse(row.gender)
        if gender is Gender.UNKNOWN and licensed is not None:
            gender = Gender.parse(licensed.gender)
        entries.append(
            PlayerEntry(
                player_id=player_id,
                player_name=row.name,
                licensed_name=licensed.full_name if licensed is not None else None,
                gender=gender,
                results=tuple(results_by_player.get(player_id, ())),
            )
        )

    if include_unlinked_licensed:
        for row in unlinked_licensed:
            entries.append(
                PlayerEntry(
                    player_id=None,
                    licensed_name=row.full_name,
                    gender=Gender.parse(row.gender),
                )
            )

    return entries


def fetch_rating_inputs(
    session: Session,
    *,
    qualifying: QualifyingPoints | None = None,
    include_unlinked_licensed: bool = True,
) -> RatingInputs:
    """Configuration and entries read together so one computation sees one snapshot."""
    config = fetch_rating_config(session, qualifying=qualifying)
    entries = fetch_player_entries(session, include_unlinked_licensed=include_unlinked_licensed)
    return RatingInputs(config=config, entries=entries)


def ensure_schema(engine: Engine) -> None:
    """Create the rating input tables (used by local fixtures and tests)."""
    metadata.create_all(engine)


__all__ = [
    "BEST_RESULTS_COUNT_SETTING",
    "RatingInputs",
    "ensure_schema",
    "fetch_player_entries",
    "fetch_rating_config",
    "fetch_rating_inputs",
    "fetch_tournament_results",
    "metadata",
]
