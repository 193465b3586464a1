"""Shared types for the tournament rating engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from domain.ratings.errors import UnknownPointsReasonError


class Cup(str, Enum):
    """Elimination bracket run after the qualifying stage."""

    A = "A"
    B = "B"


class Gender(str, Enum):
    """Rating table partition."""

    MALE = "male"
    FEMALE = "female"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str | None) -> Gender:
        if value is None:
            return cls.UNKNOWN
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN


class PointsReason(str, Enum):
    """Why a team earned the points recorded on a result."""

    CUP_WINNER = "CUP_WINNER"
    CUP_RUNNER_UP = "CUP_RUNNER_UP"
    CUP_THIRD_PLACE = "CUP_THIRD_PLACE"
    CUP_SEMI_FINAL = "CUP_SEMI_FINAL"
    CUP_QUARTER_FINAL = "CUP_QUARTER_FINAL"
    QUALIFYING_HIGH = "QUALIFYING_HIGH"
    QUALIFYING_LOW = "QUALIFYING_LOW"
    PLAYER_RESULT = "PLAYER_RESULT"

    @classmethod
    def parse(cls, value: PointsReason | str) -> PointsReason:
        """Return the reason named by ``value`` or raise UnknownPointsReasonError."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError as exc:
            raise UnknownPointsReasonError(value) from exc

    @property
    def is_cup(self) -> bool:
        return self.value.startswith("CUP_")

    @property
    def is_qualifying(self) -> bool:
        return self.value.startswith("QUALIFYING_")


@dataclass(frozen=True)
class TournamentResult:
    """One team's recorded outcome in one tournament."""

    tournament_id: int
    team_id: int
    points: int
    points_reason: PointsReason
    tournament_date: date | None = None
    cup: Cup | None = None
    cup_position: str | None = None
    qualifying_wins: int | None = None
    wins: int | None = None
    losses: int | None = None
    tournament_manual: bool = False
    team_players: str = ""
    tournament_name: str | None = None
    result_id: int | None = None


@dataclass(frozen=True)
class CountedResult:
    """A result tagged with whether it contributes to the player's total."""

    result: TournamentResult
    is_counted: bool

    @property
    def points(self) -> int:
        return self.result.points


@dataclass(frozen=True)
class PlayerEntry:
    """Aggregator input: one player's identity and full result list."""

    player_id: int | None
    player_name: str | None = None
    licensed_name: str | None = None
    gender: Gender = Gender.UNKNOWN
    results: tuple[TournamentResult, ...] = ()

    @property
    def display_name(self) -> str:
        return self.licensed_name or self.player_name or ""

    @property
    def identity_key(self) -> str | None:
        """Key used for aggregation; unmatched licensed entries key on their name."""
        if self.player_id is not None:
            return f"player:{self.player_id}"
        if self.licensed_name:
            return f"licensed:{self.licensed_name}"
        return None


@dataclass(frozen=True)
class PlayerRating:
    """Computed rating row for one player."""

    player_id: int | None
    display_name: str
    gender: Gender
    total_points: int
    rank: int
    all_results: tuple[CountedResult, ...]
    best_results: tuple[CountedResult, ...]


__all__ = [
    "CountedResult",
    "Cup",
    "Gender",
    "PlayerEntry",
    "PlayerRating",
    "PointsReason",
    "TournamentResult",
]
