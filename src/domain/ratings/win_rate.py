"""Win/loss statistics for display."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from domain.ratings.common import CountedResult, PlayerRating, PointsReason, TournamentResult
from domain.ratings.errors import DataIntegrityError

DEFAULT_QUALIFYING_ROUNDS = 5

_CUP_BONUS_WINS: dict[PointsReason, int] = {
    PointsReason.CUP_WINNER: 3,
    PointsReason.CUP_RUNNER_UP: 2,
    PointsReason.CUP_THIRD_PLACE: 2,
    PointsReason.CUP_SEMI_FINAL: 1,
}

_CUP_EXTRA_LOSSES: dict[PointsReason, int] = {
    PointsReason.CUP_RUNNER_UP: 1,
    PointsReason.CUP_THIRD_PLACE: 1,
    PointsReason.CUP_SEMI_FINAL: 1,
}


@dataclass(frozen=True)
class WinRateStats:
    total_wins: int
    total_losses: int
    win_rate: float


def calculate_win_rate(results: Iterable[TournamentResult | CountedResult]) -> WinRateStats:
    """Sum wins and losses over non-manual results.

    Manually entered tournaments carry no match data and are skipped. The rate
    is a percentage, and 0.0 when no games were played.
    """
    total_wins = 0
    total_losses = 0
    for item in results:
        result = item.result if isinstance(item, CountedResult) else item
        if result.tournament_manual:
            continue
        wins = result.wins or 0
        losses = result.losses or 0
        if wins < 0 or losses < 0:
            raise DataIntegrityError(
                f"tournament_id={result.tournament_id} team_id={result.team_id} has "
                f"negative wins/losses ({wins}/{losses})"
            )
        total_wins += wins
        total_losses += losses

    games = total_wins + total_losses
    win_rate = total_wins / games * 100.0 if games > 0 else 0.0
    return WinRateStats(total_wins=total_wins, total_losses=total_losses, win_rate=win_rate)


def player_win_rate(rating: PlayerRating) -> WinRateStats:
    return calculate_win_rate(rating.all_results)


def derive_wins_losses(
    reason: PointsReason | str,
    qualifying_wins: int,
    *,
    rounds: int = DEFAULT_QUALIFYING_ROUNDS,
) -> tuple[int, int]:
    """Cumulative (wins, losses) from qualifying wins plus the bracket run."""
    points_reason = PointsReason.parse(reason)
    if qualifying_wins < 0:
        raise DataIntegrityError(f"qualifying_wins must be >= 0, got {qualifying_wins}")
    if rounds < 1:
        raise ValueError("rounds must be >= 1")

    wins = qualifying_wins + _CUP_BONUS_WINS.get(points_reason, 0)
    losses = max(0, rounds - qualifying_wins) + _CUP_EXTRA_LOSSES.get(points_reason, 0)
    return wins, losses


__all__ = [
    "DEFAULT_QUALIFYING_ROUNDS",
    "WinRateStats",
    "calculate_win_rate",
    "derive_wins_losses",
    "player_win_rate",
]
