"""Tests for win-rate statistics and win/loss derivation."""

from __future__ import annotations

import pytest

from domain.ratings.aggregator import aggregate_ratings
from domain.ratings.common import CountedResult, Gender, PlayerEntry, PointsReason, TournamentResult
from domain.ratings.errors import DataIntegrityError, UnknownPointsReasonError
from domain.ratings.win_rate import calculate_win_rate, derive_wins_losses, player_win_rate


def _result(
    *,
    wins: int | None,
    losses: int | None,
    manual: bool = False,
    points: int = 0,
    tournament_id: int = 1,
) -> TournamentResult:
    return TournamentResult(
        tournament_id=tournament_id,
        team_id=1,
        points=points,
        points_reason=PointsReason.PLAYER_RESULT,
        tournament_manual=manual,
        wins=wins,
        losses=losses,
    )


def test_manual_tournaments_are_excluded() -> None:
    stats = calculate_win_rate(
        [
            _result(wins=4, losses=1),
            _result(wins=3, losses=2),
            _result(wins=0, losses=0, manual=True),
        ]
    )

    assert stats.total_wins == 7
    assert stats.total_losses == 3
    assert stats.win_rate == pytest.approx(70.0)


def test_manual_results_with_match_data_are_still_skipped() -> None:
    stats = calculate_win_rate(
        [_result(wins=2, losses=0), _result(wins=0, losses=9, manual=True)]
    )

    assert stats.total_losses == 0
    assert stats.win_rate == pytest.approx(100.0)


def test_no_games_gives_zero_rate() -> None:
    assert calculate_win_rate([]).win_rate == 0.0
    assert calculate_win_rate([_result(wins=None, losses=None)]).win_rate == 0.0
    assert calculate_win_rate([_result(wins=0, losses=0)]).win_rate == 0.0


def test_counted_and_uncounted_results_both_contribute() -> None:
    results = [
        CountedResult(result=_result(wins=1, losses=1), is_counted=True),
        CountedResult(result=_result(wins=3, losses=3), is_counted=False),
    ]

    stats = calculate_win_rate(results)

    assert (stats.total_wins, stats.total_losses) == (4, 4)
    assert stats.win_rate == pytest.approx(50.0)


def test_negative_counts_raise() -> None:
    with pytest.raises(DataIntegrityError, match="negative wins/losses"):
        calculate_win_rate([_result(wins=-1, losses=2)])


def test_player_win_rate_uses_all_results() -> None:
    entry = PlayerEntry(
        player_id=1,
        player_name="Anna",
        gender=Gender.FEMALE,
        results=(
            _result(wins=4, losses=0, points=100, tournament_id=1),
            _result(wins=3, losses=0, points=80, tournament_id=2),
            _result(wins=0, losses=0, points=50, tournament_id=3, manual=True),
        ),
    )
    rating = aggregate_ratings([entry], 2).ratings[0]

    stats = player_win_rate(rating)

    assert rating.total_points == 180
    assert stats.total_wins == 7
    assert stats.win_rate == pytest.approx(100.0)


@pytest.mark.parametrize(
    ("reason", "qualifying_wins", "expected"),
    [
        (PointsReason.CUP_WINNER, 4, (7, 1)),
        (PointsReason.CUP_RUNNER_UP, 3, (5, 3)),
        (PointsReason.CUP_THIRD_PLACE, 3, (5, 3)),
        (PointsReason.CUP_SEMI_FINAL, 5, (6, 1)),
        (PointsReason.CUP_QUARTER_FINAL, 3, (3, 2)),
        (PointsReason.QUALIFYING_LOW, 1, (1, 4)),
        ("qualifying_high", 3, (3, 2)),
    ],
)
def test_derive_wins_losses(
    reason: PointsReason | str,
    qualifying_wins: int,
    expected: tuple[int, int],
) -> None:
    assert derive_wins_losses(reason, qualifying_wins) == expected


def test_derive_wins_losses_validates_inputs() -> None:
    with pytest.raises(DataIntegrityError):
        derive_wins_losses(PointsReason.CUP_WINNER, -1)
    with pytest.raises(UnknownPointsReasonError):
        derive_wins_losses("CUP_FOURTH", 2)
