"""Best-N result selection."""

from __future__ import annotations

from collections.abc import Iterable

from domain.ratings.common import CountedResult, TournamentResult
from domain.ratings.config import validate_best_results_count


def selection_key(result: TournamentResult) -> tuple[object, ...]:
    """Total order used to pick counted results.

    Points descending, then the most recent tournament, then tournament and
    team ids ascending. Results without a date sort after dated ones.
    """
    tournament_date = result.tournament_date
    return (
        -result.points,
        tournament_date is None,
        -tournament_date.toordinal() if tournament_date is not None else 0,
        result.tournament_id,
        result.team_id,
        result.result_id if result.result_id is not None else -1,
    )


def select_best_results(
    results: Iterable[TournamentResult],
    best_results_count: int,
) -> list[CountedResult]:
    """Tag every result, marking the ``best_results_count`` highest as counted.

    The output is ordered by ``selection_key`` so it does not depend on the
    input order.
    """
    count = validate_best_results_count(best_results_count)
    ordered = sorted(results, key=selection_key)
    return [
        CountedResult(result=result, is_counted=index < count)
        for index, result in enumerate(ordered)
    ]


def counted_total(results: Iterable[CountedResult]) -> int:
    return sum(result.points for result in results if result.is_counted)


__all__ = ["counted_total", "select_best_results", "selection_key"]
