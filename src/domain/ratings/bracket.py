"""Display order and labels for cup (bracket) placements."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from domain.ratings.common import Cup, PointsReason, TournamentResult

UNRANKED_PRIORITY = 999
QUALIFICATION_LABEL = "Qualification"

# Lower sorts first. Named codes, their numeric spellings and the stored
# SEMI_FINAL/QUARTER_FINAL spellings share a priority.
POSITION_PRIORITY: dict[str, int] = {
    "WINNER": 1,
    "1": 1,
    "RUNNER_UP": 2,
    "2": 2,
    "THIRD_PLACE": 3,
    "3": 3,
    "ROUND_OF_4": 4,
    "1/2": 4,
    "SEMI_FINAL": 4,
    "ROUND_OF_8": 5,
    "1/4": 5,
    "QUARTER_FINAL": 5,
    "ROUND_OF_16": 6,
    "1/8": 6,
}

ROUND_NAMES: dict[str, str] = {
    "WINNER": "1",
    "1": "1",
    "RUNNER_UP": "2",
    "2": "2",
    "THIRD_PLACE": "3",
    "3": "3",
    "ROUND_OF_4": "1/2",
    "1/2": "1/2",
    "SEMI_FINAL": "1/2",
    "ROUND_OF_8": "1/4",
    "1/4": "1/4",
    "QUARTER_FINAL": "1/4",
    "ROUND_OF_16": "1/8",
    "1/8": "1/8",
}

_REASON_CODES: dict[PointsReason, str] = {
    PointsReason.CUP_WINNER: "WINNER",
    PointsReason.CUP_RUNNER_UP: "RUNNER_UP",
    PointsReason.CUP_THIRD_PLACE: "THIRD_PLACE",
    PointsReason.CUP_SEMI_FINAL: "ROUND_OF_4",
    PointsReason.CUP_QUARTER_FINAL: "ROUND_OF_8",
}


@dataclass(frozen=True)
class BracketEntry:
    result: TournamentResult
    priority: int
    label: str


def position_code(result: TournamentResult) -> str | None:
    """Bracket code for a result, falling back to the round named by its points reason."""
    if result.cup_position is not None and result.cup_position.strip():
        return result.cup_position.strip()
    return _REASON_CODES.get(result.points_reason)


def position_priority(code: str | None) -> int:
    if code is None:
        return UNRANKED_PRIORITY
    return POSITION_PRIORITY.get(code, UNRANKED_PRIORITY)


def position_label(code: str | None, cup: Cup | None) -> str:
    """Human label such as ``"1 A"`` or ``"1/2 B"``; qualification when no bracket applies."""
    if code is None or cup is None:
        return QUALIFICATION_LABEL
    return f"{ROUND_NAMES.get(code, code)} {cup.value}"


def result_label(result: TournamentResult) -> str:
    return position_label(position_code(result), result.cup)


def order_bracket_results(results: Sequence[TournamentResult]) -> list[TournamentResult]:
    """Stable sort on bracket priority only; ties keep their input order."""
    return sorted(results, key=lambda result: position_priority(position_code(result)))


def bracket_view(
    results: Iterable[TournamentResult],
    *,
    cup: Cup,
    tournament_id: int | None = None,
) -> list[BracketEntry]:
    """Ordered, labelled results of one cup, optionally restricted to one tournament."""
    selected = [
        result
        for result in results
        if result.cup is cup and (tournament_id is None or result.tournament_id == tournament_id)
    ]
    return [
        BracketEntry(
            result=result,
            priority=position_priority(position_code(result)),
            label=result_label(result),
        )
        for result in order_bracket_results(selected)
    ]


def best_cup_result_per_team(results: Iterable[TournamentResult]) -> list[TournamentResult]:
    """Keep each team's best bracket placement, in first-seen team order."""
    best: dict[int, TournamentResult] = {}
    for result in results:
        if result.cup is None:
            continue
        existing = best.get(result.team_id)
        if existing is None or position_priority(position_code(result)) < position_priority(
            position_code(existing)
        ):
            best[result.team_id] = result
    return list(best.values())


__all__ = [
    "BracketEntry",
    "POSITION_PRIORITY",
    "QUALIFICATION_LABEL",
    "UNRANKED_PRIORITY",
    "best_cup_result_per_team",
    "bracket_view",
    "order_bracket_results",
    "position_code",
    "position_label",
    "position_priority",
    "result_label",
]
