"""Combine selected results into ranked, gender-partitioned rating tables."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from domain.ratings.common import (
    CountedResult,
    Gender,
    PlayerEntry,
    PlayerRating,
    TournamentResult,
)
from domain.ratings.config import RatingConfig, validate_best_results_count
from domain.ratings.errors import DataIntegrityError
from domain.ratings.selection import counted_total, select_best_results

logger = logging.getLogger(__name__)


class RankingMode(str, Enum):
    """How ranks are assigned after sorting by total points."""

    SEQUENTIAL = "sequential"
    COMPETITION = "competition"


@dataclass(frozen=True)
class RejectedPlayer:
    identity_key: str | None
    display_name: str
    reason: str


@dataclass(frozen=True)
class RatingTable:
    best_results_count: int
    ratings: tuple[PlayerRating, ...]
    rejected: tuple[RejectedPlayer, ...] = ()

    def find(self, player_id: int) -> PlayerRating | None:
        for rating in self.ratings:
            if rating.player_id == player_id:
                return rating
        return None


@dataclass
class _MergedEntry:
    identity_key: str
    player_id: int | None
    player_name: str | None
    licensed_name: str | None
    gender: Gender
    results: list[TournamentResult]

    @property
    def display_name(self) -> str:
        return self.licensed_name or self.player_name or ""


def _merge_entries(
    entries: Iterable[PlayerEntry],
) -> tuple[list[_MergedEntry], list[tuple[Gender, RejectedPlayer]]]:
    """Collapse entries sharing an identity key; keyless entries are rejected with their gender."""
    merged: dict[str, _MergedEntry] = {}
    rejected: list[tuple[Gender, RejectedPlayer]] = []
    for entry in entries:
        key = entry.identity_key
        if key is None:
            rejected.append(
                (
                    entry.gender,
                    RejectedPlayer(
                        identity_key=None,
                        display_name=entry.display_name,
                        reason="player has neither a player id nor a licensed name",
                    ),
                )
            )
            continue

        existing = merged.get(key)
        if existing is None:
            merged[key] = _MergedEntry(
                identity_key=key,
                player_id=entry.player_id,
                player_name=entry.player_name,
                licensed_name=entry.licensed_name,
                gender=entry.gender,
                results=list(entry.results),
            )
            continue

        existing.player_name = existing.player_name or entry.player_name
        existing.licensed_name = existing.licensed_name or entry.licensed_name
        if existing.gender is Gender.UNKNOWN:
            existing.gender = entry.gender
        existing.results.extend(entry.results)
    return list(merged.values()), rejected


def _validate_results(entry: _MergedEntry) -> None:
    for result in entry.results:
        if result.points < 0:
            raise DataIntegrityError(
                f"tournament_id={result.tournament_id} team_id={result.team_id} "
                f"has negative points={result.points}"
            )


def _assign_ranks(totals: list[int], ranking_mode: RankingMode) -> list[int]:
    ranks: list[int] = []
    for index, total in enumerate(totals):
        if ranking_mode is RankingMode.COMPETITION and index > 0 and total == totals[index - 1]:
            ranks.append(ranks[-1])
        else:
            ranks.append(index + 1)
    return ranks


def _rank_merged(
    merged: Iterable[_MergedEntry],
    rejected: list[RejectedPlayer],
    count: int,
    ranking_mode: RankingMode,
) -> RatingTable:
    scored: list[tuple[_MergedEntry, int, tuple[CountedResult, ...]]] = []
    for entry in merged:
        try:
            _validate_results(entry)
        except DataIntegrityError as exc:
            logger.warning("Skipping player %s: %s", entry.identity_key, exc)
            rejected.append(
                RejectedPlayer(
                    identity_key=entry.identity_key,
                    display_name=entry.display_name,
                    reason=str(exc),
                )
            )
            continue
        counted = tuple(select_best_results(entry.results, count))
        scored.append((entry, counted_total(counted), counted))

    scored.sort(key=lambda item: -item[1])
    ranks = _assign_ranks([total for _, total, _ in scored], ranking_mode)

    ratings = tuple(
        PlayerRating(
            player_id=entry.player_id,
            display_name=entry.display_name,
            gender=entry.gender,
            total_points=total,
            rank=rank,
            all_results=counted,
            best_results=tuple(result for result in counted if result.is_counted),
        )
        for (entry, total, counted), rank in zip(scored, ranks)
    )
    return RatingTable(
        best_results_count=count,
        ratings=ratings,
        rejected=tuple(rejected),
    )


def _merged_by_gender(
    entries: Iterable[PlayerEntry],
) -> dict[Gender, tuple[list[_MergedEntry], list[RejectedPlayer]]]:
    """Merge identities first, then bucket each player by their resolved gender."""
    merged, rejected = _merge_entries(entries)
    buckets: dict[Gender, tuple[list[_MergedEntry], list[RejectedPlayer]]] = {
        gender: ([], []) for gender in Gender
    }
    for entry in merged:
        buckets[entry.gender][0].append(entry)
    for gender, player in rejected:
        buckets[gender][1].append(player)
    return buckets


def aggregate_ratings(
    entries: Iterable[PlayerEntry],
    best_results_count: int,
    *,
    ranking_mode: RankingMode = RankingMode.SEQUENTIAL,
) -> RatingTable:
    """Rank players by the sum of their best ``best_results_count`` results.

    Ties keep input order. A player whose data is invalid is left out and
    reported in ``RatingTable.rejected``; an invalid count fails the whole run.
    """
    count = validate_best_results_count(best_results_count)
    merged, rejected = _merge_entries(entries)
    return _rank_merged(merged, [player for _, player in rejected], count, ranking_mode)


def partition_by_gender(
    entries: Iterable[PlayerEntry],
    best_results_count: int,
    *,
    ranking_mode: RankingMode = RankingMode.SEQUENTIAL,
) -> dict[Gender, RatingTable]:
    """Independently ranked tables for every gender bucket.

    A player appears in exactly one bucket, with the same totals as in the
    overall table.
    """
    count = validate_best_results_count(best_results_count)
    return {
        gender: _rank_merged(merged, rejected, count, ranking_mode)
        for gender, (merged, rejected) in _merged_by_gender(entries).items()
    }


def build_rating_view(
    entries: Iterable[PlayerEntry],
    config: RatingConfig,
    *,
    gender: Gender | None = None,
    ranking_mode: RankingMode = RankingMode.SEQUENTIAL,
) -> RatingTable:
    """Rating table for one configuration snapshot, optionally for one gender."""
    if gender is None:
        return aggregate_ratings(entries, config.best_results_count, ranking_mode=ranking_mode)
    count = validate_best_results_count(config.best_results_count)
    merged, rejected = _merged_by_gender(entries)[gender]
    return _rank_merged(merged, rejected, count, ranking_mode)


__all__ = [
    "RankingMode",
    "RatingTable",
    "RejectedPlayer",
    "aggregate_ratings",
    "build_rating_view",
    "partition_by_gender",
]
