"""Resolve a single tournament outcome to a point value."""

from __future__ import annotations

from enum import Enum

from domain.ratings.common import Cup, PointsReason
from domain.ratings.config import RatingConfig
from domain.ratings.errors import DataIntegrityError, MissingPositionPointsError

QUALIFYING_HIGH_MIN_WINS = 3

# Finishing position implied by each bracket round.
CUP_ROUND_POSITIONS: dict[PointsReason, int] = {
    PointsReason.CUP_WINNER: 1,
    PointsReason.CUP_RUNNER_UP: 2,
    PointsReason.CUP_THIRD_PLACE: 3,
    PointsReason.CUP_SEMI_FINAL: 4,
    PointsReason.CUP_QUARTER_FINAL: 5,
}


class MissingPointsPolicy(str, Enum):
    """What to do when a finishing position has no configured points."""

    REJECT = "reject"
    ZERO = "zero"


def qualifying_reason(qualifying_wins: int) -> PointsReason | None:
    """Map a qualifying-stage win count to its points bracket (None for zero wins)."""
    if qualifying_wins < 0:
        raise DataIntegrityError(f"qualifying_wins must be >= 0, got {qualifying_wins}")
    if qualifying_wins >= QUALIFYING_HIGH_MIN_WINS:
        return PointsReason.QUALIFYING_HIGH
    if qualifying_wins >= 1:
        return PointsReason.QUALIFYING_LOW
    return None


def lookup_position_points(
    config: RatingConfig,
    position: int,
    *,
    cup: Cup | None = None,
) -> int | None:
    """Return configured points for ``position``, or None when the table has no entry."""
    return config.points_table_for(cup).get(position)


def resolve_points(
    reason: PointsReason | str,
    config: RatingConfig,
    *,
    cup: Cup | None = None,
    position: int | None = None,
    qualifying_wins: int | None = None,
    missing: MissingPointsPolicy = MissingPointsPolicy.REJECT,
) -> int:
    """Resolve the points earned for one outcome.

    Cup rounds look up the finishing position they imply, qualifying brackets
    use the configured qualifying points, and ``PLAYER_RESULT`` looks up the
    explicit finishing ``position``. Unknown reasons raise
    UnknownPointsReasonError.

    When ``qualifying_wins`` is given for a qualifying reason, the reason must
    match the bracket those wins fall in; zero wins earn nothing.
    """
    points_reason = PointsReason.parse(reason)

    if points_reason.is_qualifying:
        if qualifying_wins is not None:
            earned = qualifying_reason(qualifying_wins)
            if earned is None:
                return 0
            if earned is not points_reason:
                raise DataIntegrityError(
                    f"{points_reason.value} does not match qualifying_wins={qualifying_wins} "
                    f"(expected {earned.value})"
                )
        if points_reason is PointsReason.QUALIFYING_HIGH:
            return config.qualifying.high_points
        return config.qualifying.low_points

    if points_reason is PointsReason.PLAYER_RESULT:
        if position is None:
            raise DataIntegrityError("PLAYER_RESULT requires a finishing position")
        if position <= 0:
            raise DataIntegrityError(f"finishing position must be > 0, got {position}")
        finishing_position = position
    else:
        finishing_position = CUP_ROUND_POSITIONS[points_reason]

    points = lookup_position_points(config, finishing_position, cup=cup)
    if points is not None:
        return points
    if missing is MissingPointsPolicy.ZERO:
        return 0
    raise MissingPositionPointsError(
        finishing_position,
        cup.value if cup is not None else None,
    )


def resolve_qualifying_points(qualifying_wins: int, config: RatingConfig) -> int:
    """Points earned in the qualifying stage alone."""
    reason = qualifying_reason(qualifying_wins)
    if reason is None:
        return 0
    return resolve_points(reason, config, qualifying_wins=qualifying_wins)


__all__ = [
    "CUP_ROUND_POSITIONS",
    "MissingPointsPolicy",
    "lookup_position_points",
    "qualifying_reason",
    "resolve_points",
    "resolve_qualifying_points",
]
