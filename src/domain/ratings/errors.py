"""Typed failures raised by the rating engine."""

from __future__ import annotations


class RatingError(Exception):
    """Base class for rating-engine failures."""


class RatingConfigurationError(RatingError, ValueError):
    """Configuration is unusable; no rating may be produced from it."""


class UnknownPointsReasonError(RatingConfigurationError):
    """A points reason value is not one of the supported reasons."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Unknown points reason: {value!r}")
        self.value = value


class MissingPositionPointsError(RatingConfigurationError):
    """A finishing position has no entry in the position-points table."""

    def __init__(self, position: int, cup: str | None = None) -> None:
        where = f" for cup {cup}" if cup is not None else ""
        super().__init__(f"No points configured for position {position}{where}")
        self.position = position
        self.cup = cup


class DataIntegrityError(RatingError, ValueError):
    """A result record (or a player's result set) has an invalid shape."""


__all__ = [
    "DataIntegrityError",
    "MissingPositionPointsError",
    "RatingConfigurationError",
    "RatingError",
    "UnknownPointsReasonError",
]
