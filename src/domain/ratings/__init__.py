"""Rating aggregation and ranking engine."""

from domain.ratings.common import (
    CountedResult,
    Cup,
    Gender,
    PlayerEntry,
    PlayerRating,
    PointsReason,
    TournamentResult,
)
from domain.ratings.config import RatingConfig
from domain.ratings.errors import (
    DataIntegrityError,
    MissingPositionPointsError,
    RatingConfigurationError,
    RatingError,
    UnknownPointsReasonError,
)

__all__ = [
    "CountedResult",
    "Cup",
    "DataIntegrityError",
    "Gender",
    "MissingPositionPointsError",
    "PlayerEntry",
    "PlayerRating",
    "PointsReason",
    "RatingConfig",
    "RatingConfigurationError",
    "RatingError",
    "TournamentResult",
    "UnknownPointsReasonError",
]
