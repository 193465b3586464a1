"""Tournament rating domain modules."""

from domain.ratings.common import Cup, Gender, PointsReason

__all__ = ["Cup", "Gender", "PointsReason"]
