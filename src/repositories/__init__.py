"""Database repository helpers."""

from repositories.rating_inputs import (
    RatingInputs,
    ensure_schema,
    fetch_player_entries,
    fetch_rating_config,
    fetch_rating_inputs,
    fetch_tournament_results,
)

__all__ = [
    "RatingInputs",
    "ensure_schema",
    "fetch_player_entries",
    "fetch_rating_config",
    "fetch_rating_inputs",
    "fetch_tournament_results",
]
