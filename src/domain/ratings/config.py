"""Load rating-system definitions from TOML files."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from domain.config_base import BaseSystemConfig, load_system_configs, read_toml
from domain.ratings.common import Cup
from domain.ratings.errors import RatingConfigurationError

MIN_BEST_RESULTS_COUNT = 1
MAX_BEST_RESULTS_COUNT = 50
DEFAULT_BEST_RESULTS_COUNT = 8


def validate_best_results_count(value: object, *, source: str = "best_results_count") -> int:
    """Return ``value`` as an int in the allowed range or raise."""
    if isinstance(value, bool):
        raise RatingConfigurationError(f"{source} must be an integer, got {value!r}")
    try:
        count = int(value)
    except (TypeError, ValueError) as exc:
        raise RatingConfigurationError(f"{source} must be an integer, got {value!r}") from exc
    if isinstance(value, float) and value != count:
        raise RatingConfigurationError(f"{source} must be an integer, got {value!r}")
    if count < MIN_BEST_RESULTS_COUNT or count > MAX_BEST_RESULTS_COUNT:
        raise RatingConfigurationError(
            f"{source} must be between {MIN_BEST_RESULTS_COUNT} and "
            f"{MAX_BEST_RESULTS_COUNT}, got {count}"
        )
    return count


def _freeze_points_table(raw: Mapping[Any, Any], *, source: str) -> Mapping[int, int]:
    table: dict[int, int] = {}
    for raw_position, raw_points in raw.items():
        try:
            position = int(raw_position)
        except (TypeError, ValueError) as exc:
            raise RatingConfigurationError(
                f"{source}: position {raw_position!r} is not an integer"
            ) from exc
        if position <= 0:
            raise RatingConfigurationError(f"{source}: position {position} must be > 0")
        if isinstance(raw_points, bool) or not isinstance(raw_points, int):
            raise RatingConfigurationError(
                f"{source}: points for position {position} must be an integer"
            )
        if raw_points < 0:
            raise RatingConfigurationError(
                f"{source}: points for position {position} must be >= 0"
            )
        if position in table:
            raise RatingConfigurationError(f"{source}: position {position} is defined twice")
        table[position] = raw_points
    return MappingProxyType(dict(sorted(table.items())))


@dataclass(frozen=True)
class QualifyingPoints:
    high_points: int = 3
    low_points: int = 2
    rounds: int = 5


@dataclass(frozen=True)
class RatingConfig:
    """Immutable snapshot of everything one aggregation pass depends on."""

    best_results_count: int = DEFAULT_BEST_RESULTS_COUNT
    position_points: Mapping[int, int] = field(default_factory=lambda: MappingProxyType({}))
    cup_position_points: Mapping[Cup, Mapping[int, int]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    qualifying: QualifyingPoints = field(default_factory=QualifyingPoints)

    @classmethod
    def from_values(
        cls,
        *,
        best_results_count: object = DEFAULT_BEST_RESULTS_COUNT,
        position_points: Mapping[Any, Any] | None = None,
        cup_position_points: Mapping[Any, Mapping[Any, Any]] | None = None,
        qualifying: QualifyingPoints | None = None,
    ) -> RatingConfig:
        """Validate raw values (for example from a settings table) into a snapshot."""
        cup_tables: dict[Cup, Mapping[int, int]] = {}
        for raw_cup, raw_table in (cup_position_points or {}).items():
            try:
                cup = Cup(str(raw_cup).strip().upper())
            except ValueError as exc:
                raise RatingConfigurationError(
                    f"cup_position_points: unknown cup {raw_cup!r}"
                ) from exc
            cup_tables[cup] = _freeze_points_table(
                raw_table, source=f"cup_position_points.{cup.value}"
            )

        qualifying = qualifying or QualifyingPoints()
        if qualifying.high_points < 0 or qualifying.low_points < 0:
            raise RatingConfigurationError("qualifying points must be >= 0")
        if qualifying.rounds < 1:
            raise RatingConfigurationError("qualifying rounds must be >= 1")

        return cls(
            best_results_count=validate_best_results_count(best_results_count),
            position_points=_freeze_points_table(
                position_points or {}, source="position_points"
            ),
            cup_position_points=MappingProxyType(cup_tables),
            qualifying=qualifying,
        )

    def points_table_for(self, cup: Cup | None) -> Mapping[int, int]:
        if cup is not None and cup in self.cup_position_points:
            return self.cup_position_points[cup]
        return self.position_points

    def fingerprint(self) -> tuple[Any, ...]:
        """Hashable identity of this configuration, independent of insertion order."""
        return (
            self.best_results_count,
            tuple(sorted(self.position_points.items())),
            tuple(
                (cup.value, tuple(sorted(table.items())))
                for cup, table in sorted(
                    self.cup_position_points.items(), key=lambda item: item[0].value
                )
            ),
            (self.qualifying.high_points, self.qualifying.low_points, self.qualifying.rounds),
        )


@dataclass(frozen=True)
class RatingSystemConfig(BaseSystemConfig):
    """One named rating system loaded from a TOML file."""

    parameters: RatingConfig

    def as_config_json(self) -> dict[str, Any]:
        return {
            "best_results_count": self.parameters.best_results_count,
            "position_points": {
                str(position): points
                for position, points in self.parameters.position_points.items()
            },
            "cup_position_points": {
                cup.value: {str(position): points for position, points in table.items()}
                for cup, table in self.parameters.cup_position_points.items()
            },
            "qualifying_high_points": self.parameters.qualifying.high_points,
            "qualifying_low_points": self.parameters.qualifying.low_points,
            "qualifying_rounds": self.parameters.qualifying.rounds,
        }


def load_rating_system_configs(config_dir: Path) -> list[RatingSystemConfig]:
    """Load and validate all rating system TOML config files in a directory."""
    return load_system_configs(
        config_dir,
        _parse_rating_system_config,
        duplicate_name_label="rating",
    )


def load_rating_system_config(file_path: Path) -> RatingSystemConfig:
    """Load and validate a single rating system TOML file."""
    if not file_path.is_file():
        raise FileNotFoundError(f"Config file not found: {file_path}")
    return _parse_rating_system_config(read_toml(file_path), file_path)


def _parse_rating_system_config(raw: dict[str, Any], file_path: Path) -> RatingSystemConfig:
    system_raw = raw.get("system", {})
    rating_raw = raw.get("rating", {})
    qualifying_raw = raw.get("qualifying", {})

    name = str(system_raw.get("name", "")).strip()
    if not name:
        raise RatingConfigurationError(f"{file_path}: [system].name is required")

    description_value = system_raw.get("description")
    description = None if description_value is None else str(description_value)

    best_results_count = validate_best_results_count(
        rating_raw.get("best_results_count", DEFAULT_BEST_RESULTS_COUNT),
        source=f"{file_path}: [rating].best_results_count",
    )

    qualifying = QualifyingPoints(
        high_points=_int_value(qualifying_raw, "high_points", 3, file_path=file_path),
        low_points=_int_value(qualifying_raw, "low_points", 2, file_path=file_path),
        rounds=_int_value(qualifying_raw, "rounds", 5, file_path=file_path),
    )
    if qualifying.high_points < 0:
        raise RatingConfigurationError(f"{file_path}: [qualifying].high_points must be >= 0")
    if qualifying.low_points < 0:
        raise RatingConfigurationError(f"{file_path}: [qualifying].low_points must be >= 0")
    if qualifying.rounds < 1:
        raise RatingConfigurationError(f"{file_path}: [qualifying].rounds must be >= 1")

    try:
        parameters = RatingConfig.from_values(
            best_results_count=best_results_count,
            position_points=raw.get("position_points", {}),
            cup_position_points=raw.get("cup_position_points", {}),
            qualifying=qualifying,
        )
    except RatingConfigurationError as exc:
        raise RatingConfigurationError(f"{file_path}: {exc}") from exc

    return RatingSystemConfig(
        name=name,
        description=description,
        file_path=file_path,
        parameters=parameters,
    )


def _int_value(section: dict[str, Any], key: str, default: int, *, file_path: Path) -> int:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise RatingConfigurationError(f"{file_path}: [qualifying].{key} must be an integer")
    return value


__all__ = [
    "DEFAULT_BEST_RESULTS_COUNT",
    "MAX_BEST_RESULTS_COUNT",
    "MIN_BEST_RESULTS_COUNT",
    "QualifyingPoints",
    "RatingConfig",
    "RatingSystemConfig",
    "load_rating_system_config",
    "load_rating_system_configs",
    "validate_best_results_count",
]
