"""Shared TOML loading for named rating-system configs."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, TypeVar
import tomllib

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BaseSystemConfig:
    """Name and origin shared by every loaded rating system."""

    name: str
    description: str | None
    file_path: Path

    def as_config_json(self) -> dict[str, Any]:
        raise NotImplementedError


T = TypeVar("T", bound=BaseSystemConfig)


def read_toml(file_path: Path) -> dict[str, Any]:
    with file_path.open("rb") as file:
        return tomllib.load(file)


def load_system_configs(
    config_dir: Path,
    parser: Callable[[dict[str, Any], Path], T],
    *,
    duplicate_name_label: str = "rating",
) -> list[T]:
    """Parse every ``*.toml`` file in ``config_dir`` (sorted by file name).

    Dot-prefixed files are ignored. Two files declaring the same system name
    fail the whole load.
    """
    if not config_dir.exists():
        raise FileNotFoundError(f"Config directory not found: {config_dir}")
    if not config_dir.is_dir():
        raise NotADirectoryError(f"Config path is not a directory: {config_dir}")

    config_files = [path for path in sorted(config_dir.glob("*.toml")) if not path.name.startswith(".")]
    if not config_files:
        raise ValueError(f"No .toml config files found in: {config_dir}")

    systems = [parser(read_toml(file_path), file_path) for file_path in config_files]

    duplicates = sorted(name for name, count in Counter(s.name for s in systems).items() if count > 1)
    if duplicates:
        raise ValueError(
            f"Duplicate {duplicate_name_label} system names found in {config_dir}: {duplicates}"
        )

    logger.debug("Loaded %d %s system configs from %s", len(systems), duplicate_name_label, config_dir)
    return systems


__all__ = ["BaseSystemConfig", "load_system_configs", "read_toml"]
