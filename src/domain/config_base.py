"""Shared config-loading utilities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, TypeVar
import tomllib


@dataclass(frozen=True)
class BaseSystemConfig:
    """Minimal metadata shared by every TOML-defined configuration."""

    name: str
    description: str | None
    file_path: Path

    def as_config_json(self) -> dict[str, Any]:
        raise NotImplementedError


T = TypeVar("T", bound=BaseSystemConfig)


def load_system_config(
    file_path: Path,
    parser: Callable[[dict[str, Any], Path], T],
) -> T:
    """Load one TOML file and hand the raw table to ``parser``."""
    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {file_path}")
    if not file_path.is_file():
        raise IsADirectoryError(f"Config path is not a file: {file_path}")

    with file_path.open("rb") as file:
        raw = tomllib.load(file)
    return parser(raw, file_path)


__all__ = ["BaseSystemConfig", "load_system_config"]
