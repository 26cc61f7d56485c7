"""Load rating, match and inactivity settings from a TOML file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from domain.config_base import BaseSystemConfig, load_system_config
from domain.elo.calculator import EloParameters
from domain.inactivity import InactivityPolicy
from domain.validation import MatchRules

ROOT_DIR = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_PATH = ROOT_DIR / "configs" / "padel" / "default.toml"


@dataclass(frozen=True)
class PadelSystemConfig(BaseSystemConfig):
    """Everything the rating operations need besides a database."""

    elo: EloParameters = field(default_factory=EloParameters)
    match_rules: MatchRules = field(default_factory=MatchRules)
    inactivity: InactivityPolicy = field(default_factory=InactivityPolicy)

    def as_config_json(self) -> dict[str, Any]:
        return {
            "initial_rating": self.elo.initial_rating,
            "k_factor": self.elo.k_factor,
            "scale_factor": self.elo.scale_factor,
            "significant_win_threshold": self.elo.significant_win_threshold,
            "significant_win_bonus": self.elo.significant_win_bonus,
            "max_score": self.match_rules.max_score,
            "inactive_days": self.inactivity.inactive_days,
            "inactivity_penalty": self.inactivity.penalty,
            "inactivity_cooldown_hours": self.inactivity.cooldown_hours,
        }


def load_padel_config(file_path: Path = DEFAULT_CONFIG_PATH) -> PadelSystemConfig:
    """Load and validate one padel rating config file."""
    return load_system_config(file_path, _parse_padel_config)


def _parse_padel_config(raw: dict[str, Any], file_path: Path) -> PadelSystemConfig:
    system_raw = raw.get("system", {})
    elo_raw = raw.get("elo", {})
    match_raw = raw.get("match", {})
    inactivity_raw = raw.get("inactivity", {})

    name = str(system_raw.get("name", "")).strip()
    if not name:
        raise ValueError(f"{file_path}: [system].name is required")

    description_value = system_raw.get("description")
    description = None if description_value is None else str(description_value)

    elo = EloParameters(
        initial_rating=int(elo_raw.get("initial_rating", 500)),
        k_factor=float(elo_raw.get("k_factor", 32.0)),
        scale_factor=float(elo_raw.get("scale_factor", 400.0)),
        significant_win_threshold=int(elo_raw.get("significant_win_threshold", 5)),
        significant_win_bonus=float(elo_raw.get("significant_win_bonus", 3.0)),
    )
    match_rules = MatchRules(max_score=int(match_raw.get("max_score", 7)))
    inactivity = InactivityPolicy(
        inactive_days=int(inactivity_raw.get("inactive_days", 7)),
        penalty=int(inactivity_raw.get("penalty", 10)),
        cooldown_hours=int(inactivity_raw.get("cooldown_hours", 24)),
    )
    _validate(file_path=file_path, elo=elo, match_rules=match_rules, inactivity=inactivity)

    return PadelSystemConfig(
        name=name,
        description=description,
        file_path=file_path,
        elo=elo,
        match_rules=match_rules,
        inactivity=inactivity,
    )


def _validate(
    *,
    file_path: Path,
    elo: EloParameters,
    match_rules: MatchRules,
    inactivity: InactivityPolicy,
) -> None:
    if elo.initial_rating < 0:
        raise ValueError(f"{file_path}: [elo].initial_rating must be >= 0")
    if elo.k_factor <= 0.0:
        raise ValueError(f"{file_path}: [elo].k_factor must be > 0")
    if elo.scale_factor <= 0.0:
        raise ValueError(f"{file_path}: [elo].scale_factor must be > 0")
    if elo.significant_win_threshold <= 0:
        raise ValueError(f"{file_path}: [elo].significant_win_threshold must be > 0")
    if elo.significant_win_bonus < 0.0:
        raise ValueError(f"{file_path}: [elo].significant_win_bonus must be >= 0")
    if match_rules.max_score <= 0:
        raise ValueError(f"{file_path}: [match].max_score must be > 0")
    if inactivity.inactive_days <= 0:
        raise ValueError(f"{file_path}: [inactivity].inactive_days must be > 0")
    if inactivity.penalty < 0:
        raise ValueError(f"{file_path}: [inactivity].penalty must be >= 0")
    if inactivity.cooldown_hours < 0:
        raise ValueError(f"{file_path}: [inactivity].cooldown_hours must be >= 0")


__all__ = ["DEFAULT_CONFIG_PATH", "PadelSystemConfig", "load_padel_config"]
