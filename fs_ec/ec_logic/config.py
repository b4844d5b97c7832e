"""Immutable run configuration for the Evaporative Cooling controller."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from fs_ec.exceptions import ConfigurationError


class ECMode(str, Enum):
    """Which ranking engines take part in a run."""

    BOTH = "both"
    MAIN_EFFECT_ONLY = "main_effect"
    INTERACTION_ONLY = "interaction"

    @classmethod
    def parse(cls, value) -> "ECMode":
        if isinstance(value, ECMode):
            return value
        key = str(value).strip().lower()
        try:
            return _MODE_ALIASES[key]
        except KeyError as exc:
            raise ConfigurationError(
                f"Unknown EC algorithm steps '{value}'; expected one of: all, main_effect or interaction."
            ) from exc

    @property
    def uses_main_effect(self) -> bool:
        return self in (ECMode.BOTH, ECMode.MAIN_EFFECT_ONLY)

    @property
    def uses_interaction(self) -> bool:
        return self in (ECMode.BOTH, ECMode.INTERACTION_ONLY)

    @property
    def output_suffix(self) -> str:
        return _OUTPUT_SUFFIXES[self]


_MODE_ALIASES: Dict[str, ECMode] = {
    "all": ECMode.BOTH,
    "both": ECMode.BOTH,
    "main_effect": ECMode.MAIN_EFFECT_ONLY,
    "main": ECMode.MAIN_EFFECT_ONLY,
    "rj": ECMode.MAIN_EFFECT_ONLY,
    "interaction": ECMode.INTERACTION_ONLY,
    "relieff": ECMode.INTERACTION_ONLY,
    "rf": ECMode.INTERACTION_ONLY,
}

_OUTPUT_SUFFIXES: Dict[ECMode, str] = {
    ECMode.BOTH: ".ec",
    ECMode.MAIN_EFFECT_ONLY: ".ec.main",
    ECMode.INTERACTION_ONLY: ".ec.interaction",
}


@dataclass(frozen=True)
class ECConfig:
    """Settings fixed for the lifetime of one EC run."""

    target_attributes: int
    mode: ECMode = ECMode.BOTH
    remove_n: Optional[int] = None
    remove_percent: Optional[float] = None
    temperature: float = 1.0
    out_files_prefix: str = "ec_scores"
    log_diagnostics: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", ECMode.parse(self.mode))
        if self.target_attributes is None or self.target_attributes < 1:
            raise ConfigurationError(
                f"Target attribute count must be at least 1, got {self.target_attributes}."
            )
        if self.remove_n is not None and self.remove_percent is not None:
            raise ConfigurationError("Specify either a fixed removal count or a removal percentage, not both.")
        if self.remove_n is None and self.remove_percent is None:
            object.__setattr__(self, "remove_n", 1)
        if self.remove_n is not None and self.remove_n < 0:
            raise ConfigurationError(f"Removal count must be non-negative, got {self.remove_n}.")
        if self.remove_percent is not None and not 0 < self.remove_percent <= 100:
            raise ConfigurationError(f"Removal percentage must be in (0, 100], got {self.remove_percent}.")
        if not math.isfinite(self.temperature):
            raise ConfigurationError(f"Temperature must be finite, got {self.temperature}.")

    @property
    def percentage_based(self) -> bool:
        return self.remove_percent is not None

    def removal_count(self, working_attributes: int) -> int:
        """Attributes to remove this round, before clamping to the target.

        Percentages apply to the current (already shrunk) working set.
        """

        if self.remove_percent is not None:
            return int(math.floor(self.remove_percent * working_attributes / 100.0))
        return int(self.remove_n)

    @classmethod
    def from_dict(cls, ec_cfg: Dict, out_files_prefix: str = "ec_scores") -> "ECConfig":
        remove_n = ec_cfg.get("iter_remove_n")
        remove_percent = ec_cfg.get("iter_remove_percent")
        return cls(
            target_attributes=ec_cfg.get("num_target", 0),
            mode=ECMode.parse(ec_cfg.get("algorithm_steps", "all")),
            remove_n=None if remove_n is None else int(remove_n),
            remove_percent=None if remove_percent is None else float(remove_percent),
            temperature=float(ec_cfg.get("temperature", 1.0)),
            out_files_prefix=out_files_prefix,
            log_diagnostics=bool(ec_cfg.get("log_diagnostics", False)),
        )
