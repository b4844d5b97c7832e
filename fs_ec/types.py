"""Shared dataclasses for experiment results."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

from fs_ec.ec_logic import ECConfig, ECResult


@dataclass
class ExperimentResult:
    dataset: str
    run_dir: Path
    ec_config: ECConfig
    ec_result: ECResult
    scores_path: Path
    metadata: Dict[str, str] = field(default_factory=dict)
