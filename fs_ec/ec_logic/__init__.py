"""Evaporative Cooling core: scoring, fusion, pruning and the control loop."""

from .config import ECConfig, ECMode
from .controller import ECResult, ECState, EvaporativeCooling, IterationRecord
from .diagnostics import build_score_table, kendall_taus
from .fusion import align_scores, compute_free_energy
from .normalization import normalize_scores
from .pruning import AttributePruner, clamp_removal_count
from .scores import RankedScoreList, ScoredAttribute, sort_by_name, sort_by_score

__all__ = [
    "AttributePruner",
    "ECConfig",
    "ECMode",
    "ECResult",
    "ECState",
    "EvaporativeCooling",
    "IterationRecord",
    "RankedScoreList",
    "ScoredAttribute",
    "align_scores",
    "build_score_table",
    "clamp_removal_count",
    "compute_free_energy",
    "kendall_taus",
    "normalize_scores",
    "sort_by_name",
    "sort_by_score",
]
