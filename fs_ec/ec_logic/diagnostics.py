"""Inspection helpers comparing the main-effect, interaction and free-energy rankings."""

from __future__ import annotations

from typing import Dict, List

import numpy as np
import pandas as pd
from scipy.stats import kendalltau

from fs_ec.exceptions import ConsistencyError

from .scores import RankedScoreList, attribute_names, sort_by_score


def _check_sizes(main_effect: RankedScoreList, interaction: RankedScoreList, free_energy: RankedScoreList) -> None:
    if len(main_effect) != len(interaction):
        raise ConsistencyError(
            f"Main-effect and interaction score lists are not the same size: "
            f"{len(main_effect)} vs. {len(interaction)}."
        )
    if len(free_energy) != len(interaction):
        raise ConsistencyError(
            f"Free-energy and interaction score lists are not the same size: "
            f"{len(free_energy)} vs. {len(interaction)}."
        )


def build_score_table(
    main_effect: RankedScoreList,
    interaction: RankedScoreList,
    free_energy: RankedScoreList,
) -> pd.DataFrame:
    """Side-by-side table of the three lists, each sorted by descending score."""

    _check_sizes(main_effect, interaction, free_energy)
    columns = {}
    for label, scores in (("E", interaction), ("S", main_effect), ("F", free_energy)):
        ordered = sort_by_score(scores, descending=True)
        columns[f"{label}_attribute"] = attribute_names(ordered)
        columns[f"{label}_score"] = [entry.score for entry in ordered]
    table = pd.DataFrame(columns)
    table.index = pd.RangeIndex(1, len(table) + 1, name="rank")
    return table


def ranking_kendall_tau(first: List[str], second: List[str]) -> float:
    """Kendall's tau between two orderings of the same attribute names."""

    position = {name: idx for idx, name in enumerate(second)}
    common = [name for name in first if name in position]
    if len(common) < 2:
        return float("nan")
    tau, _ = kendalltau(np.arange(len(common)), [position[name] for name in common])
    return float(tau)


def kendall_taus(
    main_effect: RankedScoreList,
    interaction: RankedScoreList,
    free_energy: RankedScoreList,
) -> Dict[str, float]:
    _check_sizes(main_effect, interaction, free_energy)
    main_names = attribute_names(sort_by_score(main_effect, descending=True))
    interaction_names = attribute_names(sort_by_score(interaction, descending=True))
    free_energy_names = attribute_names(sort_by_score(free_energy, descending=True))
    return {
        "main_vs_interaction": ranking_kendall_tau(main_names, interaction_names),
        "main_vs_free_energy": ranking_kendall_tau(main_names, free_energy_names),
        "interaction_vs_free_energy": ranking_kendall_tau(interaction_names, free_energy_names),
    }
