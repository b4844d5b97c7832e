"""Name alignment of engine scores and the free-energy combination."""

from __future__ import annotations

import logging
from typing import List, Tuple

from fs_ec.exceptions import ConsistencyError

from .config import ECMode
from .scores import RankedScoreList, ScoredAttribute, sort_by_name

logger = logging.getLogger(__name__)


def align_scores(
    main_effect_scores: RankedScoreList,
    interaction_scores: RankedScoreList,
) -> List[Tuple[str, float, float]]:
    """Pair main-effect and interaction scores by attribute name.

    Returns ``(name, main_effect_score, interaction_score)`` triples in
    ascending name order.
    """

    if len(main_effect_scores) != len(interaction_scores):
        raise ConsistencyError(
            "Score lists are unequal. Main effect: "
            f"{len(main_effect_scores)} vs. interaction: {len(interaction_scores)}."
        )

    main_sorted = sort_by_name(main_effect_scores)
    interaction_sorted = sort_by_name(interaction_scores)
    aligned = []
    for main_entry, interaction_entry in zip(main_sorted, interaction_sorted):
        if main_entry.name != interaction_entry.name:
            main_names = {entry.name for entry in main_sorted}
            interaction_names = {entry.name for entry in interaction_sorted}
            raise ConsistencyError(
                "Score lists describe different attributes. Only in main effect: "
                f"{sorted(main_names - interaction_names)}; only in interaction: "
                f"{sorted(interaction_names - main_names)}."
            )
        aligned.append((main_entry.name, main_entry.score, interaction_entry.score))
    return aligned


def compute_free_energy(
    main_effect_scores: RankedScoreList,
    interaction_scores: RankedScoreList,
    mode: ECMode,
    temperature: float = 1.0,
) -> RankedScoreList:
    """Fuse normalized scores into free-energy scores.

    F = E + T * S, with E the interaction score and S the main-effect score,
    both oriented so that higher is better. Single-engine modes pass that
    engine's scores through.
    """

    mode = ECMode.parse(mode)
    if mode is ECMode.BOTH:
        return [
            ScoredAttribute(interaction + temperature * main_effect, name)
            for name, main_effect, interaction in align_scores(main_effect_scores, interaction_scores)
        ]
    if mode is ECMode.MAIN_EFFECT_ONLY:
        return [ScoredAttribute(entry.score, entry.name) for entry in main_effect_scores]
    return [ScoredAttribute(entry.score, entry.name) for entry in interaction_scores]
