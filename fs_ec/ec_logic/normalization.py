"""Rescaling of raw engine scores into [0, 1]."""

from __future__ import annotations

import logging

from .scores import RankedScoreList, ScoredAttribute

logger = logging.getLogger(__name__)


def normalize_scores(scores: RankedScoreList, label: str = "engine") -> RankedScoreList:
    """Min-max normalize scores into [0, 1], keeping each name with its score.

    When every score is equal the list is returned unchanged and a warning is
    logged. Empty lists are returned as-is.
    """

    if not scores:
        return scores

    min_score = scores[0].score
    max_score = scores[0].score
    for entry in scores[1:]:
        if entry.score < min_score:
            min_score = entry.score
        if entry.score > max_score:
            max_score = entry.score

    if min_score == max_score:
        logger.warning(
            "%s min and max scores are the same (%.6f); scores left unnormalized.", label, min_score
        )
        return scores

    score_range = max_score - min_score
    return [ScoredAttribute((entry.score - min_score) / score_range, entry.name) for entry in scores]
