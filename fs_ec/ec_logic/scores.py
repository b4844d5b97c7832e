"""Scored attributes and ranked score lists."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

import pandas as pd


@dataclass(frozen=True)
class ScoredAttribute:
    """A single (score, attribute name) pair."""

    score: float
    name: str


RankedScoreList = List[ScoredAttribute]


def sort_by_score(scores: Iterable[ScoredAttribute], descending: bool = False) -> RankedScoreList:
    return sorted(scores, key=lambda entry: entry.score, reverse=descending)


def sort_by_name(scores: Iterable[ScoredAttribute]) -> RankedScoreList:
    return sorted(scores, key=lambda entry: entry.name)


def attribute_names(scores: Iterable[ScoredAttribute]) -> List[str]:
    return [entry.name for entry in scores]


def scores_from_series(series: pd.Series) -> RankedScoreList:
    """Build a ranked list from a Series indexed by attribute name, keeping its order."""

    return [ScoredAttribute(float(value), str(name)) for name, value in series.items()]


def scores_to_series(scores: Iterable[ScoredAttribute], name: str = "score") -> pd.Series:
    scores = list(scores)
    return pd.Series(
        [entry.score for entry in scores],
        index=[entry.name for entry in scores],
        name=name,
        dtype=float,
    )
