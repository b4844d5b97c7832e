"""Scoring engine capability consumed by the EC controller."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from fs_ec.data.working_set import WorkingDataset
from fs_ec.ec_logic.scores import RankedScoreList


@runtime_checkable
class ScoringEngine(Protocol):
    """Ranks the active attributes of a working dataset.

    Implementations return raw (unnormalized) scores, higher meaning more
    important, one entry per active attribute, in any order. Failures are
    reported by raising :class:`fs_ec.exceptions.EngineFailure`.
    """

    name: str

    def rank(self, dataset: WorkingDataset) -> RankedScoreList:
        ...
