"""Removal of the worst free-energy attributes from the working set."""

from __future__ import annotations

import logging
from typing import List

from fs_ec.data.working_set import WorkingDataset
from fs_ec.exceptions import ConsistencyError

from .scores import RankedScoreList, sort_by_score

logger = logging.getLogger(__name__)


def clamp_removal_count(requested: int, working_attributes: int, target_attributes: int) -> int:
    """Reduce ``requested`` so the working set never drops below the target."""

    if working_attributes - requested < target_attributes:
        adjusted = max(working_attributes - target_attributes, 0)
        logger.warning(
            "Removing %d attributes would leave fewer than the target %d; adjusting to %d.",
            requested,
            target_attributes,
            adjusted,
        )
        return adjusted
    return requested


class AttributePruner:
    """Evaporates the lowest-scoring attributes and keeps an audit trail of them."""

    def __init__(self, target_attributes: int) -> None:
        self.target_attributes = target_attributes
        self.evaporated: RankedScoreList = []

    def prune(
        self,
        free_energy_scores: RankedScoreList,
        num_to_remove: int,
        dataset: WorkingDataset,
    ) -> RankedScoreList:
        """Remove up to ``num_to_remove`` worst attributes; return those removed, worst first."""

        num_to_remove = clamp_removal_count(num_to_remove, dataset.num_attributes, self.target_attributes)
        if num_to_remove < 1:
            return []

        logger.info("Removing %d attributes...", num_to_remove)
        removed: List = []
        for worst in sort_by_score(free_energy_scores)[:num_to_remove]:
            if not dataset.remove_attribute(worst.name):
                raise ConsistencyError(f"Cannot evaporate '{worst.name}': it is not in the working set.")
            self.evaporated.append(worst)
            logger.debug("Evaporated %s (%.6f)", worst.name, worst.score)
            removed.append(worst)
        return removed
