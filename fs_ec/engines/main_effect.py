"""Main-effect ranking from tree-ensemble impurity importance."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict

import numpy as np

from fs_ec.data.working_set import WorkingDataset
from fs_ec.ec_logic.scores import RankedScoreList, ScoredAttribute
from fs_ec.exceptions import ConfigurationError, EngineFailure
from fs_ec.models import train_random_forest, train_xgb_model

logger = logging.getLogger(__name__)

BACKENDS = ("random_forest", "xgboost")


@dataclass
class MainEffectConfig:
    """Configuration for the main-effect engine."""

    backend: str = "random_forest"
    num_trees: int = 500
    num_threads: int = 0
    random_state: int = 42
    xgb_params: Dict = field(default_factory=dict)


class MainEffectEngine:
    """Scores each attribute by its importance in a forest grown on the working set."""

    name = "main_effect"

    def __init__(self, config: MainEffectConfig | None = None) -> None:
        self.config = config or MainEffectConfig()
        if self.config.backend not in BACKENDS:
            raise ConfigurationError(
                f"Unknown main-effect backend '{self.config.backend}'; expected one of {BACKENDS}."
            )
        if self.config.num_trees < 1:
            raise ConfigurationError(f"Number of trees must be positive, got {self.config.num_trees}.")

    def _fit(self, dataset: WorkingDataset):
        X = dataset.features()
        y = dataset.outcome_codes()
        regression = dataset.has_continuous_outcome
        kwargs = dict(
            regression=regression,
            n_estimators=self.config.num_trees,
            n_jobs=self.config.num_threads,
            random_state=self.config.random_state,
        )
        if self.config.backend == "xgboost":
            return train_xgb_model(X, y, params=self.config.xgb_params, **kwargs)
        return train_random_forest(X, y, **kwargs)

    def rank(self, dataset: WorkingDataset) -> RankedScoreList:
        tree_type = "regression" if dataset.has_continuous_outcome else "classification"
        logger.info(
            "Growing %d %s trees (%s) on %d attributes.",
            self.config.num_trees,
            tree_type,
            self.config.backend,
            dataset.num_attributes,
        )
        try:
            model = self._fit(dataset)
        except (ValueError, MemoryError) as exc:
            raise EngineFailure(f"Main-effect model training failed: {exc}", engine=self.name) from exc

        importances = np.asarray(model.feature_importances_, dtype=float)
        if importances.shape[0] != dataset.num_attributes:
            raise EngineFailure(
                f"Model reported {importances.shape[0]} importances for {dataset.num_attributes} attributes.",
                engine=self.name,
            )
        importances = np.nan_to_num(importances, nan=0.0)
        return [
            ScoredAttribute(float(score), name)
            for name, score in zip(dataset.attribute_names, importances)
        ]
