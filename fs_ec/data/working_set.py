"""Dataset wrapper holding the shrinking set of attributes under consideration."""

from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np
import pandas as pd
from pandas.api.types import is_float_dtype, is_integer_dtype, is_numeric_dtype

logger = logging.getLogger(__name__)

OUTCOME_TYPES = ("auto", "discrete", "continuous")
CONTINUOUS_MIN_LEVELS = 10


class WorkingDataset:
    """Instances x attributes plus outcome, with attributes that can be masked out by name.

    Masking never touches the underlying frame; removed attributes simply
    disappear from ``attribute_names`` and ``features()``.
    """

    def __init__(
        self,
        X: pd.DataFrame,
        y: pd.Series,
        outcome_type: str = "auto",
        max_discrete_levels: int = 3,
    ) -> None:
        if X.empty or X.shape[1] == 0:
            raise ValueError("Feature matrix is empty; cannot run Evaporative Cooling.")
        if len(X) != len(y):
            raise ValueError(f"Feature matrix has {len(X)} rows but outcome has {len(y)}.")
        if X.columns.duplicated().any():
            duplicated = X.columns[X.columns.duplicated()].tolist()
            raise ValueError(f"Duplicate attribute names: {duplicated}")
        if X.isna().any().any() or y.isna().any():
            raise ValueError("Missing values are not supported; drop or impute them before running EC.")
        if outcome_type not in OUTCOME_TYPES:
            raise ValueError(f"Unknown outcome type '{outcome_type}'; expected one of {OUTCOME_TYPES}.")

        X = X.reset_index(drop=True)
        X.columns = [str(col) for col in X.columns]
        self._raw = X
        self._outcome = y.reset_index(drop=True)
        self._encoded = self._encode(X)
        self._discrete = {
            col: self._is_discrete(X[col], max_discrete_levels) for col in X.columns
        }
        self._continuous_outcome = self._resolve_outcome_type(self._outcome, outcome_type)
        self._active: List[str] = list(X.columns)
        self._removed: List[str] = []

    @staticmethod
    def _encode(X: pd.DataFrame) -> pd.DataFrame:
        encoded = X.copy()
        for col in encoded.columns:
            if not is_numeric_dtype(encoded[col]):
                encoded[col] = pd.Categorical(encoded[col]).codes.astype(float)
        return encoded.astype(float)

    @staticmethod
    def _is_discrete(series: pd.Series, max_levels: int) -> bool:
        if not is_numeric_dtype(series):
            return True
        values = series.to_numpy(dtype=float)
        integral = is_integer_dtype(series) or bool(np.all(np.mod(values, 1) == 0))
        return integral and series.nunique() <= max_levels

    @staticmethod
    def _resolve_outcome_type(y: pd.Series, outcome_type: str) -> bool:
        if outcome_type == "continuous":
            return True
        if outcome_type == "discrete":
            return False
        return is_float_dtype(y) and y.nunique() > CONTINUOUS_MIN_LEVELS

    @property
    def attribute_names(self) -> List[str]:
        return list(self._active)

    @property
    def num_attributes(self) -> int:
        return len(self._active)

    @property
    def num_instances(self) -> int:
        return len(self._raw)

    @property
    def removed_attributes(self) -> List[str]:
        return list(self._removed)

    @property
    def has_continuous_outcome(self) -> bool:
        return self._continuous_outcome

    @property
    def has_discretes(self) -> bool:
        return any(self._discrete[name] for name in self._active)

    @property
    def has_numerics(self) -> bool:
        return not all(self._discrete[name] for name in self._active)

    @property
    def outcome(self) -> pd.Series:
        return self._outcome

    def outcome_codes(self) -> np.ndarray:
        """Outcome as floats (regression) or integer class codes (classification)."""

        if self._continuous_outcome:
            return self._outcome.to_numpy(dtype=float)
        codes, _ = pd.factorize(self._outcome, sort=True)
        return codes

    def features(self, names: Optional[List[str]] = None) -> pd.DataFrame:
        """Numeric frame of the active attributes (or the given subset of them)."""

        return self._encoded[self._active if names is None else list(names)]

    def discrete_mask(self, names: Optional[List[str]] = None) -> np.ndarray:
        names = self._active if names is None else names
        return np.array([self._discrete[name] for name in names], dtype=bool)

    def is_discrete(self, name: str) -> bool:
        return self._discrete[name]

    def remove_attribute(self, name: str) -> bool:
        """Mask an attribute out of consideration. Returns False if it is not active."""

        if name not in self._active:
            logger.warning("Attribute '%s' is not in the working set; nothing removed.", name)
            return False
        self._active.remove(name)
        self._removed.append(name)
        return True
