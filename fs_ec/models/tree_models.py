"""Tree-ensemble training utilities for main-effect importance."""

from __future__ import annotations

import os
from typing import Dict, Optional, Union

import xgboost as xgb
from sklearn.ensemble import RandomForestClassifier, RandomForestRegressor


def resolve_n_jobs(requested: Optional[int] = None) -> int:
    """Clamp a requested thread count to the available processors.

    Counts below 1 or above the processor count resolve to the processor count.
    """

    available = os.cpu_count() or 1
    if requested is None or requested < 1 or requested > available:
        return available
    return int(requested)


def train_random_forest(
    X,
    y,
    regression: bool = False,
    n_estimators: int = 500,
    n_jobs: Optional[int] = None,
    random_state: int = 42,
    params: Optional[Dict] = None,
) -> Union[RandomForestClassifier, RandomForestRegressor]:
    """Fit a random forest whose impurity importances rank the attributes."""

    params = dict(params or {})
    params.setdefault("n_estimators", n_estimators)
    params.setdefault("n_jobs", resolve_n_jobs(n_jobs))
    params.setdefault("random_state", random_state)
    estimator = RandomForestRegressor if regression else RandomForestClassifier
    model = estimator(**params)
    model.fit(X, y)
    return model


def train_xgb_model(
    X,
    y,
    regression: bool = False,
    n_estimators: int = 500,
    n_jobs: Optional[int] = None,
    random_state: int = 42,
    params: Optional[Dict] = None,
) -> Union[xgb.XGBClassifier, xgb.XGBRegressor]:
    """Train an XGBoost model with sensible defaults."""

    params = dict(params or {})
    params.setdefault("n_estimators", n_estimators)
    params.setdefault("tree_method", "hist")
    params.setdefault("importance_type", "gain")
    params.setdefault("n_jobs", resolve_n_jobs(n_jobs))
    params.setdefault("random_state", random_state)
    if regression:
        params.setdefault("objective", "reg:squarederror")
        model = xgb.XGBRegressor(**params)
    else:
        model = xgb.XGBClassifier(**params)
    model.fit(X, y, verbose=False)
    return model
