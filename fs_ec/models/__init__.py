"""Model training helpers."""

from .tree_models import resolve_n_jobs, train_random_forest, train_xgb_model

__all__ = ["resolve_n_jobs", "train_random_forest", "train_xgb_model"]
