"""Data loading utilities, dataset registry and the working attribute set."""

from .datasets_registry import load_dataset, list_datasets, register_dataset
from .working_set import WorkingDataset

# Ensure dataset loaders register themselves via import side-effects.
from . import loaders as _loaders  # noqa: F401

__all__ = ["register_dataset", "WorkingDataset", "load_dataset", "list_datasets"]
