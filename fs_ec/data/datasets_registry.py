"""Named dataset loaders available to EC runs."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Iterable, Optional, Tuple

import pandas as pd

LoadedDataset = Tuple[pd.DataFrame, pd.Series, Dict[str, str]]

_LOADERS: Dict[str, Callable[[Optional[Path], Dict], LoadedDataset]] = {}


def register_dataset(name: str):
    """Decorator registering ``loader(path, options)`` under ``name``."""

    def decorator(loader):
        if name in _LOADERS:
            raise ValueError(f"Dataset '{name}' already registered.")
        _LOADERS[name] = loader
        return loader

    return decorator


def list_datasets() -> Iterable[str]:
    return tuple(sorted(_LOADERS))


def load_dataset(name: str, data_path: Optional[Path] = None, options: Optional[Dict] = None) -> LoadedDataset:
    """Run the loader registered as ``name``; returns features, outcome and metadata."""

    try:
        loader = _LOADERS[name]
    except KeyError as exc:
        raise KeyError(f"Unknown dataset '{name}'. Available: {', '.join(list_datasets())}.") from exc
    return loader(data_path, dict(options or {}))
