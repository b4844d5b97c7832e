"""Loader for delimited text tables with one outcome column."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

import pandas as pd

from ..datasets_registry import register_dataset

logger = logging.getLogger(__name__)

DATASET_NAME = "delimited"
DEFAULT_CLASS_COLUMN = "Class"
MISSING_VALUE_TOKENS = ["", "NA", "?"]


def _normalize_strings(df: pd.DataFrame) -> pd.DataFrame:
    """Trim whitespace from column names and string cells."""

    df = df.copy()
    df.columns = [str(col).strip() for col in df.columns]
    for col in df.select_dtypes(include=["object"]).columns:
        df[col] = df[col].apply(lambda value: value.strip() if isinstance(value, str) else value)
        df[col] = df[col].replace({"": pd.NA})
    return df


@register_dataset(DATASET_NAME)
def load_delimited(path: Optional[Path], options: Dict) -> Tuple[pd.DataFrame, pd.Series, Dict[str, str]]:
    """Read a table, split off the outcome column and drop incomplete rows.

    Options: ``class_column`` (default ``Class``), ``sep`` (default: sniffed
    from the file) and ``drop_columns``.
    """

    if path is None:
        raise FileNotFoundError("The delimited loader needs dataset_path to point at a data file.")
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Dataset not found at {path}.")

    class_column = options.get("class_column", DEFAULT_CLASS_COLUMN)
    sep = options.get("sep")
    df = pd.read_csv(
        path,
        sep=sep,
        engine="python" if sep is None else "c",
        na_values=MISSING_VALUE_TOKENS,
    )
    df = _normalize_strings(df)
    if class_column not in df.columns:
        raise ValueError(f"Outcome column '{class_column}' not found in {path}.")

    drop_columns = [col for col in options.get("drop_columns", []) if col in df.columns]
    total_rows = len(df)
    df = df.drop(columns=drop_columns).dropna().reset_index(drop=True)
    if len(df) < total_rows:
        logger.warning("Dropped %d of %d rows with missing values.", total_rows - len(df), total_rows)

    target = df[class_column]
    features = df.drop(columns=[class_column])
    metadata = {
        "source": str(path),
        "outcome": class_column,
        "total_rows": str(len(df)),
    }
    return features, target, metadata
