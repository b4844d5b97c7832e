"""Interaction-effect ranking with ReliefF (discrete outcome) and RReliefF (continuous outcome).

Relief-family weights reward attributes whose values differ between an
instance and its nearest neighbours of other classes (or distant outcomes)
and agree with its nearest neighbours of the same class. Because neighbours
are found in the full attribute space, attributes that only matter jointly
with others still receive credit, which a main-effect ranking misses.

Attribute differences are a 0/1 mismatch for discrete attributes and a
range-scaled absolute difference for numeric ones; the distance between
two instances is the sum of their attribute differences.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
from sklearn.metrics import pairwise_distances

from fs_ec.data.working_set import WorkingDataset
from fs_ec.ec_logic.scores import RankedScoreList, ScoredAttribute
from fs_ec.exceptions import ConfigurationError, EngineFailure
from fs_ec.models import resolve_n_jobs

logger = logging.getLogger(__name__)

VARIANTS = ("auto", "standard", "clean", "iterative")


@dataclass
class ReliefFConfig:
    """Configuration for the ReliefF interaction engine."""

    variant: str = "auto"
    k_nearest: int = 10
    num_instances: int = 0
    iter_remove_n: Optional[int] = None
    iter_remove_percent: Optional[float] = None
    num_threads: int = 0
    random_state: int = 42


def _scaled_matrix(dataset: WorkingDataset, names: List[str]) -> Tuple[np.ndarray, np.ndarray]:
    X = dataset.features(names).to_numpy(dtype=float, copy=True)
    discrete = dataset.discrete_mask(names)
    numeric = ~discrete
    if numeric.any():
        block = X[:, numeric]
        mins = block.min(axis=0)
        ranges = block.max(axis=0) - mins
        ranges[ranges == 0] = 1.0
        X[:, numeric] = (block - mins) / ranges
    return X, discrete


def _distance_matrix(X: np.ndarray, discrete: np.ndarray, n_jobs: int) -> np.ndarray:
    n_rows = X.shape[0]
    distances = np.zeros((n_rows, n_rows))
    numeric = ~discrete
    if numeric.any():
        distances += pairwise_distances(X[:, numeric], metric="manhattan", n_jobs=n_jobs)
    if discrete.any():
        # hamming is the mismatch fraction; scale back to a mismatch count
        distances += pairwise_distances(X[:, discrete], metric="hamming", n_jobs=n_jobs) * discrete.sum()
    return distances


def _nearest(distances: np.ndarray, candidates: np.ndarray, k: int) -> np.ndarray:
    if candidates.size == 0:
        return candidates
    order = np.argsort(distances[candidates], kind="stable")
    return candidates[order[:k]]


def _diffs(X: np.ndarray, discrete: np.ndarray, row: int, neighbours: np.ndarray) -> np.ndarray:
    diff = np.abs(X[neighbours] - X[row])
    diff[:, discrete] = (diff[:, discrete] > 0).astype(float)
    return diff


def relieff_weights(
    X: np.ndarray,
    discrete: np.ndarray,
    y: np.ndarray,
    targets: np.ndarray,
    k: int,
    n_jobs: int = 1,
) -> np.ndarray:
    """ReliefF weights for a class outcome (k nearest hits and misses per class)."""

    n_rows, n_attributes = X.shape
    distances = _distance_matrix(X, discrete, n_jobs)
    classes, counts = np.unique(y, return_counts=True)
    priors = dict(zip(classes, counts / n_rows))
    members = {label: np.flatnonzero(y == label) for label in classes}
    weights = np.zeros(n_attributes)
    m = len(targets)

    for row in targets:
        label = y[row]
        same = members[label]
        hits = _nearest(distances[row], same[same != row], k)
        if hits.size:
            weights -= _diffs(X, discrete, row, hits).mean(axis=0) / m
        miss_norm = 1.0 - priors[label]
        if miss_norm <= 0:
            continue
        for other in classes:
            if other == label:
                continue
            misses = _nearest(distances[row], members[other], k)
            if misses.size:
                weights += priors[other] / miss_norm * _diffs(X, discrete, row, misses).mean(axis=0) / m
    return weights


def rrelieff_weights(
    X: np.ndarray,
    discrete: np.ndarray,
    y: np.ndarray,
    targets: np.ndarray,
    k: int,
    n_jobs: int = 1,
) -> np.ndarray:
    """RReliefF weights for a continuous outcome."""

    n_rows, n_attributes = X.shape
    distances = _distance_matrix(X, discrete, n_jobs)
    y_range = float(y.max() - y.min()) or 1.0
    all_rows = np.arange(n_rows)

    n_dc = 0.0
    n_da = np.zeros(n_attributes)
    n_dcda = np.zeros(n_attributes)
    for row in targets:
        near = _nearest(distances[row], all_rows[all_rows != row], k)
        if near.size == 0:
            continue
        weight = 1.0 / near.size
        d_outcome = np.abs(y[near] - y[row]) / y_range
        d_attributes = _diffs(X, discrete, row, near)
        n_dc += weight * d_outcome.sum()
        n_da += weight * d_attributes.sum(axis=0)
        n_dcda += weight * (d_outcome[:, None] * d_attributes).sum(axis=0)

    m = float(len(targets))
    same_outcome = n_dcda / n_dc if n_dc > 0 else np.zeros(n_attributes)
    other_outcome = (n_da - n_dcda) / (m - n_dc) if m - n_dc > 0 else np.zeros(n_attributes)
    return same_outcome - other_outcome


class ReliefFEngine:
    """Nearest-neighbour interaction ranking with standard, clean and iterative variants."""

    name = "interaction"

    def __init__(self, config: ReliefFConfig | None = None) -> None:
        self.config = config or ReliefFConfig()
        cfg = self.config
        if cfg.variant not in VARIANTS:
            raise ConfigurationError(f"Unknown ReliefF variant '{cfg.variant}'; expected one of {VARIANTS}.")
        if cfg.k_nearest < 1:
            raise ConfigurationError(f"k_nearest must be positive, got {cfg.k_nearest}.")
        if cfg.num_instances < 0:
            raise ConfigurationError(f"num_instances must be non-negative, got {cfg.num_instances}.")
        if cfg.iter_remove_n is not None and cfg.iter_remove_percent is not None:
            raise ConfigurationError("ReliefF takes either iter_remove_n or iter_remove_percent, not both.")
        if cfg.iter_remove_percent is not None and not 0 < cfg.iter_remove_percent <= 100:
            raise ConfigurationError(
                f"ReliefF removal percentage must be in (0, 100], got {cfg.iter_remove_percent}."
            )
        if cfg.variant == "iterative" and not self.has_removal_schedule:
            raise ConfigurationError("Iterative ReliefF needs iter_remove_n or iter_remove_percent.")

    @property
    def has_removal_schedule(self) -> bool:
        return bool(self.config.iter_remove_n) or bool(self.config.iter_remove_percent)

    def resolve_variant(self, dataset: WorkingDataset) -> str:
        if self.config.variant != "auto":
            return self.config.variant
        if self.has_removal_schedule:
            return "iterative"
        if dataset.has_numerics and dataset.has_discretes:
            return "clean"
        return "standard"

    def _removal_count(self, remaining: int) -> int:
        if self.config.iter_remove_percent is not None:
            return int(self.config.iter_remove_percent * remaining / 100.0)
        return int(self.config.iter_remove_n or 0)

    def _targets(self, n_rows: int) -> np.ndarray:
        size = self.config.num_instances
        if size == 0 or size >= n_rows:
            return np.arange(n_rows)
        rng = np.random.default_rng(self.config.random_state)
        return np.sort(rng.choice(n_rows, size=size, replace=False))

    def _weights(self, X: np.ndarray, discrete: np.ndarray, y: np.ndarray, targets: np.ndarray, continuous: bool):
        weight_fn = rrelieff_weights if continuous else relieff_weights
        return weight_fn(
            X,
            discrete,
            y,
            targets,
            k=self.config.k_nearest,
            n_jobs=resolve_n_jobs(self.config.num_threads),
        )

    def _clean_weights(self, X, discrete, y, targets, continuous) -> np.ndarray:
        weights = np.zeros(X.shape[1])
        for block in (discrete, ~discrete):
            if block.any():
                weights[block] = self._weights(X[:, block], discrete[block], y, targets, continuous)
        return weights

    def _iterative_weights(self, X, discrete, y, targets, continuous, names: List[str]) -> np.ndarray:
        final = {}
        remaining = list(range(len(names)))
        passes = 0
        while True:
            passes += 1
            current = self._weights(X[:, remaining], discrete[remaining], y, targets, continuous)
            num_to_remove = min(self._removal_count(len(remaining)), len(remaining) - 1)
            if num_to_remove < 1:
                final.update(zip(remaining, current))
                break
            order = np.argsort(current, kind="stable")[:num_to_remove]
            dropped = {remaining[pos] for pos in order}
            for pos in order:
                final[remaining[pos]] = current[pos]
            remaining = [col for col in remaining if col not in dropped]
        logger.debug("Iterative ReliefF finished after %d passes.", passes)
        return np.array([final[col] for col in range(len(names))])

    def rank(self, dataset: WorkingDataset) -> RankedScoreList:
        names = dataset.attribute_names
        if dataset.num_instances < 2:
            raise EngineFailure("ReliefF needs at least two instances.", engine=self.name)
        variant = self.resolve_variant(dataset)
        continuous = dataset.has_continuous_outcome
        logger.info(
            "Running %s %s on %d attributes.",
            variant,
            "RReliefF" if continuous else "ReliefF",
            len(names),
        )

        X, discrete = _scaled_matrix(dataset, names)
        y = dataset.outcome_codes()
        targets = self._targets(dataset.num_instances)
        try:
            if variant == "iterative":
                weights = self._iterative_weights(X, discrete, y, targets, continuous, names)
            elif variant == "clean":
                weights = self._clean_weights(X, discrete, y, targets, continuous)
            else:
                weights = self._weights(X, discrete, y, targets, continuous)
        except (ValueError, MemoryError) as exc:
            raise EngineFailure(f"ReliefF failed: {exc}", engine=self.name) from exc

        return [ScoredAttribute(float(score), name) for name, score in zip(names, weights)]
