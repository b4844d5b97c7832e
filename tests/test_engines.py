"""Tests for the main-effect and ReliefF ranking engines."""

import numpy as np
import pandas as pd
import pytest

from fs_ec.data.loaders.synthetic import simulate_genotypes
from fs_ec.data.working_set import WorkingDataset
from fs_ec.engines import MainEffectConfig, MainEffectEngine, ReliefFConfig, ReliefFEngine, ScoringEngine
from fs_ec.exceptions import ConfigurationError


def _make_signal_dataset(num_instances=60, seed=0):
    rng = np.random.default_rng(seed)
    y = np.tile([0, 1], num_instances // 2)
    X = pd.DataFrame(
        {
            "signal": y * 2,
            "noise1": rng.integers(0, 3, size=num_instances),
            "noise2": rng.integers(0, 3, size=num_instances),
            "level": rng.normal(size=num_instances),
        }
    )
    return WorkingDataset(X, pd.Series(y))


def _as_dict(scores):
    return {entry.name: entry.score for entry in scores}


def test_engines_satisfy_scoring_protocol():
    assert isinstance(MainEffectEngine(), ScoringEngine)
    assert isinstance(ReliefFEngine(), ScoringEngine)


def test_relieff_rewards_the_predictive_attribute():
    dataset = _make_signal_dataset()
    scores = _as_dict(ReliefFEngine(ReliefFConfig(variant="standard", k_nearest=5)).rank(dataset))
    assert set(scores) == set(dataset.attribute_names)
    assert max(scores, key=scores.get) == "signal"
    assert scores["signal"] > 0


@pytest.mark.parametrize("variant", ["clean", "standard"])
def test_relieff_variants_score_every_attribute(variant):
    dataset = _make_signal_dataset()
    scores = ReliefFEngine(ReliefFConfig(variant=variant, k_nearest=3, num_instances=20)).rank(dataset)
    assert sorted(entry.name for entry in scores) == sorted(dataset.attribute_names)
    assert all(np.isfinite(entry.score) for entry in scores)


def test_iterative_relieff_reports_all_attributes():
    dataset = _make_signal_dataset()
    engine = ReliefFEngine(ReliefFConfig(iter_remove_n=1, k_nearest=3))
    assert engine.resolve_variant(dataset) == "iterative"
    scores = _as_dict(engine.rank(dataset))
    assert set(scores) == set(dataset.attribute_names)
    assert dataset.num_attributes == 4


def test_auto_variant_depends_on_attribute_kinds():
    engine = ReliefFEngine()
    assert engine.resolve_variant(_make_signal_dataset()) == "clean"
    X, y = simulate_genotypes(num_instances=30, num_attributes=5)
    assert engine.resolve_variant(WorkingDataset(X, y)) == "standard"


def test_rrelieff_handles_continuous_outcome():
    rng = np.random.default_rng(1)
    X = pd.DataFrame({"driver": rng.normal(size=50), "noise": rng.normal(size=50)})
    y = pd.Series(3.0 * X["driver"] + rng.normal(scale=0.1, size=50))
    dataset = WorkingDataset(X, y)
    assert dataset.has_continuous_outcome
    scores = _as_dict(ReliefFEngine(ReliefFConfig(k_nearest=5)).rank(dataset))
    assert scores["driver"] > scores["noise"]


def test_random_forest_importances_cover_active_attributes():
    dataset = _make_signal_dataset()
    dataset.remove_attribute("noise2")
    engine = MainEffectEngine(MainEffectConfig(num_trees=25, num_threads=1))
    scores = _as_dict(engine.rank(dataset))
    assert set(scores) == {"signal", "noise1", "level"}
    assert sum(scores.values()) == pytest.approx(1.0)
    assert max(scores, key=scores.get) == "signal"


def test_invalid_engine_configs_are_rejected():
    with pytest.raises(ConfigurationError):
        MainEffectEngine(MainEffectConfig(backend="gbm"))
    with pytest.raises(ConfigurationError):
        ReliefFEngine(ReliefFConfig(variant="fast"))
    with pytest.raises(ConfigurationError):
        ReliefFEngine(ReliefFConfig(variant="iterative"))
    with pytest.raises(ConfigurationError):
        ReliefFEngine(ReliefFConfig(iter_remove_n=1, iter_remove_percent=10))
