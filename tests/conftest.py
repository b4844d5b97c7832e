"""Shared fixtures: deterministic stand-ins for the ranking engines."""

import pandas as pd
import pytest

from fs_ec.data.working_set import WorkingDataset
from fs_ec.ec_logic.scores import ScoredAttribute


class FixedScoreEngine:
    """Returns a fixed raw score per attribute, in reverse working-set order."""

    def __init__(self, name, scores):
        self.name = name
        self.scores = dict(scores)
        self.calls = []

    def rank(self, dataset):
        names = dataset.attribute_names
        self.calls.append(list(names))
        return [ScoredAttribute(self.scores[attr], attr) for attr in reversed(names)]


class FailingEngine:
    def __init__(self, name="broken", exc=None):
        self.name = name
        self.exc = exc or RuntimeError("boom")

    def rank(self, dataset):
        raise self.exc


def make_dataset(num_attributes, num_instances=12):
    columns = {f"a{idx:02d}": [(row + idx) % 3 for row in range(num_instances)] for idx in range(num_attributes)}
    X = pd.DataFrame(columns)
    y = pd.Series([row % 2 for row in range(num_instances)])
    return WorkingDataset(X, y)


@pytest.fixture
def fixed_engine():
    return FixedScoreEngine


@pytest.fixture
def failing_engine():
    return FailingEngine


@pytest.fixture
def dataset_factory():
    return make_dataset
