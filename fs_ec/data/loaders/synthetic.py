"""Simulated genotype data with planted main and interaction effects."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Tuple

import numpy as np
import pandas as pd

from ..datasets_registry import register_dataset

DATASET_NAME = "synthetic_interactions"


def simulate_genotypes(
    num_instances: int = 200,
    num_attributes: int = 20,
    num_numerics: int = 0,
    noise: float = 0.1,
    random_state: int = 42,
) -> Tuple[pd.DataFrame, pd.Series]:
    """Simulate a case/control dataset of 0/1/2 genotypes.

    ``snp0`` carries a main effect, ``snp1`` and ``snp2`` interact (the
    outcome depends on their parity, invisible marginally). All other
    attributes, including the optional numeric ones, are noise.
    """

    if num_attributes < 3:
        raise ValueError("At least 3 attributes are needed to plant the effects.")
    rng = np.random.default_rng(random_state)
    genotypes = rng.integers(0, 3, size=(num_instances, num_attributes))
    features = pd.DataFrame(genotypes, columns=[f"snp{idx}" for idx in range(num_attributes)])
    for idx in range(num_numerics):
        features[f"num{idx}"] = rng.normal(size=num_instances)

    main_effect = genotypes[:, 0] >= 1
    interaction = (genotypes[:, 1] + genotypes[:, 2]) % 2 == 1
    logits = 1.5 * main_effect + 2.5 * interaction - 2.0
    prob = 1.0 / (1.0 + np.exp(-logits))
    flip = rng.random(num_instances) < noise
    outcome = (rng.random(num_instances) < prob) ^ flip
    return features, pd.Series(outcome.astype(int), name="Class")


@register_dataset(DATASET_NAME)
def load_synthetic(path: Optional[Path], options: Dict) -> Tuple[pd.DataFrame, pd.Series, Dict[str, str]]:
    features, target = simulate_genotypes(
        num_instances=int(options.get("num_instances", 200)),
        num_attributes=int(options.get("num_attributes", 20)),
        num_numerics=int(options.get("num_numerics", 0)),
        noise=float(options.get("noise", 0.1)),
        random_state=int(options.get("random_state", 42)),
    )
    metadata = {
        "source": "simulated",
        "outcome": "Class",
        "total_rows": str(len(features)),
        "planted_effects": "snp0 (main effect), snp1 x snp2 (interaction)",
    }
    return features, target, metadata
