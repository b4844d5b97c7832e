"""The Evaporative Cooling control loop.

Each iteration ranks the working attributes with the configured engines,
normalizes both rankings into [0, 1], fuses them into free-energy scores
and evaporates the worst attributes, until the working set has shrunk to
the target size or no further removal is possible.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

import pandas as pd

from fs_ec.data.working_set import WorkingDataset
from fs_ec.exceptions import ConfigurationError, ECError, EngineFailure

from .config import ECConfig, ECMode
from .diagnostics import build_score_table, kendall_taus
from .fusion import compute_free_energy
from .normalization import normalize_scores
from .pruning import AttributePruner
from .scores import RankedScoreList, sort_by_score

logger = logging.getLogger(__name__)


class ECState(str, Enum):
    RUNNING = "running"
    CONVERGED = "converged"
    STALLED = "stalled"
    FAILED = "failed"


@dataclass
class IterationRecord:
    iteration: int
    working_before: int
    requested: int
    removed: int
    working_after: int
    elapsed_seconds: float


@dataclass
class ECResult:
    """Outputs of a finished EC run."""

    state: ECState
    iterations: int
    ec_scores: RankedScoreList
    main_effect_scores: RankedScoreList
    interaction_scores: RankedScoreList
    free_energy_scores: RankedScoreList
    evaporated: RankedScoreList
    history: List[IterationRecord] = field(default_factory=list)
    score_table: Optional[pd.DataFrame] = None
    kendall_taus: Optional[Dict[str, float]] = None

    @property
    def kept_attributes(self) -> List[str]:
        return [entry.name for entry in self.ec_scores]


class EvaporativeCooling:
    """Drives the rank -> normalize -> fuse -> prune loop over a working dataset.

    The dataset is mutated in place: evaporated attributes are masked out of it.
    """

    def __init__(
        self,
        dataset: WorkingDataset,
        config: ECConfig,
        main_effect_engine=None,
        interaction_engine=None,
    ) -> None:
        if config.target_attributes >= dataset.num_attributes:
            raise ConfigurationError(
                f"Target attribute count {config.target_attributes} must be less than the "
                f"{dataset.num_attributes} attributes in the data set."
            )
        if config.mode.uses_main_effect and main_effect_engine is None:
            raise ConfigurationError(f"EC mode '{config.mode.value}' needs a main-effect engine.")
        if config.mode.uses_interaction and interaction_engine is None:
            raise ConfigurationError(f"EC mode '{config.mode.value}' needs an interaction engine.")

        self.dataset = dataset
        self.config = config
        self.main_effect_engine = main_effect_engine if config.mode.uses_main_effect else None
        self.interaction_engine = interaction_engine if config.mode.uses_interaction else None
        self.pruner = AttributePruner(config.target_attributes)

        self.state = ECState.RUNNING
        self.iteration = 1
        self.main_effect_scores: RankedScoreList = []
        self.interaction_scores: RankedScoreList = []
        self.free_energy_scores: RankedScoreList = []
        self.ec_scores: RankedScoreList = []
        self.history: List[IterationRecord] = []
        self.score_table: Optional[pd.DataFrame] = None
        self.kendall_taus: Optional[Dict[str, float]] = None
        self._started = False

        logger.info(
            "EC initialized: mode=%s, removing attributes until best %d of %d remain, %s per iteration.",
            config.mode.value,
            config.target_attributes,
            dataset.num_attributes,
            f"{config.remove_percent}%" if config.percentage_based else config.remove_n,
        )

    @property
    def mode(self) -> ECMode:
        return self.config.mode

    @property
    def evaporated(self) -> RankedScoreList:
        return self.pruner.evaporated

    def _run_engine(self, engine, label: str) -> RankedScoreList:
        start = time.perf_counter()
        logger.info("Running %s engine...", label)
        try:
            raw = engine.rank(self.dataset)
        except EngineFailure:
            raise
        except Exception as exc:
            raise EngineFailure(f"{label} engine raised {type(exc).__name__}: {exc}", engine=label) from exc
        if not raw:
            raise EngineFailure(f"{label} engine returned no scores.", engine=label)
        logger.info("%s engine finished in %.1f secs.", label, time.perf_counter() - start)
        return normalize_scores(list(raw), label=label)

    def _log_diagnostics(self) -> None:
        self.score_table = build_score_table(
            self.main_effect_scores, self.interaction_scores, self.free_energy_scores
        )
        self.kendall_taus = kendall_taus(
            self.main_effect_scores, self.interaction_scores, self.free_energy_scores
        )
        logger.info("Score table:\n%s", self.score_table.to_string(float_format=lambda v: f"{v:6.4f}"))
        logger.info(
            "Kendall taus: main vs interaction %.4f, main vs free energy %.4f, interaction vs free energy %.4f",
            self.kendall_taus["main_vs_interaction"],
            self.kendall_taus["main_vs_free_energy"],
            self.kendall_taus["interaction_vs_free_energy"],
        )

    def step(self) -> ECState:
        """Run a single iteration and return the resulting state."""

        if self.state is not ECState.RUNNING:
            raise ECError(f"Cannot iterate an EC run in state '{self.state.value}'.")

        working = self.dataset.num_attributes
        logger.info(
            "EC iteration %d: working attributes %d, target attributes %d",
            self.iteration,
            working,
            self.config.target_attributes,
        )
        start = time.perf_counter()
        try:
            if self.main_effect_engine is not None:
                self.main_effect_scores = self._run_engine(self.main_effect_engine, "main effect")
            if self.interaction_engine is not None:
                self.interaction_scores = self._run_engine(self.interaction_engine, "interaction")
            self.free_energy_scores = compute_free_energy(
                self.main_effect_scores,
                self.interaction_scores,
                self.mode,
                temperature=self.config.temperature,
            )
            if self.config.log_diagnostics and self.mode is ECMode.BOTH:
                self._log_diagnostics()

            requested = self.config.removal_count(working)
            removed = self.pruner.prune(self.free_energy_scores, requested, self.dataset)
        except ECError as exc:
            self.state = ECState.FAILED
            logger.error("EC iteration %d failed: %s", self.iteration, exc)
            raise

        working_after = self.dataset.num_attributes
        self.history.append(
            IterationRecord(
                iteration=self.iteration,
                working_before=working,
                requested=requested,
                removed=len(removed),
                working_after=working_after,
                elapsed_seconds=time.perf_counter() - start,
            )
        )

        if not removed:
            logger.warning(
                "No attributes can be removed with %d working and target %d; stopping.",
                working_after,
                self.config.target_attributes,
            )
            self.state = ECState.STALLED
        elif working_after <= self.config.target_attributes:
            self.state = ECState.CONVERGED
        else:
            self.iteration += 1
        return self.state

    def run(self) -> ECResult:
        """Iterate until the working set reaches the target size or stalls."""

        if self._started:
            raise ECError("This EC run has already been started; create a new controller.")
        self._started = True

        while self.state is ECState.RUNNING:
            self.step()

        logger.info("EC algorithm ran for %d iterations (%s).", self.iteration, self.state.value)
        self.ec_scores = sort_by_score(self.free_energy_scores, descending=True)[: self.config.target_attributes]
        return self.result()

    def result(self) -> ECResult:
        return ECResult(
            state=self.state,
            iterations=self.iteration,
            ec_scores=list(self.ec_scores),
            main_effect_scores=list(self.main_effect_scores),
            interaction_scores=list(self.interaction_scores),
            free_energy_scores=list(self.free_energy_scores),
            evaporated=list(self.evaporated),
            history=list(self.history),
            score_table=self.score_table,
            kendall_taus=self.kendall_taus,
        )
