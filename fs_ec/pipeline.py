"""End-to-end Evaporative Cooling experiment runner."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional, Tuple

import yaml

from fs_ec.data import WorkingDataset, load_dataset
from fs_ec.ec_logic import ECConfig, ECResult, EvaporativeCooling
from fs_ec.engines import MainEffectConfig, MainEffectEngine, ReliefFConfig, ReliefFEngine
from fs_ec.eval.plots import generate_ec_plots
from fs_ec.eval.reporting import write_ec_report, write_ec_scores, write_evaporated
from fs_ec.exceptions import ConfigurationError
from fs_ec.types import ExperimentResult

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "config" / "default_config.yaml"


def _deep_update(base: Dict, updates: Dict) -> Dict:
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _deep_update(base[key], value)
        else:
            base[key] = value
    return base


def load_config(path: Optional[Path]) -> Dict:
    with DEFAULT_CONFIG_PATH.open("r", encoding="utf-8") as fh:
        config = yaml.safe_load(fh)
    if path:
        with Path(path).open("r", encoding="utf-8") as fh:
            user_config = yaml.safe_load(fh)
        config = _deep_update(config, user_config or {})
    return config


def build_engines(config: Dict, ec_config: ECConfig) -> Tuple[Optional[MainEffectEngine], Optional[ReliefFEngine]]:
    main_effect_engine = None
    interaction_engine = None
    if ec_config.mode.uses_main_effect:
        main_effect_engine = MainEffectEngine(MainEffectConfig(**config.get("main_effect", {})))
    if ec_config.mode.uses_interaction:
        interaction_engine = ReliefFEngine(ReliefFConfig(**config.get("interaction", {})))
    return main_effect_engine, interaction_engine


def _persist_results(
    dataset_name: str,
    config: Dict,
    ec_config: ECConfig,
    result: ECResult,
    results_root: Path,
) -> Tuple[Path, Path]:
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    run_dir = results_root / dataset_name / timestamp
    run_dir.mkdir(parents=True, exist_ok=False)

    with (run_dir / "config.yaml").open("w", encoding="utf-8") as fh:
        yaml.safe_dump(config, fh)

    scores_path = write_ec_scores(result.ec_scores, run_dir / ec_config.out_files_prefix, ec_config.mode)
    write_evaporated(result.evaporated, run_dir / "evaporated.csv")
    if result.score_table is not None:
        result.score_table.to_csv(run_dir / "score_table.csv")
    with (run_dir / "history.json").open("w", encoding="utf-8") as fh:
        json.dump(
            {
                "state": result.state.value,
                "iterations": result.iterations,
                "history": [asdict(record) for record in result.history],
                "kendall_taus": result.kendall_taus,
            },
            fh,
            indent=2,
        )
    return run_dir, scores_path


def run_experiment(
    config_path: Optional[Path],
    results_root: Path = Path("results"),
    config: Optional[Dict] = None,
) -> ExperimentResult:
    """Run EC once; ``config`` skips reading ``config_path`` when already loaded."""

    if config is None:
        config = load_config(config_path)
    dataset_name = config["dataset"]
    dataset_path = config.get("dataset_path")
    data_path = Path(dataset_path) if dataset_path else None
    try:
        X, y, metadata = load_dataset(dataset_name, data_path, config.get("dataset_options") or {})
        dataset = WorkingDataset(
            X,
            y,
            outcome_type=config.get("outcome_type", "auto"),
            max_discrete_levels=config.get("max_discrete_levels", 3),
        )
    except (KeyError, FileNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"Cannot prepare dataset '{dataset_name}': {exc}") from exc
    logger.info("Loaded dataset '%s': %d instances, %d attributes.", dataset_name, len(X), X.shape[1])

    ec_config = ECConfig.from_dict(config.get("ec", {}), out_files_prefix=config.get("out_files_prefix", "ec_scores"))
    main_effect_engine, interaction_engine = build_engines(config, ec_config)

    controller = EvaporativeCooling(
        dataset,
        ec_config,
        main_effect_engine=main_effect_engine,
        interaction_engine=interaction_engine,
    )
    ec_result = controller.run()

    run_dir, scores_path = _persist_results(dataset_name, config, ec_config, ec_result, results_root)
    generate_ec_plots(ec_result, ec_config.target_attributes, run_dir)
    experiment_result = ExperimentResult(
        dataset=dataset_name,
        run_dir=run_dir,
        ec_config=ec_config,
        ec_result=ec_result,
        scores_path=scores_path,
        metadata=metadata,
    )
    write_ec_report(experiment_result)
    return experiment_result
