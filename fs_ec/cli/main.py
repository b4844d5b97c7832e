"""Command-line entry point for running Evaporative Cooling experiments."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import yaml

from fs_ec.exceptions import ECError
from fs_ec.logging_config import configure_logging
from fs_ec.pipeline import load_config, run_experiment

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run Evaporative Cooling feature selection.")
    parser.add_argument(
        "--config",
        type=Path,
        required=False,
        help="Path to experiment YAML config (defaults to fs_ec/config/default_config.yaml).",
    )
    parser.add_argument(
        "--results-dir",
        type=Path,
        default=Path("results"),
        help="Directory where experiment outputs will be stored.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (overrides logging.level from the config).",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Optional file that receives a copy of the log.",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        config = load_config(args.config)
    except (OSError, yaml.YAMLError) as exc:
        configure_logging(args.log_level or "INFO", log_file=args.log_file)
        logger.error("Cannot read config %s: %s", args.config, exc)
        return 1
    configure_logging(args.log_level or config.get("logging", {}).get("level", "INFO"), log_file=args.log_file)
    try:
        result = run_experiment(args.config, results_root=args.results_dir, config=config)
    except ECError as exc:
        logger.error("Evaporative Cooling failed: %s", exc)
        return 1
    print(f"Experiment finished. Results stored in: {result.run_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
