"""Plotting helpers for EC run outputs."""

from __future__ import annotations

from pathlib import Path
from typing import List

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from fs_ec.ec_logic import ECResult, IterationRecord  # noqa: E402


def _plot_trajectory(history: List[IterationRecord], target: int, run_dir: Path) -> Path:
    x_vals = [0] + [record.iteration for record in history]
    y_vals = [history[0].working_before] + [record.working_after for record in history]

    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(x_vals, y_vals, marker="o", label="Working attributes")
    ax.axhline(target, color="crimson", linestyle="--", label="Target")
    ax.set_xlabel("Iteration")
    ax.set_ylabel("Attribute count")
    ax.set_title("Working Set Size per Iteration")
    ax.legend()
    fig.tight_layout()
    path = run_dir / "working_set_trajectory.png"
    fig.savefig(path, dpi=200)
    plt.close(fig)
    return path


def _plot_ec_scores(result: ECResult, run_dir: Path) -> Path:
    names = [entry.name for entry in reversed(result.ec_scores)]
    values = [entry.score for entry in reversed(result.ec_scores)]

    fig, ax = plt.subplots(figsize=(7, max(3, 0.3 * len(names))))
    ax.barh(names, values)
    ax.set_xlabel("Free energy")
    ax.set_title("EC Scores of Kept Attributes")
    fig.tight_layout()
    path = run_dir / "ec_scores.png"
    fig.savefig(path, dpi=200)
    plt.close(fig)
    return path


def generate_ec_plots(result: ECResult, target: int, run_dir: Path) -> List[Path]:
    """Save the trajectory and final-score plots; skipped when nothing ran."""

    if not result.history:
        return []
    paths = [_plot_trajectory(result.history, target, run_dir)]
    if result.ec_scores:
        paths.append(_plot_ec_scores(result, run_dir))
    return paths
