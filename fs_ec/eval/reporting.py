"""EC score files and markdown reporting for experiments."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

import pandas as pd

from fs_ec.ec_logic import ECConfig, ECMode, ECResult, RankedScoreList
from fs_ec.exceptions import OutputError
from fs_ec.types import ExperimentResult

logger = logging.getLogger(__name__)


def scores_filename(base_filename: Union[str, Path], mode: Optional[ECMode]) -> Path:
    """Append the mode tag (``.ec``, ``.ec.main`` or ``.ec.interaction``) to a base filename."""

    if mode is None:
        raise OutputError("Attempting to write attribute scores before the analysis type was determined.")
    base = Path(base_filename)
    return base.with_name(base.name + ECMode.parse(mode).output_suffix)


def format_scores(scores: RankedScoreList) -> str:
    return "".join(f"{entry.score:.8f}\t{entry.name}\n" for entry in scores)


def write_ec_scores(scores: RankedScoreList, base_filename: Union[str, Path], mode: Optional[ECMode]) -> Path:
    """Write one ``<score>\\t<name>`` line per kept attribute."""

    path = scores_filename(base_filename, mode)
    try:
        with path.open("w", encoding="utf-8") as fh:
            fh.write(format_scores(scores))
    except OSError as exc:
        raise OutputError(f"Could not open scores file {path} for writing: {exc}") from exc
    logger.info("Wrote %d EC scores to %s", len(scores), path)
    return path


def write_evaporated(evaporated: RankedScoreList, path: Path) -> Path:
    frame = pd.DataFrame(
        {
            "order": range(1, len(evaporated) + 1),
            "attribute": [entry.name for entry in evaporated],
            "free_energy": [entry.score for entry in evaporated],
        }
    )
    try:
        frame.to_csv(path, index=False)
    except OSError as exc:
        raise OutputError(f"Could not write evaporated attributes to {path}: {exc}") from exc
    return path


def _markdown_table(headers: List[str], rows: Iterable[Iterable]) -> str:
    header_line = "| " + " | ".join(headers) + " |"
    separator = "| " + " | ".join("---" for _ in headers) + " |"
    row_lines = ["| " + " | ".join(str(item) for item in row) + " |" for row in rows]
    return "\n".join([header_line, separator, *row_lines])


def _format_float(value: float, decimals: int = 4) -> str:
    if value != value:  # NaN check
        return "nan"
    return f"{value:.{decimals}f}"


def build_config_summary(config: ECConfig) -> str:
    removal = f"{config.remove_percent}% of working set" if config.percentage_based else f"{config.remove_n} per iteration"
    lines = [
        f"- Mode: {config.mode.value}",
        f"- Target attributes: {config.target_attributes}",
        f"- Removal schedule: {removal}",
        f"- Temperature: {config.temperature}",
    ]
    return "\n".join(lines)


def build_history_table(result: ECResult) -> str:
    rows = [
        [
            record.iteration,
            record.working_before,
            record.requested,
            record.removed,
            record.working_after,
            _format_float(record.elapsed_seconds, 2),
        ]
        for record in result.history
    ]
    headers = ["Iteration", "Working before", "Requested", "Removed", "Working after", "Seconds"]
    return _markdown_table(headers, rows)


def build_ec_scores_table(result: ECResult) -> str:
    main_effect = {entry.name: entry.score for entry in result.main_effect_scores}
    interaction = {entry.name: entry.score for entry in result.interaction_scores}

    def _fmt(lookup, name: str) -> str:
        return _format_float(lookup[name]) if name in lookup else "-"

    rows = [
        [rank, entry.name, _format_float(entry.score), _fmt(main_effect, entry.name), _fmt(interaction, entry.name)]
        for rank, entry in enumerate(result.ec_scores, start=1)
    ]
    return _markdown_table(["Rank", "Attribute", "Free energy", "Main effect (S)", "Interaction (E)"], rows)


def build_evaporated_table(result: ECResult, top_n: int = 25) -> str:
    if not result.evaporated:
        return "_None._"
    rows = [
        [order, entry.name, _format_float(entry.score)]
        for order, entry in enumerate(result.evaporated[:top_n], start=1)
    ]
    table = _markdown_table(["Order", "Attribute", "Free energy"], rows)
    if len(result.evaporated) > top_n:
        table += f"\n\n_{len(result.evaporated) - top_n} more in `evaporated.csv`._"
    return table


def build_kendall_section(result: ECResult) -> str:
    if not result.kendall_taus:
        return "_Not computed (enable `ec.log_diagnostics` in both-engine mode)._"
    rows = [[pair.replace("_", " "), _format_float(tau)] for pair, tau in result.kendall_taus.items()]
    return _markdown_table(["Rankings", "Kendall tau"], rows)


def generate_ec_report_markdown(result: ExperimentResult) -> str:
    ec_result = result.ec_result
    lines = [
        f"# Evaporative Cooling Report – {result.dataset}",
        f"- Run timestamp: `{result.run_dir.name}`",
        f"- Results directory: `{result.run_dir}`",
        f"- Scores file: `{result.scores_path.name}`",
        f"- Final state: {ec_result.state.value} after {ec_result.iterations} iterations",
    ]
    planted = result.metadata.get("planted_effects")
    if planted:
        lines.append(f"- Planted effects: {planted}")
    lines.extend(
        [
            "",
            "## Configuration",
            build_config_summary(result.ec_config),
            "",
            "## Iterations",
            build_history_table(ec_result),
            "",
        ]
    )
    trajectory_plot = result.run_dir / "working_set_trajectory.png"
    if trajectory_plot.exists():
        lines.extend([f"_Working-set trajectory saved to `{trajectory_plot.name}`._", ""])
    lines.extend(
        [
            "## EC Scores (final iteration)",
            build_ec_scores_table(ec_result),
            "",
            "## Evaporated Attributes",
            build_evaporated_table(ec_result),
            "",
            "## Ranking Agreement (last iteration)",
            build_kendall_section(ec_result),
        ]
    )
    return "\n".join(lines)


def write_ec_report(result: ExperimentResult) -> Path:
    markdown = generate_ec_report_markdown(result)
    report_path = result.run_dir / "report.md"
    report_path.write_text(markdown, encoding="utf-8")
    return report_path
