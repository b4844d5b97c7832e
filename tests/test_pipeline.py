"""Integration test running the real engines on a small simulated dataset."""

import pytest
import yaml

from fs_ec.cli.main import main
from fs_ec.ec_logic.controller import ECState
from fs_ec.exceptions import ConfigurationError
from fs_ec.pipeline import load_config, run_experiment


def _write_config(tmp_path, **ec_overrides):
    ec = {"num_target": 3, "iter_remove_n": 2, "log_diagnostics": True}
    ec.update(ec_overrides)
    config = {
        "dataset_options": {"num_instances": 60, "num_attributes": 8, "random_state": 7},
        "ec": ec,
        "main_effect": {"num_trees": 20, "num_threads": 1},
        "interaction": {"k_nearest": 5, "num_threads": 1},
    }
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(config), encoding="utf-8")
    return path


def test_run_experiment_writes_all_artifacts(tmp_path):
    result = run_experiment(_write_config(tmp_path), results_root=tmp_path / "results")

    assert result.ec_result.state is ECState.CONVERGED
    assert [record.working_after for record in result.ec_result.history] == [6, 4, 3]
    lines = result.scores_path.read_text(encoding="utf-8").splitlines()
    assert result.scores_path.name == "ec_scores.ec"
    assert len(lines) == 3
    scores = [float(line.split("\t")[0]) for line in lines]
    assert scores == sorted(scores, reverse=True)
    for artifact in ("config.yaml", "evaporated.csv", "score_table.csv", "history.json", "report.md"):
        assert (result.run_dir / artifact).exists()
    assert (result.run_dir / "working_set_trajectory.png").exists()


def test_cli_runs_main_effect_only(tmp_path, monkeypatch):
    monkeypatch.setattr("fs_ec.cli.main.configure_logging", lambda *args, **kwargs: None)
    config_path = _write_config(tmp_path, algorithm_steps="main_effect")
    exit_code = main(["--config", str(config_path), "--results-dir", str(tmp_path / "out")])
    assert exit_code == 0
    assert list((tmp_path / "out").rglob("ec_scores.ec.main"))


def test_cli_reports_configuration_errors(tmp_path, monkeypatch):
    monkeypatch.setattr("fs_ec.cli.main.configure_logging", lambda *args, **kwargs: None)
    config_path = _write_config(tmp_path, num_target=8)
    assert main(["--config", str(config_path), "--results-dir", str(tmp_path / "out")]) == 1


def test_cli_reports_missing_data_file(tmp_path, monkeypatch):
    monkeypatch.setattr("fs_ec.cli.main.configure_logging", lambda *args, **kwargs: None)
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        yaml.safe_dump({"dataset": "delimited", "dataset_path": str(tmp_path / "missing.tab")}),
        encoding="utf-8",
    )
    assert main(["--config", str(config_path), "--results-dir", str(tmp_path / "out")]) == 1
    assert not (tmp_path / "out").exists()


def test_cli_reports_missing_config(tmp_path, monkeypatch):
    monkeypatch.setattr("fs_ec.cli.main.configure_logging", lambda *args, **kwargs: None)
    assert main(["--config", str(tmp_path / "nope.yaml"), "--results-dir", str(tmp_path / "out")]) == 1


def test_run_experiment_wraps_unknown_dataset(tmp_path):
    config = load_config(None)
    config["dataset"] = "no_such_dataset"
    with pytest.raises(ConfigurationError):
        run_experiment(None, results_root=tmp_path, config=config)
