"""Tests for EC run configuration and YAML config loading."""

import pytest
import yaml

from fs_ec.ec_logic.config import ECConfig, ECMode
from fs_ec.exceptions import ConfigurationError
from fs_ec.pipeline import build_engines, load_config


def test_mode_aliases():
    assert ECMode.parse("ALL") is ECMode.BOTH
    assert ECMode.parse("rj") is ECMode.MAIN_EFFECT_ONLY
    assert ECMode.parse("ReliefF") is ECMode.INTERACTION_ONLY
    assert ECMode.BOTH.uses_main_effect and ECMode.BOTH.uses_interaction
    assert not ECMode.INTERACTION_ONLY.uses_main_effect


def test_unknown_mode_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        ECMode.parse("everything")
    with pytest.raises(ConfigurationError):
        ECConfig.from_dict({"num_target": 3, "algorithm_steps": "nope"})


@pytest.mark.parametrize(
    "kwargs",
    [
        {"target_attributes": 0},
        {"target_attributes": 3, "remove_n": 2, "remove_percent": 10},
        {"target_attributes": 3, "remove_percent": 0},
        {"target_attributes": 3, "remove_percent": 150},
        {"target_attributes": 3, "remove_n": -1},
    ],
)
def test_invalid_ec_config_is_rejected(kwargs):
    with pytest.raises(ConfigurationError):
        ECConfig(**kwargs)


def test_from_dict_defaults_to_one_removal_per_iteration():
    config = ECConfig.from_dict({"num_target": 4})
    assert config.mode is ECMode.BOTH
    assert config.remove_n == 1
    assert config.removal_count(50) == 1
    assert config.temperature == 1.0


def test_percentage_removal_count_uses_current_size():
    config = ECConfig.from_dict({"num_target": 4, "iter_remove_percent": 10})
    assert config.percentage_based
    assert config.removal_count(100) == 10
    assert config.removal_count(35) == 3
    assert config.removal_count(9) == 0


def test_config_is_immutable():
    config = ECConfig(target_attributes=2)
    with pytest.raises(AttributeError):
        config.target_attributes = 3


def test_load_config_merges_user_overrides(tmp_path):
    user_path = tmp_path / "user.yaml"
    user_path.write_text(yaml.safe_dump({"ec": {"num_target": 12}, "main_effect": {"num_trees": 50}}))
    config = load_config(user_path)
    assert config["ec"]["num_target"] == 12
    assert config["ec"]["algorithm_steps"] == "all"
    assert config["main_effect"]["num_trees"] == 50
    assert config["main_effect"]["backend"] == "random_forest"


def test_build_engines_follows_mode():
    config = load_config(None)
    main_effect, interaction = build_engines(config, ECConfig(target_attributes=2, mode="main_effect"))
    assert main_effect is not None
    assert interaction is None


def test_percentage_alone_replaces_default_count():
    config = ECConfig(target_attributes=3, remove_percent=10)
    assert config.remove_n is None
    assert config.removal_count(40) == 4


def test_user_yaml_with_only_a_percentage(tmp_path):
    user_path = tmp_path / "user.yaml"
    user_path.write_text(yaml.safe_dump({"ec": {"num_target": 4, "iter_remove_percent": 10}}))
    config = ECConfig.from_dict(load_config(user_path)["ec"])
    assert config.percentage_based
    assert config.removal_count(50) == 5
