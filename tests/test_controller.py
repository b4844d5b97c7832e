"""Tests for the Evaporative Cooling control loop using deterministic engines."""

import pytest

from fs_ec.ec_logic.config import ECConfig, ECMode
from fs_ec.ec_logic.controller import ECState, EvaporativeCooling
from fs_ec.ec_logic.scores import ScoredAttribute
from fs_ec.exceptions import ConfigurationError, ConsistencyError, ECError, EngineFailure


def _main_scores(names):
    return {name: float(idx) for idx, name in enumerate(names)}


def _interaction_scores(names):
    return {name: float(idx) ** 2 + 1.0 for idx, name in enumerate(names)}


def _make_controller(dataset, fixed_engine, **config_kwargs):
    names = dataset.attribute_names
    config_kwargs.setdefault("target_attributes", 5)
    config = ECConfig(**config_kwargs)
    main_effect = fixed_engine("main effect", _main_scores(names))
    interaction = fixed_engine("interaction", _interaction_scores(names))
    return EvaporativeCooling(dataset, config, main_effect, interaction), main_effect, interaction


def test_end_to_end_fixed_removal_converges(dataset_factory, fixed_engine):
    dataset = dataset_factory(20)
    controller, main_effect, interaction = _make_controller(dataset, fixed_engine, remove_n=3)

    result = controller.run()

    assert result.state is ECState.CONVERGED
    assert result.iterations == 5
    assert [record.removed for record in result.history] == [3, 3, 3, 3, 3]
    assert len(main_effect.calls) == len(interaction.calls) == 5
    assert len(result.ec_scores) == 5
    scores = [entry.score for entry in result.ec_scores]
    assert scores == sorted(scores, reverse=True)
    assert len(result.evaporated) == 15
    assert set(result.kept_attributes) == set(dataset.attribute_names)


def test_working_set_shrinks_monotonically_and_stops_at_target(dataset_factory, fixed_engine):
    dataset = dataset_factory(20)
    controller, _, _ = _make_controller(dataset, fixed_engine, target_attributes=6, remove_n=4)
    result = controller.run()

    counts = [result.history[0].working_before] + [record.working_after for record in result.history]
    assert counts == [20, 16, 12, 8, 6]
    assert all(later <= earlier for earlier, later in zip(counts, counts[1:]))
    assert min(counts) == 6
    assert result.history[-1].requested == 4
    assert result.history[-1].removed == 2


def test_engines_see_only_the_shrunk_working_set(dataset_factory, fixed_engine):
    dataset = dataset_factory(8)
    controller, main_effect, _ = _make_controller(dataset, fixed_engine, target_attributes=4, remove_n=2)
    result = controller.run()
    assert [len(call) for call in main_effect.calls] == [8, 6]
    assert not set(main_effect.calls[1]) & {entry.name for entry in result.evaporated[:2]}


def test_percentage_removal_is_recomputed_against_current_set(dataset_factory, fixed_engine):
    dataset = dataset_factory(20)
    controller, _, _ = _make_controller(dataset, fixed_engine, remove_n=None, remove_percent=20)
    result = controller.run()
    assert result.state is ECState.CONVERGED
    assert [record.removed for record in result.history] == [4, 3, 2, 2, 1, 1, 1, 1]


def test_zero_removal_count_stalls(dataset_factory, fixed_engine):
    dataset = dataset_factory(10)
    controller, _, _ = _make_controller(dataset, fixed_engine, remove_n=None, remove_percent=5)
    result = controller.run()
    assert result.state is ECState.STALLED
    assert result.iterations == 1
    assert result.evaporated == []
    assert dataset.num_attributes == 10
    assert len(result.ec_scores) == 5


def test_evaporated_attributes_are_the_lowest_free_energy(dataset_factory, fixed_engine):
    dataset = dataset_factory(6)
    names = dataset.attribute_names
    config = ECConfig(target_attributes=3, mode=ECMode.MAIN_EFFECT_ONLY, remove_n=1)
    engine = fixed_engine("main effect", _main_scores(names))
    result = EvaporativeCooling(dataset, config, main_effect_engine=engine).run()
    assert [entry.name for entry in result.evaporated] == names[:3]
    assert result.kept_attributes == list(reversed(names[3:]))
    assert result.interaction_scores == []


def test_interaction_only_mode_skips_main_effect_engine(dataset_factory, fixed_engine):
    dataset = dataset_factory(6)
    names = dataset.attribute_names
    main_effect = fixed_engine("main effect", _main_scores(names))
    interaction = fixed_engine("interaction", _interaction_scores(names))
    config = ECConfig(target_attributes=2, mode="interaction", remove_n=2)
    result = EvaporativeCooling(dataset, config, main_effect, interaction).run()
    assert main_effect.calls == []
    assert len(interaction.calls) == 2
    assert result.main_effect_scores == []


def test_target_not_below_attribute_count_is_rejected(dataset_factory, fixed_engine):
    dataset = dataset_factory(5)
    with pytest.raises(ConfigurationError):
        _make_controller(dataset, fixed_engine, target_attributes=5)
    with pytest.raises(ConfigurationError):
        _make_controller(dataset, fixed_engine, target_attributes=9)


def test_missing_engine_for_mode_is_rejected(dataset_factory, fixed_engine):
    dataset = dataset_factory(5)
    engine = fixed_engine("main effect", _main_scores(dataset.attribute_names))
    with pytest.raises(ConfigurationError):
        EvaporativeCooling(dataset, ECConfig(target_attributes=2), main_effect_engine=engine)


def test_engine_exception_fails_the_run(dataset_factory, fixed_engine, failing_engine):
    dataset = dataset_factory(6)
    main_effect = fixed_engine("main effect", _main_scores(dataset.attribute_names))
    controller = EvaporativeCooling(dataset, ECConfig(target_attributes=2), main_effect, failing_engine())
    with pytest.raises(EngineFailure) as excinfo:
        controller.run()
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert controller.state is ECState.FAILED
    assert dataset.num_attributes == 6


def test_engine_failure_is_propagated_unchanged(dataset_factory, failing_engine):
    dataset = dataset_factory(6)
    failure = EngineFailure("no scores", engine="main effect")
    config = ECConfig(target_attributes=2, mode=ECMode.MAIN_EFFECT_ONLY)
    controller = EvaporativeCooling(dataset, config, main_effect_engine=failing_engine(exc=failure))
    with pytest.raises(EngineFailure) as excinfo:
        controller.run()
    assert excinfo.value is failure
    assert controller.state is ECState.FAILED


def test_mismatched_engine_outputs_fail_the_run(dataset_factory, fixed_engine):
    dataset = dataset_factory(6)
    names = dataset.attribute_names
    main_effect = fixed_engine("main effect", _main_scores(names))

    class DroppingEngine:
        name = "interaction"

        def rank(self, working):
            return [ScoredAttribute(1.0, attr) for attr in working.attribute_names[1:]]

    controller = EvaporativeCooling(dataset, ECConfig(target_attributes=2), main_effect, DroppingEngine())
    with pytest.raises(ConsistencyError):
        controller.run()
    assert controller.state is ECState.FAILED


def test_controller_cannot_run_twice(dataset_factory, fixed_engine):
    dataset = dataset_factory(6)
    controller, _, _ = _make_controller(dataset, fixed_engine, target_attributes=3, remove_n=3)
    controller.run()
    with pytest.raises(ECError):
        controller.run()


def test_diagnostics_are_kept_when_enabled(dataset_factory, fixed_engine):
    dataset = dataset_factory(8)
    controller, _, _ = _make_controller(
        dataset, fixed_engine, target_attributes=4, remove_n=2, log_diagnostics=True
    )
    result = controller.run()
    assert result.score_table is not None
    assert len(result.score_table) == 6
    assert set(result.kendall_taus) == {
        "main_vs_interaction",
        "main_vs_free_energy",
        "interaction_vs_free_energy",
    }
