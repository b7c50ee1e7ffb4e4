"""Tests for the namespace reducer."""

from src.console import actions as act
from src.console.namespaces import HANDLERS, Entities, new_namespace, reduce_namespace
from src.console.records import Experiment, Namespace, Param

EXP = Experiment(id="e1", name="A", num_segments=10, segments=frozenset({0}), param_ids=("p1",))
PARAM = Param(id="p1", name="color")
ENTITIES = Entities(experiments={"e1": EXP}, params={"p1": PARAM})
NS = Namespace(name="prod", experiment_ids=("e1",))


class TestHandlerCoverage:
    def test_every_namespace_action_has_a_handler(self):
        root_actions = {act.LoadNamespaces, act.AddNamespace}
        assert set(HANDLERS) == set(act.ACTION_TYPES) - root_actions


class TestNamespaceFields:
    def test_new_namespace_is_new_and_dirty(self):
        ns = new_namespace("dev")
        assert ns.name == "dev"
        assert ns.is_new and ns.is_dirty

    def test_rename(self):
        ns, _ = reduce_namespace(NS, ENTITIES, act.RenameNamespace("prod", "production"))
        assert ns.name == "production"
        assert ns.is_dirty

    def test_delete_marks_but_keeps_experiments(self):
        ns, entities = reduce_namespace(NS, ENTITIES, act.DeleteNamespace("prod"))
        assert ns.marked_for_deletion
        assert ns.experiment_ids == ("e1",)
        assert entities is ENTITIES

    def test_toggle_publish(self):
        ns, _ = reduce_namespace(NS, ENTITIES, act.TogglePublish("prod"))
        assert ns.publish is True
        ns, _ = reduce_namespace(ns, ENTITIES, act.TogglePublish("prod"))
        assert ns.publish is False


class TestLabels:
    def test_add_label_dirties_namespace(self):
        ns, _ = reduce_namespace(NS, ENTITIES, act.AddLabel("prod", "env"))
        assert [lb.key for lb in ns.labels] == ["env"]
        assert ns.is_dirty

    def test_empty_label_key_is_noop(self):
        ns, entities = reduce_namespace(NS, ENTITIES, act.AddLabel("prod", ""))
        assert ns is NS
        assert entities is ENTITIES


class TestExperimentRouting:
    def test_add_experiment_appends_id(self):
        ns, entities = reduce_namespace(
            NS, ENTITIES, act.AddExperiment("prod", "B", experiment="e2", num_segments=10),
        )
        assert ns.experiment_ids == ("e1", "e2")
        assert entities.experiments["e2"].name == "B"
        assert entities.experiments["e1"] is EXP

    def test_add_experiment_without_id_is_noop(self):
        ns, _ = reduce_namespace(NS, ENTITIES, act.AddExperiment("prod", "B"))
        assert ns is NS

    def test_add_experiment_defaults_to_namespace_universe(self):
        _, entities = reduce_namespace(NS, ENTITIES, act.AddExperiment("prod", experiment="e2"))
        assert entities.experiments["e2"].num_segments == 10

    def test_experiment_of_other_namespace_is_unreachable(self):
        foreign = Experiment(id="e9")
        entities = Entities(experiments={**ENTITIES.experiments, "e9": foreign}, params=ENTITIES.params)
        ns, result = reduce_namespace(NS, entities, act.RenameExperiment("prod", "e9", "x"))
        assert ns is NS
        assert result is entities

    def test_set_segments(self):
        ns, entities = reduce_namespace(NS, ENTITIES, act.SetSegments("prod", "e1", {4, 5}))
        assert entities.experiments["e1"].segments == frozenset({4, 5})
        assert ns.is_dirty


class TestParamRouting:
    def test_add_param(self):
        _, entities = reduce_namespace(NS, ENTITIES, act.AddParam("prod", "e1", "size", param="p2"))
        assert entities.experiments["e1"].param_ids == ("p1", "p2")
        assert entities.params["p2"].name == "size"
        assert entities.experiments["e1"].is_dirty

    def test_add_param_to_unknown_experiment_is_noop(self):
        ns, entities = reduce_namespace(NS, ENTITIES, act.AddParam("prod", "nope", param="p2"))
        assert ns is NS
        assert entities is ENTITIES

    def test_choice_edit_dirties_param_and_experiment(self):
        ns, entities = reduce_namespace(NS, ENTITIES, act.AddChoice("prod", "e1", "p1", "red"))
        assert entities.params["p1"].choices[0].value == "red"
        assert entities.params["p1"].is_dirty
        assert entities.experiments["e1"].is_dirty
        assert ns.is_dirty

    def test_unknown_param_is_noop(self):
        ns, entities = reduce_namespace(NS, ENTITIES, act.RenameParam("prod", "e1", "p404", "x"))
        assert ns is NS
        assert entities is ENTITIES

    def test_out_of_range_choice_is_noop(self):
        ns, entities = reduce_namespace(NS, ENTITIES, act.DeleteChoice("prod", "e1", "p1", 0))
        assert ns is NS
        assert entities is ENTITIES
