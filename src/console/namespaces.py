"""Namespace reducer.

``reduce_namespace`` applies one action to one namespace and the
experiments and params it owns. Label edits go to ``labels``; experiment,
param and choice edits find their target by id among the namespace's own
experiments before delegating to ``experiments`` / ``params``.

A successful edit at any depth marks the namespace dirty. An action whose
target cannot be found hands back the very same namespace and entities,
so callers can tell a no-op apart by identity.
"""

from dataclasses import dataclass, field, replace
from typing import Callable, Mapping

from loguru import logger

from src.console import actions as act
from src.console import experiments as exp_ops
from src.console import labels as label_ops
from src.console import params as param_ops
from src.console.records import Experiment, Lifecycle, Namespace, Param
from src.console.segments import universe_size


@dataclass(frozen=True)
class Entities:
    """Id-keyed storage for every experiment and param in the state."""

    experiments: Mapping[str, Experiment] = field(default_factory=dict)
    params: Mapping[str, Param] = field(default_factory=dict)


Result = tuple[Namespace, Entities] | None


def new_namespace(name: str = "") -> Namespace:
    return Namespace(name=name, is_new=True, is_dirty=True)


def experiments_of(namespace: Namespace, entities: Entities) -> list[Experiment]:
    return [entities.experiments[eid] for eid in namespace.experiment_ids]


def reduce_namespace(
    namespace: Namespace,
    entities: Entities,
    action: act.Action,
) -> tuple[Namespace, Entities]:
    handler = HANDLERS.get(type(action))
    if handler is None:
        logger.debug(f"No namespace handler for {type(action).__name__}")
        return namespace, entities

    result = handler(namespace, entities, action)
    if result is None:
        logger.debug(f"Ignoring {type(action).__name__} on namespace {namespace.name!r}: target not found")
        return namespace, entities

    updated, entities = result
    if not updated.is_dirty:
        updated = replace(updated, is_dirty=True)
    return updated, entities


# --- Namespace fields ---

def _rename(ns: Namespace, entities: Entities, action: act.RenameNamespace) -> Result:
    return replace(ns, name=action.name), entities


def _delete(ns: Namespace, entities: Entities, action: act.DeleteNamespace) -> Result:
    return replace(ns, lifecycle=Lifecycle.MARKED_FOR_DELETION), entities


def _toggle_publish(ns: Namespace, entities: Entities, action: act.TogglePublish) -> Result:
    return replace(ns, publish=not ns.publish), entities


# --- Labels ---

def _label_edit(edit: Callable[[Namespace, act.LabelAction], tuple]):
    def handler(ns: Namespace, entities: Entities, action: act.LabelAction) -> Result:
        labels = edit(ns, action)
        if labels is ns.labels:
            return None
        return replace(ns, labels=labels), entities
    return handler


_add_label = _label_edit(lambda ns, a: label_ops.add_label(ns.labels, a.key))
_toggle_label = _label_edit(lambda ns, a: label_ops.toggle_label(ns.labels, a.key))
_set_label_value = _label_edit(lambda ns, a: label_ops.set_label_value(ns.labels, a.key, a.value))


# --- Experiments ---

def _find_experiment(ns: Namespace, entities: Entities, experiment_id: str) -> Experiment | None:
    if experiment_id not in ns.experiment_ids:
        return None
    return entities.experiments.get(experiment_id)


def _with_experiment(entities: Entities, experiment: Experiment, **changes) -> Entities:
    return replace(
        entities,
        experiments={**entities.experiments, experiment.id: experiment},
        **changes,
    )


def _add_experiment(ns: Namespace, entities: Entities, action: act.AddExperiment) -> Result:
    if not action.experiment or action.experiment in entities.experiments:
        return None
    num_segments = action.num_segments
    if num_segments is None:
        num_segments = universe_size(experiments_of(ns, entities))
    experiment = exp_ops.new_experiment(action.experiment, action.name, num_segments)
    return (
        replace(ns, experiment_ids=(*ns.experiment_ids, experiment.id)),
        _with_experiment(entities, experiment),
    )


def _experiment_edit(edit: Callable[[Experiment, act.ExperimentAction], Experiment]):
    def handler(ns: Namespace, entities: Entities, action) -> Result:
        experiment = _find_experiment(ns, entities, action.experiment)
        if experiment is None:
            return None
        return ns, _with_experiment(entities, edit(experiment, action))
    return handler


_delete_experiment = _experiment_edit(lambda e, a: exp_ops.delete_experiment(e))
_rename_experiment = _experiment_edit(lambda e, a: exp_ops.rename_experiment(e, a.name))
_set_num_segments = _experiment_edit(lambda e, a: exp_ops.set_num_segments(e, a.num_segments))
_set_segments = _experiment_edit(lambda e, a: exp_ops.set_segments(e, a.segments))


# --- Params ---

def _add_param(ns: Namespace, entities: Entities, action: act.AddParam) -> Result:
    experiment = _find_experiment(ns, entities, action.experiment)
    if experiment is None or not action.param or action.param in entities.params:
        return None
    param = param_ops.new_param(action.param, action.name)
    return ns, _with_experiment(
        entities,
        exp_ops.add_param_id(experiment, param.id),
        params={**entities.params, param.id: param},
    )


def _param_edit(edit: Callable[[Param, act.Action], Param]):
    def handler(ns: Namespace, entities: Entities, action) -> Result:
        experiment = _find_experiment(ns, entities, action.experiment)
        if experiment is None:
            return None
        params = param_ops.update_param(
            experiment, entities.params, action.param, lambda p: edit(p, action),
        )
        if params is None:
            return None
        return ns, _with_experiment(entities, exp_ops.touch(experiment), params=params)
    return handler


_delete_param = _param_edit(lambda p, a: param_ops.delete_param(p))
_rename_param = _param_edit(lambda p, a: param_ops.rename_param(p, a.name))
_toggle_weighted = _param_edit(lambda p, a: param_ops.toggle_weighted(p))

# --- Choices ---

_add_choice = _param_edit(lambda p, a: param_ops.add_choice(p, a.value))
_delete_choice = _param_edit(lambda p, a: param_ops.delete_choice(p, a.index))
_set_weight = _param_edit(lambda p, a: param_ops.set_weight(p, a.index, a.weight))
_clear_choices = _param_edit(lambda p, a: param_ops.clear_choices(p))


HANDLERS: dict[type, Callable[..., Result]] = {
    act.RenameNamespace: _rename,
    act.DeleteNamespace: _delete,
    act.TogglePublish: _toggle_publish,
    act.AddLabel: _add_label,
    act.ToggleLabel: _toggle_label,
    act.SetLabelValue: _set_label_value,
    act.AddExperiment: _add_experiment,
    act.DeleteExperiment: _delete_experiment,
    act.RenameExperiment: _rename_experiment,
    act.SetNumSegments: _set_num_segments,
    act.SetSegments: _set_segments,
    act.AddParam: _add_param,
    act.DeleteParam: _delete_param,
    act.RenameParam: _rename_param,
    act.ToggleWeighted: _toggle_weighted,
    act.AddChoice: _add_choice,
    act.DeleteChoice: _delete_choice,
    act.SetWeight: _set_weight,
    act.ClearChoices: _clear_choices,
}
