"""Root store: the whole configuration state and its single entry point.

``State`` is an immutable value. ``apply_action`` takes a state and an
action and returns the next state; nothing is kept at module level, so a
host application decides where the current state lives.

Routing is by namespace name. Only the targeted namespace is replaced:
every other namespace in the returned state is the same object as before,
and an action that changes nothing returns the input state itself.

Identities for new experiments and params come from a counter carried in
the state, so replaying the same actions from the same state always
produces the same ids.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Iterable

from loguru import logger

from src.console import actions as act
from src.console.config import StoreConfig
from src.console.experiments import experiment_problems
from src.console.namespaces import (
    Entities,
    experiments_of,
    new_namespace,
    reduce_namespace,
)
from src.console.records import Choice, Experiment, Label, Lifecycle, Namespace, Param
from src.console.segments import (
    SegmentReport,
    available_segments,
    combined_segments,
    segment_report,
    universe_size,
)
from src.payloads.schemas import (
    ChoicePayload,
    ExperimentPayload,
    LabelPayload,
    NamespacePayload,
    ParamPayload,
)


@dataclass(frozen=True)
class State:
    namespaces: tuple[Namespace, ...] = ()
    entities: Entities = field(default_factory=Entities)
    next_id: int = 1
    config: StoreConfig = field(default_factory=StoreConfig)


def _fresh_id(prefix: str, taken, next_id: int) -> tuple[str, int]:
    while f"{prefix}-{next_id}" in taken:
        next_id += 1
    return f"{prefix}-{next_id}", next_id + 1


# --- Loading ---

def hydrate(payloads: Iterable[Any], config: StoreConfig | None = None) -> State:
    """Build a fresh state from backend namespace payloads.

    Payloads may be dicts or ``NamespacePayload`` models; missing optional
    fields take their defaults. Experiments and params without an id, or
    whose id is already taken, get a generated one. Loaded records are
    clean: not new, not dirty, not marked for deletion.
    """
    if config is None:
        config = StoreConfig()

    namespaces: list[Namespace] = []
    experiments: dict[str, Experiment] = {}
    params: dict[str, Param] = {}
    next_id = 1

    payloads = [
        raw if isinstance(raw, NamespacePayload) else NamespacePayload.model_validate(raw)
        for raw in payloads
    ]
    # Ids carried by the payloads are reserved before any id is generated.
    explicit_experiment_ids = {e.id for p in payloads for e in p.experiments if e.id}
    explicit_param_ids = {
        param.id for p in payloads for e in p.experiments for param in e.params if param.id
    }
    reserved = explicit_experiment_ids | explicit_param_ids

    for payload in payloads:
        if any(ns.name == payload.name for ns in namespaces):
            logger.warning(f"Skipping duplicate namespace {payload.name!r} in payload")
            continue

        default_size = next(
            (e.num_segments for e in payload.experiments if e.num_segments is not None),
            config.default_num_segments,
        )

        experiment_ids = []
        for exp_payload in payload.experiments:
            exp_id = exp_payload.id
            if not exp_id or exp_id in experiments:
                exp_id, next_id = _fresh_id(
                    config.experiment_id_prefix, reserved | experiments.keys(), next_id,
                )

            param_ids = []
            for param_payload in exp_payload.params:
                param_id = param_payload.id
                if not param_id or param_id in params:
                    param_id, next_id = _fresh_id(
                        config.param_id_prefix, reserved | params.keys(), next_id,
                    )
                params[param_id] = Param(
                    id=param_id,
                    name=param_payload.name,
                    weighted=param_payload.weighted,
                    choices=tuple(Choice(value=c.value, weight=c.weight) for c in param_payload.choices),
                )
                param_ids.append(param_id)

            experiments[exp_id] = Experiment(
                id=exp_id,
                name=exp_payload.name,
                num_segments=(
                    exp_payload.num_segments if exp_payload.num_segments is not None else default_size
                ),
                segments=frozenset(exp_payload.segments),
                param_ids=tuple(param_ids),
            )
            experiment_ids.append(exp_id)

        namespaces.append(Namespace(
            name=payload.name,
            labels=tuple(
                Label(key=lb.key, value=lb.value, enabled=lb.enabled) for lb in payload.labels
            ),
            experiment_ids=tuple(experiment_ids),
            publish=payload.publish,
        ))

    logger.info(
        f"Hydrated {len(namespaces)} namespaces "
        f"({len(experiments)} experiments, {len(params)} params)"
    )
    return State(
        namespaces=tuple(namespaces),
        entities=Entities(experiments=experiments, params=params),
        next_id=next_id,
        config=config,
    )


# --- Dispatch ---

def apply_action(state: State, action: act.Action) -> State:
    if isinstance(action, act.LoadNamespaces):
        return hydrate(action.namespaces, state.config)

    if isinstance(action, act.AddNamespace):
        if get_namespace(state, action.name) is not None:
            logger.debug(f"Ignoring AddNamespace: {action.name!r} already exists")
            return state
        return replace(state, namespaces=(*state.namespaces, new_namespace(action.name)))

    index = _namespace_index(state, action.namespace)
    if index is None:
        logger.debug(f"Ignoring {type(action).__name__}: unknown namespace {action.namespace!r}")
        return state

    if isinstance(action, act.RenameNamespace) and action.name != action.namespace:
        if get_namespace(state, action.name) is not None:
            logger.debug(f"Ignoring RenameNamespace: {action.name!r} already exists")
            return state

    current = state.namespaces[index]
    action, next_id = _prepare(state, current, action)
    namespace, entities = reduce_namespace(current, state.entities, action)
    if namespace is current and entities is state.entities:
        return state

    namespaces = state.namespaces[:index] + (namespace,) + state.namespaces[index + 1:]
    return replace(state, namespaces=namespaces, entities=entities, next_id=next_id)


def apply_actions(state: State, actions: Iterable[act.Action]) -> State:
    for action in actions:
        state = apply_action(state, action)
    return state


def _namespace_index(state: State, name: str) -> int | None:
    for i, ns in enumerate(state.namespaces):
        if ns.name == name:
            return i
    return None


def _prepare(state: State, namespace: Namespace, action: act.Action) -> tuple[act.Action, int]:
    """Fill in generated ids and defaults on add actions.

    The advanced counter is only kept by the caller if the action lands.
    """
    next_id = state.next_id
    config = state.config
    if isinstance(action, act.AddExperiment):
        if action.experiment is None:
            experiment_id, next_id = _fresh_id(
                config.experiment_id_prefix, state.entities.experiments, next_id,
            )
            action = replace(action, experiment=experiment_id)
        if action.num_segments is None:
            size = universe_size(
                experiments_of(namespace, state.entities),
                default=config.default_num_segments,
            )
            action = replace(action, num_segments=size)
    elif isinstance(action, act.AddParam) and action.param is None:
        param_id, next_id = _fresh_id(config.param_id_prefix, state.entities.params, next_id)
        action = replace(action, param=param_id)
    return action, next_id


# --- Queries ---

def get_namespace(state: State, name: str) -> Namespace | None:
    index = _namespace_index(state, name)
    return None if index is None else state.namespaces[index]


def namespace_experiments(state: State, name: str) -> list[Experiment]:
    namespace = get_namespace(state, name)
    if namespace is None:
        return []
    return experiments_of(namespace, state.entities)


def experiment_params(state: State, experiment_id: str) -> list[Param]:
    experiment = state.entities.experiments.get(experiment_id)
    if experiment is None:
        return []
    return [state.entities.params[pid] for pid in experiment.param_ids]


def lifecycle_of(state: State, record_id: str) -> Lifecycle:
    """Lifecycle of an experiment or param; ids no longer present are purged."""
    record = state.entities.experiments.get(record_id) or state.entities.params.get(record_id)
    if record is None:
        return Lifecycle.PURGED
    return record.lifecycle


def combined(
    state: State,
    name: str,
    exclude_ids: Iterable[str] = (),
    num_segments: int | None = None,
) -> frozenset[int]:
    return combined_segments(
        namespace_experiments(state, name),
        exclude_ids,
        num_segments,
        default=state.config.default_num_segments,
    )


def available(
    state: State,
    name: str,
    exclude_ids: Iterable[str] = (),
    num_segments: int | None = None,
) -> frozenset[int]:
    return available_segments(
        namespace_experiments(state, name),
        exclude_ids,
        num_segments,
        default=state.config.default_num_segments,
    )


def report(
    state: State,
    name: str,
    exclude_ids: Iterable[str] = (),
    num_segments: int | None = None,
) -> SegmentReport:
    return segment_report(
        namespace_experiments(state, name),
        exclude_ids,
        num_segments,
        default=state.config.default_num_segments,
    )


def problems(state: State, name: str, experiment_id: str) -> list[str]:
    """Validity problems of one experiment within its namespace."""
    siblings = namespace_experiments(state, name)
    experiment = next((e for e in siblings if e.id == experiment_id), None)
    if experiment is None:
        return []
    return experiment_problems(experiment, experiment_params(state, experiment_id), siblings)


# --- Saving ---

def commit(state: State) -> State:
    """Apply the save step: purge deleted records and clear new/dirty flags.

    Deleting a namespace or experiment purges everything it owns.
    """
    namespaces = []
    experiments: dict[str, Experiment] = {}
    params: dict[str, Param] = {}

    for ns in state.namespaces:
        if ns.marked_for_deletion:
            continue
        experiment_ids = []
        for exp in experiments_of(ns, state.entities):
            if exp.marked_for_deletion:
                continue
            param_ids = []
            for param in (state.entities.params[pid] for pid in exp.param_ids):
                if param.marked_for_deletion:
                    continue
                params[param.id] = replace(param, is_new=False, is_dirty=False)
                param_ids.append(param.id)
            experiments[exp.id] = replace(
                exp, param_ids=tuple(param_ids), is_new=False, is_dirty=False,
            )
            experiment_ids.append(exp.id)
        namespaces.append(replace(
            ns, experiment_ids=tuple(experiment_ids), is_new=False, is_dirty=False,
        ))

    purged = len(state.namespaces) - len(namespaces)
    logger.info(
        f"Committed {len(namespaces)} namespaces, purged {purged} namespaces, "
        f"{len(state.entities.experiments) - len(experiments)} experiments, "
        f"{len(state.entities.params) - len(params)} params"
    )
    return replace(
        state,
        namespaces=tuple(namespaces),
        entities=Entities(experiments=experiments, params=params),
    )


def export_payloads(state: State) -> list[NamespacePayload]:
    """Payloads for persistence, without records marked for deletion or internal flags."""
    state = commit(state)
    payloads = []
    for ns in state.namespaces:
        payloads.append(NamespacePayload(
            name=ns.name,
            labels=[LabelPayload(key=lb.key, value=lb.value, enabled=lb.enabled) for lb in ns.labels],
            publish=ns.publish,
            experiments=[
                ExperimentPayload(
                    id=exp.id,
                    name=exp.name,
                    num_segments=exp.num_segments,
                    segments=sorted(exp.segments),
                    params=[
                        ParamPayload(
                            id=p.id,
                            name=p.name,
                            weighted=p.weighted,
                            choices=[ChoicePayload(value=c.value, weight=c.weight) for c in p.choices],
                        )
                        for p in experiment_params(state, exp.id)
                    ],
                )
                for exp in experiments_of(ns, state.entities)
            ],
        ))
    return payloads
