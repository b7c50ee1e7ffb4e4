"""Parameters of a single experiment.

Params are looked up by id in the params mapping, but only ids listed in
the owning experiment's ``param_ids`` are reachable from it. Every edit
that lands marks the param dirty; marking the experiment and namespace
is left to the callers above.
"""

from collections import Counter
from dataclasses import replace
from typing import Callable, Mapping

from src.console import choices as choice_ops
from src.console.records import Experiment, Lifecycle, Param


def new_param(param_id: str, name: str = "") -> Param:
    return Param(id=param_id, name=name, weighted=False, choices=(), is_new=True, is_dirty=True)


def rename_param(param: Param, name: str) -> Param:
    return replace(param, name=name, is_dirty=True)


def toggle_weighted(param: Param) -> Param:
    # Choices are kept when switching back to unweighted; ClearChoices does that.
    return replace(param, weighted=not param.weighted, is_dirty=True)


def delete_param(param: Param) -> Param:
    return replace(param, lifecycle=Lifecycle.MARKED_FOR_DELETION, is_dirty=True)


def add_choice(param: Param, value: str) -> Param:
    return replace(param, choices=choice_ops.add_choice(param.choices, value), is_dirty=True)


def delete_choice(param: Param, index: int) -> Param:
    updated = choice_ops.delete_choice(param.choices, index)
    if updated is param.choices:
        return param
    return replace(param, choices=updated, is_dirty=True)


def set_weight(param: Param, index: int, weight: float) -> Param:
    updated = choice_ops.set_weight(param.choices, index, weight)
    if updated is param.choices:
        return param
    return replace(param, choices=updated, is_dirty=True)


def clear_choices(param: Param) -> Param:
    return replace(param, choices=choice_ops.clear_choices(param.choices), is_dirty=True)


def update_param(
    experiment: Experiment,
    params: Mapping[str, Param],
    param_id: str,
    edit: Callable[[Param], Param],
) -> dict[str, Param] | None:
    """Apply ``edit`` to one of the experiment's params.

    Returns the new params mapping, or None when the experiment does not
    own ``param_id`` or the edit left the param unchanged.
    """
    if param_id not in experiment.param_ids or param_id not in params:
        return None
    current = params[param_id]
    updated = edit(current)
    if updated is current:
        return None
    return {**params, param_id: updated}


def duplicate_param_names(params: list[Param]) -> list[str]:
    """Names shared by more than one param that is not marked for deletion."""
    counts = Counter(p.name for p in params if not p.marked_for_deletion)
    return sorted(name for name, count in counts.items() if count > 1)
