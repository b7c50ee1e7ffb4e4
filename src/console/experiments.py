"""Experiment records and their validity.

Segment membership is written verbatim: the store does not check it
against ``num_segments`` or against sibling experiments. Those problems
are reported by ``experiment_problems`` without ever blocking the edit.
"""

from dataclasses import replace
from typing import Iterable

from src.console.params import duplicate_param_names
from src.console.records import Experiment, Lifecycle, Param
from src.console.segments import DEFAULT_NUM_SEGMENTS, format_segments


def new_experiment(
    experiment_id: str,
    name: str = "",
    num_segments: int = DEFAULT_NUM_SEGMENTS,
) -> Experiment:
    return Experiment(
        id=experiment_id,
        name=name,
        num_segments=num_segments,
        segments=frozenset(),
        param_ids=(),
        is_new=True,
        is_dirty=True,
    )


def rename_experiment(experiment: Experiment, name: str) -> Experiment:
    return replace(experiment, name=name, is_dirty=True)


def set_num_segments(experiment: Experiment, num_segments: int) -> Experiment:
    return replace(experiment, num_segments=num_segments, is_dirty=True)


def set_segments(experiment: Experiment, segments: Iterable[int]) -> Experiment:
    return replace(experiment, segments=frozenset(segments), is_dirty=True)


def delete_experiment(experiment: Experiment) -> Experiment:
    # Segments stay claimed until the experiment is purged.
    return replace(experiment, lifecycle=Lifecycle.MARKED_FOR_DELETION, is_dirty=True)


def add_param_id(experiment: Experiment, param_id: str) -> Experiment:
    return replace(experiment, param_ids=(*experiment.param_ids, param_id), is_dirty=True)


def touch(experiment: Experiment) -> Experiment:
    """Mark dirty because something the experiment owns changed."""
    if experiment.is_dirty:
        return experiment
    return replace(experiment, is_dirty=True)


def experiment_problems(
    experiment: Experiment,
    params: list[Param],
    siblings: Iterable[Experiment] = (),
) -> list[str]:
    """Return a list of validity problems (empty = valid)."""
    problems = []

    if experiment.num_segments <= 0:
        problems.append(f"numSegments must be positive, got {experiment.num_segments}")

    out_of_range = {s for s in experiment.segments if not 0 <= s < experiment.num_segments}
    if out_of_range:
        problems.append(
            f"Segments outside 0-{experiment.num_segments - 1}: {format_segments(out_of_range)}"
        )

    for name in duplicate_param_names(params):
        problems.append(f"Duplicate param name: {name!r}")

    for other in siblings:
        if other.id == experiment.id:
            continue
        if other.num_segments != experiment.num_segments:
            problems.append(
                f"numSegments {experiment.num_segments} disagrees with "
                f"{other.name or other.id} ({other.num_segments})"
            )
        shared = experiment.segments & other.segments
        if shared:
            problems.append(
                f"Segments overlap with {other.name or other.id}: {format_segments(shared)}"
            )

    return problems
