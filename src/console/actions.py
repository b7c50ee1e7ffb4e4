"""Mutation actions accepted by the store.

Each action is a frozen record naming its target by identity: the
namespace by name, experiments and params by id, choices by index within
their param. The set of action classes is closed; ``ACTION_TYPES`` lists
every one of them and the reducers keep a handler per class.
"""

from dataclasses import dataclass
from typing import Any


# --- Root ---

@dataclass(frozen=True)
class LoadNamespaces:
    namespaces: tuple[Any, ...]  # payload dicts or NamespacePayload models


@dataclass(frozen=True)
class AddNamespace:
    name: str = ""


# --- Namespace ---

@dataclass(frozen=True)
class RenameNamespace:
    namespace: str
    name: str


@dataclass(frozen=True)
class DeleteNamespace:
    namespace: str


@dataclass(frozen=True)
class TogglePublish:
    namespace: str


# --- Labels ---

@dataclass(frozen=True)
class AddLabel:
    namespace: str
    key: str


@dataclass(frozen=True)
class ToggleLabel:
    namespace: str
    key: str


@dataclass(frozen=True)
class SetLabelValue:
    namespace: str
    key: str
    value: str


# --- Experiments ---

@dataclass(frozen=True)
class AddExperiment:
    namespace: str
    name: str = ""
    # Filled in by the root store when left empty
    experiment: str | None = None
    num_segments: int | None = None


@dataclass(frozen=True)
class DeleteExperiment:
    namespace: str
    experiment: str


@dataclass(frozen=True)
class RenameExperiment:
    namespace: str
    experiment: str
    name: str


@dataclass(frozen=True)
class SetNumSegments:
    namespace: str
    experiment: str
    num_segments: int


@dataclass(frozen=True)
class SetSegments:
    namespace: str
    experiment: str
    segments: frozenset[int]

    def __post_init__(self):
        # Held as a frozenset so the same action can be replayed.
        if not isinstance(self.segments, frozenset):
            object.__setattr__(self, "segments", frozenset(self.segments))


# --- Params ---

@dataclass(frozen=True)
class AddParam:
    namespace: str
    experiment: str
    name: str = ""
    # Filled in by the root store when left empty
    param: str | None = None


@dataclass(frozen=True)
class DeleteParam:
    namespace: str
    experiment: str
    param: str


@dataclass(frozen=True)
class RenameParam:
    namespace: str
    experiment: str
    param: str
    name: str


@dataclass(frozen=True)
class ToggleWeighted:
    namespace: str
    experiment: str
    param: str


# --- Choices ---

@dataclass(frozen=True)
class AddChoice:
    namespace: str
    experiment: str
    param: str
    value: str


@dataclass(frozen=True)
class DeleteChoice:
    namespace: str
    experiment: str
    param: str
    index: int


@dataclass(frozen=True)
class SetWeight:
    namespace: str
    experiment: str
    param: str
    index: int
    weight: float


@dataclass(frozen=True)
class ClearChoices:
    namespace: str
    experiment: str
    param: str


RootAction = LoadNamespaces | AddNamespace
NamespaceAction = RenameNamespace | DeleteNamespace | TogglePublish
LabelAction = AddLabel | ToggleLabel | SetLabelValue
ExperimentAction = (
    AddExperiment | DeleteExperiment | RenameExperiment | SetNumSegments | SetSegments
)
ParamAction = AddParam | DeleteParam | RenameParam | ToggleWeighted
ChoiceAction = AddChoice | DeleteChoice | SetWeight | ClearChoices

Action = (
    RootAction | NamespaceAction | LabelAction | ExperimentAction | ParamAction | ChoiceAction
)

ACTION_TYPES: tuple[type, ...] = (
    LoadNamespaces, AddNamespace,
    RenameNamespace, DeleteNamespace, TogglePublish,
    AddLabel, ToggleLabel, SetLabelValue,
    AddExperiment, DeleteExperiment, RenameExperiment, SetNumSegments, SetSegments,
    AddParam, DeleteParam, RenameParam, ToggleWeighted,
    AddChoice, DeleteChoice, SetWeight, ClearChoices,
)
