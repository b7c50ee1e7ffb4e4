"""Immutable records making up the configuration graph.

Records reference their children by id only. The graph itself lives in
``State`` (see ``src.console.store``): namespaces in order, experiments
and params in id-keyed mappings.
"""

from dataclasses import dataclass
from enum import Enum


class Lifecycle(str, Enum):
    ACTIVE = "active"
    MARKED_FOR_DELETION = "marked_for_deletion"
    # Never stored on a record; reported for ids removed by a commit
    PURGED = "purged"


@dataclass(frozen=True)
class Label:
    key: str
    value: str = ""
    enabled: bool = True


@dataclass(frozen=True)
class Choice:
    value: str
    weight: float = 0  # Only meaningful when the owning param is weighted


@dataclass(frozen=True)
class Param:
    id: str
    name: str = ""
    weighted: bool = False
    choices: tuple[Choice, ...] = ()
    is_new: bool = False
    is_dirty: bool = False
    lifecycle: Lifecycle = Lifecycle.ACTIVE

    @property
    def marked_for_deletion(self) -> bool:
        return self.lifecycle is Lifecycle.MARKED_FOR_DELETION


@dataclass(frozen=True)
class Experiment:
    id: str
    name: str = ""
    num_segments: int = 128
    segments: frozenset[int] = frozenset()
    param_ids: tuple[str, ...] = ()
    is_new: bool = False
    is_dirty: bool = False
    lifecycle: Lifecycle = Lifecycle.ACTIVE

    @property
    def marked_for_deletion(self) -> bool:
        return self.lifecycle is Lifecycle.MARKED_FOR_DELETION


@dataclass(frozen=True)
class Namespace:
    name: str = ""
    labels: tuple[Label, ...] = ()
    experiment_ids: tuple[str, ...] = ()
    is_new: bool = False
    is_dirty: bool = False
    lifecycle: Lifecycle = Lifecycle.ACTIVE
    publish: bool = False

    @property
    def marked_for_deletion(self) -> bool:
        return self.lifecycle is Lifecycle.MARKED_FOR_DELETION
