"""Wire shapes for namespace configurations.

These are the payloads exchanged with the backend: what ``hydrate``
accepts and what ``export_payloads`` produces. Keys are camelCase on the
wire; snake_case field names are accepted too. Internal bookkeeping
(isDirty, isNew, markedForDeletion) is not part of any payload and is
dropped if present.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.console.segments import decode_segments


class LabelPayload(BaseModel):
    key: str
    value: str = ""
    enabled: bool = True

    model_config = ConfigDict(populate_by_name=True)


class ChoicePayload(BaseModel):
    value: str
    weight: float = 0

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)


class ParamPayload(BaseModel):
    id: Optional[str] = None
    name: str = ""
    weighted: bool = False
    choices: List[ChoicePayload] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class ExperimentPayload(BaseModel):
    id: Optional[str] = None
    name: str = ""
    num_segments: Optional[int] = Field(default=None, alias="numSegments")
    segments: List[int] = Field(default_factory=list)
    params: List[ParamPayload] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("segments", mode="before")
    @classmethod
    def _decode_bitmap(cls, value):
        # The backend stores segments as a hex bitmap string.
        if isinstance(value, str):
            return sorted(decode_segments(value))
        return value


class NamespacePayload(BaseModel):
    name: str = ""
    labels: List[LabelPayload] = Field(default_factory=list)
    experiments: List[ExperimentPayload] = Field(default_factory=list)
    publish: bool = False

    model_config = ConfigDict(populate_by_name=True)


class ConfigPayload(BaseModel):
    """A whole configuration file: every namespace in display order."""

    namespaces: List[NamespacePayload] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)
