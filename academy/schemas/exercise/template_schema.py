"""Pydantic models for exercise template configurations.

A template configuration carries exactly one of ``sections``, ``quadrants``
or ``steps``. Each shape is its own model, and they are combined in a tagged
union discriminated by ``shape``, a key the parser adds from whichever
collection is present.
"""

from __future__ import annotations

import enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class InputType(str, enum.Enum):
    TEXT = "text"
    MULTILINE = "multiline"
    LIST = "list"


class TemplateField(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    label: str = ""
    description: str = ""
    input_type: InputType = Field(default=InputType.MULTILINE, alias="inputType")
    min_items: Optional[int] = Field(default=None, alias="minItems", ge=0)
    max_items: Optional[int] = Field(default=None, alias="maxItems", ge=1)
    placeholder: Optional[str] = None
    prompt: Optional[str] = None
    # Named sub-fields of each entry of a ``list`` field.
    fields: Optional[List[str]] = None

    @property
    def is_sequence(self) -> bool:
        return self.input_type in (InputType.MULTILINE, InputType.LIST)


class FollowUpField(TemplateField):
    id: str = "followUp"


class SectionsTemplate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    shape: Literal["sections"] = "sections"
    sections: List[TemplateField]

    @property
    def fields(self) -> List[TemplateField]:
        return list(self.sections)


class QuadrantsTemplate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    shape: Literal["quadrants"] = "quadrants"
    quadrants: List[TemplateField]
    follow_up: Optional[FollowUpField] = Field(default=None, alias="followUp")

    @model_validator(mode="after")
    def _quadrants_are_multiline(self) -> "QuadrantsTemplate":
        # Quadrants (and the follow-up) always collect a list of lines.
        for quadrant in self.quadrants:
            quadrant.input_type = InputType.MULTILINE
        if self.follow_up is not None:
            self.follow_up.id = "followUp"
            self.follow_up.input_type = InputType.MULTILINE
        return self

    @property
    def fields(self) -> List[TemplateField]:
        fields: List[TemplateField] = list(self.quadrants)
        if self.follow_up is not None:
            fields.append(self.follow_up)
        return fields


class StepsTemplate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    shape: Literal["steps"] = "steps"
    steps: List[TemplateField]

    @property
    def fields(self) -> List[TemplateField]:
        return list(self.steps)


TemplateConfig = Annotated[
    Union[SectionsTemplate, QuadrantsTemplate, StepsTemplate],
    Field(discriminator="shape"),
]

TEMPLATE_SHAPES = ("sections", "quadrants", "steps")


__all__ = [
    "InputType",
    "TemplateField",
    "FollowUpField",
    "SectionsTemplate",
    "QuadrantsTemplate",
    "StepsTemplate",
    "TemplateConfig",
    "TEMPLATE_SHAPES",
]
