"""
Exercise template engine.

Parses stored template configurations into the shape union, edits a learner's
response mapping (field id -> string | list[str] | list[dict]) and checks
whether a response is complete enough to be submitted.
"""

import copy
import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import TypeAdapter, ValidationError

from academy.schemas.exercise.template_schema import (
    TEMPLATE_SHAPES,
    InputType,
    QuadrantsTemplate,
    SectionsTemplate,
    StepsTemplate,
    TemplateConfig,
    TemplateField,
)

logger = logging.getLogger(__name__)

DEFAULT_MULTILINE_MAX_ITEMS = 10

_template_adapter: TypeAdapter = TypeAdapter(TemplateConfig)


class ExerciseTemplateError(Exception):
    """Base class for template engine errors."""


class TemplateConfigError(ExerciseTemplateError, ValueError):
    pass


class UnknownFieldError(ExerciseTemplateError, KeyError):
    pass


class ItemLimitError(ExerciseTemplateError):
    pass


class ReadOnlyResponseError(ExerciseTemplateError):
    pass


def parse_template_config(config: Union[Mapping[str, Any], Any]) -> TemplateConfig:
    """
    Build the typed template from a raw configuration mapping.

    Exactly one of ``sections`` / ``quadrants`` / ``steps`` must be present;
    anything else raises ``TemplateConfigError``.
    """
    if isinstance(config, (SectionsTemplate, QuadrantsTemplate, StepsTemplate)):
        return config
    if not isinstance(config, Mapping):
        raise TemplateConfigError("Template configuration must be a mapping.")

    present = [key for key in TEMPLATE_SHAPES if config.get(key) is not None]
    if len(present) != 1:
        raise TemplateConfigError(
            f"Template configuration must define exactly one of {', '.join(TEMPLATE_SHAPES)} (found: {present or 'none'})."
        )

    payload = dict(config)
    payload["shape"] = present[0]
    try:
        return _template_adapter.validate_python(payload)
    except ValidationError as exc:
        raise TemplateConfigError(f"Invalid {present[0]} template: {exc}") from exc


def _max_items(field: TemplateField) -> Optional[int]:
    if field.max_items is not None:
        return field.max_items
    if field.input_type == InputType.MULTILINE:
        return DEFAULT_MULTILINE_MAX_ITEMS
    return None


def is_blank_entry(entry: Any) -> bool:
    """An entry is blank when it is empty text, or an object whose sub-fields are all blank."""
    if isinstance(entry, str):
        return not entry.strip()
    if isinstance(entry, dict):
        return all(is_blank_entry(value) for value in entry.values())
    return entry is None


def validate_response(template: Union[TemplateConfig, Mapping[str, Any]], data: Optional[Mapping[str, Any]]) -> List[str]:
    """
    Return the ids of the fields that keep the response from being submitted.

    Text needs non-blank content; multiline and list fields need at least one
    non-blank entry, or ``minItems`` of them when the field declares it. The
    quadrant follow-up is optional.
    """
    template = parse_template_config(template)
    data = data or {}
    missing: List[str] = []

    for field in template.fields:
        if field.id == "followUp":
            continue
        value = data.get(field.id)

        if field.input_type == InputType.TEXT:
            if not isinstance(value, str) or not value.strip():
                missing.append(field.id)
            continue

        if not isinstance(value, list):
            missing.append(field.id)
            continue
        required = field.min_items or 1
        filled = sum(1 for entry in value if not is_blank_entry(entry))
        if filled < required:
            missing.append(field.id)

    return missing


class ExerciseResponseEditor:
    """
    Index-addressed edits over a response mapping.

    Every operation replaces the whole value of the field it touches. In
    read-only mode mutations raise ``ReadOnlyResponseError`` but ``render``
    still works.
    """

    def __init__(self, template: Union[TemplateConfig, Mapping[str, Any]], data: Optional[Mapping[str, Any]] = None, read_only: bool = False):
        self.template = parse_template_config(template)
        self.data: Dict[str, Any] = copy.deepcopy(dict(data or {}))
        self.read_only = read_only
        self._fields: Dict[str, TemplateField] = {field.id: field for field in self.template.fields}

    # --- lookups ---

    def field(self, field_id: str) -> TemplateField:
        try:
            return self._fields[field_id]
        except KeyError:
            raise UnknownFieldError(field_id) from None

    def _ensure_writable(self) -> None:
        if self.read_only:
            raise ReadOnlyResponseError("This response has been submitted and can no longer be edited.")

    def _items(self, field: TemplateField) -> List[Any]:
        if not field.is_sequence:
            raise TemplateConfigError(f"Field '{field.id}' is not a list field.")
        current = self.data.get(field.id)
        items = list(current) if isinstance(current, list) else []
        # A multiline field always shows at least one (blank) line.
        if not items and field.input_type == InputType.MULTILINE:
            items = [""]
        return items

    def _blank_entry(self, field: TemplateField) -> Any:
        if field.input_type == InputType.LIST and field.fields:
            return {name: "" for name in field.fields}
        return ""

    @staticmethod
    def _check_index(items: List[Any], index: int) -> None:
        if index < 0 or index >= len(items):
            raise IndexError(f"Item index {index} out of range (0..{len(items) - 1}).")

    # --- mutations ---

    def update_field(self, field_id: str, value: Any) -> Dict[str, Any]:
        self._ensure_writable()
        field = self.field(field_id)
        if field.is_sequence:
            if not isinstance(value, list):
                raise TemplateConfigError(f"Field '{field_id}' expects a list value.")
            limit = _max_items(field)
            if limit is not None and len(value) > limit:
                raise ItemLimitError(f"Field '{field_id}' accepts at most {limit} items.")
        elif value is not None and not isinstance(value, str):
            raise TemplateConfigError(f"Field '{field_id}' expects a text value.")
        self.data[field_id] = copy.deepcopy(value)
        return self.data

    def add_list_item(self, field_id: str) -> Dict[str, Any]:
        self._ensure_writable()
        field = self.field(field_id)
        if not field.is_sequence:
            raise TemplateConfigError(f"Field '{field_id}' is not a list field.")
        current = self.data.get(field_id)
        items = list(current) if isinstance(current, list) else []
        limit = _max_items(field)
        if limit is not None and len(items) >= limit:
            raise ItemLimitError(f"Field '{field_id}' accepts at most {limit} items.")
        items.append(self._blank_entry(field))
        self.data[field_id] = items
        return self.data

    def update_list_item(self, field_id: str, index: int, value: Any) -> Dict[str, Any]:
        self._ensure_writable()
        field = self.field(field_id)
        items = self._items(field)
        self._check_index(items, index)
        items[index] = copy.deepcopy(value)
        self.data[field_id] = items
        return self.data

    def update_list_item_field(self, field_id: str, index: int, sub_field: str, value: str) -> Dict[str, Any]:
        self._ensure_writable()
        field = self.field(field_id)
        if not field.fields or sub_field not in field.fields:
            raise UnknownFieldError(f"{field_id}.{sub_field}")
        items = self._items(field)
        self._check_index(items, index)
        entry = items[index]
        entry = dict(entry) if isinstance(entry, dict) else self._blank_entry(field)
        entry[sub_field] = value
        items[index] = entry
        self.data[field_id] = items
        return self.data

    def remove_list_item(self, field_id: str, index: int) -> Dict[str, Any]:
        self._ensure_writable()
        field = self.field(field_id)
        items = self._items(field)
        self._check_index(items, index)
        if field.input_type == InputType.MULTILINE and len(items) <= 1:
            raise ItemLimitError(f"Field '{field_id}' keeps at least one line.")
        del items[index]
        self.data[field_id] = items
        return self.data

    def apply(self, operation: Mapping[str, Any]) -> Dict[str, Any]:
        """Run one operation described as ``{"op": ..., "field_id": ..., ...}``."""
        op = operation.get("op")
        field_id = operation.get("field_id")
        if op == "update_field":
            return self.update_field(field_id, operation.get("value"))
        if op == "add_list_item":
            return self.add_list_item(field_id)
        if op == "update_list_item":
            return self.update_list_item(field_id, int(operation["index"]), operation.get("value"))
        if op == "update_list_item_field":
            return self.update_list_item_field(
                field_id, int(operation["index"]), operation["sub_field"], operation.get("value", "")
            )
        if op == "remove_list_item":
            return self.remove_list_item(field_id, int(operation["index"]))
        raise TemplateConfigError(f"Unknown edit operation: {op!r}")

    # --- view ---

    def render(self) -> List[Dict[str, Any]]:
        """Per-field view of the current state, in template order."""
        views: List[Dict[str, Any]] = []
        numbered = isinstance(self.template, StepsTemplate)

        for position, field in enumerate(self.template.fields):
            if field.is_sequence:
                value: Any = self._items(field) if field.input_type == InputType.MULTILINE else list(self.data.get(field.id) or [])
                limit = _max_items(field)
                can_add = not self.read_only and (limit is None or len(value) < limit)
                if field.input_type == InputType.MULTILINE:
                    can_remove = not self.read_only and len(value) > 1
                else:
                    can_remove = not self.read_only and len(value) > 0
            else:
                value = self.data.get(field.id) or ""
                can_add = False
                can_remove = False

            views.append(
                {
                    "id": field.id,
                    "label": field.label,
                    "description": field.description,
                    "input_type": field.input_type.value,
                    "placeholder": field.placeholder or field.description,
                    "prompt": field.prompt,
                    "sub_fields": list(field.fields or []),
                    "value": value,
                    "step_number": position + 1 if numbered else None,
                    "minimum_note": f"Minimum {field.min_items} items required" if numbered and field.min_items else None,
                    "can_add": can_add,
                    "can_remove": can_remove,
                    "read_only": self.read_only,
                }
            )
        return views
