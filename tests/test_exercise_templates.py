from __future__ import annotations

import pytest

from academy.schemas.exercise.template_schema import InputType, QuadrantsTemplate, SectionsTemplate, StepsTemplate
from academy.services.exercise_template_service import (
    ExerciseResponseEditor,
    ItemLimitError,
    ReadOnlyResponseError,
    TemplateConfigError,
    UnknownFieldError,
    parse_template_config,
    validate_response,
)

SECTIONS = {
    "sections": [
        {"id": "problem", "label": "Problem", "description": "Describe it", "inputType": "text"},
        {"id": "evidence", "label": "Evidence", "inputType": "multiline", "maxItems": 2},
    ]
}

QUADRANTS = {
    "quadrants": [
        {"id": "pains", "label": "Pains", "inputType": "text"},
        {"id": "gains", "label": "Gains"},
    ],
    "followUp": {"label": "Insight"},
}

STEPS = {
    "steps": [
        {"id": "hypotheses", "label": "Hypotheses", "inputType": "multiline", "minItems": 2},
        {"id": "people", "label": "People", "inputType": "list", "fields": ["name", "role"], "maxItems": 2},
    ]
}


def test_parse_each_shape():
    assert isinstance(parse_template_config(SECTIONS), SectionsTemplate)
    assert isinstance(parse_template_config(QUADRANTS), QuadrantsTemplate)
    assert isinstance(parse_template_config(STEPS), StepsTemplate)


def test_quadrants_are_always_multiline_with_optional_follow_up():
    template = parse_template_config(QUADRANTS)
    assert [f.input_type for f in template.fields] == [InputType.MULTILINE] * 3
    assert template.fields[-1].id == "followUp"


@pytest.mark.parametrize(
    "config",
    [
        {},
        {"sections": [], "steps": []},
        {"sections": [{"label": "no id"}]},
        ["not", "a", "mapping"],
    ],
)
def test_invalid_configurations_are_rejected(config):
    with pytest.raises(TemplateConfigError):
        parse_template_config(config)


def test_validate_response_reports_missing_fields():
    assert validate_response(SECTIONS, {}) == ["problem", "evidence"]
    assert validate_response(SECTIONS, {"problem": "   ", "evidence": ["", " "]}) == ["problem", "evidence"]
    assert validate_response(SECTIONS, {"problem": "Invoices", "evidence": ["", "3 interviews"]}) == []


def test_validate_response_honours_min_items_and_object_entries():
    data = {
        "hypotheses": ["Founders hate invoicing", ""],
        "people": [{"name": "", "role": ""}],
    }
    assert validate_response(STEPS, data) == ["hypotheses", "people"]

    data = {
        "hypotheses": ["Founders hate invoicing", "They pay for tools"],
        "people": [{"name": "Ana", "role": ""}],
    }
    assert validate_response(STEPS, data) == []


def test_follow_up_is_optional():
    data = {"pains": ["Late payments"], "gains": ["Cash flow"]}
    assert validate_response(QUADRANTS, data) == []


def test_multiline_field_shows_one_blank_line():
    editor = ExerciseResponseEditor(SECTIONS, {})
    view = {v["id"]: v for v in editor.render()}

    assert view["evidence"]["value"] == [""]
    assert view["evidence"]["can_remove"] is False
    assert view["evidence"]["can_add"] is True
    assert view["problem"]["placeholder"] == "Describe it"


def test_add_update_and_remove_lines():
    editor = ExerciseResponseEditor(SECTIONS, {"evidence": ["first"]})
    editor.add_list_item("evidence")
    editor.update_list_item("evidence", 1, "second")
    assert editor.data["evidence"] == ["first", "second"]

    with pytest.raises(ItemLimitError):
        editor.add_list_item("evidence")

    editor.remove_list_item("evidence", 0)
    assert editor.data["evidence"] == ["second"]

    with pytest.raises(ItemLimitError):
        editor.remove_list_item("evidence", 0)


def test_update_list_item_rejects_out_of_range_index():
    editor = ExerciseResponseEditor(SECTIONS, {"evidence": ["only"]})
    with pytest.raises(IndexError):
        editor.update_list_item("evidence", 3, "nope")


def test_object_entries_are_created_with_blank_sub_fields():
    editor = ExerciseResponseEditor(STEPS, {})
    editor.add_list_item("people")
    editor.update_list_item_field("people", 0, "name", "Ana")

    assert editor.data["people"] == [{"name": "Ana", "role": ""}]

    with pytest.raises(UnknownFieldError):
        editor.update_list_item_field("people", 0, "email", "ana@example.com")


def test_update_field_validates_value_type_and_limit():
    editor = ExerciseResponseEditor(SECTIONS, {})
    editor.update_field("problem", "Invoicing is painful")
    assert editor.data["problem"] == "Invoicing is painful"

    with pytest.raises(TemplateConfigError):
        editor.update_field("evidence", "not a list")
    with pytest.raises(ItemLimitError):
        editor.update_field("evidence", ["a", "b", "c"])
    with pytest.raises(UnknownFieldError):
        editor.update_field("unknown", "x")


def test_read_only_editor_refuses_mutations_but_renders():
    editor = ExerciseResponseEditor(SECTIONS, {"problem": "Done"}, read_only=True)

    with pytest.raises(ReadOnlyResponseError):
        editor.update_field("problem", "Changed")
    views = editor.render()
    assert all(v["read_only"] for v in views)
    assert not any(v["can_add"] or v["can_remove"] for v in views)


def test_steps_render_numbered_with_minimum_note():
    views = ExerciseResponseEditor(STEPS, {}).render()

    assert [v["step_number"] for v in views] == [1, 2]
    assert views[0]["minimum_note"] == "Minimum 2 items required"
    assert views[1]["value"] == []
    assert views[1]["sub_fields"] == ["name", "role"]


def test_apply_dispatches_operations():
    editor = ExerciseResponseEditor(SECTIONS, {})
    editor.apply({"op": "update_field", "field_id": "problem", "value": "Churn"})
    editor.apply({"op": "update_list_item", "field_id": "evidence", "index": 0, "value": "Exit survey"})

    assert editor.data == {"problem": "Churn", "evidence": ["Exit survey"]}

    with pytest.raises(TemplateConfigError):
        editor.apply({"op": "explode", "field_id": "problem"})
