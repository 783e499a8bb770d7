import pytest

from academy.utils.json_utils import extract_json_object
from academy.utils.number_utils import clamp, round_half_up


def test_extract_json_object_from_fenced_reply():
    raw = '```json\n{"message": "Hi", "hints": ["a"]}\n```'
    assert extract_json_object(raw) == {"message": "Hi", "hints": ["a"]}


def test_extract_json_object_ignores_surrounding_prose():
    raw = 'Sure! Here is the evaluation: {"overallScore": 80, "feedback": "use {braces} wisely"} Hope it helps.'
    data = extract_json_object(raw)
    assert data["overallScore"] == 80
    assert data["feedback"] == "use {braces} wisely"


@pytest.mark.parametrize("raw", ["", "no json here", "[1, 2, 3]", "{not: valid}"])
def test_extract_json_object_rejects_invalid_output(raw):
    with pytest.raises(ValueError):
        extract_json_object(raw)


def test_round_half_up_differs_from_bankers_rounding():
    assert round_half_up(12.5) == 13
    assert round_half_up(66.666) == 67
    assert round_half_up(33.333) == 33


def test_clamp_bounds_scores():
    assert clamp(120) == 100
    assert clamp(-4) == 0
    assert clamp(55) == 55
