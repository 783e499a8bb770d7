from __future__ import annotations

import pytest

from academy.api.v2.endpoints import exercise_router
from tests.utils import auth_headers, create_course, create_exercise, create_user

COMPLETE_RESPONSE = {"problem": "Freelancers chase late invoices", "evidence": ["12 of 15 interviewees"]}


@pytest.fixture()
def user(db_session):
    return create_user(db_session, email="founder@example.com")


@pytest.fixture()
def exercise(db_session):
    course = create_course(db_session)
    return create_exercise(db_session, course.lessons[0])


@pytest.fixture()
def scheduled(monkeypatch):
    calls = []
    monkeypatch.setattr(exercise_router, "run_submission_evaluation", calls.append)
    return calls


def test_get_exercise_renders_empty_form(client, user, exercise):
    response = client.get(f"/api/v2/exercises/{exercise.id}", headers=auth_headers(user))

    assert response.status_code == 200
    body = response.json()
    assert body["submission"] is None
    assert body["read_only"] is False
    assert [field["id"] for field in body["form"]] == ["problem", "evidence"]
    assert body["form"][1]["value"] == [""]
    assert body["missing_fields"] == ["problem", "evidence"]


def test_unknown_exercise_is_404(client, user):
    response = client.get("/api/v2/exercises/999", headers=auth_headers(user))
    assert response.status_code == 404
    assert response.json()["detail"] == "exercise_not_found"


def test_edit_draft_operations(client, user, exercise):
    url = f"/api/v2/exercises/{exercise.id}/draft"
    headers = auth_headers(user)

    response = client.patch(url, json={"op": "update_field", "field_id": "problem", "value": "Churn"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["user_response"] == {"problem": "Churn"}

    response = client.patch(url, json={"op": "update_field", "field_id": "nope", "value": "x"}, headers=headers)
    assert response.status_code == 404

    response = client.patch(url, json={"op": "remove_list_item", "field_id": "evidence", "index": 0}, headers=headers)
    assert response.status_code == 422


def test_submit_incomplete_response_is_rejected(client, user, exercise, scheduled):
    client.put(f"/api/v2/exercises/{exercise.id}/draft", json={"user_response": {"problem": "Churn"}}, headers=auth_headers(user))

    response = client.post(f"/api/v2/exercises/{exercise.id}/submit", json={}, headers=auth_headers(user))

    assert response.status_code == 422
    assert response.json()["detail"]["missing_fields"] == ["evidence"]
    assert scheduled == []


def test_submit_schedules_evaluation_and_locks_the_form(client, user, exercise, scheduled):
    headers = auth_headers(user)
    response = client.post(
        f"/api/v2/exercises/{exercise.id}/submit",
        json={"user_response": COMPLETE_RESPONSE},
        headers=headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["evaluation_scheduled"] is True
    assert body["submission"]["status"] == "submitted"
    assert scheduled == [body["submission"]["id"]]

    again = client.post(f"/api/v2/exercises/{exercise.id}/submit", json={}, headers=headers)
    assert again.status_code == 409

    edit = client.put(f"/api/v2/exercises/{exercise.id}/draft", json={"user_response": {}}, headers=headers)
    assert edit.status_code == 409

    detail = client.get(f"/api/v2/exercises/{exercise.id}", headers=headers).json()
    assert detail["read_only"] is True
    assert all(field["read_only"] for field in detail["form"])
