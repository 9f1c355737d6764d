from __future__ import annotations

import pytest
from rest_framework.test import APIClient

from assessments.models import Question, Submission
from assessments.question_bank import create_question


def _client(user):
    c = APIClient()
    c.force_authenticate(user)
    return c


@pytest.fixture
def bank(mcq):
    q1 = create_question(mcq, {"text": "Pet?", "options": ["Cat", "Dog"], "correct_answer": "Cat", "order_index": 1})
    q2 = create_question(
        mcq, {"text": "Sky?", "options": ["Red", "Blue", "Green"], "correct_answer": "Blue", "points": 2, "order_index": 2}
    )
    return q1, q2


@pytest.mark.django_db
def test_submit_with_list_payload(mcq, enrolled, bank):
    q1, q2 = bank
    r = _client(enrolled).post(
        f"/api/v1/assessments/{mcq.pk}/submit/",
        {"answers": [{"question_id": q1.pk, "answer": "cat"}, {"question_id": q2.pk, "answer": "Green"}]},
        format="json",
    )
    assert r.status_code == 201
    body = r.json()
    assert body["score"] == 1.0
    assert body["totalPoints"] == 3.0
    assert body["results"] == {str(q1.pk): True, str(q2.pk): False}
    assert Submission.objects.filter(pk=body["submissionId"], student=enrolled).exists()


@pytest.mark.django_db
def test_submit_with_mapping_payload(mcq, enrolled, bank):
    q1, q2 = bank
    r = _client(enrolled).post(
        f"/api/v1/assessments/{mcq.pk}/submit/",
        {"answers": {str(q1.pk): " CAT ", str(q2.pk): "blue"}},
        format="json",
    )
    assert r.status_code == 201
    assert r.json()["score"] == 3.0


@pytest.mark.django_db
def test_submit_errors_map_to_status_codes(mcq, teacher, enrolled, user_factory, bank):
    url = f"/api/v1/assessments/{mcq.pk}/submit/"
    r = _client(enrolled).post(url, {"answers": []}, format="json")
    assert r.status_code == 400
    assert r.json() == {"detail": "Answers are required"}

    r = _client(teacher).post(url, {"answers": {str(bank[0].pk): "Cat"}}, format="json")
    assert r.status_code == 403

    outsider = user_factory("outsider")
    r = _client(outsider).post(url, {"answers": {str(bank[0].pk): "Cat"}}, format="json")
    assert r.status_code == 403

    r = _client(enrolled).post("/api/v1/assessments/999999/submit/", {"answers": {"1": "x"}}, format="json")
    assert r.status_code == 404

    r = _client(enrolled).post(url, {"answers": "Cat"}, format="json")
    assert r.status_code == 400
    assert "answers" in r.json()


@pytest.mark.django_db
def test_submit_to_empty_bank_is_404(mcq, enrolled):
    r = _client(enrolled).post(f"/api/v1/assessments/{mcq.pk}/submit/", {"answers": {"1": "x"}}, format="json")
    assert r.status_code == 404
    assert r.json()["detail"] == "No questions found for this test"


@pytest.mark.django_db
def test_latest_submission(mcq, enrolled, bank):
    c = _client(enrolled)
    url = f"/api/v1/assessments/{mcq.pk}/submissions/latest/"
    assert c.get(url).status_code == 404
    c.post(f"/api/v1/assessments/{mcq.pk}/submit/", {"answers": {str(bank[0].pk): "Dog"}}, format="json")
    c.post(f"/api/v1/assessments/{mcq.pk}/submit/", {"answers": {str(bank[0].pk): "Cat"}}, format="json")
    data = c.get(url).json()
    assert data["score"] == 1.0
    assert len(data["answers"]) == 2
    assert data["percentage"] == pytest.approx(100 / 3)


@pytest.mark.django_db
def test_students_do_not_see_correct_answers(mcq, teacher, enrolled, bank):
    student_view = _client(enrolled).get(f"/api/v1/assessments/{mcq.pk}/questions/").json()
    assert student_view["count"] == 2
    assert all("correct_answer" not in q for q in student_view["results"])
    teacher_view = _client(teacher).get(f"/api/v1/assessments/{mcq.pk}/questions/").json()
    assert [q["correct_answer"] for q in teacher_view["results"]] == ["Cat", "Blue"]


@pytest.mark.django_db
def test_owner_manages_questions(mcq, teacher, enrolled):
    c = _client(teacher)
    base = f"/api/v1/assessments/{mcq.pk}/questions/"
    r = c.post(base, {"text": "Pick", "options": ["A", ""], "correct_answer": "A"}, format="json")
    assert r.status_code == 400
    assert "At least 2 valid" in r.json()["detail"]

    r = c.post(base, {"text": "Pick", "options": ["A", "B"], "correct_answer": "B"}, format="json")
    assert r.status_code == 201
    qid = r.json()["id"]

    r = c.patch(f"{base}{qid}/", {"points": 4}, format="json")
    assert r.status_code == 200
    assert r.json()["points"] == 4.0

    # Students cannot manage questions
    assert _client(enrolled).delete(f"{base}{qid}/").status_code == 403

    assert c.delete(f"{base}{qid}/").status_code == 204
    assert not Question.objects.filter(pk=qid).exists()
    assert c.delete(f"{base}{qid}/").status_code == 404


@pytest.mark.django_db
def test_malformed_order_index_is_rejected(mcq, teacher):
    c = _client(teacher)
    base = f"/api/v1/assessments/{mcq.pk}/questions/"
    r = c.post(base, {"text": "Pick", "options": ["A", "B"], "correct_answer": "A", "order_index": "first"}, format="json")
    assert r.status_code == 400
    assert r.json()["detail"] == "Order index must be an integer."

    qid = c.post(base, {"text": "Pick", "options": ["A", "B"], "correct_answer": "A"}, format="json").json()["id"]
    r = c.patch(f"{base}{qid}/", {"order_index": [1]}, format="json")
    assert r.status_code == 400
    assert Question.objects.get(pk=qid).order_index == 0

    r = c.post(f"{base}batch/", {"questions": [{"text": "T", "options": ["A", "B"], "correct_answer": "A", "order_index": 2.5}]}, format="json")
    assert r.status_code == 400
    assert r.json()["detail"] == "Question 1: Order index must be an integer."


@pytest.mark.django_db
def test_batch_create_reports_question_number(mcq, teacher):
    url = f"/api/v1/assessments/{mcq.pk}/questions/batch/"
    items = [
        {"text": "One", "options": ["A", "B"], "correct_answer": "A"},
        {"text": "Two", "options": ["A", "B"], "correct_answer": "C"},
    ]
    r = _client(teacher).post(url, {"questions": items}, format="json")
    assert r.status_code == 400
    assert r.json()["detail"] == "Question 2: Correct answer must be one of the valid options."
    assert not Question.objects.filter(material=mcq).exists()

    items[1]["correct_answer"] = "B"
    r = _client(teacher).post(url, {"questions": items}, format="json")
    assert r.status_code == 201
    assert r.json()["count"] == 2
