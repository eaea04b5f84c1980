"""
HTTP tests for the exam API using FastAPI's TestClient.
"""

import pytest
from fastapi.testclient import TestClient

from exam_app.core.exam_manager import ExamManager
from exam_app.server.api_server import create_api_app

PROFESSOR = {"X-User-Id": "prof-1", "X-User-Role": "professor"}
STUDENT = {"X-User-Id": "stu-1", "X-User-Role": "student"}


def exam_body(**overrides):
    body = {
        "title": "Cell biology",
        "description": "Chapter 3",
        "duration_minutes": 10,
        "questions": [
            {
                "text": "Which organelle makes ATP?",
                "options": [
                    {"text": "Mitochondrion", "is_correct": True},
                    {"text": "Ribosome"},
                    {"text": "Golgi body"},
                ],
            },
            {
                "text": "DNA is found in the...",
                "options": [
                    {"text": "Nucleus", "is_correct": True},
                    {"text": "Cell wall"},
                ],
            },
        ],
    }
    body.update(overrides)
    return body


@pytest.fixture
def manager():
    return ExamManager()


@pytest.fixture
def client(manager):
    return TestClient(create_api_app(manager))


@pytest.fixture
def created_exam(client):
    response = client.post("/exams", json=exam_body(), headers=PROFESSOR)
    assert response.status_code == 201
    return response.json()


def correct_option(exam, question_index):
    question = exam["questions"][question_index]
    option = next(o for o in question["options"] if o["is_correct"])
    return question["id"], option["id"]


def wrong_option(exam, question_index):
    question = exam["questions"][question_index]
    option = next(o for o in question["options"] if not o["is_correct"])
    return question["id"], option["id"]


class TestIdentity:
    def test_student_page_when_requested_then_served_without_identity(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "X-User-Id" in response.text

    def test_identity_when_headers_missing_then_401(self, client):
        assert client.get("/identity").status_code == 401

    def test_identity_when_role_unknown_then_401(self, client):
        response = client.get("/identity", headers={"X-User-Id": "x", "X-User-Role": "admin"})
        assert response.status_code == 401

    def test_identity_when_valid_then_echoed(self, client):
        response = client.get("/identity", headers=PROFESSOR)
        assert response.json() == {"user_id": "prof-1", "role": "professor"}

    def test_professor_route_when_student_calls_then_403(self, client):
        response = client.post("/exams", json=exam_body(), headers=STUDENT)
        assert response.status_code == 403

    def test_student_route_when_professor_calls_then_403(self, client):
        assert client.get("/exams/available", headers=PROFESSOR).status_code == 403


class TestProfessorRoutes:
    def test_create_when_valid_then_ids_assigned_and_listed(self, client, created_exam):
        assert created_exam["created_by"] == "prof-1"
        assert created_exam["question_count"] == 2
        assert all(option["id"] for option in created_exam["questions"][0]["options"])

        listed = client.get("/exams/mine", headers=PROFESSOR).json()
        assert [(e["id"], e["submission_count"]) for e in listed] == [(created_exam["id"], 0)]

    def test_create_when_invalid_then_422_with_reason(self, client):
        response = client.post("/exams", json=exam_body(questions=[]), headers=PROFESSOR)
        assert response.status_code == 422
        assert response.json()["detail"] == "Exam must contain at least one question."

    def test_create_when_id_taken_then_409(self, client):
        client.post("/exams", json=exam_body(id="bio-1"), headers=PROFESSOR)
        response = client.post("/exams", json=exam_body(id="bio-1"), headers=PROFESSOR)
        assert response.status_code == 409

    def test_update_when_questions_reordered_then_read_back_exactly(self, client, created_exam):
        exam_id = created_exam["id"]
        updated = dict(created_exam, title="Cell biology v2", duration_minutes=15)
        updated["questions"] = [created_exam["questions"][1], created_exam["questions"][0]]

        response = client.put(f"/exams/{exam_id}", json=updated, headers=PROFESSOR)
        assert response.status_code == 200

        stored = client.get(f"/exams/{exam_id}", headers=PROFESSOR).json()
        assert stored["title"] == "Cell biology v2"
        assert stored["duration_minutes"] == 15
        assert stored["questions"] == updated["questions"]

    def test_update_when_exam_missing_then_404(self, client):
        response = client.put("/exams/missing", json=exam_body(), headers=PROFESSOR)
        assert response.status_code == 404

    def test_update_when_invalid_then_422_and_unchanged(self, client, created_exam):
        exam_id = created_exam["id"]
        response = client.put(f"/exams/{exam_id}", json=exam_body(title=" "), headers=PROFESSOR)
        assert response.status_code == 422
        assert client.get(f"/exams/{exam_id}", headers=PROFESSOR).json()["title"] == "Cell biology"

    def test_delete_when_present_then_gone(self, client, created_exam):
        exam_id = created_exam["id"]
        assert client.delete(f"/exams/{exam_id}", headers=PROFESSOR).status_code == 204
        assert client.get(f"/exams/{exam_id}", headers=PROFESSOR).status_code == 404
        assert client.get("/exams/mine", headers=PROFESSOR).json() == []
        assert client.delete(f"/exams/{exam_id}", headers=PROFESSOR).status_code == 404


class TestStudentFlow:
    def test_attempt_when_started_then_answer_key_hidden(self, client, created_exam):
        response = client.post(f"/exams/{created_exam['id']}/attempt", headers=STUDENT)

        assert response.status_code == 201
        attempt = response.json()
        assert attempt["state"] == "in_progress"
        assert attempt["time_remaining_seconds"] == 600
        assert attempt["answered"] == [False, False]
        assert all("is_correct" not in option for option in attempt["question"]["options"])

    def test_attempt_when_exam_missing_then_404(self, client):
        assert client.post("/exams/missing/attempt", headers=STUDENT).status_code == 404

    def test_full_flow_when_unanswered_then_confirmation_then_graded(self, client, created_exam):
        exam_id = created_exam["id"]
        client.post(f"/exams/{exam_id}/attempt", headers=STUDENT)

        question_id, option_id = correct_option(created_exam, 0)
        answered = client.post(
            "/attempt/answer", json={"question_id": question_id, "option_id": option_id}, headers=STUDENT
        ).json()
        assert answered["selected_option_id"] == option_id
        assert answered["answered_count"] == 1

        assert client.post("/attempt/next", headers=STUDENT).json()["current_index"] == 1
        assert client.post("/attempt/next", headers=STUDENT).json()["current_index"] == 1
        assert client.post("/attempt/goto", json={"index": -4}, headers=STUDENT).json()["current_index"] == 0
        assert client.post("/attempt/prev", headers=STUDENT).json()["current_index"] == 0

        refused = client.post("/attempt/finish", json={}, headers=STUDENT)
        assert refused.status_code == 409
        assert refused.json()["detail"]["unanswered_count"] == 1

        finished = client.post("/attempt/finish", json={"confirm": True}, headers=STUDENT)
        assert finished.status_code == 201
        submission = finished.json()
        assert submission["score"] == 50.0
        assert submission["passed"] is False
        assert submission["exam_title"] == "Cell biology"

        assert client.get("/attempt", headers=STUDENT).status_code == 404
        assert client.get("/exams/available", headers=STUDENT).json() == []
        assert client.post(f"/exams/{exam_id}/attempt", headers=STUDENT).status_code == 409

        mine = client.get("/submissions/mine", headers=STUDENT).json()
        assert [s["id"] for s in mine] == [submission["id"]]

        listed = client.get(f"/exams/{exam_id}/submissions", headers=PROFESSOR).json()
        assert [(s["student_id"], s["score"]) for s in listed] == [("stu-1", 50.0)]

    def test_report_when_requested_then_breakdown_with_answer_key(self, client, created_exam):
        client.post(f"/exams/{created_exam['id']}/attempt", headers=STUDENT)
        for index, pick in ((0, correct_option), (1, wrong_option)):
            question_id, option_id = pick(created_exam, index)
            client.post(
                "/attempt/answer", json={"question_id": question_id, "option_id": option_id}, headers=STUDENT
            )
        submission = client.post("/attempt/finish", json={}, headers=STUDENT).json()

        report = client.get(f"/submissions/{submission['id']}", headers=STUDENT).json()

        assert report["correct_count"] == 1
        assert report["total_questions"] == 2
        assert [q["is_correct"] for q in report["questions"]] == [True, False]
        assert any(o["is_correct"] for o in report["questions"][1]["options"])

    def test_report_when_exam_deleted_then_score_kept(self, client, created_exam):
        client.post(f"/exams/{created_exam['id']}/attempt", headers=STUDENT)
        submission = client.post("/attempt/finish", json={"confirm": True}, headers=STUDENT).json()
        client.delete(f"/exams/{created_exam['id']}", headers=PROFESSOR)

        report = client.get(f"/submissions/{submission['id']}", headers=STUDENT).json()

        assert report["score"] == 0.0
        assert report["exam_title"] is None
        assert report["questions"] == []

    def test_answer_when_option_not_in_question_then_422(self, client, created_exam):
        client.post(f"/exams/{created_exam['id']}/attempt", headers=STUDENT)
        question_id, _ = correct_option(created_exam, 0)
        _, other_option = correct_option(created_exam, 1)
        response = client.post(
            "/attempt/answer", json={"question_id": question_id, "option_id": other_option}, headers=STUDENT
        )
        assert response.status_code == 422

    def test_attempt_routes_when_nothing_open_then_errors(self, client):
        assert client.get("/attempt", headers=STUDENT).status_code == 404
        assert client.post("/attempt/next", headers=STUDENT).status_code == 409
        assert client.delete("/attempt", headers=STUDENT).status_code == 404

    def test_abandon_when_open_then_exam_still_available(self, client, created_exam):
        client.post(f"/exams/{created_exam['id']}/attempt", headers=STUDENT)
        assert client.delete("/attempt", headers=STUDENT).status_code == 204
        available = client.get("/exams/available", headers=STUDENT).json()
        assert [e["id"] for e in available] == [created_exam["id"]]

    def test_countdown_when_expired_then_submission_visible(self, client, manager, created_exam):
        client.post(f"/exams/{created_exam['id']}/attempt", headers=STUDENT)

        forced = manager.tick_attempts(seconds=600)

        assert len(forced) == 1
        assert client.get("/attempt", headers=STUDENT).status_code == 404
        mine = client.get("/submissions/mine", headers=STUDENT).json()
        assert mine[0]["exam_id"] == created_exam["id"]

    def test_report_when_other_student_asks_then_403_and_professor_allowed(self, client, created_exam):
        client.post(f"/exams/{created_exam['id']}/attempt", headers=STUDENT)
        submission = client.post("/attempt/finish", json={"confirm": True}, headers=STUDENT).json()
        other_student = {"X-User-Id": "stu-2", "X-User-Role": "student"}

        assert client.get(f"/submissions/{submission['id']}", headers=other_student).status_code == 403
        assert client.get(f"/submissions/{submission['id']}", headers=PROFESSOR).status_code == 200

    def test_submission_when_unknown_then_404(self, client):
        assert client.get("/submissions/missing", headers=STUDENT).status_code == 404
