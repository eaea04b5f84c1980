"""FastAPI server that exposes the professor and student endpoints."""

from __future__ import annotations

from datetime import datetime
from threading import Thread
from uuid import uuid4

from fastapi import Depends, FastAPI, Header, HTTPException, Response
from fastapi.responses import HTMLResponse
import uvicorn

from exam_app.constants.about import APP_NAME, APP_VERSION
from exam_app.constants.identity_constants import USER_ID_HEADER, USER_ROLE_HEADER
from exam_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from exam_app.core.errors import (
    AttemptStateError,
    ConfirmationRequiredError,
    DuplicateExamError,
    ExamNotFoundError,
)
from exam_app.core.exam_manager import ExamManager
from exam_app.core.markdown_math_renderer import renderer
from exam_app.core.models import (
    AttemptSnapshot,
    Exam,
    Identity,
    Option,
    Question,
    Submission,
    SubmissionReport,
    UserRole,
    utc_now,
)
from exam_app.core.services.grading import is_passing
from exam_app.server.schemas import AnswerPayload, ExamPayload, FinishPayload, GoToPayload
from exam_app.server.student_page import STUDENT_PAGE_HTML


def _new_id() -> str:
    return uuid4().hex


# --- Identity ---


def _get_identity(
    user_id: str | None = Header(default=None, alias=USER_ID_HEADER),
    role: str | None = Header(default=None, alias=USER_ROLE_HEADER),
) -> Identity:
    if not user_id or not user_id.strip() or not role:
        raise HTTPException(status_code=401, detail="Missing identity headers.")
    try:
        parsed_role = UserRole(role.strip().lower())
    except ValueError as exc:
        raise HTTPException(status_code=401, detail=f"Unknown role '{role}'.") from exc
    return Identity(user_id=user_id.strip(), role=parsed_role)


def _require_role(role: UserRole):
    def dependency(identity: Identity = Depends(_get_identity)) -> Identity:
        if identity.role is not role:
            raise HTTPException(status_code=403, detail=f"This route is for {role.value}s only.")
        return identity

    return dependency


require_professor = _require_role(UserRole.PROFESSOR)
require_student = _require_role(UserRole.STUDENT)


def _get_exam_manager_dependency(exam_manager: ExamManager):
    def dependency() -> ExamManager:
        return exam_manager

    return dependency


# --- Payload conversion ---


def _exam_from_payload(
    payload: ExamPayload,
    *,
    exam_id: str,
    created_by: str,
    created_at: datetime,
) -> Exam:
    questions: list[Question] = []
    for question_payload in payload.questions:
        question_id = question_payload.id or _new_id()
        options = [
            Option(
                id=option_payload.id or _new_id(),
                question_id=question_id,
                text=option_payload.text,
                is_correct=option_payload.is_correct,
            )
            for option_payload in question_payload.options
        ]
        questions.append(
            Question(id=question_id, exam_id=exam_id, text=question_payload.text, options=options)
        )
    return Exam(
        id=exam_id,
        title=payload.title,
        created_by=created_by,
        duration_minutes=payload.duration_minutes,
        questions=questions,
        description=payload.description,
        created_at=created_at,
        updated_at=utc_now(),
    )


def _exam_summary(exam: Exam) -> dict[str, object]:
    return {
        "id": exam.id,
        "title": exam.title,
        "description": exam.description,
        "created_by": exam.created_by,
        "created_at": exam.created_at.isoformat(),
        "updated_at": exam.updated_at.isoformat(),
        "duration_minutes": exam.duration_minutes,
        "question_count": len(exam.questions),
    }


def _professor_exam(exam: Exam) -> dict[str, object]:
    body = _exam_summary(exam)
    body["questions"] = [
        {
            "id": question.id,
            "text": question.text,
            "options": [
                {"id": option.id, "text": option.text, "is_correct": option.is_correct}
                for option in question.options
            ],
        }
        for question in exam.questions
    ]
    return body


def _student_question(question: Question) -> dict[str, object]:
    # The answer key never leaves the server while an attempt is open.
    return {
        "id": question.id,
        "text": question.text,
        "html": renderer.render_fragment(question.text),
        "options": [
            {"id": option.id, "text": option.text, "html": renderer.render_inline(option.text)}
            for option in question.options
        ],
    }


def _attempt_payload(snapshot: AttemptSnapshot) -> dict[str, object]:
    question = snapshot.current_question
    return {
        "exam_id": snapshot.exam.id,
        "exam_title": snapshot.exam.title,
        "state": snapshot.state.value,
        "current_index": snapshot.current_index,
        "question_count": snapshot.question_count,
        "answered_count": snapshot.answered_count,
        "time_remaining_seconds": snapshot.time_remaining_seconds,
        "question": _student_question(question) if question is not None else None,
        "selected_option_id": snapshot.answers.get(question.id) if question is not None else None,
        "answered": [q.id in snapshot.answers for q in snapshot.exam.questions],
    }


def _submission_payload(submission: Submission, exam: Exam | None = None) -> dict[str, object]:
    return {
        "id": submission.id,
        "exam_id": submission.exam_id,
        "exam_title": exam.title if exam is not None else None,
        "student_id": submission.student_id,
        "submitted_at": submission.submitted_at.isoformat(),
        "score": submission.score,
        "passed": is_passing(submission.score),
        "answers": [
            {"question_id": answer.question_id, "selected_option_id": answer.selected_option_id}
            for answer in submission.answers
        ],
    }


def _report_payload(report: SubmissionReport) -> dict[str, object]:
    body = _submission_payload(report.submission, report.exam)
    body["passed"] = report.passed
    if report.exam is None or report.grade is None:
        body.update({"correct_count": None, "total_questions": None, "questions": []})
        return body

    results = {result.question_id: result for result in report.grade.question_results}
    questions = []
    for question in report.exam.questions:
        result = results[question.id]
        questions.append(
            {
                "id": question.id,
                "html": renderer.render_fragment(question.text),
                "is_correct": result.is_correct,
                "selected_option_id": result.selected_option_id,
                "options": [
                    {
                        "id": option.id,
                        "html": renderer.render_inline(option.text),
                        "is_correct": option.is_correct,
                    }
                    for option in question.options
                ],
            }
        )
    body.update(
        {
            "correct_count": report.grade.correct_count,
            "total_questions": report.grade.total_questions,
            "questions": questions,
        }
    )
    return body


def create_api_app(exam_manager: ExamManager) -> FastAPI:
    """Create a FastAPI application wired to the provided exam manager."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
    exam_manager_dep = _get_exam_manager_dependency(exam_manager)

    @app.get("/", response_class=HTMLResponse)
    def serve_student_page() -> str:
        return STUDENT_PAGE_HTML

    @app.get("/identity")
    def get_identity(identity: Identity = Depends(_get_identity)) -> dict[str, object]:
        return {"user_id": identity.user_id, "role": identity.role.value}

    # --- Professor routes ---

    @app.get("/exams/mine")
    def list_my_exams(
        identity: Identity = Depends(require_professor),
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> list[dict[str, object]]:
        exams = manager.list_exams_by_author(identity.user_id)
        return [
            {**_exam_summary(exam), "submission_count": len(manager.list_submissions_for_exam(exam.id))}
            for exam in exams
        ]

    @app.post("/exams", status_code=201)
    def create_exam(
        payload: ExamPayload,
        identity: Identity = Depends(require_professor),
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, object]:
        exam = _exam_from_payload(
            payload,
            exam_id=payload.id or _new_id(),
            created_by=identity.user_id,
            created_at=utc_now(),
        )
        try:
            manager.create_exam(exam)
        except DuplicateExamError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _professor_exam(exam)

    # --- Student routes ---

    @app.get("/exams/available")
    def list_available_exams(
        identity: Identity = Depends(require_student),
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> list[dict[str, object]]:
        return [_exam_summary(exam) for exam in manager.list_available_exams(identity.user_id)]

    @app.post("/exams/{exam_id}/attempt", status_code=201)
    def start_attempt(
        exam_id: str,
        identity: Identity = Depends(require_student),
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, object]:
        try:
            snapshot = manager.start_attempt(exam_id, identity.user_id)
        except ExamNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except AttemptStateError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return _attempt_payload(snapshot)

    # --- Professor routes on a single exam ---

    @app.get("/exams/{exam_id}")
    def get_exam(
        exam_id: str,
        _: Identity = Depends(require_professor),
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, object]:
        exam = manager.get_exam(exam_id)
        if exam is None:
            raise HTTPException(status_code=404, detail=f"Exam '{exam_id}' not found.")
        return _professor_exam(exam)

    @app.put("/exams/{exam_id}")
    def update_exam(
        exam_id: str,
        payload: ExamPayload,
        _: Identity = Depends(require_professor),
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, object]:
        existing = manager.get_exam(exam_id)
        if existing is None:
            raise HTTPException(status_code=404, detail=f"Exam '{exam_id}' not found.")
        exam = _exam_from_payload(
            payload,
            exam_id=exam_id,
            created_by=existing.created_by,
            created_at=existing.created_at,
        )
        try:
            manager.update_exam(exam)
        except ExamNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _professor_exam(exam)

    @app.delete("/exams/{exam_id}", status_code=204)
    def delete_exam(
        exam_id: str,
        _: Identity = Depends(require_professor),
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> Response:
        if not manager.delete_exam(exam_id):
            raise HTTPException(status_code=404, detail=f"Exam '{exam_id}' not found.")
        return Response(status_code=204)

    @app.get("/exams/{exam_id}/submissions")
    def list_exam_submissions(
        exam_id: str,
        _: Identity = Depends(require_professor),
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> list[dict[str, object]]:
        exam = manager.get_exam(exam_id)
        return [_submission_payload(s, exam) for s in manager.list_submissions_for_exam(exam_id)]

    # --- Attempt routes ---

    def _attempt_action(action):
        try:
            return _attempt_payload(action())
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except AttemptStateError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc

    @app.get("/attempt")
    def get_attempt(
        identity: Identity = Depends(require_student),
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, object]:
        snapshot = manager.get_attempt(identity.user_id)
        if snapshot is None:
            raise HTTPException(status_code=404, detail="No exam is currently in progress.")
        return _attempt_payload(snapshot)

    @app.post("/attempt/answer")
    def select_answer(
        payload: AnswerPayload,
        identity: Identity = Depends(require_student),
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, object]:
        return _attempt_action(
            lambda: manager.select_answer(identity.user_id, payload.question_id, payload.option_id)
        )

    @app.post("/attempt/next")
    def next_question(
        identity: Identity = Depends(require_student),
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, object]:
        return _attempt_action(lambda: manager.next_question(identity.user_id))

    @app.post("/attempt/prev")
    def prev_question(
        identity: Identity = Depends(require_student),
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, object]:
        return _attempt_action(lambda: manager.prev_question(identity.user_id))

    @app.post("/attempt/goto")
    def go_to_question(
        payload: GoToPayload,
        identity: Identity = Depends(require_student),
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, object]:
        return _attempt_action(lambda: manager.go_to_question(identity.user_id, payload.index))

    @app.post("/attempt/finish", status_code=201)
    def finish_attempt(
        payload: FinishPayload,
        identity: Identity = Depends(require_student),
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, object]:
        try:
            submission = manager.finish_attempt(identity.user_id, confirmed=payload.confirm)
        except ConfirmationRequiredError as exc:
            raise HTTPException(
                status_code=409,
                detail={"message": str(exc), "unanswered_count": exc.unanswered_count},
            ) from exc
        except AttemptStateError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return _submission_payload(submission, manager.get_exam(submission.exam_id))

    @app.delete("/attempt", status_code=204)
    def abandon_attempt(
        identity: Identity = Depends(require_student),
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> Response:
        if not manager.abandon_attempt(identity.user_id):
            raise HTTPException(status_code=404, detail="No exam is currently in progress.")
        return Response(status_code=204)

    # --- Submission routes ---

    @app.get("/submissions/mine")
    def list_my_submissions(
        identity: Identity = Depends(require_student),
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> list[dict[str, object]]:
        return [
            _submission_payload(s, manager.get_exam(s.exam_id))
            for s in manager.list_submissions_for_student(identity.user_id)
        ]

    @app.get("/submissions/{submission_id}")
    def get_submission(
        submission_id: str,
        identity: Identity = Depends(_get_identity),
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, object]:
        report = manager.get_submission_report(submission_id)
        if report is None:
            raise HTTPException(status_code=404, detail=f"Submission '{submission_id}' not found.")
        if identity.role is UserRole.STUDENT and report.submission.student_id != identity.user_id:
            raise HTTPException(status_code=403, detail="Students can only view their own submissions.")
        return _report_payload(report)

    return app


def start_api_server(
    exam_manager: ExamManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(exam_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="ExamApiServer", daemon=True)
    thread.start()
    return thread
