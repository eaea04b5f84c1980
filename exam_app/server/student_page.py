"""Single-page student client served at ``/``.

The identity provider normally injects the identity headers; when the page is
opened directly it asks for a student id once and sends the headers itself.
"""

from __future__ import annotations

from exam_app.constants.exam_constants import LOW_TIME_WARNING_SECONDS, PASSING_SCORE
from exam_app.constants.identity_constants import USER_ID_HEADER, USER_ROLE_HEADER
from exam_app.core.markdown_math_renderer import MATHJAX_SCRIPT

_STUDENT_PAGE_TEMPLATE = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>ExamDesk Student</title>
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <style>
      :root { color-scheme: light; }
      body { font-family: 'Segoe UI', system-ui, sans-serif; margin: 0; background: #f5f5f5; color: #111; }
      main { max-width: 760px; margin: 0 auto; padding: 1.5rem; }
      .card { background: #fff; border: 1px solid #d1d1d1; border-radius: 8px; padding: 1rem 1.25rem; margin-bottom: 1rem; }
      .muted { color: #666; font-size: 0.9rem; }
      button { font: inherit; padding: 0.5rem 1rem; border-radius: 4px; border: 1px solid #d1d1d1; background: #f5f5f5; cursor: pointer; }
      button.primary { background: #0078d4; border-color: #0078d4; color: #fff; }
      button:disabled { opacity: 0.5; cursor: default; }
      .row { display: flex; justify-content: space-between; align-items: center; gap: 0.5rem; }
      .option { display: block; width: 100%; text-align: left; margin: 0.4rem 0; }
      .option.selected { border-color: #0078d4; background: #e6f1fb; }
      .grid { display: flex; flex-wrap: wrap; gap: 0.4rem; margin-top: 1rem; }
      .grid button { width: 2.6rem; padding: 0.4rem 0; }
      .grid button.answered { background: #0078d4; color: #fff; }
      .grid button.current { outline: 2px solid #00b294; }
      .timer { font-size: 1.2rem; font-weight: 600; }
      .timer.low { color: #d13438; }
      .correct { color: #107c10; }
      .wrong { color: #d13438; }
      .hidden { display: none; }
    </style>
    <script>
      window.MathJax = { tex: { inlineMath: [['$','$']], displayMath: [['$$','$$']] } };
    </script>
    <script defer src="__MATHJAX__"></script>
  </head>
  <body>
    <main>
      <div class="row">
        <h1>ExamDesk</h1>
        <span class="muted" id="whoami"></span>
      </div>

      <section id="list-view">
        <div class="card">
          <h2>Available exams</h2>
          <div id="available"></div>
        </div>
        <div class="card">
          <h2>Completed exams</h2>
          <div id="completed"></div>
        </div>
      </section>

      <section id="attempt-view" class="hidden">
        <div class="row">
          <h2 id="attempt-title"></h2>
          <span class="timer" id="timer"></span>
        </div>
        <div class="card">
          <div class="row muted">
            <span id="position"></span>
            <span id="progress"></span>
          </div>
          <div id="question"></div>
          <div id="options"></div>
          <div class="row">
            <button id="prev">Previous</button>
            <button id="leave">Leave exam</button>
            <button id="next">Next</button>
            <button id="finish" class="primary">Finish exam</button>
          </div>
        </div>
        <div class="grid" id="grid"></div>
      </section>

      <section id="result-view" class="hidden">
        <div class="card">
          <h2 id="result-title"></h2>
          <p id="result-score" class="timer"></p>
          <p id="result-summary" class="muted"></p>
        </div>
        <div id="result-questions"></div>
        <button id="back">Back to exams</button>
      </section>
    </main>

    <script>
      const USER_ID_HEADER = "__USER_ID_HEADER__";
      const USER_ROLE_HEADER = "__USER_ROLE_HEADER__";
      const LOW_TIME_SECONDS = __LOW_TIME__;
      const PASSING_SCORE = __PASSING_SCORE__;
      let studentId = localStorage.getItem("examdesk_student_id");
      let currentExamId = null;
      let pollHandle = null;

      function headers(extra) {
        const base = { "Content-Type": "application/json" };
        base[USER_ID_HEADER] = studentId;
        base[USER_ROLE_HEADER] = "student";
        return Object.assign(base, extra || {});
      }

      async function api(method, path, body) {
        const response = await fetch(path, {
          method: method,
          headers: headers(),
          body: body === undefined ? undefined : JSON.stringify(body),
        });
        let data = null;
        if (response.status !== 204) {
          data = await response.json().catch(() => null);
        }
        return { status: response.status, data: data };
      }

      function show(view) {
        for (const id of ["list-view", "attempt-view", "result-view"]) {
          document.getElementById(id).classList.toggle("hidden", id !== view);
        }
      }

      function typeset() {
        if (window.MathJax && window.MathJax.typesetPromise) {
          window.MathJax.typesetPromise();
        }
      }

      function formatTime(seconds) {
        const mins = Math.floor(seconds / 60);
        const secs = seconds % 60;
        return String(mins).padStart(2, "0") + ":" + String(secs).padStart(2, "0");
      }

      async function loadLists() {
        stopPolling();
        currentExamId = null;
        show("list-view");
        const available = await api("GET", "/exams/available");
        const completed = await api("GET", "/submissions/mine");
        const availableBox = document.getElementById("available");
        availableBox.innerHTML = "";
        if (!available.data || available.data.length === 0) {
          availableBox.innerHTML = '<p class="muted">No exams available right now.</p>';
        } else {
          for (const exam of available.data) {
            const row = document.createElement("div");
            row.className = "row";
            const info = document.createElement("div");
            info.innerHTML = "<strong></strong><div class='muted'></div>";
            info.querySelector("strong").textContent = exam.title;
            info.querySelector(".muted").textContent =
              exam.duration_minutes + " min · " + exam.question_count + " questions";
            const start = document.createElement("button");
            start.className = "primary";
            start.textContent = "Start";
            start.onclick = () => startExam(exam.id);
            row.appendChild(info);
            row.appendChild(start);
            availableBox.appendChild(row);
          }
        }
        const completedBox = document.getElementById("completed");
        completedBox.innerHTML = "";
        if (!completed.data || completed.data.length === 0) {
          completedBox.innerHTML = '<p class="muted">Nothing submitted yet.</p>';
        } else {
          for (const submission of completed.data) {
            const row = document.createElement("div");
            row.className = "row";
            const label = document.createElement("span");
            label.textContent = (submission.exam_title || "Deleted exam") + " · " + submission.score.toFixed(1) + "%";
            const view = document.createElement("button");
            view.textContent = "View result";
            view.onclick = () => showResult(submission.id);
            row.appendChild(label);
            row.appendChild(view);
            completedBox.appendChild(row);
          }
        }
      }

      async function startExam(examId) {
        const result = await api("POST", "/exams/" + encodeURIComponent(examId) + "/attempt");
        if (result.status !== 201) {
          alert(result.data && result.data.detail ? result.data.detail : "Could not start the exam.");
          return loadLists();
        }
        currentExamId = examId;
        renderAttempt(result.data);
        show("attempt-view");
        startPolling();
      }

      function renderAttempt(attempt) {
        document.getElementById("attempt-title").textContent = attempt.exam_title;
        renderTimer(attempt.time_remaining_seconds);
        document.getElementById("position").textContent =
          "Question " + (attempt.current_index + 1) + " of " + attempt.question_count;
        document.getElementById("progress").textContent =
          attempt.answered_count + " of " + attempt.question_count + " answered";
        const question = attempt.question;
        document.getElementById("question").innerHTML = question ? question.html : "";
        const optionsBox = document.getElementById("options");
        optionsBox.innerHTML = "";
        if (question) {
          question.options.forEach((option, index) => {
            const button = document.createElement("button");
            button.className = "option" + (attempt.selected_option_id === option.id ? " selected" : "");
            button.innerHTML = "<strong>" + String.fromCharCode(65 + index) + ".</strong> " + option.html;
            button.onclick = () => act("POST", "/attempt/answer", { question_id: question.id, option_id: option.id });
            optionsBox.appendChild(button);
          });
        }
        document.getElementById("prev").disabled = attempt.current_index === 0;
        document.getElementById("next").disabled = attempt.current_index >= attempt.question_count - 1;
        const grid = document.getElementById("grid");
        grid.innerHTML = "";
        attempt.answered.forEach((answered, index) => {
          const button = document.createElement("button");
          button.textContent = index + 1;
          button.className = (answered ? "answered" : "") + (index === attempt.current_index ? " current" : "");
          button.onclick = () => act("POST", "/attempt/goto", { index: index });
          grid.appendChild(button);
        });
        typeset();
      }

      function renderTimer(seconds) {
        const timer = document.getElementById("timer");
        timer.textContent = formatTime(seconds);
        timer.classList.toggle("low", seconds < LOW_TIME_SECONDS);
      }

      async function act(method, path, body) {
        const result = await api(method, path, body);
        if (result.status === 200) {
          renderAttempt(result.data);
        } else if (result.status === 409 || result.status === 404) {
          await handleAttemptGone();
        }
      }

      async function finishExam(confirmed) {
        const result = await api("POST", "/attempt/finish", { confirm: confirmed });
        if (result.status === 201) {
          stopPolling();
          return showResult(result.data.id);
        }
        const detail = result.data ? result.data.detail : null;
        if (result.status === 409 && detail && detail.unanswered_count !== undefined) {
          if (window.confirm("You have " + detail.unanswered_count + " unanswered question(s). Submit anyway?")) {
            return finishExam(true);
          }
          return;
        }
        await handleAttemptGone();
      }

      async function handleAttemptGone() {
        // The countdown may have submitted the exam on the server.
        stopPolling();
        const examId = currentExamId;
        const completed = await api("GET", "/submissions/mine");
        const match = (completed.data || []).find((s) => s.exam_id === examId);
        if (match) {
          return showResult(match.id);
        }
        return loadLists();
      }

      function startPolling() {
        stopPolling();
        pollHandle = setInterval(async () => {
          const result = await api("GET", "/attempt");
          if (result.status === 200) {
            renderTimer(result.data.time_remaining_seconds);
          } else {
            await handleAttemptGone();
          }
        }, 1000);
      }

      function stopPolling() {
        if (pollHandle !== null) {
          clearInterval(pollHandle);
          pollHandle = null;
        }
      }

      async function showResult(submissionId) {
        const result = await api("GET", "/submissions/" + encodeURIComponent(submissionId));
        if (result.status !== 200) {
          return loadLists();
        }
        const report = result.data;
        currentExamId = null;
        document.getElementById("result-title").textContent = report.exam_title || "Exam result";
        const score = document.getElementById("result-score");
        score.textContent = report.score.toFixed(1) + "% · " + (report.passed ? "Passed" : "Not passed");
        score.className = "timer " + (report.passed ? "correct" : "wrong");
        document.getElementById("result-summary").textContent = report.total_questions === null
          ? "This exam has been removed."
          : report.correct_count + " of " + report.total_questions + " correct · pass mark " + PASSING_SCORE + "%";
        const box = document.getElementById("result-questions");
        box.innerHTML = "";
        report.questions.forEach((question, index) => {
          const card = document.createElement("div");
          card.className = "card";
          let html = "<div class='row'><strong>Question " + (index + 1) + "</strong><span class='"
            + (question.is_correct ? "correct'>Correct" : "wrong'>Incorrect") + "</span></div>" + question.html;
          for (const option of question.options) {
            const picked = option.id === question.selected_option_id;
            let css = option.is_correct ? "correct" : (picked ? "wrong" : "");
            html += "<div class='" + css + "'>" + (picked ? "&#9679; " : "&#9675; ") + option.html + "</div>";
          }
          card.innerHTML = html;
          box.appendChild(card);
        });
        show("result-view");
        typeset();
      }

      document.getElementById("prev").onclick = () => act("POST", "/attempt/prev");
      document.getElementById("next").onclick = () => act("POST", "/attempt/next");
      document.getElementById("finish").onclick = () => finishExam(false);
      document.getElementById("leave").onclick = async () => {
        if (window.confirm("Leave the exam? Your answers will be discarded.")) {
          stopPolling();
          await api("DELETE", "/attempt");
          loadLists();
        }
      };
      document.getElementById("back").onclick = () => loadLists();
      window.addEventListener("pagehide", () => {
        if (currentExamId !== null) {
          fetch("/attempt", { method: "DELETE", headers: headers(), keepalive: true });
        }
      });

      while (!studentId) {
        studentId = (window.prompt("Student id") || "").trim();
        if (studentId) {
          localStorage.setItem("examdesk_student_id", studentId);
        }
      }
      document.getElementById("whoami").textContent = "Signed in as " + studentId;
      loadLists();
    </script>
  </body>
</html>
"""

STUDENT_PAGE_HTML = (
    _STUDENT_PAGE_TEMPLATE.replace("__MATHJAX__", MATHJAX_SCRIPT)
    .replace("__USER_ID_HEADER__", USER_ID_HEADER)
    .replace("__USER_ROLE_HEADER__", USER_ROLE_HEADER)
    .replace("__LOW_TIME__", str(LOW_TIME_WARNING_SECONDS))
    .replace("__PASSING_SCORE__", str(PASSING_SCORE))
)
