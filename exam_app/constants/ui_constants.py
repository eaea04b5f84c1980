"""Qt UI constants used across widgets."""

WINDOW_TITLE: str = "ExamDesk Professor Console"
STUDENT_URL_PLACEHOLDER: str = "http://<professor-ip>:8000/"
REFRESH_INTERVAL_MS: int = 1000

LIST_BUTTON_NEW: str = "New Exam"
LIST_BUTTON_EDIT: str = "Edit Exam"
LIST_BUTTON_DETAILS: str = "Results"
LIST_BUTTON_DELETE: str = "Delete Exam"
LIST_BUTTON_IMPORT: str = "Import Exam"
LIST_BUTTON_EXPORT: str = "Save Exam to File"
LIST_EMPTY_STATE: str = "No exams yet. Create one or import a file."

EDITOR_TITLE_PLACEHOLDER: str = "Exam title"
EDITOR_DESCRIPTION_PLACEHOLDER: str = "Optional description shown to students"
EDITOR_QUESTION_PLACEHOLDER: str = "Enter your question text (supports Markdown + LaTeX)."
EDITOR_ADD_QUESTION: str = "Add Question"
EDITOR_SAVE_QUESTION: str = "Save Question"
EDITOR_DELETE_QUESTION: str = "Delete Question"
EDITOR_PREV_QUESTION: str = "Previous Question"
EDITOR_NEXT_QUESTION: str = "Next Question"
EDITOR_ADD_OPTION: str = "Add Option"
EDITOR_REMOVE_OPTION: str = "Remove Option"
EDITOR_SAVE_EXAM: str = "Save Exam"
EDITOR_BACK: str = "Back to Exams"

DETAILS_BACK: str = "Back to Exams"
DETAILS_NO_SUBMISSIONS: str = "No submissions yet."
DETAILS_TABLE_HEADERS: tuple[str, ...] = ("Student", "Score", "Result", "Submitted at")

IMPORT_DIALOG_TITLE: str = "Select exam file"
IMPORT_FILE_FILTER: str = "Exam files (*.txt);;All files (*.*)"
EXPORT_DIALOG_TITLE: str = "Save exam to file"
EXPORT_FILE_FILTER: str = "Exam files (*.txt);;All files (*.*)"

NO_EXAM_SELECTED_MESSAGE: str = "Select an exam in the list first."
